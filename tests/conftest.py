from __future__ import annotations

import sys

import pytest
from loguru import logger

from benchr.config import AppSettings


@pytest.fixture(autouse=True)
def benchr_home(tmp_path, monkeypatch):
    """Every test gets its own data directory."""
    monkeypatch.setenv("BENCHR_HOME", str(tmp_path / "benchr"))
    yield tmp_path / "benchr"


@pytest.fixture(autouse=True)
def reset_logging():
    # CLI runs point loguru at the runner's temporary stderr
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture()
def wide_console(monkeypatch):
    # Rich falls back to 80 columns when not attached to a terminal
    from benchr.utils import console

    monkeypatch.setattr(console, "width", 200)
    return console


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(
        standard_monthly_capacity=160,
        standard_weekly_capacity=40,
        available_monthly_threshold=120,
        available_weekly_threshold=30,
    )
