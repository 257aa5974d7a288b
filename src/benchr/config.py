import json
import os
import sys
from pathlib import Path
from typing import Literal, Optional

import typer
from loguru import logger
from pydantic import BaseModel, ValidationError
from rich.console import Console

CONFIG_FILENAME = "config.json"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class SettingsError(ValueError):
    pass


class AppSettings(BaseModel):
    standard_monthly_capacity: float = 160
    standard_weekly_capacity: float = 40
    available_monthly_threshold: float = 120
    available_weekly_threshold: float = 30
    default_view: Literal["monthly", "weekly"] = "monthly"
    include_tentative_by_default: bool = True
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @property
    def weekly_by_default(self) -> bool:
        return self.default_view == "weekly"


def get_data_dir() -> Path:
    """Everything lives in $BENCHR_HOME, or ~/.benchr when unset."""
    override = os.environ.get("BENCHR_HOME")
    return Path(override) if override else Path.home() / ".benchr"


def config_path() -> Path:
    return get_data_dir() / CONFIG_FILENAME


def load_config() -> AppSettings:
    path = config_path()
    if not path.exists():
        return AppSettings()
    try:
        with path.open("r") as f:
            settings = AppSettings(**json.load(f))
    except (json.JSONDecodeError, ValidationError, TypeError) as exc:
        logger.warning(f"Ignoring unreadable config {path}: {exc}")
        return AppSettings()
    if settings.log_level not in LOG_LEVELS:
        logger.warning(f"Unknown log level {settings.log_level!r} in {path}, using WARNING")
        settings = settings.model_copy(update={"log_level": "WARNING"})
    return settings


def validate_settings(settings: AppSettings) -> None:
    if settings.standard_monthly_capacity <= 0 or settings.standard_weekly_capacity <= 0:
        raise SettingsError("Standard capacities must be greater than zero.")
    if settings.available_monthly_threshold < 0 or settings.available_weekly_threshold < 0:
        raise SettingsError("Availability thresholds cannot be negative.")
    if settings.log_level not in LOG_LEVELS:
        raise SettingsError(f"Log level must be one of: {', '.join(LOG_LEVELS)}.")


def save_config(settings: AppSettings) -> None:
    validate_settings(settings)
    path = config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        json.dump(settings.model_dump(), f, indent=2)
    logger.info(f"Settings saved to {path}")


def setup_logging(settings: AppSettings) -> None:
    logger.remove()
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level)
    logger.add(sys.stderr, level=settings.log_level)


def run_setup_wizard():
    console = Console()
    console.print("\n[bold cyan]🛠️  Welcome to Benchr Setup![/bold cyan]")
    console.print("Let's configure capacity rules. You can change these anytime with 'benchr setup'.\n")

    cfg = load_config()

    cfg.standard_monthly_capacity = typer.prompt("Standard Monthly Capacity (hours)", default=cfg.standard_monthly_capacity, type=float)
    cfg.standard_weekly_capacity = typer.prompt("Standard Weekly Capacity (hours)", default=cfg.standard_weekly_capacity, type=float)
    cfg.available_monthly_threshold = typer.prompt("Monthly Availability Threshold (hours)", default=cfg.available_monthly_threshold, type=float)
    cfg.available_weekly_threshold = typer.prompt("Weekly Availability Threshold (hours)", default=cfg.available_weekly_threshold, type=float)

    console.print("\n[bold]Default View:[/bold]")
    console.print("1: Monthly")
    console.print("2: Weekly")
    current_choice = "2" if cfg.weekly_by_default else "1"
    view_choice = typer.prompt("Choose default view", default=current_choice, type=str)
    cfg.default_view = "weekly" if view_choice == "2" else "monthly"

    cfg.include_tentative_by_default = typer.confirm("Include tentative hours by default?", default=cfg.include_tentative_by_default)

    try:
        save_config(cfg)
    except SettingsError as exc:
        typer.secho(f"❌ {exc}", fg="red", bold=True)
        raise typer.Exit(code=1)
    console.print("\n[bold green]✅ Configuration saved successfully![/bold green]\n")
