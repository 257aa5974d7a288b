import math
import re
from datetime import date
from typing import Any, Dict, Iterable, Optional

import typer
from rich.console import Console

from .occupancy import OccupancyStatus
from .periods import Period, format_period

# Initialize a single console to be imported across all apps
console = Console()

STATUS_COLORS = {
    OccupancyStatus.OVERLOADED: "red",
    OccupancyStatus.AVAILABLE: "yellow",
    OccupancyStatus.NOMINAL: "green",
}


def generate_short_code(name: str, existing_ids: Iterable[str]) -> str:
    """
    Consultant ids: first 4 letters of the first name + initial of the last name.
    Example: 'Maria Rodriguez' -> 'MariR'. Collisions get a numeric suffix.
    """
    existing_codes = {c.upper() for c in existing_ids}
    parts = name.strip().split()
    if not parts:
        base_code = "CONS"
    else:
        first_part = parts[0][:4].capitalize()
        last_part = parts[-1][0].upper() if len(parts) > 1 else ""
        base_code = first_part + last_part

    code = base_code
    counter = 1
    while code.upper() in existing_codes:
        code = f"{base_code}{counter}"
        counter += 1
    return code


def generate_project_id(name: str, existing_ids: Iterable[str]) -> str:
    existing = set(existing_ids)
    base_id = re.sub(r'[^a-z0-9]+', '-', name.lower()).strip('-')
    if not base_id: base_id = "project"
    project_id, counter = base_id, 1
    while project_id in existing:
        counter += 1
        project_id = f"{base_id}-{counter}"
    return project_id


def pick_view(weekly: Optional[bool], settings) -> bool:
    """--weekly/--monthly when given, otherwise the configured default view."""
    return settings.weekly_by_default if weekly is None else weekly


def resolve_period(period_key: Optional[str], weekly: bool, today: Optional[date] = None) -> Period:
    """Parses an explicit period key, or formats today's period in the requested view."""
    if period_key:
        try:
            return Period.from_key(period_key)
        except ValueError as exc:
            typer.secho(f"❌ {exc}", fg="red")
            raise typer.Exit(1)
    return format_period(today or date.today(), weekly)


def prompt_for_hours(prompt_text: str, default: Any = None) -> float:
    while True:
        hours = typer.prompt(prompt_text, default=default, type=float)
        if hours >= 0:
            return hours
        typer.secho("⚠️ Hours cannot be negative.", fg="yellow")


def prompt_for_choice(prompt_text: str, choices: Dict[str, Any], default: str) -> Any:
    keys = " / ".join(choices)
    while True:
        answer = typer.prompt(f"{prompt_text} [{keys}]", default=default).strip()
        for key, value in choices.items():
            if key.lower() == answer.lower():
                return value
        typer.secho(f"⚠️ Choose one of: {keys}", fg="yellow")


def format_fte(fte: float) -> str:
    if math.isnan(fte) or math.isinf(fte):
        return "n/a"
    return f"{fte:.2f}"


def format_hours(hours: float) -> str:
    return f"{hours:g}h"


def styled_status(status: OccupancyStatus) -> str:
    color = STATUS_COLORS.get(status, "white")
    return f"[{color}]{status.value}[/]"
