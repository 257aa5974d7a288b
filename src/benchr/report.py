import json
from datetime import date
from typing import List, Optional
import typer
from rich.table import Table

from .config import load_config
from .ledger import load_roster
from .occupancy import (
    build_insight_summary,
    build_occupancy_rows,
    capacity_for,
    filter_rows,
    occupancy_timeline,
    summarize_team,
)
from .utils import console, format_fte, format_hours, pick_view, resolve_period, styled_status

report_app = typer.Typer(help="Occupancy, FTE and team reports per period")

def _include_tentative(flag: Optional[bool], settings) -> bool:
    return settings.include_tentative_by_default if flag is None else flag

@report_app.command(name="occupancy")
def report_occupancy(
    period_key: Optional[str] = typer.Argument(None, help="YYYY-MM or YYYY-MM-W<n>"),
    weekly: Optional[bool] = typer.Option(None, "--weekly/--monthly", "-w/-m", help="Defaults to the configured view"),
    tentative: Optional[bool] = typer.Option(None, "--tentative/--no-tentative", help="Count tentative hours in the total"),
    search: str = typer.Option("", "--search", "-q", help="Filter by name or role"),
    only_overloaded: bool = typer.Option(False, "--overloaded", help="Only show overloaded consultants"),
    only_available: bool = typer.Option(False, "--available", help="Only show available consultants"),
):
    settings = load_config()
    roster = load_roster()
    period = resolve_period(period_key, pick_view(weekly, settings))
    include_tentative = _include_tentative(tentative, settings)

    active = [c for c in roster.consultants if c.active]
    rows = build_occupancy_rows(active, roster.assignments, roster.absences, period.key, period.is_weekly, include_tentative, settings)
    rows = filter_rows(rows, search, only_overloaded, only_available)
    if not rows: return console.print(f"[yellow]No consultants match for {period.label}.[/yellow]")

    capacity = capacity_for(settings, period.is_weekly)
    table = Table(title=f"Occupancy · {period.label} (capacity {format_hours(capacity)})", header_style="bold magenta")
    table.add_column("Id", style="bold yellow"); table.add_column("Name", style="cyan")
    table.add_column("Confirmed", justify="right"); table.add_column("Tentative", justify="right", style="blue")
    table.add_column("Absence", justify="right", style="dim"); table.add_column("Total", justify="right", style="bold")
    table.add_column("FTE", justify="right"); table.add_column("Status")

    for r in rows:
        occ = r.occupancy
        table.add_row(
            r.consultant.id, r.consultant.name, format_hours(occ.confirmed_hours),
            format_hours(occ.tentative_hours), format_hours(occ.absence_hours),
            format_hours(occ.total_hours), format_fte(r.fte), styled_status(r.status)
        )
    console.print(table)
    if not include_tentative:
        console.print("[dim]Tentative hours are shown but not counted in the total.[/dim]")

@report_app.command(name="team")
def report_team(
    period_key: Optional[str] = typer.Argument(None),
    weekly: Optional[bool] = typer.Option(None, "--weekly/--monthly", "-w/-m", help="Defaults to the configured view"),
    tentative: Optional[bool] = typer.Option(None, "--tentative/--no-tentative"),
):
    settings = load_config()
    roster = load_roster()
    period = resolve_period(period_key, pick_view(weekly, settings))
    include_tentative = _include_tentative(tentative, settings)

    active = [c for c in roster.consultants if c.active]
    rows = build_occupancy_rows(active, roster.assignments, roster.absences, period.key, period.is_weekly, include_tentative, settings)
    stats = summarize_team(rows, settings, period.is_weekly, include_tentative)

    table = Table(title=f"Team Summary · {period.label}", header_style="bold magenta", show_header=False)
    table.add_column("Metric", style="bold"); table.add_column("Value", justify="right")
    table.add_row("Occupancy", f"{stats.occupancy_pct:.1f}%")
    table.add_row("Committed hours", format_hours(stats.committed_hours))
    table.add_row("Team FTE", f"{stats.total_fte:.1f}")
    table.add_row("Available consultants", f"[yellow]{stats.available_count}[/]")
    table.add_row("Overloaded consultants", f"[red]{stats.overloaded_count}[/]")
    table.add_row("Tentative load", f"[blue]{format_hours(stats.tentative_hours)}[/]")
    console.print(table)

@report_app.command(name="timeline")
def report_timeline(
    anchor: Optional[str] = typer.Option(None, "--date", help="Anchor date YYYY-MM-DD, defaults to today"),
    weekly: Optional[bool] = typer.Option(None, "--weekly/--monthly", "-w/-m", help="Defaults to the configured view"),
    tentative: Optional[bool] = typer.Option(None, "--tentative/--no-tentative"),
    consultant_ids: Optional[List[str]] = typer.Option(None, "--consultant", "-c", help="Consultants to chart (repeatable)"),
):
    settings = load_config()
    roster = load_roster()
    try:
        day = date.fromisoformat(anchor) if anchor else date.today()
    except ValueError:
        typer.secho("⚠️ Invalid format. Please use YYYY-MM-DD (e.g., 2026-01-15).", fg="yellow"); raise typer.Exit(1)
    is_weekly = pick_view(weekly, settings)

    active = [c for c in roster.consultants if c.active]
    points = occupancy_timeline(day, active, roster.assignments, roster.absences, is_weekly,
                                _include_tentative(tentative, settings), consultant_ids)

    table = Table(title="Occupancy Timeline (hours)", header_style="bold magenta")
    table.add_column("Series", style="bold yellow")
    for pt in points: table.add_column(pt["period"].key, justify="center")

    names = {c.id: c.name for c in active}
    for cid in (consultant_ids or []):
        if cid not in names: continue
        table.add_row(names[cid], *[format_hours(pt["consultants"][cid]) for pt in points])
    table.add_row("[italic]Team average[/]", *[f"{pt['team_average']:.1f}h" for pt in points])
    console.print(table)

@report_app.command(name="insights")
def report_insights(
    period_key: Optional[str] = typer.Argument(None),
    weekly: Optional[bool] = typer.Option(None, "--weekly/--monthly", "-w/-m", help="Defaults to the configured view"),
):
    """Prints the occupancy summary that is handed to the recommendation service."""
    settings = load_config()
    period = resolve_period(period_key, pick_view(weekly, settings))
    summary = build_insight_summary(load_roster(), period.key, period.is_weekly)
    typer.echo(json.dumps(summary, indent=2))
