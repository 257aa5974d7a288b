from pathlib import Path
from typing import Optional
import typer
from rich.table import Table

from .config import load_config
from .ledger import append_event, load_roster
from .models import new_record_id
from .occupancy import get_occupancy_status, get_period_occupancy
from .periods import month_subperiods
from .planning import export_period_csv, select_period_records
from .utils import console, format_hours, pick_view, resolve_period, styled_status

plan_app = typer.Typer(help="Plan a period: grid view, reset, copy forward and CSV export")

@plan_app.command(name="view")
def plan_view(
    period_key: Optional[str] = typer.Argument(None, help="YYYY-MM or YYYY-MM-W<n>"),
    weekly: Optional[bool] = typer.Option(None, "--weekly/--monthly", "-w/-m", help="Defaults to the configured view"),
):
    settings = load_config()
    roster = load_roster()
    period = resolve_period(period_key, pick_view(weekly, settings))
    columns = [period] if period.is_weekly else month_subperiods(period)

    table = Table(title=f"Planning Grid · {period.label}", header_style="bold magenta")
    table.add_column("Consultant", style="bold yellow")
    for p in columns:
        table.add_column(p.key, justify="center")
    table.add_column("Total", justify="right"); table.add_column("Status")

    for c in roster.consultants:
        if not c.active: continue
        row = [c.name]
        for p in columns:
            # Cells show what is filed exactly under that key; the total rolls up
            booked = sum(a.hours for a in roster.assignments if a.consultant_id == c.id and a.period == p.key)
            booked += sum(a.hours for a in roster.absences if a.consultant_id == c.id and a.period == p.key)
            row.append(format_hours(booked) if booked else "[dim].[/]")
        occ = get_period_occupancy(c.id, roster.assignments, roster.absences, period.key, period.is_weekly, True)
        status = get_occupancy_status(occ.total_hours, settings, period.is_weekly)
        row.extend([format_hours(occ.total_hours), styled_status(status)])
        table.add_row(*row)
    console.print(table)

@plan_app.command(name="reset")
def plan_reset(
    period_key: str = typer.Argument(..., help="YYYY-MM or YYYY-MM-W<n>"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    roster = load_roster()
    period = resolve_period(period_key, False)
    n_assign = len(select_period_records(roster.assignments, period.key, period.is_weekly))
    n_absent = len(select_period_records(roster.absences, period.key, period.is_weekly))
    if n_assign + n_absent == 0:
        return console.print(f"[yellow]Nothing is filed under {period.key}.[/yellow]")

    if not period.is_weekly:
        console.print("[dim]Records filed under the weeks of this month are kept.[/dim]")
    if yes or typer.confirm(f"Delete {n_assign} assignments and {n_absent} absences filed under {period.key}?"):
        append_event("PERIOD_RESET", {"period": period.key, "is_weekly": period.is_weekly})
        typer.secho(f"✅ {period.label} cleared.", fg="green")

@plan_app.command(name="copy")
def plan_copy(
    from_key: str = typer.Argument(..., help="Source period"),
    to_key: str = typer.Argument(..., help="Target period"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    roster = load_roster()
    source, target = resolve_period(from_key, False), resolve_period(to_key, False)
    if source.is_weekly != target.is_weekly:
        typer.secho("❌ Both periods must be months, or both weeks.", fg="red"); raise typer.Exit(1)

    assignments = select_period_records(roster.assignments, source.key, source.is_weekly)
    absences = select_period_records(roster.absences, source.key, source.is_weekly)
    if not assignments and not absences:
        return console.print(f"[yellow]Nothing is filed under {source.key}.[/yellow]")

    existing = len(select_period_records(roster.assignments, target.key, target.is_weekly))
    if existing:
        console.print(f"[yellow]⚠️ {target.key} already holds {existing} assignments; copies are added on top.[/yellow]")
    if yes or typer.confirm(f"Copy {len(assignments)} assignments and {len(absences)} absences to {target.key}?"):
        append_event("PERIOD_COPIED", {
            "from_period": source.key, "to_period": target.key, "is_weekly": source.is_weekly,
            "assignment_ids": [new_record_id() for _ in assignments],
            "absence_ids": [new_record_id() for _ in absences],
        })
        typer.secho(f"✅ Copied {source.label} to {target.label}.", fg="green")

@plan_app.command(name="export")
def plan_export(
    period_key: Optional[str] = typer.Argument(None, help="YYYY-MM or YYYY-MM-W<n>"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Defaults to planning_<period>.csv"),
    weekly: Optional[bool] = typer.Option(None, "--weekly/--monthly", "-w/-m", help="Defaults to the configured view"),
):
    settings = load_config()
    roster = load_roster()
    period = resolve_period(period_key, pick_view(weekly, settings))
    target = output or Path(f"planning_{period.key}.csv")
    count = export_period_csv(target, period.key, roster.consultants, roster.projects, roster.assignments)
    typer.secho(f"✅ Wrote {count} rows to {target}.", fg="green")
