from typing import Optional
import typer
from rich.table import Table

from .ledger import append_event, load_roster
from .models import AbsenceCategory, new_record_id
from .periods import Period, period_in_scope
from .utils import console, format_hours, prompt_for_choice, prompt_for_hours, resolve_period

absence_app = typer.Typer(help="Log vacations, holidays and leave")

CATEGORIES = {c.name.lower().replace("_", "-"): c for c in AbsenceCategory}

@absence_app.command(name="add")
def add_absence(
    consultant_id: str = typer.Option(..., "--consultant", "-c", prompt="Consultant Id"),
    period_key: Optional[str] = typer.Option(None, "--period", help="YYYY-MM or YYYY-MM-W<n>; defaults to today"),
    weekly: bool = typer.Option(False, "--weekly", "-w"),
    hours: Optional[float] = typer.Option(None, "--hours", "-h", min=0),
    category: Optional[str] = typer.Option(None, "--category", help="vacation, public-holiday, medical-leave, personal-leave"),
    notes: str = typer.Option("", "--notes", "-n"),
):
    roster = load_roster()
    consultant = roster.consultant(consultant_id)
    if consultant is None:
        typer.secho("❌ Consultant not found.", fg="red"); raise typer.Exit(1)

    period = resolve_period(period_key, weekly)
    if category and category.lower() in CATEGORIES:
        cat = CATEGORIES[category.lower()]
    else:
        cat = prompt_for_choice("Category", CATEGORIES, default="vacation")
    if hours is None:
        hours = prompt_for_hours(f"Hours absent in {period.label}", default=8.0)

    absence_id = new_record_id()
    append_event("ABSENCE_ADDED", {
        "id": absence_id, "consultant_id": consultant.id, "category": cat.value,
        "hours": hours, "period": period.key, "is_weekly": period.is_weekly, "notes": notes or None
    })
    typer.secho(f"✅ Logged {cat.value} ({format_hours(hours)}) for {consultant.name} in {period.label}.", fg="green")

@absence_app.command(name="list")
def list_absences(period_key: Optional[str] = typer.Option(None, "--period")):
    roster = load_roster()
    period = Period.parse(period_key) if period_key else None
    if period_key and period is None:
        typer.secho(f"❌ Not a period key: {period_key}", fg="red"); raise typer.Exit(1)

    table = Table(title="Roster Absence Log", header_style="bold magenta")
    table.add_column("Id", style="dim"); table.add_column("Period", style="cyan")
    table.add_column("Consultant", style="bold yellow"); table.add_column("Category")
    table.add_column("Hours", justify="right"); table.add_column("Notes", style="dim")
    found = False
    for ab in roster.absences:
        if period and not period_in_scope(ab.period, period.key, period.is_weekly): continue
        c = roster.consultant(ab.consultant_id)
        table.add_row(ab.id, ab.period, c.name if c else ab.consultant_id, ab.category.value, format_hours(ab.hours), ab.notes or "")
        found = True
    if found: console.print(table)
    else: console.print("[yellow]No absences have been logged.[/yellow]")

@absence_app.command(name="remove")
def remove_absence(absence_id: str):
    roster = load_roster()
    if any(a.id == absence_id for a in roster.absences):
        append_event("ABSENCE_REMOVED", {"id": absence_id})
        typer.secho("✅ Absence removed.", fg="green")
    else:
        typer.secho("❌ ID not found.", fg="red"); raise typer.Exit(1)

@absence_app.command(name="edit")
def edit_absence(absence_id: str):
    roster = load_roster()
    cur = next((a for a in roster.absences if a.id == absence_id), None)
    if cur is None:
        typer.secho("❌ Absence not found.", fg="red"); raise typer.Exit(1)

    default_cat = next(k for k, v in CATEGORIES.items() if v == cur.category)
    cat = prompt_for_choice("Category", CATEGORIES, default=default_cat)
    hours = prompt_for_hours("Hours", default=cur.hours)
    period = resolve_period(typer.prompt("Period", default=cur.period), cur.is_weekly)
    notes = typer.prompt("Notes", default=cur.notes or "", show_default=False)

    append_event("ABSENCE_EDITED", {
        "id": cur.id, "category": cat.value, "hours": hours,
        "period": period.key, "is_weekly": period.is_weekly, "notes": notes or None
    })
    typer.secho("✅ Absence updated.", fg="green")
