from typing import Optional
import typer
from rich.table import Table

from .ledger import append_event, load_roster
from .models import AssignmentStatus, new_record_id
from .periods import Period, period_in_scope
from .utils import console, format_hours, prompt_for_choice, prompt_for_hours, resolve_period

assign_app = typer.Typer(help="Book consultants onto projects for a month or a week")

STATUSES = {s.value: s for s in AssignmentStatus}

@assign_app.command(name="add")
def add_assignment(
    consultant_id: str = typer.Option(..., "--consultant", "-c", prompt="Consultant Id"),
    project_id: str = typer.Option(..., "--project", "-p", prompt="Project Id"),
    period_key: Optional[str] = typer.Option(None, "--period", help="YYYY-MM or YYYY-MM-W<n>; defaults to today"),
    weekly: bool = typer.Option(False, "--weekly", "-w", help="Use this week instead of this month when --period is omitted"),
    hours: Optional[float] = typer.Option(None, "--hours", "-h", min=0),
    tentative: bool = typer.Option(False, "--tentative", "-t", help="Book as Tentative instead of Confirmed"),
    description: str = typer.Option("", "--description", "-d"),
):
    roster = load_roster()
    consultant, project = roster.consultant(consultant_id), roster.project(project_id)
    if consultant is None or not consultant.active:
        typer.secho("❌ Consultant not found.", fg="red"); raise typer.Exit(1)
    if project is None or not project.active:
        typer.secho("❌ Project not found.", fg="red"); raise typer.Exit(1)

    period = resolve_period(period_key, weekly)
    if hours is None:
        hours = prompt_for_hours(f"Hours for {period.label}", default=40.0)
    status = AssignmentStatus.TENTATIVE if tentative else AssignmentStatus.CONFIRMED

    assignment_id = new_record_id()
    append_event("ASSIGNMENT_ADDED", {
        "id": assignment_id, "consultant_id": consultant.id, "project_id": project.id,
        "hours": hours, "status": status.value, "period": period.key,
        "is_weekly": period.is_weekly, "description": description or None
    })
    typer.secho(f"✅ Booked {consultant.name} on {project.name} for {format_hours(hours)} in {period.label} ({assignment_id}).", fg="green", bold=True)

@assign_app.command(name="list")
def list_assignments(
    period_key: Optional[str] = typer.Option(None, "--period", help="Only records counted in this period"),
    consultant_id: Optional[str] = typer.Option(None, "--consultant", "-c"),
):
    roster = load_roster()
    period = Period.parse(period_key) if period_key else None
    if period_key and period is None:
        typer.secho(f"❌ Not a period key: {period_key}", fg="red"); raise typer.Exit(1)

    table = Table(title="Assignments" + (f" · {period.label}" if period else ""), header_style="bold magenta")
    table.add_column("Id", style="dim"); table.add_column("Period", style="cyan")
    table.add_column("Consultant", style="bold yellow"); table.add_column("Project")
    table.add_column("Hours", justify="right"); table.add_column("Status"); table.add_column("Description", style="dim")

    found = False
    for a in roster.assignments:
        if consultant_id and a.consultant_id != consultant_id: continue
        if period and not period_in_scope(a.period, period.key, period.is_weekly): continue
        c, p = roster.consultant(a.consultant_id), roster.project(a.project_id)
        status = a.status.value if a.status == AssignmentStatus.CONFIRMED else f"[italic blue]{a.status.value}[/]"
        table.add_row(a.id, a.period, c.name if c else a.consultant_id, p.name if p else a.project_id,
                      format_hours(a.hours), status, a.description or "")
        found = True
    if found: console.print(table)
    else: console.print("[yellow]No assignments match.[/yellow]")

@assign_app.command(name="edit")
def edit_assignment(assignment_id: str):
    roster = load_roster()
    cur = next((a for a in roster.assignments if a.id == assignment_id), None)
    if cur is None:
        typer.secho("❌ Assignment not found.", fg="red"); raise typer.Exit(1)

    hours = prompt_for_hours("Hours", default=cur.hours)
    status = prompt_for_choice("Status", STATUSES, default=cur.status.value)
    period_key = typer.prompt("Period", default=cur.period)
    period = resolve_period(period_key, cur.is_weekly)
    desc = typer.prompt("Description", default=cur.description or "", show_default=False)

    append_event("ASSIGNMENT_EDITED", {
        "id": cur.id, "hours": hours, "status": status.value,
        "period": period.key, "is_weekly": period.is_weekly, "description": desc or None
    })
    typer.secho("✅ Assignment updated.", fg="green")

@assign_app.command(name="remove")
def remove_assignment(assignment_id: str):
    roster = load_roster()
    if any(a.id == assignment_id for a in roster.assignments):
        append_event("ASSIGNMENT_REMOVED", {"id": assignment_id})
        typer.secho("✅ Assignment removed.", fg="green")
    else:
        typer.secho("❌ ID not found.", fg="red"); raise typer.Exit(1)
