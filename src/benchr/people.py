import typer
from typing import Optional
from rich.table import Table

from .ledger import append_event, load_roster
from .utils import console, generate_short_code

people_app = typer.Typer(help="Manage consultants on the roster")

@people_app.command(name="add")
def add_consultant():
    roster = load_roster()
    name = typer.prompt("Enter Full Name")
    consultant_id = generate_short_code(name, [c.id for c in roster.consultants])
    typer.secho(f"🤖 Auto-assigned Id: {consultant_id}", fg="cyan")

    role = typer.prompt("Role (e.g. Senior Architect)")
    email = typer.prompt("Email address", default="", show_default=False)
    notes = typer.prompt("Notes (optional)", default="", show_default=False)

    append_event("CONSULTANT_ADDED", {
        "id": consultant_id, "name": name, "role": role,
        "email": email, "notes": notes or None, "active": True
    })
    typer.secho(f"\n✅ Successfully added {name} ({consultant_id}) to the roster!", fg="green", bold=True)

@people_app.command(name="list")
def list_consultants(
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Search name, role or email"),
    show_inactive: bool = typer.Option(False, "--all", "-a", help="Include deactivated consultants")
):
    roster = load_roster()
    if not roster.consultants: return console.print("[yellow]The roster is currently empty.[/yellow]")

    table = Table(title="Consultant Roster", header_style="bold magenta")
    table.add_column("Id", style="bold yellow")
    table.add_column("Name", style="white")
    table.add_column("Role", style="yellow")
    table.add_column("Email", style="cyan")
    table.add_column("Active", justify="center")

    for c in roster.consultants:
        if not c.active and not show_inactive: continue
        if search and search.lower() not in f"{c.name} {c.role} {c.email}".lower(): continue
        table.add_row(c.id, c.name, c.role or "N/A", c.email or "-", "✅" if c.active else "❌")
    console.print(table)

@people_app.command(name="edit")
def edit_consultant(consultant_id: Optional[str] = typer.Argument(None)):
    roster = load_roster()
    if not consultant_id:
        ref_table = Table(title="Reference: Active Consultants")
        ref_table.add_column("Id"); ref_table.add_column("Name"); ref_table.add_column("Role")
        for c in roster.consultants:
            if c.active: ref_table.add_row(c.id, c.name, c.role)
        console.print(ref_table)
        consultant_id = typer.prompt("\nEnter id of the consultant to edit")

    cur = roster.consultant(consultant_id)
    if cur is None or not cur.active:
        typer.secho("❌ Error: Active consultant not found.", fg="red")
        raise typer.Exit(1)

    new_name = typer.prompt("Full Name", default=cur.name)
    new_role = typer.prompt("Role", default=cur.role or "N/A")
    new_email = typer.prompt("Email", default=cur.email, show_default=bool(cur.email))
    new_notes = typer.prompt("Notes", default=cur.notes or "", show_default=False)

    append_event("CONSULTANT_EDITED", {
        "id": cur.id, "name": new_name, "role": new_role,
        "email": new_email, "notes": new_notes or None
    })
    typer.secho(f"✅ Successfully updated {new_name} in the ledger!", fg="green")

@people_app.command(name="delete")
def delete_consultant(consultant_id: str, yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")):
    roster = load_roster()
    cur = roster.consultant(consultant_id)
    if cur is None:
        typer.secho("❌ Consultant not found.", fg="red"); raise typer.Exit(1)
    if yes or typer.confirm(f"Are you sure you want to deactivate {cur.name}?"):
        append_event("CONSULTANT_DELETED", {"id": consultant_id})
        typer.secho("✅ Deactivated successfully.", fg="green")
