from typing import Optional
import typer
from rich.table import Table

from .ledger import append_event, load_roster
from .models import ProjectType
from .utils import console, generate_project_id, prompt_for_choice

project_app = typer.Typer(help="Manage client, internal and bucket projects")

PROJECT_TYPES = {t.value: t for t in ProjectType}

@project_app.command(name="add")
def add_project():
    roster = load_roster()
    name = typer.prompt("Project Name")
    project_id = generate_project_id(name, [p.id for p in roster.projects])
    typer.secho(f"🤖 Auto-assigned Id: {project_id}", fg="cyan")

    ptype = prompt_for_choice("Type", PROJECT_TYPES, default=ProjectType.CLIENT.value)
    client = ""
    if ptype == ProjectType.CLIENT:
        client = typer.prompt("Client Name", default="", show_default=False)
    desc = typer.prompt("Brief Description", default="", show_default=False)

    append_event("PROJECT_ADDED", {
        "id": project_id, "name": name, "type": ptype.value,
        "client": client or None, "description": desc or None, "active": True
    })
    typer.secho(f"✅ Project {project_id} recorded in ledger.", fg="green")

@project_app.command(name="list")
def list_projects(
    ptype: Optional[str] = typer.Option(None, "--type", "-t", help="Filter by project type"),
    show_inactive: bool = typer.Option(False, "--all", "-a", help="Include deactivated projects")
):
    roster = load_roster()
    if not roster.projects: return console.print("[yellow]The project list is empty.[/yellow]")

    table = Table(title="Projects Overview", header_style="bold magenta")
    table.add_column("Id", style="bold yellow")
    table.add_column("Name", style="white")
    table.add_column("Type", style="yellow")
    table.add_column("Client", style="cyan")
    table.add_column("Team", style="blue")

    for p in roster.projects:
        if not p.active and not show_inactive: continue
        if ptype and p.type.value.lower() != ptype.lower(): continue

        team = sorted({a.consultant_id for a in roster.assignments if a.project_id == p.id})
        team_str = ", ".join(team) if team else "[dim]-[/dim]"
        name = p.name if p.active else f"[dim]{p.name} (inactive)[/dim]"
        table.add_row(p.id, name, p.type.value, p.client or "-", team_str)
    console.print(table)

@project_app.command(name="edit")
def edit_project(project_id: Optional[str] = typer.Argument(None)):
    roster = load_roster()
    if not project_id:
        ref = Table(title="Reference: Projects")
        ref.add_column("Id"); ref.add_column("Name"); ref.add_column("Type")
        for p in roster.projects:
            if p.active: ref.add_row(p.id, p.name, p.type.value)
        console.print(ref)
        project_id = typer.prompt("\nEnter Project Id to edit")

    cur = roster.project(project_id)
    if cur is None or not cur.active:
        typer.secho("❌ Project not found.", fg="red"); raise typer.Exit(1)

    name = typer.prompt("Name", default=cur.name)
    ptype = prompt_for_choice("Type", PROJECT_TYPES, default=cur.type.value)
    client = typer.prompt("Client", default=cur.client or "", show_default=bool(cur.client))
    desc = typer.prompt("Description", default=cur.description or "", show_default=False)

    append_event("PROJECT_EDITED", {
        "id": cur.id, "name": name, "type": ptype.value,
        "client": client or None, "description": desc or None
    })
    typer.secho("✅ Project updated.", fg="green")

@project_app.command(name="delete")
def delete_project(project_id: str, yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")):
    roster = load_roster()
    cur = roster.project(project_id)
    if cur is None:
        typer.secho("❌ Project not found.", fg="red"); raise typer.Exit(1)
    if yes or typer.confirm(f"Deactivate project {cur.name}?"):
        append_event("PROJECT_DELETED", {"id": project_id})
        typer.secho("✅ Project deactivated.", fg="green")
