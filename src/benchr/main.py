import typer

from .absences import absence_app
from .assign import assign_app
from .config import load_config, run_setup_wizard, setup_logging
from .people import people_app
from .plan import plan_app
from .project import project_app
from .report import report_app

# Initialize the Main App and Sub-Apps
app = typer.Typer(help="Benchr: Consultant Occupancy and Period Planning CLI", add_completion=False)

app.add_typer(people_app, name="people")
app.add_typer(project_app, name="project")
app.add_typer(assign_app, name="assign")
app.add_typer(absence_app, name="absence")
app.add_typer(plan_app, name="plan")
app.add_typer(report_app, name="report")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr")):
    settings = load_config()
    if verbose:
        settings.log_level = "DEBUG"
    setup_logging(settings)


@app.command(name="setup")
def setup():
    """Configure capacities, availability thresholds and default view."""
    run_setup_wizard()


if __name__ == "__main__":
    app()
