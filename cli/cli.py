"""CLI for shootsync.

Developer CLI to inspect a project's shooting schedule, preview the scheduler
impact of a script diff and apply it, using the same reconciler code path as
the application.
"""

from pathlib import Path

import typer
from loguru import logger
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shootsync.config.settings import settings
from shootsync.core.errors import DiffValidationError, PersistenceError
from shootsync.core.logger import setup_logger
from shootsync.db.session import get_session, init_db
from shootsync.schedule.aggregates import format_page_eighths
from shootsync.schedule.diff_loader import ParagraphPayload, load_diff_document, resolve_diff
from shootsync.schedule.graph import ScheduleGraph
from shootsync.schedule.impact import summarize_impact
from shootsync.schedule.reconciler import ScheduleReconciler
from shootsync.script.types import TypedParagraph

# Initialize Rich console for output
console = Console()

# Initialize Typer app
app = typer.Typer(
    name="shootsync",
    help="shootsync - keep the shooting schedule in step with the script",
    add_completion=False,
)

ProjectOption = typer.Option(..., "--project", "-p", help="Project ID")
_PARAGRAPHS_ADAPTER = TypeAdapter(dict[str, list[ParagraphPayload]])


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level"),
) -> None:
    """Configure logging for every command."""
    setup_logger(level=log_level)


@app.command("init-db")
def init_db_command() -> None:
    """Create the database tables."""
    init_db()
    console.print("[green]Database schema ready[/green]")


@app.command()
def show_schedule(project: str = ProjectOption) -> None:
    """Show shoot days with their scene counts and page totals."""
    with get_session() as session:
        graph = ScheduleGraph(session, project)
        days = graph.shoot_days()
        unscheduled = [s for s in graph.scenes() if s.shoot_day_id is None]

        table = Table(title=f"Schedule for {project}")
        table.add_column("Day", style="cyan")
        table.add_column("Scenes", justify="right")
        table.add_column("Pages", justify="right")
        for day in days:
            table.add_row(day.display_title, str(day.scene_count), format_page_eighths(day.total_page_eighths))
        console.print(table)
        console.print(f"[dim]{len(unscheduled)} unscheduled scene(s)[/dim]")


@app.command()
def preview(
    diff_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Diff document (JSON)"),
    project: str = ProjectOption,
) -> None:
    """Preview the scheduler impact of a diff without applying it."""
    with get_session() as session:
        graph = ScheduleGraph(session, project)
        try:
            diff = resolve_diff(load_diff_document(diff_path), graph)
        except DiffValidationError as e:
            _print_validation_error(e)
            raise typer.Exit(1) from e

        impact = summarize_impact(diff)
        style = "bold yellow" if impact.has_impact else "green"
        console.print(Panel(Text(impact.summary, style=style), title="Scheduler impact", subtitle=diff.summary))


@app.command()
def reconcile(
    diff_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Diff document (JSON)"),
    project: str = ProjectOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Apply without asking for confirmation"),
) -> None:
    """Apply a diff to the schedule."""
    with get_session() as session:
        graph = ScheduleGraph(session, project)
        try:
            diff = resolve_diff(load_diff_document(diff_path), graph)
        except DiffValidationError as e:
            _print_validation_error(e)
            raise typer.Exit(1) from e

        impact = summarize_impact(diff)
        console.print(f"[yellow]{impact.summary}[/yellow]")
        if impact.has_impact and not yes and not typer.confirm("Apply these changes to the schedule?"):
            console.print("[dim]Aborted, schedule unchanged[/dim]")
            raise typer.Exit(0)

        try:
            report = ScheduleReconciler().reconcile(diff, graph)
        except PersistenceError as e:
            logger.error(f"Reconciliation failed: {e}")
            console.print(f"[bold red]Reconciliation failed, schedule unchanged:[/bold red] {e}")
            raise typer.Exit(1) from e

        console.print(
            f"[green]Reconciled:[/green] {len(report.unscheduled)} unscheduled, "
            f"{len(report.added_scene_ids)} added, {len(report.modified_scene_ids)} modified, "
            f"{len(report.moved_scene_ids)} moved"
        )
        for totals in report.day_totals:
            console.print(f"  Day {totals.day_number}: {totals.scene_count} scenes, {totals.display} pages")


@app.command()
def recompute(project: str = ProjectOption) -> None:
    """Recompute every shoot day's page total and scene count."""
    with get_session() as session:
        try:
            totals = ScheduleReconciler().recompute_days(ScheduleGraph(session, project))
        except PersistenceError as e:
            console.print(f"[bold red]Recompute failed:[/bold red] {e}")
            raise typer.Exit(1) from e
    console.print(f"[green]Recomputed {len(totals)} shoot day(s)[/green]")


@app.command()
def recalc_lengths(
    paragraphs_path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help='JSON object: {"<scene id>": [{"type": "...", "text": "..."}]}'
    ),
    project: str = ProjectOption,
) -> None:
    """Re-estimate page lengths of all scenes from their paragraphs."""
    try:
        raw = _PARAGRAPHS_ADAPTER.validate_json(paragraphs_path.read_bytes())
    except ValidationError as e:
        console.print("[bold red]Invalid paragraphs file:[/bold red]")
        for err in e.errors():
            location = ".".join(str(p) for p in err["loc"]) or "<root>"
            console.print(f"  - {location}: {err['msg']}")
        raise typer.Exit(1) from e

    paragraphs_by_scene_id = {
        scene_id: [TypedParagraph.of(p.type, p.text) for p in paragraphs] for scene_id, paragraphs in raw.items()
    }

    with get_session() as session:
        try:
            report = ScheduleReconciler().recalculate_page_lengths(ScheduleGraph(session, project), paragraphs_by_scene_id)
        except PersistenceError as e:
            console.print(f"[bold red]Recalculation failed:[/bold red] {e}")
            raise typer.Exit(1) from e

    console.print(f"[green]Updated page length of {len(report.updated)} scene(s)[/green]")
    for change in report.updated:
        console.print(
            f"  {change.scene_id}: {format_page_eighths(change.old_eighths)} -> {format_page_eighths(change.new_eighths)}"
        )


def _print_validation_error(error: DiffValidationError) -> None:
    console.print("[bold red]Invalid diff document:[/bold red]")
    for detail in error.details:
        console.print(f"  - {detail}")


if __name__ == "__main__":
    app()
