"""CLI commands for Doubt Desk.

Commands:
- init-db: Create the database schema
- seed-subjects: Load departments and subjects from a YAML catalog
- leaderboard: Print the top students
- review-queue: Print pending practice answers
- serve: Run the Web API with uvicorn
"""

from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.table import Table

from doubtdesk.config.app_config import load_app_config
from doubtdesk.config.logging_setup import configure_logging
from doubtdesk.core.practice_review import list_review_queue
from doubtdesk.core.query_views import get_leaderboard
from doubtdesk.db.database import get_db_path, init_db
from doubtdesk.db.subjects_repository import seed_from_catalog
from doubtdesk.utils.validators import DoubtDeskError

app = typer.Typer(
    name="doubtdesk",
    help="Doubts, answers and practice review for students and professors.",
    no_args_is_help=True,
)

console = Console()


def _truncate(text: str, max_len: int = 60) -> str:
    """Truncate text with ellipsis if too long."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


def _open_db(db: str | None) -> None:
    try:
        init_db(Path(db) if db else None)
    except DoubtDeskError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)


@app.command("init-db")
def init_database(
    db: str | None = typer.Option(None, "--db", help="Database file"),
) -> None:
    """Create the database schema (idempotent)."""
    _open_db(db)
    console.print(f"[green]✓ Database ready[/green] [dim]{get_db_path()}[/dim]")


@app.command()
def seed_subjects(
    file: str = typer.Argument(..., help="YAML catalog of departments and subjects"),
    db: str | None = typer.Option(None, "--db", help="Database file"),
) -> None:
    """Load departments and subjects from a YAML catalog."""
    catalog_path = Path(file).expanduser()
    if not catalog_path.exists():
        console.print(f"[red]✗ File not found: {catalog_path}[/red]")
        raise typer.Exit(code=1)

    try:
        catalog = yaml.safe_load(catalog_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        console.print(f"[red]✗ Invalid YAML: {e}[/red]")
        raise typer.Exit(code=1)

    _open_db(db)

    try:
        inserted = seed_from_catalog(catalog)
    except (KeyError, ValueError, TypeError) as e:
        console.print(f"[red]✗ Malformed catalog: {e}[/red]")
        raise typer.Exit(code=1)
    except DoubtDeskError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ {inserted} subjects loaded[/green]")


@app.command()
def leaderboard(
    db: str | None = typer.Option(None, "--db", help="Database file"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Rows to show"),
) -> None:
    """Print the top students by points."""
    _open_db(db)

    rows = get_leaderboard(limit)
    if not rows:
        console.print("[yellow]No students yet[/yellow]")
        return

    table = Table(title="Leaderboard")
    table.add_column("#", justify="right")
    table.add_column("Student")
    table.add_column("Points", justify="right")
    for position, row in enumerate(rows, start=1):
        table.add_row(str(position), row["full_name"], str(row["points"]))

    console.print(table)


@app.command()
def review_queue(
    db: str | None = typer.Option(None, "--db", help="Database file"),
) -> None:
    """Print pending practice answers awaiting review."""
    _open_db(db)

    rows = list_review_queue()
    if not rows:
        console.print("[green]✓ Review queue is empty[/green]")
        return

    table = Table(title=f"Pending practice answers ({len(rows)})")
    table.add_column("ID", justify="right")
    table.add_column("Student")
    table.add_column("Question")
    table.add_column("Answer")
    for row in rows:
        table.add_row(
            str(row["practice_id"]),
            row["student_name"],
            _truncate(row["question"]),
            _truncate(row["answer_text"]),
        )

    console.print(table)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port"),
    db: str | None = typer.Option(None, "--db", help="Database file"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Log as JSON lines"),
) -> None:
    """Run the Web API."""
    import uvicorn

    config = load_app_config()
    configure_logging(config.log_level, json_output=json_logs)
    _open_db(db)

    effective_host = host or config.server.host
    effective_port = port or config.server.port
    console.print(
        f"[green]Serving on http://{effective_host}:{effective_port}[/green]"
    )

    uvicorn.run(
        "doubtdesk.web.api:app",
        host=effective_host,
        port=effective_port,
        log_level=config.log_level,
    )


if __name__ == "__main__":
    app()
