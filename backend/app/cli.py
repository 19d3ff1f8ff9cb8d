"""osintfleet CLI: naval vessel position tracker.

Commands:
  init-db : create database tables
  seed    : load the YAML dataset into the database
  stats   : print fleet statistics
  export  : write a CSV/GeoJSON snapshot
  serve   : run the API server
"""
from __future__ import annotations

import typer
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.table import Table

from app.config import settings


app = typer.Typer(
    name="osintfleet",
    help="Naval vessel last-known-position tracker.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


def _open_source(dataset_file: Optional[Path]):
    """Return (record source, session or None). Caller closes the session."""
    if dataset_file is not None:
        from app.modules.demo_data import load_dataset
        return load_dataset(dataset_file), None

    from app.database import get_session
    from app.modules.record_source import SqlRecordSource

    db = get_session()
    return SqlRecordSource(db), db


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("init-db")
def init_database():
    """Create all tables."""
    from app.database import init_db

    try:
        with console.status("[bold]Creating database..."):
            init_db()
    except Exception as e:
        console.print(f"[red]Database setup failed:[/red] {e}")
        raise typer.Exit(1)
    console.print("[green]Database ready.[/green]")


@app.command("seed")
def seed(
    dataset_file: Path = typer.Option(
        Path(settings.DEMO_DATASET), "--file", help="YAML dataset with vessels, events, review_logs"
    ),
):
    """Load a YAML dataset into the database (existing ids are skipped)."""
    from app.database import get_session, init_db
    from app.modules.demo_data import load_dataset, seed_database
    from app.modules.record_source import DatasetValidationError

    try:
        source = load_dataset(dataset_file)
    except FileNotFoundError:
        console.print(f"[red]Dataset not found:[/red] {dataset_file}")
        raise typer.Exit(1)
    except DatasetValidationError as e:
        console.print(f"[red]{e}[/red]")
        for err in e.errors:
            console.print(f"  {'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}")
        raise typer.Exit(1)

    init_db()
    db = get_session()
    try:
        inserted = seed_database(db, source)
    finally:
        db.close()

    console.print(
        f"[green]Seeded[/green] {inserted['vessels']} vessels, "
        f"{inserted['events']} events, {inserted['review_logs']} review logs"
    )


@app.command("stats")
def stats(
    dataset_file: Optional[Path] = typer.Option(None, "--file", help="Read a YAML dataset instead of the database"),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Reference date/time (ISO-8601); default now"),
):
    """Print fleet statistics."""
    from app.modules.fleet_stats import compute_fleet_statistics
    from app.modules.record_source import DatasetValidationError, RecordSourceError
    from app.utils.dates import format_timestamp, parse_date_bound

    reference = None
    if as_of:
        reference = parse_date_bound(as_of)
        if reference is None:
            console.print(f"[red]Invalid --as-of value:[/red] {as_of}")
            raise typer.Exit(1)

    try:
        source, db = _open_source(dataset_file)
        try:
            result = compute_fleet_statistics(source.list_vessels(), source.list_events(), reference)
        finally:
            if db is not None:
                db.close()
    except (RecordSourceError, DatasetValidationError) as e:
        console.print(f"[red]Could not read records:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title=f"Fleet Statistics ({format_timestamp(result.generated_at)})")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total vessels", str(result.total_vessels))
    table.add_row("Active deployments", str(result.active_deployments))
    table.add_row("Events verified (30d)", str(result.events_last_30_days))
    table.add_row("Vessels missing updates (>14d)", str(result.vessels_missing_updates))
    console.print(table)


@app.command("export")
def export(
    dataset: str = typer.Argument(..., help="events or vessels"),
    fmt: str = typer.Argument(..., metavar="FORMAT", help="csv or geojson"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output path (default: osint-<dataset>.<ext>)"),
    dataset_file: Optional[Path] = typer.Option(None, "--file", help="Read a YAML dataset instead of the database"),
):
    """Write a CSV or GeoJSON snapshot with rounded coordinates."""
    from app.modules.export import (
        EXPORT_FORMATS,
        InvalidExportFormatError,
        export_dataset,
        resolve_dataset,
    )
    from app.modules.record_source import DatasetValidationError, RecordSourceError

    try:
        dataset = resolve_dataset(dataset)
        if fmt not in EXPORT_FORMATS:
            raise InvalidExportFormatError(fmt)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    try:
        source, db = _open_source(dataset_file)
        try:
            vessels = source.list_vessels()
            events = source.list_events() if dataset == "events" else []
        finally:
            if db is not None:
                db.close()
    except (RecordSourceError, DatasetValidationError) as e:
        console.print(f"[red]Could not read records:[/red] {e}")
        raise typer.Exit(1)

    payload = export_dataset(dataset, fmt, vessels, events)

    target = output or Path(payload.filename)
    target.write_bytes(payload.content)
    console.print(f"Wrote [cyan]{target}[/cyan] ({len(payload.content):,} bytes)")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Run the API server."""
    import uvicorn

    console.print(f"API running at [cyan]http://{host}:{port}[/cyan] (Ctrl+C to stop)")
    uvicorn.run("app.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
