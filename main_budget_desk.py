"""Mini README: Entry point CLI for the film budget desk.

Commands:
    * run - start the FastAPI service with uvicorn.
    * report - print the category summary and cost comparison of a project.
    * export - write a project's calculation to a CSV file.

Settings (database file, host, port) come from ``FILMBUDGET_*`` environment
variables or ``.env`` unless overridden by options.
"""

from __future__ import annotations

from pathlib import Path

import typer
import uvicorn

from filmbudget.calculation import compare, hotel_nights, summarize
from filmbudget.configuration import get_settings
from filmbudget.export import BudgetExporter, format_currency, format_difference
from filmbudget.logging_utils import configure_root_logger
from filmbudget.storage import create_gateway

cli = typer.Typer(help="Plan and compare film production budgets.")


def _load_snapshot(project_id: str):
    settings = get_settings()
    gateway = create_gateway(settings.database_path)
    try:
        return gateway.snapshot(project_id)
    except KeyError as error:
        typer.echo(f"Unknown project: {project_id}", err=True)
        raise typer.Exit(code=1) from error


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger()

    # Browsers cannot open 0.0.0.0, point them at localhost instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting budget desk on {effective_host}:{effective_port}.\n"
        f"Open your browser at http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "filmbudget.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def report(project_id: str = typer.Argument(..., help="Identifier of the project.")) -> None:
    """Print category totals and the planned-versus-actual comparison."""

    snapshot = _load_snapshot(project_id)
    summary = summarize(snapshot)
    comparison = compare(snapshot)

    typer.echo(f"{snapshot.name} ({snapshot.shooting_days} Drehtage)")
    for key, value in summary.as_dict().items():
        typer.echo(f"  {key:<12}{format_currency(value):>18}")
    typer.echo(f"  {'hotel nights':<12}{hotel_nights(snapshot):>18}")
    typer.echo("")
    for row in comparison.rows:
        typer.echo(
            f"  {row.name or row.row_type:<24}"
            f"{format_currency(row.calculated):>16}"
            f"{format_currency(row.actual):>16}"
            f"{format_difference(row.difference):>18}"
        )
    typer.echo(
        f"  {'Gesamt':<24}"
        f"{format_currency(comparison.total_calculated):>16}"
        f"{format_currency(comparison.total_actual):>16}"
        f"{format_difference(comparison.difference):>18}"
    )


@cli.command()
def export(
    project_id: str = typer.Argument(..., help="Identifier of the project."),
    destination: Path = typer.Option(Path("budget.csv"), help="Target CSV file."),
) -> None:
    """Write the project's calculation to a CSV file."""

    snapshot = _load_snapshot(project_id)
    path = BudgetExporter().export(snapshot, destination)
    typer.echo(f"Wrote {path}")


if __name__ == "__main__":
    cli()
