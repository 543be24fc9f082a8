"""
Launchpad CLI - Command-line interface.

Serve the API and administer the registry database from the terminal.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from launchpad.config import get_config
from launchpad.core.exceptions import LaunchpadError
from launchpad.registry import DEFAULT_APPS, AppStore, RegistryService, load_seed_file, seed_registry
from launchpad.version import __version__

app = typer.Typer(
    name="launchpad",
    help="Launchpad - Ordered application registry for the corporate launcher",
    no_args_is_help=True,
)
console = Console()

STATUS_STYLES = {
    "ACTIVE": "green",
    "MAINTENANCE": "yellow",
    "DISABLED": "red",
}


def _service(db: Optional[Path]) -> RegistryService:
    store = AppStore(db or get_config().db_path)
    store.initialize()
    return RegistryService(store)


def _fail(error: LaunchpadError) -> None:
    console.print(f"[red]{escape(str(error))}[/red]")
    raise typer.Exit(1)


DbOption = typer.Option(None, "--db", help="SQLite database file (default: LP_DB_PATH)")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: LP_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port (default: LP_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API."""
    import uvicorn

    config = get_config()
    bind_host = host or config.host
    bind_port = port or config.port
    console.print(f"[bold cyan]Launchpad API[/bold cyan] v{__version__} on http://{bind_host}:{bind_port}")
    uvicorn.run(
        "launchpad.api.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=config.log_level.lower(),
    )


@app.command("init-db")
def init_db(
    seed: Optional[Path] = typer.Option(None, "--seed", help="YAML seed file with an 'apps' list"),
    defaults: bool = typer.Option(False, "--defaults", help="Seed the stock corporate tiles"),
    replace: bool = typer.Option(False, "--replace", help="Overwrite existing records"),
    db: Optional[Path] = DbOption,
):
    """Create the database schema and optionally seed it."""
    if seed and defaults:
        console.print("[red]Use either --seed or --defaults, not both[/red]")
        raise typer.Exit(1)

    try:
        service = _service(db)
        console.print(
            f"[green]Schema v{service.store.schema_version()} ready at {service.store.db_path}[/green]"
        )

        records = None
        if seed:
            records = load_seed_file(seed)
        elif defaults:
            records = DEFAULT_APPS

        if records is not None:
            written = seed_registry(service, records, replace=replace)
            if written:
                console.print(f"[green]Seeded {written} applications[/green]")
            else:
                console.print("[yellow]Registry not empty; seed skipped (use --replace)[/yellow]")
    except LaunchpadError as e:
        _fail(e)


@app.command()
def apps(db: Optional[Path] = DbOption):
    """List applications in display order."""
    try:
        records = _service(db).list()
    except LaunchpadError as e:
        _fail(e)

    table = Table(title=f"Applications ({len(records)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Type", style="magenta")
    table.add_column("Status")
    table.add_column("Target", style="dim")

    for record in records:
        style = STATUS_STYLES.get(record.status.value, "white")
        table.add_row(
            str(record.sort_order),
            record.id,
            record.name,
            record.type.value,
            f"[{style}]{record.status.value}[/{style}]",
            record.launch_target or "",
        )

    console.print(table)


@app.command()
def reorder(
    ids: List[str] = typer.Argument(..., help="Every application id, in the new order"),
    db: Optional[Path] = DbOption,
):
    """Set the display order."""
    try:
        _service(db).reorder(list(ids))
    except LaunchpadError as e:
        _fail(e)
    console.print("[green]Order updated[/green]")


@app.command()
def delete(
    app_id: str = typer.Argument(..., help="Application id"),
    db: Optional[Path] = DbOption,
):
    """Delete an application."""
    try:
        _service(db).delete(app_id)
    except LaunchpadError as e:
        _fail(e)
    console.print(f"[green]Deleted {app_id}[/green]")


@app.command()
def settings(
    assignments: Optional[List[str]] = typer.Argument(None, help="KEY=VALUE pairs; KEY= deletes"),
    db: Optional[Path] = DbOption,
):
    """Show or update global settings."""
    values: dict[str, Optional[str]] = {}
    for item in assignments or []:
        if "=" not in item:
            console.print(f"[red]Expected KEY=VALUE, got: {item}[/red]")
            raise typer.Exit(1)
        key, value = item.split("=", 1)
        values[key] = value or None

    try:
        service = _service(db)
        current = service.update_settings(values) if values else service.get_settings()
    except LaunchpadError as e:
        _fail(e)

    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in current.items():
        table.add_row(key, value)
    console.print(table)


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]Launchpad[/bold cyan] v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
