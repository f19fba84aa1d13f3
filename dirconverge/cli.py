"""
Dirconverge CLI - converge a single directory declaration from the shell.
"""

import logging

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .engine import ConvergenceEngine
from .errors import DirConvergeError
from .models import ConvergenceResult
from .prober import StateProber
from .resources import DirectoryResource
from .settings import get_settings

# Setup
app = typer.Typer(
    name="dirconverge",
    help="Declarative directory state convergence",
    add_completion=False,
)
console = Console()


def configure_logging():
    """Configure logging based on settings."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Configure logging on module import
configure_logging()


def _handle_command_error(e: Exception, command_type: str) -> None:
    """Print a failure and exit.

    Raises:
        SystemExit: Always exits with code 1
    """
    console.print(
        f"\n[bold red]✗ {command_type.capitalize()} failed:[/bold red] {e}"
    )
    result = getattr(e, "result", None)
    if result is not None and result.changed:
        console.print("[dim]Completed before the failure:[/dim]")
        for operation in result.operations:
            console.print(f"  [dim]• {operation}[/dim]")
    raise typer.Exit(code=1)


def _print_result(result: ConvergenceResult) -> None:
    if not result.changed:
        console.print(f"[dim]✓ {result.path} is up to date (no changes)[/dim]")
        return
    for operation in result.operations:
        console.print(f"[yellow]~[/yellow] {operation}")
    console.print(f"\n[bold green]✓ {result.path} converged[/bold green]")


def _run(resource: DirectoryResource, command_name: str, dry_run: bool) -> None:
    try:
        engine = ConvergenceEngine(dry_run=True if dry_run else None)
        result = resource.converge(engine)
    except (DirConvergeError, ValidationError) as e:
        _handle_command_error(e, command_name)
    else:
        _print_result(result)


@app.command()
def create(
    path: str = typer.Argument(..., help="Directory to converge"),
    owner: str = typer.Option(None, "--owner", "-o", help="Owner name or uid"),
    group: str = typer.Option(None, "--group", "-g", help="Group name or gid"),
    mode: str = typer.Option(None, "--mode", "-m", help="Octal permissions, e.g. 755"),
    recursive: bool = typer.Option(
        False, "--recursive", "-r", help="Create missing parent directories"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would change without changing it"
    ),
):
    """Ensure a directory exists with the given owner, group and mode."""
    resource = DirectoryResource(
        path=path,
        user=owner,
        group=group,
        mode=mode,
        recursive=recursive,
    )
    _run(resource, "create", dry_run)


@app.command()
def delete(
    path: str = typer.Argument(..., help="Directory to remove"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would change without changing it"
    ),
):
    """Ensure an (empty) directory does not exist."""
    _run(DirectoryResource(path=path, present=False), "delete", dry_run)


@app.command()
def probe(
    path: str = typer.Argument(..., help="Path to inspect"),
):
    """Show the observed state of a path."""
    resource = DirectoryResource(path=path)
    try:
        observed = StateProber().probe(resource.to_desired_state().path)
    except DirConvergeError as e:
        _handle_command_error(e, "probe")
        return

    table = Table(title=observed.path, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("exists", str(observed.exists))
    if observed.exists:
        table.add_row("directory", str(observed.is_directory))
        table.add_row("owner", str(observed.owner))
        table.add_row("group", str(observed.group))
        table.add_row("mode", f"{observed.mode:04o}")
    console.print(table)


@app.command()
def version():
    """Show dirconverge version."""
    from . import __version__

    console.print(f"dirconverge version: [bold]{__version__}[/bold]")


if __name__ == "__main__":
    app()
