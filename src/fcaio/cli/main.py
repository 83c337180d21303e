"""CLI entry point for fcaio.

Invoked as::

    fcaio [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m fcaio.cli.main

Commands
--------
formats     List registered context formats
show        Print a context file as a cross table
convert     Convert a context file to another format
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

if TYPE_CHECKING:
    from fcaio.context.model import Context

console = Console()
err_console = Console(stderr=True)


def _read_or_exit(path: str) -> tuple["Context", str]:
    """Read a context file and report its detected format, exiting on error."""
    from fcaio.formats import ContextFormatError, read_context_and_format

    try:
        return read_context_and_format(path)
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)
    except ContextFormatError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="fcaio")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Read, write and convert Formal Concept Analysis contexts."""
    from fcaio.formats import default_registry

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )
    default_registry.load_entrypoints()


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from fcaio import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]fcaio[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# formats command
# ---------------------------------------------------------------------------


@cli.command(name="formats")
def formats_command() -> None:
    """List registered context formats in detection order."""
    from fcaio.formats import default_registry

    detectable = default_registry.list_formats()
    codecs = default_registry.list_codecs()

    table = Table(title="Context formats")
    table.add_column("Priority", justify="right")
    table.add_column("Format", style="bold")
    table.add_column("Codec")
    table.add_column("Detectable")

    ordered = detectable + [name for name in codecs if name not in detectable]
    for index, name in enumerate(ordered, start=1):
        codec = type(default_registry.get_codec(name)).__name__ if name in codecs else "-"
        table.add_row(
            str(index) if name in detectable else "-",
            name,
            codec,
            "[green]yes[/green]" if name in detectable else "[dim]no[/dim]",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# show command
# ---------------------------------------------------------------------------


@cli.command(name="show")
@click.argument("file", type=click.Path(exists=False))
def show_command(file: str) -> None:
    """Print a context file as a cross table.

    FILE is the path to a context in any registered format.
    """
    context, identifier = _read_or_exit(file)

    table = Table(show_lines=False)
    table.add_column("")
    for att in context.attributes:
        table.add_column(att, justify="center")
    for obj, row in context.rows():
        table.add_row(obj, *("X" if present else "." for present in row))

    console.print(f"[bold]Format:[/bold] {identifier}")
    console.print(table)
    console.print(
        f"\n[bold]Summary:[/bold] {len(context.objects)} object(s), "
        f"{len(context.attributes)} attribute(s), {len(context.incidence)} incidence pair(s)"
    )


# ---------------------------------------------------------------------------
# convert command
# ---------------------------------------------------------------------------


@cli.command(name="convert")
@click.argument("source", type=click.Path(exists=False))
@click.argument("destination", type=click.Path(exists=False))
@click.option("--to", "target_format", required=True, help="Output format identifier")
@click.option("--dual", is_flag=True, default=False, help="Write the dual context instead")
def convert_command(source: str, destination: str, target_format: str, dual: bool) -> None:
    """Convert a context file to another format.

    SOURCE is read with automatic format detection; DESTINATION is
    written in the format named by --to.
    """
    from fcaio.formats import UnknownFormatError, write_context

    context, identifier = _read_or_exit(source)
    if dual:
        context = context.dual()

    try:
        write_context(target_format, context, destination)
    except UnknownFormatError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    except (OSError, ValueError) as exc:
        err_console.print(f"[red]Error:[/red] Cannot write {destination}: {exc}")
        sys.exit(1)

    console.print(
        f"[green]Converted[/green] {source} ({identifier}) → {destination} ({target_format})"
    )


if __name__ == "__main__":
    cli()
