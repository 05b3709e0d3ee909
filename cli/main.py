#!/usr/bin/env python3
"""
Desync CLI - deterministic state fingerprinting

Main entrypoint for the desync command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import checksum
from desync.logging_config import setup_logging

# Initialize Typer app
app = typer.Typer(
    name="desync",
    help="Deterministic state fingerprinting for lockstep simulations",
    add_completion=False,
)

# Console for rich output
console = Console()

app.command("checksum")(checksum.checksum_command)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from desync import __version__ as core_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Desync CLI[/bold]", f"v{__version__}")
    table.add_row("Core", f"v{core_version}")
    table.add_row("Checksum", "CRC-32")

    console.print(table)


def main():
    """Main entrypoint."""
    setup_logging()
    app()


if __name__ == "__main__":
    main()
