#!/usr/bin/env python3
"""panelforge CLI - Docker Compose to platform template converter."""

import typer
from rich.console import Console

from panelforge import __version__
from panelforge.cli_compose_commands import register_compose_commands
from panelforge.core.logger import get_logger

app = typer.Typer(
    name="panelforge",
    help="""panelforge - Turn docker-compose files into deployable templates

Quick start:
  panelforge compose analyze docker-compose.yml       # See how services are classified
  panelforge compose convert docker-compose.yml myapp # Write templates/myapp/

More commands: panelforge --help
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

# Attach modular subcommands
register_compose_commands(app, console)


@app.command()
def version():
    """Show panelforge version."""
    console.print(f"panelforge v{__version__}")


if __name__ == "__main__":
    app()
