"""Docker Compose command group."""
from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from panelforge.cli_support import (
    find_templates_dir,
    handle_cli_error,
    print_info,
    print_success,
    print_warning,
    setup_file_logging,
)
from panelforge.core.errors import ConversionError
from panelforge.services.compose_converter import ComposeConverter
from panelforge.services.docker_compose import ComposeAnalyzer, ComposeLoader

ComposeApp = typer.Typer(help="Analyze and convert Docker Compose files", add_completion=False)

_console: Console = Console()


def register_compose_commands(app: typer.Typer, console: Console) -> None:
    """Attach compose commands to the primary CLI."""
    global _console
    _console = console
    app.add_typer(ComposeApp, name="compose")


@ComposeApp.command("analyze")
def compose_analyze(
    source: str = typer.Argument(..., help="Path or URL to docker-compose.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Classify the services of a docker-compose.yml without converting it."""
    try:
        document = ComposeLoader().load(source)
    except ConversionError as exc:
        handle_cli_error(exc, _console, verbose)

    analysis = ComposeAnalyzer().analyze(document)

    table = Table(title="Services", show_header=True)
    table.add_column("Service", style="cyan")
    table.add_column("Class", style="bold")
    table.add_column("Image", style="blue")
    table.add_column("Port", style="dim")
    table.add_column("Volumes", style="dim")

    for name in analysis.ordered_services():
        service = analysis.services[name]
        ports = analysis.ports(name)
        table.add_row(
            escape(name),
            analysis.class_of(name).value,
            escape(service.image or ("(build)" if service.build else "-")),
            str(ports[0].container_port) if ports else "-",
            str(len(service.volumes)),
        )
    _console.print(table)

    for issue in analysis.issues:
        print_warning(_console, escape(issue))

    print_success(_console, "Compose analysis complete")


@ComposeApp.command("convert")
def compose_convert(
    source: str = typer.Argument(..., help="Path or URL to docker-compose.yml"),
    slug: str = typer.Argument(..., help="Slug for the new template (lowercase, e.g., myapp)"),
    templates_dir: Optional[str] = typer.Option(
        None, "--templates-dir", "-t", help="Directory templates are written to (default: ./templates)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the generated index.ts without writing files"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
) -> None:
    """Convert a Docker Compose file into a template.

    This command analyzes a Docker Compose file and generates:
    - meta.yaml with an input schema for service names, images and env vars
    - index.ts declaring one service per compose service
    - CONVERSION_NOTES.md listing items that need manual review

    Examples:
        panelforge compose convert ./docker-compose.yml myapp
        panelforge compose convert https://example.com/docker-compose.yml myapp
        panelforge compose convert ./compose.yml myapp --dry-run
    """
    setup_file_logging(log_file=log_file, verbose=verbose)

    target_dir = find_templates_dir(templates_dir)
    converter = ComposeConverter(templates_dir=target_dir)

    try:
        if dry_run:
            result = converter.render(source, slug)
        else:
            result = converter.convert(source, slug)
    except ConversionError as exc:
        handle_cli_error(exc, _console, verbose)

    analysis = result.analysis
    _console.print("[bold cyan]Analysis:[/bold cyan]")
    _console.print(f"  - {len(analysis.databases)} database service(s)")
    _console.print(f"  - {len(analysis.applications)} application service(s)")
    _console.print(f"  - {len(analysis.others)} other service(s)")

    if analysis.issues:
        _console.print("\n[bold yellow]Needs review:[/bold yellow]")
        for issue in analysis.issues:
            print_warning(_console, escape(issue))

    if dry_run:
        _console.print("\n[bold]Generated index.ts:[/bold]\n")
        _console.print(result.generator_source, markup=False, highlight=False)
        print_info(_console, "Dry run: no files written")
        return

    location = target_dir / slug
    print_success(_console, "Template created successfully!")
    _console.print(f"\nLocation: {location}/\n")
    _console.print("[dim]Next steps:[/dim]")
    _console.print(f"  1. Review generated files in {location}/")
    _console.print(f"  2. Add logo: {location}/assets/logo.png")
    _console.print(f"  3. Add screenshot: {location}/assets/screenshot.png")
    _console.print("  4. Customize meta.yaml (name, description, etc.)")
    _console.print("  5. Review and adjust index.ts")
    print_warning(_console, "Please review the generated template carefully. Some features may need manual adjustment.")
