"""
navguard CLI
============

Sanitize JavaScript files, scan them for navigation writes, or serve the
sanitizer over HTTP.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from navguard import __version__
from navguard.sanitization.domain.enums import FailSafePolicy, LocationPropertyPolicy
from navguard.sanitization.domain.models import NavigationRules
from navguard.sanitization.sanitizer import NavigationSanitizer
from navguard.server.http_server import main as http_main
from navguard.shared.infrastructure.config import settings
from navguard.shared.infrastructure.logging import configure_logging

app = typer.Typer(
    name="navguard",
    help="Strip navigation-redirect assignments from untrusted JavaScript",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    source_path = Path(path)
    if not source_path.is_file():
        err_console.print(f"[red]File not found:[/red] {path}")
        raise typer.Exit(code=2)
    return source_path.read_text(encoding="utf-8")


def _rules(href_only: bool) -> NavigationRules:
    rules = NavigationRules.from_settings(settings)
    if href_only:
        return NavigationRules(
            global_names=rules.global_names,
            property_policy=LocationPropertyPolicy.HREF_ONLY,
        )
    return rules


@app.callback()
def _setup():
    configure_logging()


@app.command()
def version():
    """Show navguard version info."""
    table = Table(show_header=False, box=None)
    table.add_row("navguard", f"[bold green]v{__version__}[/bold green]")
    table.add_row("Python", sys.version.split()[0])
    table.add_row("Platform", sys.platform)

    console.print(Panel(table, title="[bold blue]navguard[/bold blue]", expand=False))


@app.command()
def sanitize(
    path: str = typer.Argument("-", help="JavaScript file to sanitize, '-' for stdin"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the result to a file"),
    as_json: bool = typer.Option(False, "--json", help="Print the full report as JSON"),
    fail_safe: Optional[FailSafePolicy] = typer.Option(
        None, "--fail-safe", help="Result for unparseable input (default from settings)"
    ),
    href_only: bool = typer.Option(
        False, "--href-only", help="Only treat location.href writes as navigation"
    ),
):
    """Remove navigation-redirect statements from a JavaScript file."""
    source = _read_source(path)
    sanitizer = NavigationSanitizer(rules=_rules(href_only), fail_safe=fail_safe)
    report = sanitizer.sanitize(source)

    if as_json:
        text = json.dumps(report.to_json(), indent=2)
    else:
        text = report.code

    if output:
        output.write_text(text, encoding="utf-8")
    else:
        typer.echo(text)

    if report.is_rejected:
        message = report.errors[0].message if report.errors else "parse failed"
        err_console.print(f"[red]Input rejected:[/red] {message}")
        raise typer.Exit(code=1)


@app.command()
def scan(
    path: str = typer.Argument(..., help="JavaScript file to scan, '-' for stdin"),
    href_only: bool = typer.Option(
        False, "--href-only", help="Only treat location.href writes as navigation"
    ),
):
    """List navigation-redirect statements without changing anything."""
    source = _read_source(path)
    hazards, errors = NavigationSanitizer(rules=_rules(href_only)).scan(source)

    if errors:
        for error in errors:
            where = f" (line {error.location.start_line})" if error.location else ""
            err_console.print(f"[red]Parse error{where}:[/red] {error.message}")
        raise typer.Exit(code=1)

    if not hazards:
        console.print("[green]No navigation writes found[/green]")
        return

    table = Table(title=f"Navigation writes in {path}")
    table.add_column("Line", justify="right")
    table.add_column("Column", justify="right")
    table.add_column("Target")
    table.add_column("Statement")
    for hazard in hazards:
        table.add_row(
            str(hazard.location.start_line) if hazard.location else "-",
            str(hazard.location.start_column) if hazard.location else "-",
            hazard.target,
            hazard.statement_type,
        )
    console.print(table)
    raise typer.Exit(code=1)


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, help="Interface to bind"),
    port: int = typer.Option(settings.api_port, help="Port to listen on"),
):
    """Start the HTTP sanitize service."""
    try:
        asyncio.run(http_main(host, port))
    except KeyboardInterrupt:
        pass


def main():
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
