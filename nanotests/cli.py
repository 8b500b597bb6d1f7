#!/usr/bin/env python3
"""
nanotests CLI

Usage:
    nanotests parse <url> [--json]
    nanotests run <suite.yaml> [OPTIONS]
    nanotests validate <suite.yaml>
    nanotests info
    nanotests --version
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .exceptions import DecodeError
from .runner import run_suite
from .suite import AssertStep, RequestStep, load_suite
from .url import parse_url

app = typer.Typer(
    name="nanotests",
    help="nanotests - URL parsing and HTTP/XML/DB checks for server tests",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"nanotests v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level",
        help="Logging level: DEBUG, INFO, WARNING or ERROR"
    ),
):
    """
    nanotests - URL parsing and HTTP/XML/DB checks for server tests.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def parse(
    url: str = typer.Argument(..., help="URL to decompose"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """
    Decompose a URL into protocol, domain, resource and parameters.
    """
    try:
        parsed = parse_url(url)
    except DecodeError as e:
        console.print(f"[red]Cannot parse URL:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(data={
            "protocol": parsed.protocol,
            "domain": parsed.domain,
            "resource": parsed.resource,
            "params": dict(parsed.params),
        })
        return

    table = Table(title=escape(url), show_header=False)
    table.add_column("Part", style="cyan")
    table.add_column("Value")
    table.add_row("protocol", _show(parsed.protocol))
    table.add_row("domain", escape(parsed.domain))
    table.add_row("resource", _show(parsed.resource))
    for name, value in parsed.params.items():
        table.add_row(escape(f"param {name}"), escape(value))
    console.print(table)


def _show(value: Optional[str]) -> str:
    return "[dim]<none>[/dim]" if value is None else escape(value)


@app.command()
def run(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show errors and final status"
    ),
    output: str = typer.Option(
        "text", "--output", "-o",
        help="Output format: text or json"
    ),
    report_dir: Path = typer.Option(
        Path("reports"), "--report-dir", "-r",
        help="Directory to save JSON reports"
    ),
    no_report: bool = typer.Option(
        False, "--no-report",
        help="Don't save a JSON report file"
    ),
):
    """
    Run a check suite.

    Send every request, evaluate every assertion and write a run report.
    """
    if output not in ("text", "json"):
        console.print(f"[red]Unknown output format:[/red] {output}")
        raise typer.Exit(code=2)

    suite, validation = load_suite(suite_file)
    if not validation.is_valid:
        console.print("[red]Validation failed:[/red]")
        console.print(str(validation))
        raise typer.Exit(code=1)

    show_progress = not quiet and output == "text"
    if show_progress:
        console.print(f"[bold]Running:[/bold] {suite.name} against {suite.server.url}")

    reporter = asyncio.run(run_suite(suite, console if show_progress else None))
    report = reporter.report

    if output == "json":
        console.print_json(data=report.to_dict())
    elif not quiet:
        console.print(report.summary(), markup=False, highlight=False)
    else:
        console.print(f"{suite.name}: {report.status.value.upper()}")

    if not no_report:
        report_path = reporter.save_json(report_dir / f"{report.run_id}.json")
        if show_progress:
            console.print(f"Report saved: {report_path}")

    raise typer.Exit(code=0 if report.status.value == "passed" else 1)


@app.command()
def validate(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
):
    """
    Validate a suite YAML file without running it.
    """
    suite, validation = load_suite(suite_file)

    if not validation.is_valid:
        console.print("[red]Validation failed:[/red]")
        console.print(str(validation))
        raise typer.Exit(code=1)

    console.print(f"[green]Valid suite:[/green] {suite.name}")
    console.print(f"   Server: {suite.server.url}")
    console.print(f"   Steps: {len(suite.steps)}")

    table = Table(title="Steps")
    table.add_column("ID", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Details")

    for step in suite.steps:
        if isinstance(step, RequestStep):
            details = f"{step.method} {step.resource}"
        elif isinstance(step, AssertStep):
            source = step.check.url or f"from: {step.from_step}"
            details = f"{source}, op: {step.check.op.value}"
        else:
            details = ""
        table.add_row(step.id, step.type.value, details)

    console.print(table)


@app.command()
def info():
    """
    Show information about nanotests.
    """
    console.print(f"""
[bold]nanotests[/bold] v{__version__}

URL parsing and assertion toolkit for server tests

[bold]Features:[/bold]
  - URL decomposition with strict percent-decoding
  - HTTP status, header, body and JSONPath checks
  - XML element checks
  - Database row and query checks
  - Declarative YAML check suites with JSON run reports

[bold]Quick Start:[/bold]
  nanotests parse "http://test.com/page?a=1&b=2"
  nanotests validate checks/site.yaml
  nanotests run checks/site.yaml
""")


if __name__ == "__main__":
    app()
