"""CLI entry point for one-off accessibility scans."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
from playwright.async_api import async_playwright
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from axe_baseline.errors import AccessibilityViolation, InvalidBaseline, ScanProviderError
from axe_baseline.models.baseline import load_baseline
from axe_baseline.models.config import AxeConfig
from axe_baseline.models.outcome import Verdict
from axe_baseline.reporter.reporter import RunReporter
from axe_baseline.session import AxeSession, RaisingHost

console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


async def _scan(url: str, session: AxeSession, baseline: dict) -> Verdict | None:
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        try:
            page = await browser.new_page()
            await page.goto(url, wait_until="networkidle")
            return await session.check(page, baseline)
        finally:
            await browser.close()


def _print_events(session: AxeSession) -> None:
    table = Table(title=f"Accessibility checks for {session.url}")
    table.add_column("Result", style="bold")
    table.add_column("Check")
    table.add_column("Details")
    for event in session.events:
        result = "[red]FAIL[/red]" if event.failed else "[green]PASS[/green]"
        table.add_row(result, event.check_name, json.dumps(event.context))
    console.print(table)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Accessibility checks with axe-core and a declared baseline"""
    setup_logging(verbose)


@cli.command()
@click.argument("url")
@click.option("--baseline", "-b", "baseline_file", default=None, help="Baseline JSON file")
@click.option("--config", "-c", default=None, help="Config file path")
@click.option("--report", "-r", default=None, help="Report file (relative to the output dir)")
def scan(url: str, baseline_file: str | None, config: str | None, report: str | None) -> None:
    """Scan URL and compare the findings against a baseline."""
    try:
        cfg = AxeConfig.load(config) if config else AxeConfig()
        baseline = load_baseline(baseline_file) if baseline_file else {}
    except (FileNotFoundError, InvalidBaseline, json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(2)
    if report:
        cfg.report_filename = report

    session = AxeSession(RaisingHost(url), cfg)
    failed = False
    try:
        asyncio.run(_scan(url, session, baseline))
    except ScanProviderError as e:
        console.print(f"[red]Scan failed:[/red] {e}")
        sys.exit(2)
    except AccessibilityViolation as e:
        failed = True
        console.print(f"[red]{e}[/red]")

    _print_events(session)

    reporter = RunReporter(cfg)
    reporter.add(session.to_record())
    for fmt, path in reporter.generate_reports().items():
        console.print(f"  {fmt.upper()} report: [blue]{path}[/blue]")

    if failed:
        sys.exit(1)
    console.print("[bold green]No unexpected accessibility issues[/bold green]")


@cli.command()
@click.option("--path", "-p", default="axe-config.json", help="Config file to create")
def init(path: str) -> None:
    """Create a default configuration file."""
    config_path = Path(path)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    AxeConfig().save(config_path)
    console.print(f"[green]Created {config_path}[/green]")


if __name__ == "__main__":
    cli()
