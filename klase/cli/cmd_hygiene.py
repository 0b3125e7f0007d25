# -*- coding: utf-8 -*-
"""
Data Hygiene CLI Commands
=========================

Commands:
    klase hygiene run <store>      - Clean every person, post and class
    klase hygiene report <store>   - Show the report of the last run

Example:
    $ klase hygiene run ./klase-store.json
    $ klase hygiene report ./klase-store.json --json
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from klase.data_hygiene.config import get_config
from klase.data_hygiene.migration import get_last_hygiene_report, run_data_hygiene
from klase.data_hygiene.models import HygieneReport
from klase.records.store import JsonFileHygieneStore

app = typer.Typer(
    name="hygiene",
    help="Data hygiene validation and bulk cleanup",
    no_args_is_help=True,
)

console = Console()


def _render(report: HygieneReport, title: str) -> None:
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")
    table.add_row("Phones fixed", str(report.phones_fixed))
    table.add_row("Phones invalid", str(report.phones_invalid))
    table.add_row("Dates adjusted", str(report.dates_adjusted))
    table.add_row("Titles trimmed", str(report.titles_trimmed))
    table.add_row("Texts clipped", str(report.texts_clipped))
    table.add_row("Errors remaining", str(report.total_errors))
    console.print(table)
    console.print(f"[dim]Timestamp:[/dim] {report.timestamp}")
    if report.provenance_hash:
        console.print(f"[dim]Provenance:[/dim] {report.provenance_hash}")


@app.command()
def run(
    store_path: Path = typer.Argument(..., help="JSON store to clean"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """
    Run the bulk hygiene pass over a JSON store.

    Exits with status 1 when the pass fails.
    """
    config = get_config()
    store = JsonFileHygieneStore(store_path, report_key=config.report_key)
    report = run_data_hygiene(store, config)

    if as_json:
        console.print_json(json.dumps(report.to_store()))
    else:
        _render(report, "Hygiene run")

    if report.failed:
        console.print("[red]Error:[/red] hygiene run failed; see the log for details")
        raise typer.Exit(1)
    console.print("[green]✓[/green] Hygiene run complete")


@app.command()
def report(
    store_path: Path = typer.Argument(..., help="JSON store holding the report"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
):
    """
    Show the report of the last hygiene run.

    Exits with status 1 when no report is stored.
    """
    config = get_config()
    store = JsonFileHygieneStore(store_path, report_key=config.report_key)
    last = get_last_hygiene_report(store)
    if last is None:
        console.print("[yellow]No hygiene report found[/yellow]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(json.dumps(last.to_store()))
    else:
        _render(last, "Last hygiene run")
