# -*- coding: utf-8 -*-
"""
Klase CLI
=========

Administrative entry point for the record hygiene subsystem.

Commands:
    klase version
    klase hygiene run STORE.json
    klase hygiene report STORE.json
    klase dedup check SNAPSHOT.json --tenant T [--name ... --cpf ...]
"""

import logging

import typer
from rich.console import Console

from klase import __version__
from klase.cli.cmd_dedup import app as dedup_app
from klase.cli.cmd_hygiene import app as hygiene_app

app = typer.Typer(
    name="klase",
    help="Klase: record deduplication and data hygiene",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


@app.callback(invoke_without_command=True)
def _root(
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """
    Klase - record deduplication and data hygiene
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if version:
        console.print(f"Klase v{__version__}")
        raise typer.Exit(0)


@app.command()
def version():
    """Show Klase version"""
    console.print(f"[bold green]Klase v{__version__}[/bold green]")


app.add_typer(hygiene_app, name="hygiene", help="Data hygiene validation and bulk cleanup")
app.add_typer(dedup_app, name="dedup", help="Duplicate record checks")


def main():
    """Main entry point for the klase CLI"""
    app()


if __name__ == "__main__":
    main()
