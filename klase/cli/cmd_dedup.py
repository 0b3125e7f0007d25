# -*- coding: utf-8 -*-
"""
Duplicate Check CLI Commands
============================

Commands:
    klase dedup check <snapshot> --tenant <id> [fields]  - Check a candidate

The snapshot is a JSON export of the record store with ``profiles`` and
``guardians`` lists.

Example:
    $ klase dedup check ./snapshot.json --tenant school-1 --name "Maria Silva" --dob 2010-01-01
    $ klase dedup check ./snapshot.json --tenant school-1 --cpf 123.456.789-00 --json
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from klase.duplicate_checker.checker import DuplicateChecker
from klase.duplicate_checker.models import CandidateRecord, DuplicateCheckResult
from klase.exceptions import KlaseException
from klase.records.memory import InMemoryRecordRepository
from klase.records.models import Address

app = typer.Typer(
    name="dedup",
    help="Duplicate record checks",
    no_args_is_help=True,
)

console = Console()


def _render(result: DuplicateCheckResult) -> None:
    if result.blocking_issues:
        table = Table(title="Blocking issues")
        table.add_column("Field", style="red")
        table.add_column("Message")
        table.add_column("Existing record")
        for issue in result.blocking_issues:
            user = issue.existing_user
            table.add_row(issue.field.value, issue.message, f"{user.name} ({user.id})")
        console.print(table)

    if result.similarities:
        table = Table(title="Similar records")
        table.add_column("Type", style="yellow")
        table.add_column("Severity")
        table.add_column("Message")
        table.add_column("Existing records")
        for similarity in result.similarities:
            users = ", ".join(f"{u.name} ({u.id})" for u in similarity.existing_users)
            table.add_row(
                similarity.type.value, similarity.severity.value, similarity.message, users,
            )
        console.print(table)

    for warning in result.integrity_warnings:
        console.print(f"[yellow]Integrity warning:[/yellow] {warning.message}")

    if not result.has_blocking and not result.has_similarities:
        console.print("[green]✓[/green] No duplicates found")


@app.command()
def check(
    snapshot: Path = typer.Argument(..., help="JSON snapshot of the record store"),
    tenant: str = typer.Option(..., "--tenant", "-t", help="Tenant (school) id"),
    name: Optional[str] = typer.Option(None, "--name", help="Full name"),
    cpf: Optional[str] = typer.Option(None, "--cpf", help="CPF, any formatting"),
    enrollment: Optional[str] = typer.Option(None, "--enrollment", help="Enrollment number"),
    dob: Optional[str] = typer.Option(None, "--dob", help="Date of birth (YYYY-MM-DD)"),
    phone: Optional[str] = typer.Option(None, "--phone", help="Phone, any formatting"),
    email: Optional[str] = typer.Option(None, "--email", help="Email"),
    street: Optional[str] = typer.Option(None, "--street", help="Street"),
    number: Optional[str] = typer.Option(None, "--number", help="House number"),
    city: Optional[str] = typer.Option(None, "--city", help="City"),
    exclude_id: Optional[str] = typer.Option(None, "--exclude-id", help="Record being edited"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """
    Check a candidate person against a store snapshot.

    Exits with status 2 when a blocking duplicate is found.
    """
    try:
        repository = InMemoryRecordRepository.from_file(snapshot)
    except KlaseException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)

    address = None
    if street or number or city:
        address = Address(street=street, number=number, city=city)
    candidate = CandidateRecord(
        name=name,
        cpf=cpf,
        enrollment_number=enrollment,
        dob=dob,
        phone=phone,
        email=email,
        address=address,
    )

    checker = DuplicateChecker(repository, tenant)
    result = asyncio.run(checker.check_duplicates(candidate, exclude_id=exclude_id))

    if as_json:
        console.print_json(result.model_dump_json(by_alias=True))
    else:
        _render(result)

    if result.has_blocking:
        raise typer.Exit(2)
