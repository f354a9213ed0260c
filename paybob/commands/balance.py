from datetime import datetime
from typing import List, Optional

import typer
from rich import box
from rich.console import Group as RenderGroup
from rich.panel import Panel
from rich.table import Table
from typing_extensions import Annotated

from paybob.aggregation import filter_by_categories, is_overdue
from paybob.models import Balance
from paybob.operations import BalanceInput, create_balance, edit_balance, settle_balance, delete_balance
from paybob.utils.helpers import (
    get_store, report_errors, console, money, plain_money, date_str, parse_date, split_tags,
)

balance_app = typer.Typer(no_args_is_help=True)


def _get_balance_or_exit(store, balance_id: int) -> Balance:
    balance = store.get(Balance, balance_id)
    if not balance:
        typer.echo(f"❌ Balance ID {balance_id} not found.")
        raise typer.Exit()
    return balance


@balance_app.command()
def add(
        amount: Annotated[str, typer.Option(help="Amount of the balance.", prompt=True)],
        description: Annotated[str, typer.Option(help="What the balance is for.", prompt=True)],
        person: Annotated[str, typer.Option(help="Name of the other person.", prompt=True)],
        owed_to_me: Annotated[bool, typer.Option("--owed-to-me/--i-owe",
                                                 help="Whether they owe you or you owe them.")] = True,
        contact: Annotated[Optional[str], typer.Option(help="Phone or email of the other person.")] = None,
        due: Annotated[Optional[str], typer.Option(help="Due date (YYYY-MM-DD).")] = None,
        tags: Annotated[Optional[str], typer.Option(help="Comma separated categories.")] = None,
        notes: Annotated[Optional[str], typer.Option(help="Additional notes.")] = None,
):
    """
    Record a new balance with another person.
    """
    with get_store() as store, report_errors():
        balance = create_balance(store, BalanceInput(
            amount=amount,
            description=description,
            other_person_name=person,
            is_owed_to_me=owed_to_me,
            other_person_contact=contact,
            due_date=parse_date(due),
            tags=split_tags(tags),
            notes=notes,
        ))
        direction = "owes you" if balance.is_owed_to_me else "you owe"
        typer.echo(f"✅ Balance added (ID: {balance.id}): {balance.other_person_name} {direction} "
                   f"{plain_money(balance.amount)} for '{balance.description}'.")


@balance_app.command()
def edit(balance_id: int):
    """
    Edit an existing balance using interactive prompts.

    Leave a prompt unchanged to keep the current value. Enter '-' to clear an
    optional field.
    """
    with get_store() as store, report_errors():
        balance = _get_balance_or_exit(store, balance_id)
        if balance.is_settled:
            typer.echo(f"❌ Balance ID {balance_id} is settled and can no longer be edited.")
            raise typer.Exit()

        typer.echo(f"🛠️ Editing balance ID {balance_id}")
        new_amount = typer.prompt("Amount", default=str(balance.amount))
        new_description = typer.prompt("Description", default=balance.description)
        new_person = typer.prompt("Name", default=balance.other_person_name)
        new_contact = typer.prompt("Phone or Email", default=balance.other_person_contact or "-")
        new_tags = typer.prompt("Tags (comma separated)", default=", ".join(balance.tags or []) or "-")
        new_due = typer.prompt("Due date (YYYY-MM-DD)",
                               default=date_str(balance.due_date) if balance.due_date else "-")
        new_notes = typer.prompt("Notes", default=balance.notes or "-")

        def cleared(value: str) -> Optional[str]:
            return None if value.strip() == "-" else value

        edit_balance(store, balance, BalanceInput(
            amount=new_amount,
            description=new_description,
            other_person_name=new_person,
            is_owed_to_me=balance.is_owed_to_me,
            other_person_contact=cleared(new_contact),
            due_date=parse_date(cleared(new_due)),
            tags=split_tags(cleared(new_tags)),
            notes=cleared(new_notes),
        ))
        typer.echo(f"✅ Balance ID {balance_id} updated. ({balance.description}, "
                   f"{plain_money(balance.amount)}, {balance.other_person_name})")


@balance_app.command()
def settle(
        balance_id: int,
        yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation.")] = False,
):
    """
    Mark a balance as settled. This cannot be undone.
    """
    with get_store() as store, report_errors():
        balance = _get_balance_or_exit(store, balance_id)
        if balance.is_settled:
            typer.echo(f"❌ Balance ID {balance_id} is already settled.")
            raise typer.Exit()
        if not yes and not typer.confirm("Mark this balance as settled? This action cannot be undone."):
            typer.echo("❌ Settlement cancelled.")
            raise typer.Exit()
        settle_balance(store, balance)
        typer.echo(f"✅ Balance ID {balance_id} with {balance.other_person_name} settled "
                   f"({plain_money(balance.amount)}).")


@balance_app.command()
def delete(
        balance_id: int,
        yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation and delete immediately.")] = False,
):
    """
    Delete a balance and its transactions.
    """
    with get_store() as store, report_errors():
        balance = _get_balance_or_exit(store, balance_id)
        if not yes:
            typer.echo(f"🗑️ You are about to delete:")
            typer.echo(f"   • ID: {balance.id}")
            typer.echo(f"   • Description: {balance.description}")
            typer.echo(f"   • Amount: {plain_money(balance.amount)}")
            typer.echo(f"   • Person: {balance.other_person_name}")
            if not typer.confirm("Proceed with deletion?"):
                typer.echo("❌ Deletion cancelled.")
                raise typer.Exit()
        description = balance.description
        delete_balance(store, balance)
        typer.echo(f"✅ Deleted balance ID {balance_id} ('{description}').")


@balance_app.command()
def show(
        category: Annotated[Optional[List[str]], typer.Option("--category", "-c",
                                                              help="Only show balances with this tag.")] = None,
        include_settled: Annotated[bool, typer.Option("--all", help="Include settled balances.")] = False,
):
    """
    List balances, newest first.
    """
    with get_store() as store:
        balances = store.query(Balance, order_by=Balance.updated_at.desc())
        if not include_settled:
            balances = [b for b in balances if not b.is_settled]
        balances = filter_by_categories(balances, category or [])
        if not balances:
            typer.echo("No balances found.")
            raise typer.Exit()

        now = datetime.now()
        table = Table(title="💰 Balances", box=box.SIMPLE_HEAVY, expand=True)
        table.add_column("ID", justify="right")
        table.add_column("Person", style="bold")
        table.add_column("Description")
        table.add_column("Tags", style="dim")
        table.add_column("Due")
        table.add_column("Amount", justify="right")
        for b in balances:
            amount = b.amount if b.is_owed_to_me else -b.amount
            due = date_str(b.due_date) if b.due_date else ""
            if is_overdue(b, now):
                due = f"[red]{due} (overdue)[/red]"
            status = " [dim](settled)[/dim]" if b.is_settled else ""
            table.add_row(str(b.id), b.other_person_name, b.description + status,
                          ", ".join(b.tags or []), due, money(amount, signed=True))
        console.print(table)


@balance_app.command()
def detail(balance_id: int):
    """
    Show a single balance and its transaction history.
    """
    with get_store() as store:
        balance = _get_balance_or_exit(store, balance_id)

        header = Table.grid(expand=True)
        header.add_column(justify="left", ratio=3)
        header.add_column(justify="right", ratio=1)
        direction = "owes you" if balance.is_owed_to_me else "you owe"
        header.add_row(
            f"[b]{balance.description}[/]\n[dim]ID #{balance.id} • {balance.other_person_name} {direction}[/dim]",
            f"[b]{money(balance.amount if balance.is_owed_to_me else -balance.amount)}[/b]",
        )

        info = Table.grid(padding=(0, 2))
        info.add_column(style="dim")
        info.add_column()
        info.add_row("Status", "Settled" if balance.is_settled else "Active")
        if balance.other_person_contact:
            info.add_row("Contact", balance.other_person_contact)
        if balance.due_date:
            overdue = " [red](overdue)[/red]" if is_overdue(balance, datetime.now()) else ""
            info.add_row("Due", date_str(balance.due_date) + overdue)
        if balance.tags:
            info.add_row("Tags", ", ".join(balance.tags))
        if balance.notes:
            info.add_row("Notes", balance.notes)
        info.add_row("Created", date_str(balance.created_at))
        info.add_row("Updated", date_str(balance.updated_at))

        parts = [header, info]
        if balance.transactions:
            history = Table(box=box.SIMPLE, expand=True, title="Transactions")
            history.add_column("Date")
            history.add_column("Type")
            history.add_column("Description")
            history.add_column("Amount", justify="right")
            for t in balance.transactions:
                history.add_row(date_str(t.created_at), t.type, t.description, plain_money(t.amount))
            parts.append(history)

        console.print(Panel(RenderGroup(*parts), box=box.ROUNDED, padding=(1, 2)))
