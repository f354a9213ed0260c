from datetime import datetime

import typer
from rich import box
from rich.columns import Columns
from rich.panel import Panel
from rich.table import Table

from paybob.aggregation import derive_dashboard_totals, derive_activity_stats
from paybob.models import Balance, Group
from paybob.operations import seed_sample_data
from paybob.utils.helpers import get_store, report_errors, console, money, plain_money


def _balance_section(title: str, balances, empty_message: str, color: str) -> Panel:
    if not balances:
        return Panel(f"[dim]{empty_message}[/dim]", title=title, box=box.ROUNDED, border_style=color)
    table = Table(box=None, expand=True, show_header=False)
    table.add_column("Person", style="bold")
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    for b in balances:
        table.add_row(b.other_person_name, b.description, f"[{color}]{plain_money(b.amount)}[/{color}]")
    return Panel(table, title=title, box=box.ROUNDED, border_style=color)


def dashboard():
    """
    Show who you owe and who owes you.
    """
    with get_store() as store:
        totals = derive_dashboard_totals(store.query(Balance, order_by=Balance.updated_at.desc()))
        console.print(Columns([
            Panel(f"[red]{plain_money(totals.total_owed_by_me)}[/red]", title="I Owe", box=box.ROUNDED),
            Panel(f"[green]{plain_money(totals.total_owed_to_me)}[/green]", title="Owed to Me", box=box.ROUNDED),
            Panel(money(totals.net, signed=True), title="Net", box=box.ROUNDED),
        ]))
        console.print(_balance_section("I Owe", totals.owed_by_me, "You don't owe anyone money! 🎉", "red"))
        console.print(_balance_section("Owed to Me", totals.owed_to_me, "Nobody owes you money right now", "green"))


def profile():
    """
    Show the financial summary and activity counts.
    """
    with get_store() as store:
        stats = derive_activity_stats(store.query(Balance), store.query(Group), datetime.now())
        typer.echo("📊 Financial Summary")
        typer.echo(f"   You Owe: {plain_money(stats.totals.total_owed_by_me)}")
        typer.echo(f"   Owed to You: {plain_money(stats.totals.total_owed_to_me)}")
        console.print(f"   Net Balance: {money(stats.totals.net, signed=True)}")
        typer.echo("📈 Activity")
        typer.echo(f"   Total Balances: {stats.total_balances}")
        typer.echo(f"   Active Groups: {stats.active_groups}")
        typer.echo(f"   Settled: {stats.settled}")
        typer.echo(f"   Overdue: {stats.overdue}")


def seed():
    """
    Add sample balances and groups to an empty database.
    """
    with get_store() as store, report_errors():
        added_balances, added_groups = seed_sample_data(store)
    if not added_balances and not added_groups:
        typer.echo("Nothing to do, data already exists.")
        return
    typer.echo(f"🌱 Added {added_balances} sample balance(s) and {added_groups} sample group(s).")
