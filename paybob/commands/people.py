import typer
from rich import box
from rich.table import Table
from typing_extensions import Annotated

from paybob.aggregation import (
    derive_person_summaries, rank_people, balances_for_person, derive_known_people,
)
from paybob.models import Balance
from paybob.utils.helpers import get_store, console, money, plain_money, date_str

people_app = typer.Typer(no_args_is_help=True)

MAX_SUGGESTIONS = 5


@people_app.command()
def show(search: Annotated[str, typer.Option("--search", "-s", help="Only people whose name contains this.")] = ""):
    """
    List everyone you have balances with and where you stand with them.
    """
    with get_store() as store:
        people = rank_people(derive_person_summaries(store.query(Balance)), search)
        if not people:
            typer.echo("No people found." if search else "No people yet. Add a balance to get started.")
            raise typer.Exit()

        table = Table(title="👥 People", box=box.SIMPLE_HEAVY, expand=True)
        table.add_column("Name", style="bold")
        table.add_column("Active", justify="right")
        table.add_column("Last activity")
        table.add_column("Net", justify="right")
        table.add_column("")
        for p in people:
            table.add_row(
                p.name,
                str(p.active_balances) if p.active_balances else "",
                date_str(p.last_activity),
                money(p.net, signed=True),
                "owes you" if p.net >= 0 else "you owe",
            )
        console.print(table)


@people_app.command()
def detail(name: Annotated[str, typer.Argument(help="Name of the person.")]):
    """
    Show every balance with one person.
    """
    with get_store() as store:
        balances = balances_for_person(store.query(Balance, order_by=Balance.updated_at.desc()), name)
        if not balances:
            typer.echo(f"❌ No balances found with '{name}'.")
            raise typer.Exit()

        summary = derive_person_summaries(balances)[0]
        typer.echo(f"👤 {summary.name}")
        typer.echo(f"   Owes you: {plain_money(summary.owed_to_me)}")
        typer.echo(f"   You owe: {plain_money(summary.i_owe)}")
        console.print(f"   Net: {money(summary.net, signed=True)}")

        table = Table(box=box.SIMPLE, expand=True)
        table.add_column("ID", justify="right")
        table.add_column("Description")
        table.add_column("Status")
        table.add_column("Amount", justify="right")
        for b in balances:
            table.add_row(
                str(b.id),
                b.description,
                "Settled" if b.is_settled else "Active",
                money(b.amount if b.is_owed_to_me else -b.amount, signed=True),
            )
        console.print(table)


@people_app.command()
def suggest(text: Annotated[str, typer.Argument(help="Part of a name.")] = ""):
    """
    Suggest existing people whose name matches.
    """
    with get_store() as store:
        people = derive_known_people(store.query(Balance), text)[:MAX_SUGGESTIONS]
        if not people:
            typer.echo("No matching people.")
            return
        for p in people:
            contact = f" ({p.contact})" if p.contact else ""
            typer.echo(f"• {p.name}{contact}")
