from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.panel import Panel
from rich.table import Table
from typing_extensions import Annotated

from paybob.models import SPLIT_TYPES
from paybob.operations import ExpenseInput, add_group_expense, delete_group_expense
from paybob.utils.helpers import get_store_and_group, report_errors, console, plain_money, date_str

expense_app = typer.Typer(no_args_is_help=True)


@expense_app.command()
def add(
        amount: Annotated[str, typer.Option(help="Amount of the expense.", prompt=True)],
        paid_by: Annotated[str, typer.Option(help="Who paid.", prompt=True)],
        description: Annotated[str, typer.Option(help="Description of the expense.", prompt=True)],
        split_type: Annotated[str, typer.Option(help=f"How it is split: {', '.join(SPLIT_TYPES)}.")] = "equal",
        category: Annotated[Optional[str], typer.Option(help="Category of the expense.")] = None,
        receipt: Annotated[Optional[Path], typer.Option(help="Path to a receipt image.", exists=True,
                                                        dir_okay=False, readable=True)] = None,
):
    """
    Add an expense to the active group.
    """
    with get_store_and_group() as (store, group), report_errors():
        expense = add_group_expense(store, group, ExpenseInput(
            amount=amount,
            description=description,
            paid_by=paid_by,
            split_type=split_type,
            category=category,
            receipt_image=receipt.read_bytes() if receipt else None,
        ))
        typer.echo(f"✅ Expense '{expense.description}' ({plain_money(expense.amount)}) added to '{group.name}'.")


@expense_app.command()
def show():
    """
    Show all expenses in the active group.
    """
    with get_store_and_group() as (store, group):
        if not group.expenses:
            console.print(Panel("No expenses found in the current group.", title="📊 Expenses", box=box.ROUNDED))
            raise typer.Exit()

        count = len(group.expenses)
        table = Table(title=f"📊 Expenses in '{group.name}' ({count} expense{'' if count == 1 else 's'})",
                      box=box.SIMPLE_HEAVY, expand=True)
        table.add_column("ID", justify="right")
        table.add_column("Date")
        table.add_column("Description")
        table.add_column("Paid by")
        table.add_column("Category", style="dim")
        table.add_column("Split", style="dim")
        table.add_column("Amount", justify="right")
        for e in sorted(group.expenses, key=lambda e: (e.created_at, e.id), reverse=True):
            receipt = " 🧾" if e.receipt_image else ""
            table.add_row(str(e.id), date_str(e.created_at), e.description + receipt, e.paid_by,
                          e.category or "", e.split_type, plain_money(e.amount))
        console.print(table)
        console.print(f"[bold]Total expenses:[/] {plain_money(group.total_expenses)}")


@expense_app.command()
def delete(
        expense_id: int,
        yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation and delete immediately.")] = False,
):
    """
    Delete an expense from the active group.
    """
    with get_store_and_group() as (store, group), report_errors():
        expense = next((e for e in group.expenses if e.id == expense_id), None)
        if not expense:
            typer.echo(f"❌ Expense ID {expense_id} not found in the current group.")
            raise typer.Exit()

        if not yes:
            typer.echo(f"🗑️ You are about to delete:")
            typer.echo(f"   • ID: {expense.id}")
            typer.echo(f"   • Description: {expense.description}")
            typer.echo(f"   • Amount: {plain_money(expense.amount)}")
            typer.echo(f"   • Paid by: {expense.paid_by} on {date_str(expense.created_at)}")
            if not typer.confirm("Proceed with deletion?"):
                typer.echo("❌ Deletion cancelled.")
                raise typer.Exit()

        description = expense.description
        delete_group_expense(store, group, expense)
        typer.echo(f"✅ Deleted expense ID {expense_id} ('{description}').")
