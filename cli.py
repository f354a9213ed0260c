import typer

from paybob.commands.balance import balance_app
from paybob.commands.people import people_app
from paybob.commands.category import category_app
from paybob.commands.group import group_app
from paybob.commands.member import member_app
from paybob.commands.expense import expense_app
from paybob.commands.summary import dashboard, profile, seed
from paybob.utils.helpers import ensure_schema


app = typer.Typer(no_args_is_help=True)
app.add_typer(balance_app, name="balance", help="Balance management commands.")
app.add_typer(people_app, name="people", help="Per-person summaries.")
app.add_typer(category_app, name="category", help="Balance categories.")
app.add_typer(group_app, name="group", help="Group management commands.")
app.add_typer(member_app, name="member", help="Member management commands.")
app.add_typer(expense_app, name="expense", help="Group expense commands.")
app.command()(dashboard)
app.command()(profile)
app.command()(seed)


@app.callback()
def main():
    """
    PayBob: keep track of who owes whom.
    """
    ensure_schema()


if __name__ == "__main__":
    app()
