import typer

from paybob.aggregation import BUILT_IN_CATEGORIES, derive_categories
from paybob.models import Balance
from paybob.utils.helpers import get_store

category_app = typer.Typer(no_args_is_help=True)


@category_app.command("list")
def list_categories():
    """
    List the built-in categories plus every tag in use.
    """
    with get_store() as store:
        categories = derive_categories(store.query(Balance), BUILT_IN_CATEGORIES)
    typer.echo("🏷️ Categories:")
    for name in categories:
        custom = "" if name in BUILT_IN_CATEGORIES else " (custom)"
        typer.echo(f"• {name}{custom}")
