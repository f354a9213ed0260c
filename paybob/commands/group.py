from typing import Optional

import typer

from paybob.aggregation import active_groups
from paybob.models import Group
from paybob.operations import GroupInput, create_group, delete_group
from paybob.utils.helpers import (
    get_store, get_store_and_group, report_errors, set_active_group_id, clear_active_group,
    get_active_group_id, plain_money,
)
from typing_extensions import Annotated
group_app = typer.Typer(no_args_is_help=True, short_help="Group management commands.")


# Group Management Commands
@group_app.command()
def select():
    """
    Select an active group session.
    """
    with get_store() as store:
        groups = active_groups(store.query(Group, order_by=Group.id))
        if not groups:
            typer.echo("❌ No groups found. Please create one first.")
            raise typer.Exit()
        typer.echo("📂 Available Groups:")
        for i, group in enumerate(groups, 1):
            typer.echo(f"{i}. {group.name}")

        choice = typer.prompt("Enter the number of the group")
        try:
            index = int(choice) - 1
            if 0 <= index < len(groups):
                selected = groups[index]
                set_active_group_id(selected.id)
                typer.echo(f"✅ Selected group '{selected.name}' (id: {selected.id}) as active.")
                return
        except ValueError:
            pass
    typer.echo("❌ Invalid selection.")
    raise typer.Exit()


@group_app.command()
def create(
        name: str,
        description: Annotated[Optional[str], typer.Option(help="What the group is for.")] = None,
):
    """
    Create a new group.
    """
    with get_store() as store, report_errors():
        new_group = create_group(store, GroupInput(name=name, description=description))
        set_active_group_id(new_group.id)
        typer.echo(f"✅ Created group '{new_group.name}' (id: {new_group.id}) and set it as active.")


@group_app.command()
def clear_session():
    """
    Clear the current group session.
    """
    clear_active_group()
    typer.echo("🧹 Session cleared.")


@group_app.command()
def current():
    """
    Show the currently selected group.
    """
    with get_store_and_group() as (store, group):
        typer.echo(f"📁 Current group: '{group.name}' (ID: {group.id})")
        if group.description:
            typer.echo(f"   {group.description}")
        typer.echo(f"   Members: {len(group.members)} • Total expenses: {plain_money(group.total_expenses)}")


@group_app.command()
def show():
    """
    List all active groups.
    """
    with get_store() as store:
        groups = active_groups(store.query(Group, order_by=Group.id))
        if not groups:
            typer.echo("❌ No groups found, please create one first.")
            raise typer.Exit()
        typer.echo("📂 Groups:")
        for group in groups:
            members = len(group.members)
            typer.echo(f"• {group.name} (ID: {group.id}) – {members} member{'' if members == 1 else 's'}, "
                       f"{plain_money(group.total_expenses)} total expenses")


@group_app.command()
def delete(group_id: int,
           yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation and delete immediately.")] = False,
           ):
    """
    Delete a group by ID.
    WARNING: This deletes all associated members and expenses.
    """
    with get_store() as store, report_errors():
        group = store.get(Group, group_id)
        if not group:
            typer.echo(f"❌ Group ID {group_id} not found.")
            raise typer.Exit()

        name = group.name
        if not yes:
            typer.echo(f"🗑️ You are about to delete:")
            typer.echo(f"  • Group: {group.name} (ID: {group.id})")
            typer.echo(f"  • Members: {len(group.members)}")
            typer.echo(f"  • Expenses: {len(group.expenses)}")
            if not typer.confirm("Proceed with deletion?"):
                typer.echo("❌ Deletion cancelled.")
                raise typer.Exit()

        delete_group(store, group)
        typer.echo(f"✅ Deleted group '{name}' (ID: {group_id}).")
        # Clear if this group was the active one
        if group_id == get_active_group_id():
            clear_active_group()
