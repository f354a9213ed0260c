from typing import Optional

import typer
from typing_extensions import Annotated

from paybob.models import User, GroupMember
from paybob.operations import create_user, add_group_member, remove_group_member
from paybob.utils.helpers import get_store_and_group, report_errors, date_str

member_app = typer.Typer(no_args_is_help=True)


def _find_member(store, group, name: str) -> Optional[GroupMember]:
    for m in group.members:
        user = store.get(User, m.user_id)
        if user and user.name == name:
            return m
    return None


@member_app.command()
def add(
        name: Annotated[str, typer.Argument(help="Name of the new member.")],
        role: Annotated[str, typer.Option(help="Role in the group (admin or member).")] = "member",
        email: Annotated[Optional[str], typer.Option(help="Email, used when creating a new user.")] = None,
        phone: Annotated[Optional[str], typer.Option(help="Phone, used when creating a new user.")] = None,
):
    """
    Add a member to the active group, creating the user if needed.
    """
    with get_store_and_group() as (store, group), report_errors():
        users = store.query(User, User.name == name.strip(), order_by=User.id)
        user = users[0] if users else create_user(store, name, email=email, phone=phone)
        add_group_member(store, group, user, role=role)
        typer.echo(f"✅ Added member '{user.name}' to group '{group.name}' as {role}.")


@member_app.command()
def show():
    """
    List the members of the active group.
    """
    with get_store_and_group() as (store, group):
        if not group.members:
            typer.echo("No members found in this group.")
            return

        count = len(group.members)
        typer.echo(f"👥 Members in '{group.name}' ({count} member{'' if count == 1 else 's'}):")
        for m in group.members:
            user = store.get(User, m.user_id)
            crown = " 👑" if m.role == "admin" else ""
            typer.echo(f"• {user.name if user else 'Unknown'} – {m.role.capitalize()}{crown} "
                       f"(joined {date_str(m.joined_at)})")


@member_app.command()
def delete(name: Annotated[str, typer.Argument(help="Name of the member to remove.")]):
    """
    Remove a member from the active group.
    """
    with get_store_and_group() as (store, group), report_errors():
        member = _find_member(store, group, name)
        if not member:
            typer.echo(f"❌ Member '{name}' not found in group '{group.name}'.")
            raise typer.Exit()

        remove_group_member(store, group, member)
        typer.echo(f"✅ Removed member '{name}' from group '{group.name}'.")
