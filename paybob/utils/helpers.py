import os
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generator

import typer
from rich.console import Console
from sqlalchemy.orm import Session

from paybob.db import SessionLocal, init_db
from paybob.errors import StoreError, ValidationError
from paybob.models import Group
from paybob.store import RecordStore

SESSION_FILE = ".paybob_session"

console = Console()


def money(x, signed: bool = False) -> str:
    x = Decimal(x)
    color = "green" if x >= 0 else "red"
    if signed:
        sign = "+" if x >= 0 else "-"
    else:
        sign = "-" if x < 0 else ""
    return f"[{color}]{sign}${abs(x):,.2f}[/{color}]"


def plain_money(x) -> str:
    return f"${Decimal(x):,.2f}"


def date_str(d) -> str:
    if isinstance(d, (datetime, date)):
        return d.strftime("%Y-%m-%d")
    try:
        return d.strftime("%Y-%m-%d")
    except AttributeError:
        return str(d)


def parse_date(value: str | None) -> datetime | None:
    if value is None or not str(value).strip():
        return None
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"Invalid date '{value}'. Use YYYY-MM-DD.", field="due_date")
    if parsed.tzinfo is not None:
        # stored dates are naive local time
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def split_tags(value: str | None) -> list[str]:
    if not value:
        return []
    return [t.strip() for t in value.split(",") if t.strip()]


def set_active_group_id(group_id: int):
    with open(SESSION_FILE, "w") as f:
        f.write(str(group_id))


def get_active_group_id() -> int | None:
    if not os.path.exists(SESSION_FILE):
        return None
    with open(SESSION_FILE, "r") as f:
        content = f.read().strip()
    try:
        return int(content)
    except ValueError:
        clear_active_group()
        return None


def clear_active_group():
    if os.path.exists(SESSION_FILE):
        os.remove(SESSION_FILE)


def ensure_schema():
    db = SessionLocal()
    try:
        init_db(db.get_bind())
    finally:
        db.close()


@contextmanager
def report_errors() -> Generator[None, Any, None]:
    """Turn operation failures into a message and exit code 1."""
    try:
        yield
    except ValidationError as e:
        typer.echo(f"❌ {e.message}")
        raise typer.Exit(code=1)
    except StoreError as e:
        typer.echo(f"❌ Could not save: {e.original or e.message}")
        raise typer.Exit(code=1)


@contextmanager
def get_store() -> Generator[RecordStore, Any, None]:
    db = SessionLocal()
    try:
        yield RecordStore(db)
    except Exception as e:
        db.rollback()
        raise e
    finally:
        db.close()


@contextmanager
def get_store_and_group() -> Generator[tuple[RecordStore, Group], Any, None]:
    db = SessionLocal()
    try:
        group_id = resolve_or_prompt_group(db)
        group = db.query(Group).filter_by(id=group_id).first()
        if not group:
            typer.echo("⚠️ Selected group no longer exists.")
            clear_active_group()
            raise typer.Exit()
        yield RecordStore(db), group
    except Exception as e:
        db.rollback()
        raise e
    finally:
        db.close()


def resolve_or_prompt_group(db: Session) -> int:
    group_id = get_active_group_id()
    if group_id:
        return group_id

    groups = db.query(Group).filter_by(is_active=True).all()
    if not groups:
        typer.echo("❌ No groups found. Please create one first.")
        raise typer.Exit()

    if len(groups) == 1:
        selected = groups[0]
        typer.echo(f"✅ Automatically selected group '{selected.name}' (id: {selected.id}) as active.")
        set_active_group_id(selected.id)
        return selected.id

    typer.echo("📂 Select a group:")
    for i, group in enumerate(groups, 1):
        typer.echo(f"{i}. {group.name}")

    choice = typer.prompt("Enter the number of the group")
    try:
        index = int(choice) - 1
        if 0 <= index < len(groups):
            selected = groups[index]
            set_active_group_id(selected.id)
            typer.echo(f"✅ Selected group '{selected.name}' (id: {selected.id}) as active.")
            return selected.id
    except ValueError:
        pass

    typer.echo("❌ Invalid selection.")
    raise typer.Exit()
