"""
State changes applied to the record store.

Each operation validates its input first and raises ValidationError without
touching the store, then writes and commits in one step. The created or
updated record is returned so callers can re-render from it.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from paybob.errors import ValidationError
from paybob.log import get_logger
from paybob.models import (
    Balance, Transaction, Group, GroupMember, GroupExpense, User,
    MEMBER_ROLES, SPLIT_TYPES,
)
from paybob.store import RecordStore

logger = get_logger(__name__)

CENT = Decimal("0.01")
# Numeric(15, 2) leaves 13 digits before the point
MAX_AMOUNT_DIGITS = 13


@dataclass
class BalanceInput:
    amount: Any
    description: str
    other_person_name: str
    is_owed_to_me: bool = True
    other_person_contact: Optional[str] = None
    due_date: Optional[datetime] = None
    tags: list = field(default_factory=list)
    notes: Optional[str] = None


@dataclass
class GroupInput:
    name: str
    description: Optional[str] = None


@dataclass
class ExpenseInput:
    amount: Any
    description: str
    paid_by: str
    split_type: str = "equal"
    split_details: Optional[dict] = None
    category: Optional[str] = None
    receipt_image: Optional[bytes] = None


def parse_amount(value: Any, field_name: str = "amount") -> Decimal:
    """Parse a positive amount, rounded to cents."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Amount is required.", field=field_name)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"Amount '{value}' is not a number.", field=field_name)
    if not amount.is_finite():
        raise ValidationError(f"Amount '{value}' is not a number.", field=field_name)
    if amount.adjusted() < MAX_AMOUNT_DIGITS:
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount.adjusted() >= MAX_AMOUNT_DIGITS:
        raise ValidationError(f"Amount '{value}' is too large.", field=field_name)
    if amount <= 0:
        raise ValidationError("Amount must be a positive number.", field=field_name)
    return amount


def _required_text(value: Optional[str], label: str, field_name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{label} is required.", field=field_name)
    return text


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    return text or None


def normalize_tags(tags) -> list[str]:
    return sorted({t.strip() for t in tags or [] if t and t.strip()})


def _validated_balance_fields(data: BalanceInput) -> dict:
    return dict(
        amount=parse_amount(data.amount),
        description=_required_text(data.description, "Description", "description"),
        other_person_name=_required_text(data.other_person_name, "Name", "other_person_name"),
        other_person_contact=_optional_text(data.other_person_contact),
        due_date=data.due_date,
        tags=normalize_tags(data.tags),
        notes=_optional_text(data.notes),
    )


# Balances

def create_balance(store: RecordStore, data: BalanceInput, user: Optional[User] = None,
                   now: Optional[datetime] = None) -> Balance:
    fields = _validated_balance_fields(data)
    now = now or datetime.now()
    balance = Balance(
        user_id=user.id if user is not None else None,
        is_owed_to_me=bool(data.is_owed_to_me),
        created_at=now,
        updated_at=now,
        is_settled=False,
        **fields,
    )
    store.insert(balance)
    logger.info("balance_created", balance_id=balance.id, person=balance.other_person_name,
                amount=str(balance.amount))
    return balance


def edit_balance(store: RecordStore, balance: Balance, data: BalanceInput,
                 now: Optional[datetime] = None) -> Balance:
    """Replace the editable fields. Direction, id and created_at are kept."""
    fields = _validated_balance_fields(data)
    for name, value in fields.items():
        setattr(balance, name, value)
    balance.updated_at = now or datetime.now()
    store.commit()
    logger.info("balance_updated", balance_id=balance.id)
    return balance


def settle_balance(store: RecordStore, balance: Balance, now: Optional[datetime] = None) -> Balance:
    if balance.is_settled:
        raise ValidationError("Balance is already settled.", field="is_settled")
    now = now or datetime.now()
    balance.is_settled = True
    balance.updated_at = now
    balance.transactions.append(Transaction(
        amount=balance.amount,
        description="Balance settled",
        type="settlement",
        created_at=now,
    ))
    store.commit()
    logger.info("balance_settled", balance_id=balance.id, amount=str(balance.amount))
    return balance


def delete_balance(store: RecordStore, balance: Balance) -> None:
    balance_id = balance.id
    store.delete(balance)
    logger.info("balance_deleted", balance_id=balance_id)


# Users and groups

def create_user(store: RecordStore, name: str, email: Optional[str] = None, phone: Optional[str] = None,
                now: Optional[datetime] = None) -> User:
    user = User(
        name=_required_text(name, "Name", "name"),
        email=_optional_text(email),
        phone=_optional_text(phone),
        created_at=now or datetime.now(),
    )
    store.insert(user)
    logger.info("user_created", user_id=user.id)
    return user


def create_group(store: RecordStore, data: GroupInput, now: Optional[datetime] = None) -> Group:
    group = Group(
        name=_required_text(data.name, "Group name", "name"),
        description=_optional_text(data.description),
        created_at=now or datetime.now(),
        is_active=True,
        total_expenses=Decimal("0.00"),
    )
    store.insert(group)
    logger.info("group_created", group_id=group.id, name=group.name)
    return group


def delete_group(store: RecordStore, group: Group) -> None:
    group_id = group.id
    store.delete(group)
    logger.info("group_deleted", group_id=group_id)


def add_group_member(store: RecordStore, group: Group, user: User, role: str = "member",
                     now: Optional[datetime] = None) -> GroupMember:
    if role not in MEMBER_ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(MEMBER_ROLES)}.", field="role")
    if any(m.user_id == user.id for m in group.members):
        raise ValidationError(f"'{user.name}' is already a member of '{group.name}'.", field="user")
    member = GroupMember(user_id=user.id, role=role, joined_at=now or datetime.now())
    group.members.append(member)
    store.commit()
    logger.info("member_added", group_id=group.id, user_id=user.id, role=role)
    return member


def remove_group_member(store: RecordStore, group: Group, member: GroupMember) -> None:
    user_id = member.user_id
    group.members.remove(member)
    store.delete(member)
    logger.info("member_removed", group_id=group.id, user_id=user_id)


def add_group_expense(store: RecordStore, group: Group, data: ExpenseInput,
                      now: Optional[datetime] = None) -> GroupExpense:
    amount = parse_amount(data.amount)
    description = _required_text(data.description, "Description", "description")
    paid_by = _required_text(data.paid_by, "Payer", "paid_by")
    if data.split_type not in SPLIT_TYPES:
        raise ValidationError(f"Split type must be one of: {', '.join(SPLIT_TYPES)}.", field="split_type")

    expense = GroupExpense(
        amount=amount,
        description=description,
        paid_by=paid_by,
        split_type=data.split_type,
        split_details=data.split_details,
        category=_optional_text(data.category),
        created_at=now or datetime.now(),
        receipt_image=data.receipt_image,
    )
    group.expenses.append(expense)
    group.total_expenses = Decimal(group.total_expenses or 0) + amount
    store.commit()
    logger.info("expense_added", group_id=group.id, expense_id=expense.id, amount=str(amount))
    return expense


def delete_group_expense(store: RecordStore, group: Group, expense: GroupExpense) -> None:
    expense_id = expense.id
    group.total_expenses = Decimal(group.total_expenses or 0) - Decimal(expense.amount)
    group.expenses.remove(expense)
    store.delete(expense)
    logger.info("expense_deleted", group_id=group.id, expense_id=expense_id)


# First launch

SAMPLE_BALANCES = [
    BalanceInput(amount="25.00", description="Coffee at Starbucks", is_owed_to_me=False,
                 other_person_name="Alex", tags=["Food"]),
    BalanceInput(amount="50.00", description="Birthday gift", is_owed_to_me=True,
                 other_person_name="Sarah", tags=["Birthday", "Gift"]),
    BalanceInput(amount="120.00", description="Dinner split", is_owed_to_me=True,
                 other_person_name="Mike", tags=["Dinner"]),
    BalanceInput(amount="15.00", description="Uber ride", is_owed_to_me=False,
                 other_person_name="Emma", tags=["Transportation"]),
]

SAMPLE_GROUPS = [
    GroupInput(name="NYC Trip 2025", description="Weekend getaway with college friends"),
    GroupInput(name="Roommate Expenses", description="Shared apartment costs"),
]


def seed_sample_data(store: RecordStore, now: Optional[datetime] = None) -> tuple[int, int]:
    """Insert the sample balances and groups into an empty store. Returns what was added."""
    added_balances = added_groups = 0
    if not store.query(Balance):
        for data in SAMPLE_BALANCES:
            create_balance(store, data, now=now)
            added_balances += 1
    if not store.query(Group):
        for data in SAMPLE_GROUPS:
            create_group(store, data, now=now)
            added_groups += 1
    return added_balances, added_groups
