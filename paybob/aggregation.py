"""
Read-only summaries derived from the balance and group records.

Nothing here touches the store or mutates its input; every function returns
the same result for the same records and ``now``.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from paybob.models import Balance, Group

BUILT_IN_CATEGORIES = [
    "Food",
    "Drinks",
    "Transportation",
    "Entertainment",
    "Travel",
    "Shopping",
    "Birthday",
    "Wedding",
    "Utilities",
    "Rent",
]

ZERO = Decimal("0")


@dataclass
class PersonSummary:
    name: str
    owed_to_me: Decimal
    i_owe: Decimal
    net: Decimal
    total_balances: int
    active_balances: int
    last_activity: datetime


@dataclass
class DashboardTotals:
    owed_to_me: list[Balance] = field(default_factory=list)
    owed_by_me: list[Balance] = field(default_factory=list)
    total_owed_to_me: Decimal = ZERO
    total_owed_by_me: Decimal = ZERO
    net: Decimal = ZERO


@dataclass
class PersonInfo:
    name: str
    contact: str


@dataclass
class ActivityStats:
    totals: DashboardTotals
    total_balances: int
    active_groups: int
    settled: int
    overdue: int


def _sum(balances: Iterable[Balance]) -> Decimal:
    return sum((Decimal(b.amount) for b in balances), ZERO)


def derive_person_summaries(balances: Iterable[Balance]) -> list[PersonSummary]:
    """
    One summary per other party, matched on the exact name.

    Settled balances count towards ``total_balances`` and ``last_activity``
    but not towards the money columns. Order follows first appearance.
    """
    grouped: dict[str, list[Balance]] = {}
    for balance in balances:
        grouped.setdefault(balance.other_person_name, []).append(balance)

    summaries = []
    for name, person_balances in grouped.items():
        active = [b for b in person_balances if not b.is_settled]
        owed_to_me = _sum(b for b in active if b.is_owed_to_me)
        i_owe = _sum(b for b in active if not b.is_owed_to_me)
        summaries.append(PersonSummary(
            name=name,
            owed_to_me=owed_to_me,
            i_owe=i_owe,
            net=owed_to_me - i_owe,
            total_balances=len(person_balances),
            active_balances=len(active),
            last_activity=max(b.updated_at for b in person_balances),
        ))
    return summaries


def rank_people(summaries: Iterable[PersonSummary], search: str = "") -> list[PersonSummary]:
    """
    Presentation order for the people list.

    With no search text, largest absolute net first. With search text, only
    names containing it (case-insensitive), alphabetically.
    """
    search = search.strip()
    if not search:
        return sorted(summaries, key=lambda p: (-abs(p.net), p.name))
    needle = search.casefold()
    return sorted((p for p in summaries if needle in p.name.casefold()), key=lambda p: p.name)


def balances_for_person(balances: Iterable[Balance], name: str) -> list[Balance]:
    return [b for b in balances if b.other_person_name == name]


def derive_dashboard_totals(balances: Iterable[Balance]) -> DashboardTotals:
    active = [b for b in balances if not b.is_settled]
    owed_to_me = [b for b in active if b.is_owed_to_me]
    owed_by_me = [b for b in active if not b.is_owed_to_me]
    total_owed_to_me = _sum(owed_to_me)
    total_owed_by_me = _sum(owed_by_me)
    return DashboardTotals(
        owed_to_me=owed_to_me,
        owed_by_me=owed_by_me,
        total_owed_to_me=total_owed_to_me,
        total_owed_by_me=total_owed_by_me,
        net=total_owed_to_me - total_owed_by_me,
    )


def derive_categories(balances: Iterable[Balance], built_in_categories: Iterable[str] = BUILT_IN_CATEGORIES) -> list[str]:
    categories = set(built_in_categories)
    for balance in balances:
        categories.update(balance.tags or [])
    return sorted(categories)


def filter_by_categories(balances: Iterable[Balance], selected_categories: Iterable[str]) -> list[Balance]:
    """Balances carrying any selected tag. An empty selection keeps everything."""
    balances = list(balances)
    selected = set(selected_categories)
    if not selected:
        return balances
    return [b for b in balances if selected.intersection(b.tags or [])]


def is_overdue(balance: Balance, now: datetime) -> bool:
    return not balance.is_settled and balance.due_date is not None and balance.due_date < now


def derive_known_people(balances: Iterable[Balance], search: str = "") -> list[PersonInfo]:
    """Distinct people for name suggestions, with the contact from their first balance."""
    people: dict[str, PersonInfo] = {}
    for balance in balances:
        if balance.other_person_name not in people:
            people[balance.other_person_name] = PersonInfo(
                name=balance.other_person_name,
                contact=balance.other_person_contact or "",
            )
    result = sorted(people.values(), key=lambda p: p.name)
    if search:
        needle = search.casefold()
        result = [p for p in result if needle in p.name.casefold()]
    return result


def active_groups(groups: Iterable[Group]) -> list[Group]:
    return [g for g in groups if g.is_active]


def derive_activity_stats(balances: Iterable[Balance], groups: Iterable[Group], now: datetime) -> ActivityStats:
    balances = list(balances)
    return ActivityStats(
        totals=derive_dashboard_totals(balances),
        total_balances=len(balances),
        active_groups=len(active_groups(groups)),
        settled=sum(1 for b in balances if b.is_settled),
        overdue=sum(1 for b in balances if is_overdue(b, now)),
    )
