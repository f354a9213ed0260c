import unittest
from datetime import datetime, timedelta
from decimal import Decimal

from paybob.aggregation import (
    BUILT_IN_CATEGORIES,
    derive_person_summaries,
    derive_dashboard_totals,
    derive_categories,
    filter_by_categories,
    is_overdue,
    rank_people,
    balances_for_person,
    derive_known_people,
    derive_activity_stats,
    active_groups,
)
from paybob.models import Group
from tests.base import make_balance, NOW


class TestPersonSummaries(unittest.TestCase):
    def test_example_from_dashboard(self):
        balances = [
            make_balance("25", person="Alex", owed_to_me=False),
            make_balance("50", person="Sarah", owed_to_me=True),
        ]
        by_name = {p.name: p for p in derive_person_summaries(balances)}
        self.assertEqual(by_name["Alex"].net, Decimal("-25"))
        self.assertEqual(by_name["Sarah"].net, Decimal("50"))

    def test_settled_balances_do_not_count_towards_money(self):
        balances = [
            make_balance("30", person="Mike", owed_to_me=True),
            make_balance("20", person="Mike", owed_to_me=False),
            make_balance("100", person="Mike", owed_to_me=True, settled=True),
        ]
        [mike] = derive_person_summaries(balances)
        self.assertEqual(mike.owed_to_me, Decimal("30"))
        self.assertEqual(mike.i_owe, Decimal("20"))
        self.assertEqual(mike.net, Decimal("10"))
        self.assertEqual(mike.total_balances, 3)
        self.assertEqual(mike.active_balances, 2)

    def test_last_activity_includes_settled(self):
        later = NOW + timedelta(days=3)
        balances = [
            make_balance("5", person="Emma", updated_at=NOW),
            make_balance("5", person="Emma", settled=True, updated_at=later),
        ]
        [emma] = derive_person_summaries(balances)
        self.assertEqual(emma.last_activity, later)

    def test_names_match_case_sensitively(self):
        balances = [make_balance("5", person="alex"), make_balance("5", person="Alex")]
        self.assertEqual(len(derive_person_summaries(balances)), 2)

    def test_groups_cover_every_balance_once(self):
        balances = [
            make_balance("1", person="A"),
            make_balance("2", person="B"),
            make_balance("3", person="A", settled=True),
            make_balance("4", person="C", owed_to_me=False),
        ]
        summaries = derive_person_summaries(balances)
        self.assertEqual(len({p.name for p in summaries}), len(summaries))
        self.assertEqual(sum(p.total_balances for p in summaries), len(balances))

    def test_empty_input(self):
        self.assertEqual(derive_person_summaries([]), [])


class TestRankPeople(unittest.TestCase):
    def setUp(self):
        self.summaries = derive_person_summaries([
            make_balance("10", person="Bob"),
            make_balance("80", person="alice", owed_to_me=False),
            make_balance("40", person="Carol"),
            make_balance("40", person="Aaron", owed_to_me=False),
        ])

    def test_default_order_is_largest_net_first(self):
        names = [p.name for p in rank_people(self.summaries)]
        self.assertEqual(names, ["alice", "Aaron", "Carol", "Bob"])

    def test_search_filters_then_sorts_by_name(self):
        names = [p.name for p in rank_people(self.summaries, "A")]
        self.assertEqual(names, ["Aaron", "Carol", "alice"])

    def test_search_without_matches(self):
        self.assertEqual(rank_people(self.summaries, "zed"), [])


class TestDashboardTotals(unittest.TestCase):
    def test_example_totals(self):
        totals = derive_dashboard_totals([
            make_balance("25", person="Alex", owed_to_me=False),
            make_balance("50", person="Sarah", owed_to_me=True),
        ])
        self.assertEqual(totals.total_owed_by_me, Decimal("25"))
        self.assertEqual(totals.total_owed_to_me, Decimal("50"))
        self.assertEqual(totals.net, Decimal("25"))

    def test_net_matches_partition_sums(self):
        balances = [
            make_balance("12.50", owed_to_me=True),
            make_balance("7.25", owed_to_me=False),
            make_balance("3.10", owed_to_me=False),
            make_balance("99", owed_to_me=True, settled=True),
        ]
        totals = derive_dashboard_totals(balances)
        self.assertEqual(
            sum(b.amount for b in totals.owed_to_me) - sum(b.amount for b in totals.owed_by_me),
            totals.net,
        )
        self.assertEqual(totals.net, Decimal("2.15"))

    def test_settled_balances_are_excluded(self):
        settled = make_balance("99", owed_to_me=True, settled=True)
        totals = derive_dashboard_totals([settled])
        self.assertEqual(totals.owed_to_me, [])
        self.assertEqual(totals.net, Decimal("0"))


class TestCategories(unittest.TestCase):
    def test_union_is_sorted(self):
        balances = [make_balance(tags=["Food", "Gift"])]
        self.assertEqual(derive_categories(balances, ["Food", "Rent"]), ["Food", "Gift", "Rent"])

    def test_default_built_ins(self):
        categories = derive_categories([make_balance(tags=["Dinner"])])
        self.assertIn("Dinner", categories)
        self.assertTrue(set(BUILT_IN_CATEGORIES).issubset(categories))
        self.assertEqual(categories, sorted(categories))

    def test_empty_selection_passes_everything_through(self):
        balances = [make_balance(tags=["Food"]), make_balance(tags=[])]
        self.assertEqual(filter_by_categories(balances, set()), balances)

    def test_selection_keeps_intersecting_balances(self):
        food = make_balance(tags=["Food", "Birthday"])
        rent = make_balance(tags=["Rent"])
        untagged = make_balance(tags=[])
        self.assertEqual(filter_by_categories([food, rent, untagged], {"Birthday", "Travel"}), [food])


class TestOverdue(unittest.TestCase):
    def test_past_due_date(self):
        self.assertTrue(is_overdue(make_balance(due_date=NOW - timedelta(days=1)), NOW))

    def test_future_due_date(self):
        self.assertFalse(is_overdue(make_balance(due_date=NOW + timedelta(days=1)), NOW))

    def test_no_due_date(self):
        self.assertFalse(is_overdue(make_balance(due_date=None), NOW))

    def test_settled_is_never_overdue(self):
        self.assertFalse(is_overdue(make_balance(settled=True, due_date=NOW - timedelta(days=30)), NOW))


class TestPeopleLookups(unittest.TestCase):
    def test_balances_for_person(self):
        alex = make_balance(person="Alex")
        balances = [alex, make_balance(person="Sarah")]
        self.assertEqual(balances_for_person(balances, "Alex"), [alex])

    def test_known_people_use_first_contact(self):
        balances = [
            make_balance(person="Sarah", other_person_contact="sarah@example.com"),
            make_balance(person="Sarah", other_person_contact="555-0100"),
            make_balance(person="Alex"),
        ]
        people = derive_known_people(balances)
        self.assertEqual([p.name for p in people], ["Alex", "Sarah"])
        self.assertEqual(people[0].contact, "")
        self.assertEqual(people[1].contact, "sarah@example.com")

    def test_known_people_search(self):
        balances = [make_balance(person="Sarah"), make_balance(person="Alex")]
        self.assertEqual([p.name for p in derive_known_people(balances, "sa")], ["Sarah"])


class TestActivityStats(unittest.TestCase):
    def test_counts(self):
        balances = [
            make_balance("10", settled=True),
            make_balance("20", due_date=NOW - timedelta(days=2)),
            make_balance("30", owed_to_me=False),
        ]
        groups = [Group(name="Trip", is_active=True), Group(name="Old", is_active=False)]
        stats = derive_activity_stats(balances, groups, NOW)
        self.assertEqual(stats.total_balances, 3)
        self.assertEqual(stats.settled, 1)
        self.assertEqual(stats.overdue, 1)
        self.assertEqual(stats.active_groups, 1)
        self.assertEqual(stats.totals.net, Decimal("-10"))
        self.assertEqual([g.name for g in active_groups(groups)], ["Trip"])
