from datetime import datetime, timedelta

from cli import app
from paybob.models import Balance, Group
from tests.base import BaseCLITest, make_balance, NOW


class TestSummaryCommands(BaseCLITest):
    def test_dashboard(self):
        self.add(
            make_balance("25", person="Alex", owed_to_me=False),
            make_balance("50", person="Sarah", owed_to_me=True),
        )
        result = self.runner.invoke(app, ["dashboard"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("$25.00", result.stdout)
        self.assertIn("$50.00", result.stdout)
        self.assertIn("+$25.00", result.stdout)

    def test_dashboard_empty(self):
        result = self.runner.invoke(app, ["dashboard"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("You don't owe anyone money!", result.stdout)

    def test_profile(self):
        self.add(
            make_balance("25", person="Alex", owed_to_me=False),
            make_balance("50", person="Sarah", owed_to_me=True, settled=True),
            make_balance("5", person="Kim", due_date=datetime.now() - timedelta(days=1)),
            Group(name="Trip", created_at=NOW, is_active=True, total_expenses=0),
        )
        result = self.runner.invoke(app, ["profile"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("You Owe: $25.00", result.stdout)
        self.assertIn("Owed to You: $5.00", result.stdout)
        self.assertIn("Net Balance: -$20.00", result.stdout)
        self.assertIn("Total Balances: 3", result.stdout)
        self.assertIn("Active Groups: 1", result.stdout)
        self.assertIn("Settled: 1", result.stdout)
        self.assertIn("Overdue: 1", result.stdout)

    def test_seed(self):
        result = self.runner.invoke(app, ["seed"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("🌱 Added 4 sample balance(s) and 2 sample group(s).", result.stdout)
        result = self.runner.invoke(app, ["seed"])
        self.assertIn("Nothing to do", result.stdout)
        with self.Session() as db:
            self.assertEqual(db.query(Balance).count(), 4)
            self.assertEqual(db.query(Group).count(), 2)

    def test_category_list(self):
        self.add(make_balance(tags=["Gift"]))
        result = self.runner.invoke(app, ["category", "list"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("• Gift (custom)", result.stdout)
        self.assertIn("• Food\n", result.stdout)
        self.assertLess(result.stdout.index("Food"), result.stdout.index("Gift"))
