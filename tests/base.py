# tests/base.py

import unittest
from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from typer.testing import CliRunner

from paybob.db import init_db
from paybob.models import Balance
from paybob.store import RecordStore

NOW = datetime(2025, 7, 25, 12, 0, 0)


def make_balance(amount="10", person="Alex", owed_to_me=True, settled=False, tags=None,
                 due_date=None, updated_at=NOW, description="Lunch", **kwargs) -> Balance:
    """Build an unsaved balance for the pure aggregation functions."""
    return Balance(
        amount=Decimal(amount),
        description=description,
        is_owed_to_me=owed_to_me,
        other_person_name=person,
        tags=list(tags or []),
        due_date=due_date,
        created_at=kwargs.pop("created_at", updated_at),
        updated_at=updated_at,
        is_settled=settled,
        **kwargs,
    )


def memory_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    return engine


class StoreTestCase(unittest.TestCase):
    """A record store over a fresh in-memory database."""

    def setUp(self):
        self.engine = memory_engine()
        self.session = Session(self.engine)
        self.store = RecordStore(self.session)

    def tearDown(self):
        self.session.close()
        self.engine.dispose()


class BaseCLITest(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()
        self.engine = memory_engine()
        self.Session = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        self.active_group_id = None

        # Patches
        self.patches = {}

        # Point every command at the in-memory database
        self._patch("paybob.utils.helpers.SessionLocal", new=self.Session)

        # Patch session file handlers
        self._patch("paybob.utils.helpers.get_active_group_id", side_effect=lambda: self.active_group_id)
        self._patch("paybob.utils.helpers.set_active_group_id", side_effect=self._set_active)
        self._patch("paybob.utils.helpers.clear_active_group", side_effect=self._clear_active)
        self._patch("paybob.commands.group.get_active_group_id", side_effect=lambda: self.active_group_id)
        self._patch("paybob.commands.group.set_active_group_id", side_effect=self._set_active)
        self._patch("paybob.commands.group.clear_active_group", side_effect=self._clear_active)

    def _set_active(self, group_id):
        self.active_group_id = group_id

    def _clear_active(self):
        self.active_group_id = None

    def _patch(self, target, **kwargs):
        patcher = patch(target, **kwargs)
        mocked = patcher.start()
        self.patches[target] = patcher  # Store the patcher object instead of the mocked instance
        return mocked  # Return the mocked instance for immediate use if needed

    def add(self, *records):
        """Save records through a short-lived session and return them detached."""
        with self.Session() as db:
            db.add_all(records)
            db.commit()
        return records[0] if len(records) == 1 else records

    def tearDown(self):
        for patcher in self.patches.values():
            patcher.stop()  # Stop each patcher individually
        self.patches.clear()
        self.engine.dispose()
