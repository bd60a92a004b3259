"""Tests for database schema invariants.

Invariants:
1. Entries unique per (username, list_type)
2. list_type restricted to "following" / "followers"
3. Timestamps assigned by the database
"""

import pytest
from sqlalchemy.exc import IntegrityError

from userlists.db.schema import Base, UsernameEntry


class TestSchemaCreation:
    """Test that schema can be created without errors."""

    def test_usernames_table_created(self, engine):
        """The usernames table should exist after creation."""
        assert "usernames" in Base.metadata.tables

    def test_ids_auto_assigned(self, session):
        """Ids are assigned by the database and increase."""
        first = UsernameEntry(username="foo", list_type="following")
        second = UsernameEntry(username="bar", list_type="following")
        session.add_all([first, second])
        session.commit()

        assert first.id is not None
        assert second.id > first.id

    def test_timestamps_default(self, session):
        """created_at and updated_at are filled in by the database."""
        entry = UsernameEntry(username="foo", list_type="followers")
        session.add(entry)
        session.commit()
        session.refresh(entry)

        assert entry.created_at is not None
        assert entry.updated_at is not None


class TestEntryUniqueness:
    """Invariant: entries unique per (username, list_type)."""

    def test_duplicate_pair_rejected(self, session):
        """Same username on the same list should be rejected."""
        session.add(UsernameEntry(username="foo", list_type="following"))
        session.commit()

        session.add(UsernameEntry(username="foo", list_type="following"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_same_username_on_both_lists_allowed(self, session):
        """A handle may be on following and followers at once."""
        session.add(UsernameEntry(username="foo", list_type="following"))
        session.add(UsernameEntry(username="foo", list_type="followers"))
        session.commit()

        assert session.query(UsernameEntry).count() == 2


class TestListTypeCheck:
    """Invariant: list_type is one of the two lists."""

    def test_unknown_list_type_rejected(self, session):
        """The CHECK constraint rejects other values."""
        session.add(UsernameEntry(username="foo", list_type="blocked"))
        with pytest.raises(IntegrityError):
            session.commit()
