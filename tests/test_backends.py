"""Tests for the persistence backends.

Both backends honour the same execute() contract; the embedded backend
additionally mirrors every mutation to its file before returning.
"""

import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError

from userlists.db.backends import EmbeddedDatabase, ExecuteResult, RemoteDatabase

INSERT = (
    "INSERT INTO usernames (username, list_type) VALUES (:username, :list_type) RETURNING id"
)


def _file_usernames(path) -> list[str]:
    """Read usernames straight from the file, bypassing the backend."""
    conn = sqlite3.connect(path)
    try:
        return [r[0] for r in conn.execute("SELECT username FROM usernames ORDER BY id")]
    finally:
        conn.close()


@pytest.fixture
def embedded(tmp_path):
    database = EmbeddedDatabase(tmp_path / "store" / "lists.db")
    database.init_schema()
    yield database
    database.close()


class TestExecuteResult:
    """Test ExecuteResult.inserted_id."""

    def test_prefers_returning_row(self):
        result = ExecuteResult(rows=[{"id": 7}], rowcount=1, lastrowid=3)
        assert result.inserted_id == 7

    def test_falls_back_to_lastrowid(self):
        result = ExecuteResult(rows=[], rowcount=1, lastrowid=3)
        assert result.inserted_id == 3

    def test_none_when_unknown(self):
        assert ExecuteResult().inserted_id is None


class TestRemoteDatabase:
    """Test RemoteDatabase against in-memory SQLite."""

    def test_insert_reports_id(self, db):
        """Inserted rows report their auto-assigned id."""
        first = db.execute(INSERT, {"username": "foo", "list_type": "following"})
        second = db.execute(INSERT, {"username": "bar", "list_type": "following"})

        assert first.inserted_id == 1
        assert second.inserted_id == 2

    def test_select_returns_dict_rows(self, db):
        """Query rows come back as dicts keyed by column."""
        db.execute(INSERT, {"username": "foo", "list_type": "followers"})
        result = db.execute("SELECT username, list_type FROM usernames")

        assert result.rows == [{"username": "foo", "list_type": "followers"}]

    def test_rowcount_for_update_and_delete(self, db):
        """Updates and deletes report affected rows."""
        db.execute(INSERT, {"username": "foo", "list_type": "following"})
        db.execute(INSERT, {"username": "bar", "list_type": "following"})

        updated = db.execute(
            "UPDATE usernames SET notes = :notes WHERE list_type = :list_type",
            {"notes": "n", "list_type": "following"},
        )
        deleted = db.execute("DELETE FROM usernames WHERE username = :u", {"u": "nobody"})

        assert updated.rowcount == 2
        assert deleted.rowcount == 0

    def test_parameters_are_bound_not_interpolated(self, db):
        """Quotes in values cannot break out of the statement."""
        hostile = "x'); DROP TABLE usernames; --"
        db.execute(INSERT, {"username": hostile, "list_type": "following"})

        rows = db.execute("SELECT username FROM usernames").rows
        assert rows == [{"username": hostile}]

    def test_constraint_violation_raises(self, db):
        """Duplicate pairs surface as IntegrityError."""
        db.execute(INSERT, {"username": "foo", "list_type": "following"})
        with pytest.raises(IntegrityError):
            db.execute(INSERT, {"username": "foo", "list_type": "following"})

    def test_file_url(self, tmp_path):
        """A file-based SQLite URL works through the same contract."""
        database = RemoteDatabase(f"sqlite:///{tmp_path / 'remote.db'}")
        database.init_schema()
        database.execute(INSERT, {"username": "foo", "list_type": "following"})

        assert _file_usernames(tmp_path / "remote.db") == ["foo"]
        database.close()


class TestEmbeddedDatabase:
    """Test EmbeddedDatabase file persistence."""

    def test_schema_flushed_on_init(self, embedded):
        """The file exists (with parent dirs) right after schema creation."""
        assert embedded.path.exists()
        assert _file_usernames(embedded.path) == []

    def test_each_mutation_flushed_before_return(self, embedded):
        """The file reflects an insert as soon as execute() returns."""
        embedded.execute(INSERT, {"username": "foo", "list_type": "following"})
        assert _file_usernames(embedded.path) == ["foo"]

        embedded.execute(INSERT, {"username": "bar", "list_type": "followers"})
        assert _file_usernames(embedded.path) == ["foo", "bar"]

        embedded.execute("DELETE FROM usernames WHERE username = :u", {"u": "foo"})
        assert _file_usernames(embedded.path) == ["bar"]

    def test_reopen_loads_file(self, embedded):
        """A new handle on the same file sees acknowledged rows."""
        embedded.execute(INSERT, {"username": "foo", "list_type": "following"})

        reopened = EmbeddedDatabase(embedded.path)
        reopened.init_schema()
        rows = reopened.execute("SELECT username FROM usernames").rows
        reopened.close()

        assert rows == [{"username": "foo"}]

    def test_reads_do_not_touch_file(self, embedded):
        """Queries without changes skip the flush."""
        embedded.execute(INSERT, {"username": "foo", "list_type": "following"})
        mtime = embedded.path.stat().st_mtime_ns

        embedded.execute("SELECT * FROM usernames")
        embedded.execute("DELETE FROM usernames WHERE username = :u", {"u": "nobody"})

        assert embedded.path.stat().st_mtime_ns == mtime

    def test_failed_statement_leaves_file_intact(self, embedded):
        """A rejected insert does not alter the file."""
        embedded.execute(INSERT, {"username": "foo", "list_type": "following"})
        with pytest.raises(IntegrityError):
            embedded.execute(INSERT, {"username": "foo", "list_type": "following"})

        assert _file_usernames(embedded.path) == ["foo"]

    def test_insert_reports_id(self, embedded):
        result = embedded.execute(INSERT, {"username": "foo", "list_type": "following"})
        assert result.inserted_id == 1
