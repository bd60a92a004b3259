"""Persistence backends.

Both backends share one narrow contract, ``Database.execute(sql, params)``,
so the repository and API layers never know which one is in use:

- RemoteDatabase: SQLAlchemy engine built from a database URL
- EmbeddedDatabase: in-memory SQLite mirrored to a file after every mutation
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from sqlalchemy import Connection, Engine, create_engine, make_url, text
from sqlalchemy.pool import StaticPool

from userlists.db.schema import Base

logger = logging.getLogger(__name__)


@dataclass
class ExecuteResult:
    """Outcome of a single statement."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0
    lastrowid: int | None = None

    @property
    def inserted_id(self) -> int | None:
        """Auto-assigned id of an inserted row.

        Prefers an ``id`` column from a RETURNING clause and falls back to
        the driver's lastrowid.
        """
        if self.rows and "id" in self.rows[0]:
            return int(self.rows[0]["id"])
        return self.lastrowid


class Database:
    """Engine-backed statement executor.

    Every call to execute() runs in its own transaction, so each statement
    is atomic and nothing is held open between requests.
    """

    name = "database"

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> ExecuteResult:
        """Run one parameterized statement.

        Args:
            sql: Statement with ``:name`` placeholders.
            params: Values bound to the placeholders.

        Returns:
            ExecuteResult with rows (for queries or RETURNING), rowcount
            and lastrowid.

        Raises:
            sqlalchemy.exc.IntegrityError: On constraint violations.
        """
        with self.engine.begin() as conn:
            return self._run(conn, sql, params)

    @staticmethod
    def _run(conn: Connection, sql: str, params: Mapping[str, Any] | None) -> ExecuteResult:
        result = conn.execute(text(sql), dict(params or {}))
        # lastrowid is only meaningful on SQLite; other dialects use RETURNING.
        lastrowid = result.lastrowid if conn.dialect.name == "sqlite" else None
        rows = [dict(row._mapping) for row in result] if result.returns_rows else []
        return ExecuteResult(rows=rows, rowcount=result.rowcount, lastrowid=lastrowid)

    def init_schema(self) -> None:
        """Create the usernames table if it does not exist."""
        Base.metadata.create_all(self.engine)
        logger.info(f"Schema ready on {self.name} database")

    def close(self) -> None:
        self.engine.dispose()


class RemoteDatabase(Database):
    """Database reached through a SQLAlchemy URL.

    Intended for a managed SQL service (PostgreSQL, libSQL, ...). In-memory
    SQLite URLs are accepted too and share a single connection, which is
    what the test suite uses.
    """

    name = "remote"

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        url_obj = make_url(url)
        if url_obj.get_backend_name() == "sqlite" and url_obj.database in (None, "", ":memory:"):
            # StaticPool: one connection shared across threads, otherwise
            # every pooled connection would see its own empty database.
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
            engine_kwargs.setdefault("poolclass", StaticPool)
        else:
            engine_kwargs.setdefault("pool_pre_ping", True)

        super().__init__(create_engine(url_obj, echo=False, **engine_kwargs))
        self.url = url_obj.render_as_string(hide_password=True)
        logger.info(f"Opened remote database {self.url}")


class EmbeddedDatabase(Database):
    """In-memory SQLite engine persisted to a single file.

    The file is loaded once on open. After any statement that changed rows
    the whole database is copied back to the file with the SQLite backup
    API before execute() returns. There is no batching.
    """

    name = "embedded"

    def __init__(self, path: Path | str) -> None:
        engine = create_engine(
            "sqlite://",
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        super().__init__(engine)
        self.path = Path(path)
        # Serializes statement + flush on the single shared connection.
        self._lock = threading.RLock()

        proxy = engine.raw_connection()
        self._sqlite: sqlite3.Connection = proxy.driver_connection
        proxy.close()

        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.info(f"Embedded database {self.path} does not exist yet, starting empty")
            return

        source = sqlite3.connect(self.path)
        try:
            source.backup(self._sqlite)
        finally:
            source.close()
        logger.info(f"Loaded embedded database from {self.path}")

    def save(self) -> None:
        """Write the in-memory database to its file."""
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            target = sqlite3.connect(self.path)
            try:
                self._sqlite.backup(target)
            finally:
                target.close()
        logger.debug(f"Flushed embedded database to {self.path}")

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> ExecuteResult:
        with self._lock:
            before = self._sqlite.total_changes
            result = super().execute(sql, params)
            if self._sqlite.total_changes != before:
                self.save()
            return result

    def init_schema(self) -> None:
        with self._lock:
            super().init_schema()
            self.save()
