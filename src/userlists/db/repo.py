"""Repository for username entries.

Encapsulates all SQL, keeping domain logic free of statements.
Statements use ``:name`` placeholders only and portable SQL (CURRENT_TIMESTAMP,
ON CONFLICT DO NOTHING, RETURNING) understood by SQLite and PostgreSQL.
Returns domain models, not raw rows, to external callers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from userlists.core.normalize import LIKE_ESCAPE, escape_like
from userlists.db.backends import Database
from userlists.models.domain import ListStats, UsernameEntryEntity

_COLUMNS = "id, username, list_type, display_name, notes, created_at, updated_at"

# Newest first; id breaks ties between rows created in the same second.
_RECENT = "created_at DESC, id DESC"


# ============================================================================
# Converters: row -> Domain
# ============================================================================


def _as_utc(value: datetime | str | None) -> datetime | None:
    """Parse a stored timestamp and mark naive values as UTC.

    CURRENT_TIMESTAMP is UTC on both SQLite and PostgreSQL; SQLite hands it
    back as text without an offset.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _row_to_entity(row: dict[str, Any]) -> UsernameEntryEntity:
    """Convert a result row to a domain entity."""
    return UsernameEntryEntity(
        id=int(row["id"]),
        username=row["username"],
        list_type=row["list_type"],
        display_name=row["display_name"],
        notes=row["notes"],
        created_at=_as_utc(row["created_at"]),
        updated_at=_as_utc(row["updated_at"]),
    )


# ============================================================================
# Reads
# ============================================================================


def list_entries(db: Database, list_type: str | None = None) -> list[UsernameEntryEntity]:
    """List entries, newest first.

    With a list_type only that list is returned; otherwise entries are
    grouped by list_type.
    """
    if list_type is not None:
        result = db.execute(
            f"SELECT {_COLUMNS} FROM usernames WHERE list_type = :list_type ORDER BY {_RECENT}",
            {"list_type": list_type},
        )
    else:
        result = db.execute(f"SELECT {_COLUMNS} FROM usernames ORDER BY list_type, {_RECENT}")
    return [_row_to_entity(r) for r in result.rows]


def get_entry(db: Database, entry_id: int) -> UsernameEntryEntity | None:
    """Get entry by ID."""
    result = db.execute(
        f"SELECT {_COLUMNS} FROM usernames WHERE id = :id",
        {"id": entry_id},
    )
    return _row_to_entity(result.rows[0]) if result.rows else None


def find_entry_id(db: Database, username: str, list_type: str) -> int | None:
    """Get the id of the entry holding (username, list_type), if any."""
    result = db.execute(
        "SELECT id FROM usernames WHERE username = :username AND list_type = :list_type",
        {"username": username, "list_type": list_type},
    )
    return int(result.rows[0]["id"]) if result.rows else None


def search_entries(
    db: Database, term: str, list_type: str | None = None
) -> list[UsernameEntryEntity]:
    """Case-insensitive substring search over username, display_name and notes.

    The term is matched literally; LIKE wildcards inside it are escaped.
    """
    params: dict[str, Any] = {"pattern": f"%{escape_like(term.lower())}%"}
    match = (
        f"(lower(username) LIKE :pattern ESCAPE '{LIKE_ESCAPE}'"
        f" OR lower(display_name) LIKE :pattern ESCAPE '{LIKE_ESCAPE}'"
        f" OR lower(notes) LIKE :pattern ESCAPE '{LIKE_ESCAPE}')"
    )

    if list_type is not None:
        params["list_type"] = list_type
        sql = (
            f"SELECT {_COLUMNS} FROM usernames WHERE {match} AND list_type = :list_type "
            f"ORDER BY {_RECENT}"
        )
    else:
        sql = f"SELECT {_COLUMNS} FROM usernames WHERE {match} ORDER BY list_type, {_RECENT}"

    return [_row_to_entity(r) for r in db.execute(sql, params).rows]


def count_by_list(db: Database) -> ListStats:
    """Count entries per list."""
    result = db.execute(
        "SELECT list_type, COUNT(*) AS count FROM usernames GROUP BY list_type"
    )
    stats = ListStats()
    for row in result.rows:
        if row["list_type"] == "following":
            stats.following = int(row["count"])
        elif row["list_type"] == "followers":
            stats.followers = int(row["count"])
    return stats


# ============================================================================
# Writes
# ============================================================================


def insert_entry(
    db: Database,
    username: str,
    list_type: str,
    display_name: str | None = None,
    notes: str | None = None,
) -> int:
    """Insert an entry and return its id.

    Raises:
        sqlalchemy.exc.IntegrityError: If (username, list_type) exists.
    """
    result = db.execute(
        "INSERT INTO usernames (username, list_type, display_name, notes) "
        "VALUES (:username, :list_type, :display_name, :notes) RETURNING id",
        {
            "username": username,
            "list_type": list_type,
            "display_name": display_name,
            "notes": notes,
        },
    )
    entry_id = result.inserted_id
    if entry_id is None:
        raise RuntimeError("Insert did not report a row id")
    return entry_id


def insert_entry_if_absent(db: Database, username: str, list_type: str) -> bool:
    """Insert (username, list_type) unless it exists. Returns True if inserted."""
    result = db.execute(
        "INSERT INTO usernames (username, list_type) VALUES (:username, :list_type) "
        "ON CONFLICT (username, list_type) DO NOTHING",
        {"username": username, "list_type": list_type},
    )
    return result.rowcount > 0


def update_entry(
    db: Database,
    entry_id: int,
    *,
    username: str,
    list_type: str,
    display_name: str | None,
    notes: str | None,
) -> bool:
    """Overwrite all editable fields and touch updated_at. Returns True if a row changed.

    Raises:
        sqlalchemy.exc.IntegrityError: If the new (username, list_type) is taken.
    """
    result = db.execute(
        "UPDATE usernames SET username = :username, list_type = :list_type, "
        "display_name = :display_name, notes = :notes, updated_at = CURRENT_TIMESTAMP "
        "WHERE id = :id",
        {
            "id": entry_id,
            "username": username,
            "list_type": list_type,
            "display_name": display_name,
            "notes": notes,
        },
    )
    return result.rowcount > 0


def delete_entry(db: Database, entry_id: int) -> bool:
    """Delete entry by ID. Returns True if a row was removed."""
    result = db.execute("DELETE FROM usernames WHERE id = :id", {"id": entry_id})
    return result.rowcount > 0


def delete_list(db: Database, list_type: str) -> int:
    """Delete every entry of one list. Returns the number removed."""
    result = db.execute(
        "DELETE FROM usernames WHERE list_type = :list_type",
        {"list_type": list_type},
    )
    return result.rowcount
