"""Username entry operations.

Validation, normalization and merge rules live here; statements go
through repo. Every function takes the Database handle explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError

from userlists.core.normalize import LIST_TYPES, is_list_type, normalize_username
from userlists.db import repo
from userlists.db.backends import Database
from userlists.lists.errors import ConflictError, NotFoundError, ValidationError
from userlists.models.domain import BulkImportResult, ListStats, UsernameEntryEntity

logger = logging.getLogger(__name__)

LIST_TYPE_MESSAGE = 'list_type must be either "following" or "followers"'
NOT_FOUND_MESSAGE = "Username not found"

# Sentinel for "field not supplied" in partial updates
UNSET: Any = object()


@dataclass
class EntryInput:
    """Input for entry creation."""

    username: Any
    list_type: Any
    display_name: str | None = None
    notes: str | None = None


def _optional_text(value: str | None) -> str | None:
    """Store empty optional text as NULL."""
    return value if value else None


def _require_list_type(list_type: Any) -> str:
    if not is_list_type(list_type):
        raise ValidationError(LIST_TYPE_MESSAGE)
    return list_type


def _conflict(username: str, list_type: str) -> ConflictError:
    return ConflictError(f"Username @{username} already exists in {list_type} list")


def filter_list_type(list_type: str | None) -> str | None:
    """Return list_type if it names a list, else None (meaning "all lists")."""
    return list_type if list_type in LIST_TYPES else None


# ============================================================================
# Reads
# ============================================================================


def list_entries(db: Database, list_type: str | None = None) -> list[UsernameEntryEntity]:
    """List entries. Unrecognized list_type values are ignored."""
    return repo.list_entries(db, filter_list_type(list_type))


def get_entry(db: Database, entry_id: int) -> UsernameEntryEntity:
    """Get entry by ID.

    Raises:
        NotFoundError: If no entry has this id.
    """
    entry = repo.get_entry(db, entry_id)
    if entry is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return entry


def search(db: Database, query: str | None, list_type: str | None = None) -> list[UsernameEntryEntity]:
    """Substring search across username, display_name and notes.

    Raises:
        ValidationError: If the query is missing or blank.
    """
    if query is None or not query.strip():
        raise ValidationError("Search query is required")
    return repo.search_entries(db, query, filter_list_type(list_type))


def stats(db: Database) -> ListStats:
    """Entry counts per list."""
    return repo.count_by_list(db)


# ============================================================================
# Writes
# ============================================================================


def create_entry(db: Database, entry_input: EntryInput) -> UsernameEntryEntity:
    """Create an entry.

    Args:
        db: Database handle.
        entry_input: Raw fields from the request.

    Returns:
        The stored entry with server-assigned id and timestamps.

    Raises:
        ValidationError: Missing fields, bad list_type, or a username that
            is not a string or normalizes to "".
        ConflictError: If (username, list_type) already exists.
    """
    if not entry_input.username or not entry_input.list_type:
        raise ValidationError("Username and list_type are required")
    list_type = _require_list_type(entry_input.list_type)

    if not isinstance(entry_input.username, str):
        raise ValidationError("Invalid username")
    username = normalize_username(entry_input.username)
    if not username:
        raise ValidationError("Invalid username")

    if repo.find_entry_id(db, username, list_type) is not None:
        raise _conflict(username, list_type)

    try:
        entry_id = repo.insert_entry(
            db,
            username,
            list_type,
            display_name=_optional_text(entry_input.display_name),
            notes=_optional_text(entry_input.notes),
        )
    except IntegrityError as e:
        # Lost a race against a concurrent insert of the same pair
        raise _conflict(username, list_type) from e

    logger.info(f"Added @{username} to {list_type} (id={entry_id})")
    return get_entry(db, entry_id)


def update_entry(
    db: Database,
    entry_id: int,
    *,
    username: Any = UNSET,
    list_type: Any = UNSET,
    display_name: Any = UNSET,
    notes: Any = UNSET,
) -> UsernameEntryEntity:
    """Merge the supplied fields over the stored entry.

    username and list_type keep their stored value when unset or empty.
    display_name and notes keep theirs only when unset, so an explicit
    None clears them.

    Raises:
        NotFoundError: If no entry has this id.
        ValidationError: Bad list_type, or a username that is not a string
            or normalizes to "".
        ConflictError: If the new (username, list_type) belongs to another entry.
    """
    existing = get_entry(db, entry_id)

    if username is UNSET or not username:
        new_username = existing.username
    else:
        new_username = normalize_username(username) if isinstance(username, str) else ""
        if not new_username:
            raise ValidationError("Invalid username")

    if list_type is UNSET or not list_type:
        new_list_type = existing.list_type
    else:
        new_list_type = _require_list_type(list_type)

    new_display_name = existing.display_name if display_name is UNSET else display_name
    new_notes = existing.notes if notes is UNSET else notes

    try:
        updated = repo.update_entry(
            db,
            entry_id,
            username=new_username,
            list_type=new_list_type,
            display_name=new_display_name,
            notes=new_notes,
        )
    except IntegrityError as e:
        raise _conflict(new_username, new_list_type) from e

    if not updated:
        # Deleted between the read and the write
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return get_entry(db, entry_id)


def delete_entry(db: Database, entry_id: int) -> None:
    """Delete one entry.

    Raises:
        NotFoundError: If no entry has this id.
    """
    if not repo.delete_entry(db, entry_id):
        raise NotFoundError(NOT_FOUND_MESSAGE)
    logger.info(f"Deleted entry {entry_id}")


def delete_list(db: Database, list_type: str) -> int:
    """Delete every entry on one list.

    Returns:
        Number of entries removed.

    Raises:
        ValidationError: If list_type does not name a list.
    """
    list_type = _require_list_type(list_type)
    deleted = repo.delete_list(db, list_type)
    logger.info(f"Cleared {list_type} list ({deleted} entries)")
    return deleted


def bulk_import(db: Database, usernames: Any, list_type: Any) -> BulkImportResult:
    """Best-effort import of many usernames into one list.

    Each item is stringified and normalized; empty results and pairs that
    already exist are skipped. Items are inserted one statement at a time,
    so a failure part way through keeps the rows already written.

    Raises:
        ValidationError: If usernames is not a list or list_type is bad.
    """
    if not isinstance(usernames, list) or not list_type:
        raise ValidationError("usernames array and list_type are required")
    list_type = _require_list_type(list_type)

    imported = 0
    for raw in usernames:
        username = normalize_username(raw)
        if username and repo.insert_entry_if_absent(db, username, list_type):
            imported += 1

    result = BulkImportResult(
        imported=imported,
        skipped=len(usernames) - imported,
        total=len(usernames),
    )
    logger.info(
        f"Bulk import into {list_type}: {result.imported} imported, {result.skipped} skipped"
    )
    return result
