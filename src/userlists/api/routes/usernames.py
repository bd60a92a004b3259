"""Username list endpoints.

GET /api/usernames - List entries (optional ?list_type=)
POST /api/usernames - Create entry
POST /api/usernames/bulk - Bulk import into one list
DELETE /api/usernames/list/{list_type} - Clear one list
GET /api/usernames/{entry_id} - Get entry
PUT /api/usernames/{entry_id} - Update entry
DELETE /api/usernames/{entry_id} - Delete entry
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from userlists.api.app import get_db, reported
from userlists.db.backends import Database
from userlists.lists import entries
from userlists.models.domain import UsernameEntryEntity
from userlists.models.types import (
    BulkImportRequest,
    BulkImportSummary,
    DeletedEntry,
    DeletedList,
    Entry,
    EntryCreate,
    EntryUpdate,
    Envelope,
    MessageEnvelope,
)

router = APIRouter()


def _to_entry(entity: UsernameEntryEntity) -> Entry:
    return Entry.model_validate(entity, from_attributes=True)


@router.get("/usernames", response_model=Envelope[list[Entry]])
def list_usernames(
    list_type: str | None = None,
    db: Database = Depends(get_db),
) -> Envelope[list[Entry]]:
    """List entries, newest first.

    Args:
        list_type: "following" or "followers". Any other value lists both.
        db: Database handle (injected).
    """
    with reported("Failed to fetch usernames"):
        rows = entries.list_entries(db, list_type)
    return Envelope[list[Entry]](data=[_to_entry(e) for e in rows])


@router.post("/usernames", response_model=Envelope[Entry], status_code=201)
def create_username(
    payload: EntryCreate,
    db: Database = Depends(get_db),
) -> Envelope[Entry]:
    """Add a username to a list.

    Raises:
        ValidationError: 400 on missing fields, bad list_type or empty username.
        ConflictError: 409 if the username is already on that list.
    """
    entry_input = entries.EntryInput(
        username=payload.username,
        list_type=payload.list_type,
        display_name=payload.display_name,
        notes=payload.notes,
    )
    with reported("Failed to create username"):
        entity = entries.create_entry(db, entry_input)
    return Envelope[Entry](data=_to_entry(entity))


@router.post(
    "/usernames/bulk",
    response_model=MessageEnvelope[BulkImportSummary],
    status_code=201,
)
def bulk_import_usernames(
    payload: BulkImportRequest,
    db: Database = Depends(get_db),
) -> MessageEnvelope[BulkImportSummary]:
    """Insert many usernames into one list, skipping ones already present."""
    with reported("Failed to import usernames"):
        result = entries.bulk_import(db, payload.usernames, payload.list_type)
    return MessageEnvelope[BulkImportSummary](
        message=f"Imported {result.imported} usernames",
        data=BulkImportSummary(
            imported=result.imported,
            skipped=result.skipped,
            total=result.total,
        ),
    )


@router.delete("/usernames/list/{list_type}", response_model=MessageEnvelope[DeletedList])
def delete_list(
    list_type: str,
    db: Database = Depends(get_db),
) -> MessageEnvelope[DeletedList]:
    """Remove every entry from one list."""
    with reported("Failed to delete usernames"):
        deleted = entries.delete_list(db, list_type)
    return MessageEnvelope[DeletedList](
        message=f"Deleted {deleted} usernames from {list_type} list",
        data=DeletedList(list_type=list_type, deleted=deleted),
    )


@router.get("/usernames/{entry_id}", response_model=Envelope[Entry])
def get_username(
    entry_id: int,
    db: Database = Depends(get_db),
) -> Envelope[Entry]:
    """Get one entry.

    Raises:
        NotFoundError: 404 if entry not found.
    """
    with reported("Failed to fetch username"):
        entity = entries.get_entry(db, entry_id)
    return Envelope[Entry](data=_to_entry(entity))


@router.put("/usernames/{entry_id}", response_model=Envelope[Entry])
def update_username(
    entry_id: int,
    payload: EntryUpdate,
    db: Database = Depends(get_db),
) -> Envelope[Entry]:
    """Update an entry with the fields present in the body.

    Fields missing from the body keep their stored values.
    """
    fields = {name: getattr(payload, name) for name in payload.model_fields_set}
    with reported("Failed to update username"):
        entity = entries.update_entry(db, entry_id, **fields)
    return Envelope[Entry](data=_to_entry(entity))


@router.delete("/usernames/{entry_id}", response_model=MessageEnvelope[DeletedEntry])
def delete_username(
    entry_id: int,
    db: Database = Depends(get_db),
) -> MessageEnvelope[DeletedEntry]:
    """Delete one entry.

    Raises:
        NotFoundError: 404 if entry not found.
    """
    with reported("Failed to delete username"):
        entries.delete_entry(db, entry_id)
    return MessageEnvelope[DeletedEntry](
        message="Username deleted successfully",
        data=DeletedEntry(id=entry_id),
    )
