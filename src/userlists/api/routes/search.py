"""Search and statistics endpoints.

GET /api/search?q=...&list_type=... - Substring search
GET /api/stats - Entry counts per list
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from userlists.api.app import get_db, reported
from userlists.db.backends import Database
from userlists.lists import entries
from userlists.models.types import Entry, Envelope, Stats

router = APIRouter()


@router.get("/search", response_model=Envelope[list[Entry]])
def search_usernames(
    q: str | None = None,
    list_type: str | None = None,
    db: Database = Depends(get_db),
) -> Envelope[list[Entry]]:
    """Case-insensitive search across username, display name and notes.

    Raises:
        ValidationError: 400 if q is missing or blank.
    """
    with reported("Failed to search usernames"):
        rows = entries.search(db, q, list_type)
    return Envelope[list[Entry]](
        data=[Entry.model_validate(e, from_attributes=True) for e in rows]
    )


@router.get("/stats", response_model=Envelope[Stats])
def get_stats(db: Database = Depends(get_db)) -> Envelope[Stats]:
    """Count entries per list."""
    with reported("Failed to fetch stats"):
        counts = entries.stats(db)
    return Envelope[Stats](
        data=Stats(
            following=counts.following,
            followers=counts.followers,
            total=counts.total,
        )
    )
