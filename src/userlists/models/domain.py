"""Domain models for userlists.

Pure Python dataclasses representing domain entities.
These models are independent of the persistence backend and used
throughout the application for clean separation from the database layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

ListType = Literal["following", "followers"]


# ============================================================================
# Username Entry Domain
# ============================================================================


@dataclass
class UsernameEntryEntity:
    """Domain model for one username on one list."""

    id: int
    username: str
    list_type: ListType
    display_name: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ============================================================================
# Aggregates
# ============================================================================


@dataclass
class ListStats:
    """Entry counts per list."""

    following: int = 0
    followers: int = 0

    @property
    def total(self) -> int:
        return self.following + self.followers


@dataclass
class BulkImportResult:
    """Outcome of a best-effort bulk import."""

    imported: int
    skipped: int
    total: int
