"""Pydantic models for the userlists API.

Request bodies are deliberately loose (every field optional, list_type a
plain string) so that validation messages come from the domain layer and
match the documented error strings.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class EntryCreate(BaseModel):
    """Body of POST /api/usernames."""

    username: Any = None
    list_type: Any = None
    display_name: str | None = None
    notes: str | None = None


class EntryUpdate(BaseModel):
    """Body of PUT /api/usernames/{id}.

    Fields absent from the payload keep their stored value; see
    ``model_fields_set``.
    """

    username: Any = None
    list_type: Any = None
    display_name: str | None = None
    notes: str | None = None


class BulkImportRequest(BaseModel):
    """Body of POST /api/usernames/bulk."""

    usernames: Any = None
    list_type: Any = None


class Entry(BaseModel):
    """A stored username entry."""

    id: int
    username: str
    list_type: str
    display_name: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Stats(BaseModel):
    """Counts per list plus total."""

    following: int
    followers: int
    total: int


class BulkImportSummary(BaseModel):
    """Result of a bulk import."""

    imported: int
    skipped: int
    total: int


class Envelope(BaseModel, Generic[T]):
    """Successful response wrapper."""

    success: bool = True
    data: T


class MessageEnvelope(BaseModel, Generic[T]):
    """Successful response wrapper with a human-readable message."""

    success: bool = True
    message: str
    data: T


class ErrorEnvelope(BaseModel):
    """Failed response wrapper."""

    success: bool = False
    error: str


class DeletedEntry(BaseModel):
    """Payload of a single-entry delete."""

    id: int


class DeletedList(BaseModel):
    """Payload of a whole-list delete."""

    list_type: str
    deleted: int


class HealthStatus(BaseModel):
    """Payload of the health check."""

    status: str
    timestamp: datetime
    backend: str
