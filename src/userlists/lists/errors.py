"""Domain errors raised by list operations.

Each error carries the HTTP status the API layer renders it with.
"""

from __future__ import annotations


class EntryError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(EntryError):
    """Input is missing or malformed."""

    status_code = 400


class NotFoundError(EntryError):
    """The referenced entry does not exist."""

    status_code = 404


class ConflictError(EntryError):
    """The (username, list_type) pair is already taken."""

    status_code = 409


class ServiceError(EntryError):
    """An unexpected failure, reported to the client without details."""

    status_code = 500
