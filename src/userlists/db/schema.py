"""Database schema for userlists.

A single table with constraints that enforce the list invariants:
1. (username, list_type) is unique
2. list_type is one of the two fixed lists
"""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Integer,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class UsernameEntry(Base):
    """A username on the "following" or "followers" list.

    Invariant: UNIQUE(username, list_type)
    The same handle may appear once per list.
    """

    __tablename__ = "usernames"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    list_type: Mapped[str] = mapped_column(Text, nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=True, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=True, server_default=func.current_timestamp()
    )

    __table_args__ = (
        UniqueConstraint("username", "list_type", name="uq_username_list"),
        CheckConstraint("list_type IN ('following', 'followers')", name="ck_list_type"),
        {"sqlite_autoincrement": True},
    )
