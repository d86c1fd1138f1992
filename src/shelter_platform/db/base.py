"""
shelter_platform.db.base

SQLAlchemy declarative base and shared column mixins.

Responsibilities:
- Provide a shared DeclarativeBase for all ORM models.
- Provide created/updated timestamps and soft-delete columns.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    # Naive UTC timestamps keep SQLite and Postgres comparisons consistent.
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)


class SoftDeleteMixin:
    """
    Rows with `deleted_at` set are invisible to repository reads unless a
    caller asks for them explicitly (`include_deleted=True`).
    """

    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True, default=None)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def mark_deleted(self) -> None:
        self.deleted_at = utcnow()
