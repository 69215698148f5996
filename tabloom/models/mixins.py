"""Shared column helpers: ids, timestamps and the soft-delete lifecycle."""

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, Enum as SAEnum
from sqlalchemy.types import TypeDecorator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def _as_utc(value):
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UtcDateTime(TypeDecorator):
    """Timezone-aware UTC datetime on every backend.

    SQLite keeps no offset, so values come back naive; they are written as
    UTC and tagged as UTC again on load.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return _as_utc(value)

    def process_result_value(self, value, dialect):
        return _as_utc(value)


class Lifecycle(str, Enum):
    """Soft-delete state of a folder or bookmark."""
    ACTIVE = "active"
    DELETED = "deleted"


class TimestampMixin:
    """``created_at`` on insert, ``updated_at`` on every update (application-side)."""

    created_at = Column(UtcDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UtcDateTime(), nullable=False, default=utcnow, onupdate=utcnow)


class SoftDeleteMixin:
    """Rows are never removed; deletion moves them to ``Lifecycle.DELETED``.

    Repositories filter with ``Model.active()`` so ordinary reads never see
    deleted rows.
    """

    lifecycle = Column(
        SAEnum(Lifecycle, native_enum=False, length=10,
               values_callable=lambda enum: [m.value for m in enum]),
        nullable=False,
        default=Lifecycle.ACTIVE,
        index=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.lifecycle == Lifecycle.DELETED

    def mark_deleted(self) -> None:
        self.lifecycle = Lifecycle.DELETED

    @classmethod
    def active(cls):
        """Filter expression selecting live rows."""
        return cls.lifecycle == Lifecycle.ACTIVE
