"""SQLAlchemy declarative base and common mixins."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from ulid import ULID

from warden.core.constants import ULID_LENGTH


def generate_ulid() -> str:
    """Return a lexicographically sortable ULID string."""
    return str(ULID())


def utcnow() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class ULIDMixin:
    """Mixin that adds a ULID primary key.

    ULIDs sort by creation time, so ``ORDER BY id`` is creation order.
    """

    id: Mapped[str] = mapped_column(
        String(ULID_LENGTH),
        primary_key=True,
        default=generate_ulid,
    )


class CreatedAtMixin:
    """Mixin that adds a created_at timestamp."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
