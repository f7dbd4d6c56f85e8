"""Database layer - session management, base models, and mixins."""

from warden.core.database.base import (
    Base,
    CreatedAtMixin,
    ULIDMixin,
    generate_ulid,
    utcnow,
)
from warden.core.database.session import (
    async_engine,
    async_session_factory,
    build_engine,
    get_db,
)


__all__ = [
    "Base",
    "CreatedAtMixin",
    "ULIDMixin",
    "async_engine",
    "async_session_factory",
    "build_engine",
    "generate_ulid",
    "get_db",
    "utcnow",
]
