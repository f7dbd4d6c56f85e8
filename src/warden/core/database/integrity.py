"""Helpers for classifying database integrity failures."""

from sqlalchemy.exc import IntegrityError


# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True if the IntegrityError came from a unique constraint.

    Foreign key and not-null violations also raise IntegrityError; those
    must keep propagating as backend failures.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION_SQLSTATE
    # SQLite reports no SQLSTATE, only the message
    return "UNIQUE constraint failed" in str(orig)
