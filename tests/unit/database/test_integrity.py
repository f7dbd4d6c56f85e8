"""Unit tests for integrity error classification."""

import pytest
from sqlalchemy.exc import IntegrityError

from warden.core.database.integrity import is_unique_violation


pytestmark = pytest.mark.unit


class FakeDriverError(Exception):
    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def _integrity(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, orig)


class TestIsUniqueViolation:
    def test_postgres_unique_violation(self):
        exc = _integrity(FakeDriverError("duplicate key value", sqlstate="23505"))

        assert is_unique_violation(exc) is True

    def test_postgres_foreign_key_violation(self):
        """Other integrity failures keep propagating."""
        exc = _integrity(FakeDriverError("violates foreign key", sqlstate="23503"))

        assert is_unique_violation(exc) is False

    def test_sqlite_unique_violation(self):
        exc = _integrity(FakeDriverError("UNIQUE constraint failed: accounts.email"))

        assert is_unique_violation(exc) is True

    def test_sqlite_foreign_key_violation(self):
        exc = _integrity(FakeDriverError("FOREIGN KEY constraint failed"))

        assert is_unique_violation(exc) is False
