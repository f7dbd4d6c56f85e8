"""Test factories for generating test data."""

from tests.factories.account import (
    PASSWORD_HASH,
    TEST_PASSWORD,
    AccountCreateFactory,
    AccountFactory,
    PermissionFactory,
    RefreshTokenFactory,
    RoleFactory,
)


__all__ = [
    "PASSWORD_HASH",
    "TEST_PASSWORD",
    "AccountCreateFactory",
    "AccountFactory",
    "PermissionFactory",
    "RefreshTokenFactory",
    "RoleFactory",
]
