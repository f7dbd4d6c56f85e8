"""Integration tests for scripts/seed.py."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from scripts.seed import DEMO_PASSWORD, seed_accounts, seed_catalog
from warden.core.auth.backend import verify_password
from warden.core.authorization.checker import PermissionChecker
from warden.modules.permissions.models import Permission


pytestmark = pytest.mark.integration


class TestSeedCatalog:
    """Tests for the default scenario."""

    async def test_one_permission_per_action(self, db: AsyncSession):
        """Actions sharing a slug share one permission."""
        await seed_catalog(db)

        total = (await db.execute(select(func.count()).select_from(Permission))).scalar_one()
        assert total == 10

    async def test_idempotent(self, db: AsyncSession):
        first = await seed_catalog(db)
        second = await seed_catalog(db)

        assert {n: r.id for n, r in first.items()} == {n: r.id for n, r in second.items()}
        total = (await db.execute(select(func.count()).select_from(Permission))).scalar_one()
        assert total == 10


class TestSeedAccounts:
    """Tests for the demo scenario."""

    async def test_cashier_permissions(self, db: AsyncSession):
        roles = await seed_catalog(db)
        accounts = await seed_accounts(db, roles)

        cashier = next(a for a in accounts if a.email == "cashier@example.com")
        assert verify_password(DEMO_PASSWORD, cashier.password_hash)

        permissions = await PermissionChecker(db).effective_permissions(cashier.id)
        assert permissions == ["/create-sale", "/view-inventory"]

    async def test_admin_holds_everything(self, db: AsyncSession):
        roles = await seed_catalog(db)
        accounts = await seed_accounts(db, roles)

        admin = next(a for a in accounts if a.email == "admin@example.com")
        permissions = await PermissionChecker(db).effective_permissions(admin.id)
        assert len(permissions) == 10
