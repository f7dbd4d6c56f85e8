"""Integration tests for repositories and permission resolution."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import AccountFactory, PermissionFactory, RefreshTokenFactory, RoleFactory
from warden.core.authorization.checker import PermissionChecker
from warden.core.errors import AlreadyAssignedError, AlreadyExistsError, DuplicateEmailError
from warden.modules.accounts.models import Account, AccountRole
from warden.modules.accounts.repos import (
    AccountRepository,
    AccountRoleRepository,
    RefreshTokenRepository,
)
from warden.modules.permissions.repos import PermissionRepository
from warden.modules.roles.models import RolePermission
from warden.modules.roles.repos import RolePermissionRepository


pytestmark = pytest.mark.integration


class TestEffectivePermissions:
    """Tests for PermissionChecker.effective_permissions."""

    async def test_union_over_roles(self, db: AsyncSession, account: Account):
        """Overlapping roles contribute each permission once."""
        a, b, c = (PermissionFactory.build(url=u) for u in ("/a", "/b", "/c"))
        first, second = RoleFactory.build(), RoleFactory.build()
        db.add_all([a, b, c, first, second])
        await db.flush()

        db.add_all(
            [
                RolePermission(role_id=first.id, permission_id=a.id),
                RolePermission(role_id=first.id, permission_id=b.id),
                RolePermission(role_id=second.id, permission_id=b.id),
                RolePermission(role_id=second.id, permission_id=c.id),
                AccountRole(account_id=account.id, role_id=first.id),
                AccountRole(account_id=account.id, role_id=second.id),
            ]
        )
        await db.flush()

        permissions = await PermissionChecker(db).effective_permissions(account.id)

        assert permissions == ["/a", "/b", "/c"]

    async def test_no_roles(self, db: AsyncSession, account: Account):
        """An account without roles has no permissions."""
        assert await PermissionChecker(db).effective_permissions(account.id) == []

    async def test_other_accounts_roles_ignored(
        self, db: AsyncSession, account: Account, grant_role
    ):
        """Only the account's own roles count."""
        other = AccountFactory.build()
        db.add(other)
        await db.flush()
        await grant_role(other, ["/access-settings"])

        assert await PermissionChecker(db).effective_permissions(account.id) == []


class TestRefreshTokenRepository:
    """Tests for session liveness."""

    async def test_live_token_found(self, db: AsyncSession, account: Account):
        token = RefreshTokenFactory.build(account_id=account.id)
        db.add(token)
        await db.flush()

        repo = RefreshTokenRepository(db)

        assert await repo.find_live_by_token(token.token_value) is not None
        assert await repo.find_live_by_id(token.id) is not None
        assert await repo.find_live_by_account(account.id) is not None

    async def test_expired_token_is_not_live(self, db: AsyncSession, account: Account):
        """Expired tokens are filtered out on read; nothing reaps them."""
        token = RefreshTokenFactory.build(
            account_id=account.id,
            expires_at=datetime.now(UTC) - timedelta(seconds=1),
        )
        db.add(token)
        await db.flush()

        repo = RefreshTokenRepository(db)

        assert await repo.find_live_by_token(token.token_value) is None
        assert await repo.find_live_by_id(token.id) is None
        assert await repo.find_live_by_account(account.id) is None

    async def test_revoked_token_is_not_live(self, db: AsyncSession, account: Account):
        token = RefreshTokenFactory.build(account_id=account.id)
        db.add(token)
        await db.flush()

        repo = RefreshTokenRepository(db)
        await repo.revoke(token)

        assert await repo.find_live_by_token(token.token_value) is None

    async def test_revoke_all_for_accounts(self, db: AsyncSession, account: Account):
        """Bulk revocation only touches the listed accounts."""
        other = AccountFactory.build()
        db.add(other)
        await db.flush()
        mine = RefreshTokenFactory.build(account_id=account.id)
        theirs = RefreshTokenFactory.build(account_id=other.id)
        db.add_all([mine, theirs])
        await db.flush()

        repo = RefreshTokenRepository(db)

        assert await repo.revoke_all_for_accounts([account.id]) == 1
        assert await repo.find_live_by_account(account.id) is None
        assert await repo.find_live_by_account(other.id) is not None

    async def test_revoke_all_for_no_accounts(self, db: AsyncSession):
        assert await RefreshTokenRepository(db).revoke_all_for_accounts([]) == 0


class TestUniqueConstraints:
    """The database rejects duplicates even when a pre-check is skipped."""

    async def test_duplicate_email(self, db: AsyncSession, account: Account):
        db.expunge_all()
        duplicate = AccountFactory.build(email=account.email)

        with pytest.raises(DuplicateEmailError):
            await AccountRepository(db).save(duplicate)

    async def test_duplicate_permission_url(self, db: AsyncSession):
        db.add(PermissionFactory.build(url="/create-sale"))
        await db.flush()
        db.expunge_all()

        with pytest.raises(AlreadyExistsError):
            await PermissionRepository(db).save(PermissionFactory.build(url="/create-sale"))

    async def test_duplicate_account_role(self, db: AsyncSession, account: Account):
        role = RoleFactory.build()
        db.add(role)
        await db.flush()
        repo = AccountRoleRepository(db)
        await repo.assign(account.id, role.id)
        db.expunge_all()

        with pytest.raises(AlreadyAssignedError):
            await repo.assign(account.id, role.id)

    async def test_duplicate_role_permission(self, db: AsyncSession):
        role = RoleFactory.build()
        permission = PermissionFactory.build()
        db.add_all([role, permission])
        await db.flush()
        repo = RolePermissionRepository(db)
        await repo.assign(role.id, permission.id)
        db.expunge_all()

        with pytest.raises(AlreadyAssignedError):
            await repo.assign(role.id, permission.id)


class TestAssociationQueries:
    """Tests for graph lookups in both directions."""

    async def test_fetch_by_account_and_role(
        self, db: AsyncSession, account: Account, grant_role
    ):
        role, _ = await grant_role(account, ["/create-sale"])
        repo = AccountRoleRepository(db)

        roles, total = await repo.fetch_by_account(account.id)
        assert total == 1
        assert roles[0].id == role.id

        accounts, total = await repo.fetch_by_role(role.id)
        assert total == 1
        assert accounts[0].id == account.id

    async def test_account_ids_for_permission(
        self, db: AsyncSession, account: Account, grant_role
    ):
        """An account reaching a permission through two roles is listed once."""
        _, (permission,) = await grant_role(account, ["/create-sale"])
        second = RoleFactory.build()
        db.add(second)
        await db.flush()
        db.add_all(
            [
                RolePermission(role_id=second.id, permission_id=permission.id),
                AccountRole(account_id=account.id, role_id=second.id),
            ]
        )
        await db.flush()

        ids = await RolePermissionRepository(db).account_ids_for_permission(permission.id)

        assert ids == [account.id]
