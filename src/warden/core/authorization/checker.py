"""Effective permission resolution.

An account's effective permissions are the distinct permission urls
reachable through its roles: account -> account_roles -> role_permissions
-> permissions.
"""

from typing import Annotated, Protocol

from fastapi import Depends
from sqlalchemy import select

from warden.api.dependencies import DBSession
from warden.modules.accounts.models import AccountRole
from warden.modules.permissions.models import Permission
from warden.modules.roles.models import RolePermission


class PermissionResolver(Protocol):
    async def effective_permissions(self, account_id: str) -> list[str]: ...


class PermissionChecker:
    """Service for resolving and checking account permissions."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def effective_permissions(self, account_id: str) -> list[str]:
        """Get the union of permission urls over all roles of an account.

        Args:
            account_id: The account's ULID

        Returns:
            Distinct permission urls ordered by url; empty when the
            account holds no roles
        """
        stmt = (
            select(Permission.url)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(AccountRole, AccountRole.role_id == RolePermission.role_id)
            .where(AccountRole.account_id == account_id)
            .distinct()
            .order_by(Permission.url)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


# Type alias for dependency injection
Permissions = Annotated[PermissionResolver, Depends(PermissionChecker)]
