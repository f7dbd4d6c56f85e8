"""Role repositories for database operations."""

from typing import Annotated, Protocol

import structlog
from fastapi import Depends
from sqlalchemy import delete, distinct, func, select
from sqlalchemy.exc import IntegrityError

from warden.api.dependencies import DBSession
from warden.core.database.integrity import is_unique_violation
from warden.core.errors import AlreadyAssignedError
from warden.modules.accounts.models import AccountRole
from warden.modules.permissions.models import Permission
from warden.modules.roles.models import Role, RolePermission


logger = structlog.get_logger()


# ============================================================
# Capability protocols
# ============================================================


class RoleReader(Protocol):
    async def find_by_id(self, role_id: str) -> Role | None: ...

    async def list_all(self) -> tuple[list[Role], int]: ...


class RoleWriter(Protocol):
    async def save(self, role: Role) -> Role: ...

    async def delete(self, role: Role) -> None: ...


class RolePermissionReader(Protocol):
    async def fetch_by_role(self, role_id: str) -> tuple[list[Permission], int]: ...

    async def fetch_by_permission(self, permission_id: str) -> tuple[list[Role], int]: ...

    async def find(self, role_id: str, permission_id: str) -> RolePermission | None: ...

    async def account_ids_for_permission(self, permission_id: str) -> list[str]: ...


class RolePermissionWriter(Protocol):
    async def assign(self, role_id: str, permission_id: str) -> RolePermission: ...

    async def remove(self, association: RolePermission) -> None: ...

    async def remove_all_for_role(self, role_id: str) -> int: ...

    async def remove_all_for_permission(self, permission_id: str) -> int: ...


# ============================================================
# Repositories
# ============================================================


class RoleRepository:
    """Repository for Role database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def save(self, role: Role) -> Role:
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def delete(self, role: Role) -> None:
        await self.session.delete(role)
        await self.session.flush()

    async def find_by_id(self, role_id: str) -> Role | None:
        return await self.session.get(Role, role_id)

    async def list_all(self) -> tuple[list[Role], int]:
        """List all roles ordered by id.

        Returns:
            Tuple of (roles list, total count)
        """
        count_result = await self.session.execute(select(func.count()).select_from(Role))
        total = count_result.scalar_one()
        if total == 0:
            return [], 0

        result = await self.session.execute(select(Role).order_by(Role.id))
        roles = list(result.scalars().all())
        logger.debug("roles_listed", count=total)
        return roles, total


class RolePermissionRepository:
    """Repository for the role <-> permission association."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def fetch_by_role(self, role_id: str) -> tuple[list[Permission], int]:
        """Get all permissions bundled in a role.

        Returns:
            Tuple of (permissions list, total count)
        """
        stmt = (
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.id)
        )
        result = await self.session.execute(stmt)
        permissions = list(result.scalars().all())
        return permissions, len(permissions)

    async def fetch_by_permission(self, permission_id: str) -> tuple[list[Role], int]:
        """Get all roles that include a permission.

        Returns:
            Tuple of (roles list, total count)
        """
        stmt = (
            select(Role)
            .join(RolePermission, RolePermission.role_id == Role.id)
            .where(RolePermission.permission_id == permission_id)
            .order_by(Role.id)
        )
        result = await self.session.execute(stmt)
        roles = list(result.scalars().all())
        return roles, len(roles)

    async def find(self, role_id: str, permission_id: str) -> RolePermission | None:
        result = await self.session.execute(
            select(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        return result.scalar_one_or_none()

    async def account_ids_for_permission(self, permission_id: str) -> list[str]:
        """Accounts that reach a permission through any of their roles."""
        stmt = (
            select(distinct(AccountRole.account_id))
            .join(RolePermission, RolePermission.role_id == AccountRole.role_id)
            .where(RolePermission.permission_id == permission_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def assign(self, role_id: str, permission_id: str) -> RolePermission:
        """Create the association.

        Raises:
            AlreadyAssignedError: If the pair already exists
        """
        association = RolePermission(role_id=role_id, permission_id=permission_id)
        self.session.add(association)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise AlreadyAssignedError(
                    "Permission already assigned to role",
                    details={"role_id": role_id, "permission_id": permission_id},
                ) from exc
            raise
        return association

    async def remove(self, association: RolePermission) -> None:
        await self.session.delete(association)
        await self.session.flush()

    async def remove_all_for_role(self, role_id: str) -> int:
        result = await self.session.execute(
            delete(RolePermission).where(RolePermission.role_id == role_id)
        )
        return result.rowcount

    async def remove_all_for_permission(self, permission_id: str) -> int:
        result = await self.session.execute(
            delete(RolePermission).where(RolePermission.permission_id == permission_id)
        )
        return result.rowcount


# Type aliases for dependency injection
RoleRead = Annotated[RoleReader, Depends(RoleRepository)]
RoleWrite = Annotated[RoleWriter, Depends(RoleRepository)]
RolePermissionRead = Annotated[RolePermissionReader, Depends(RolePermissionRepository)]
RolePermissionWrite = Annotated[RolePermissionWriter, Depends(RolePermissionRepository)]
