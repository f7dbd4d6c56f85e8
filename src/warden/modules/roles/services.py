"""Role services for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from warden.core.errors import AlreadyAssignedError, NotFoundError
from warden.modules.accounts.repos import (
    AccountRoleRead,
    AccountRoleReader,
    AccountRoleWrite,
    AccountRoleWriter,
    SessionWrite,
    SessionWriter,
)
from warden.modules.permissions.models import Permission
from warden.modules.permissions.repos import PermissionRead, PermissionReader
from warden.modules.roles.models import Role, RolePermission
from warden.modules.roles.repos import (
    RolePermissionRead,
    RolePermissionReader,
    RolePermissionWrite,
    RolePermissionWriter,
    RoleRead,
    RoleReader,
    RoleWrite,
    RoleWriter,
)
from warden.modules.roles.schemas import RoleCreate, RoleUpdate


logger = structlog.get_logger()


class RoleService:
    """Service for role catalog operations."""

    def __init__(
        self,
        reader: RoleRead,
        writer: RoleWrite,
        role_permission_writer: RolePermissionWrite,
        account_role_reader: AccountRoleRead,
        account_role_writer: AccountRoleWrite,
        sessions: SessionWrite,
    ) -> None:
        self.reader: RoleReader = reader
        self.writer: RoleWriter = writer
        self.role_permission_writer: RolePermissionWriter = role_permission_writer
        self.account_role_reader: AccountRoleReader = account_role_reader
        self.account_role_writer: AccountRoleWriter = account_role_writer
        self.sessions: SessionWriter = sessions

    async def create_role(self, data: RoleCreate) -> Role:
        role = Role(name=data.name, description=data.description)
        role = await self.writer.save(role)
        logger.info("role_created", role_id=role.id, name=role.name)
        return role

    async def get_role(self, role_id: str) -> Role:
        """Get a role by ID.

        Raises:
            NotFoundError: If the role does not exist
        """
        role = await self.reader.find_by_id(role_id)
        if not role:
            raise NotFoundError("Role not found", resource="role", resource_id=role_id)
        return role

    async def list_roles(self) -> tuple[list[Role], int]:
        return await self.reader.list_all()

    async def edit_role(self, role_id: str, data: RoleUpdate) -> Role:
        """Update name and description of a role.

        Raises:
            NotFoundError: If the role does not exist
        """
        role = await self.get_role(role_id)
        if data.name is not None:
            role.name = data.name
        if data.description is not None:
            role.description = data.description
        return await self.writer.save(role)

    async def delete_role(self, role_id: str) -> None:
        """Delete a role together with both of its association sets.

        Accounts that held the role lose their sessions.

        Raises:
            NotFoundError: If the role does not exist
        """
        role = await self.get_role(role_id)

        affected = await self.account_role_reader.account_ids_for_role(role_id)
        await self.role_permission_writer.remove_all_for_role(role_id)
        await self.account_role_writer.remove_all_for_role(role_id)
        await self.writer.delete(role)
        revoked = await self.sessions.revoke_all_for_accounts(affected)

        logger.info("role_deleted", role_id=role_id, sessions_revoked=revoked)


class RolePermissionService:
    """Service for the role <-> permission graph.

    Every change revokes the sessions of all accounts holding the role,
    so their next login carries a regenerated grant.
    """

    def __init__(
        self,
        roles: RoleRead,
        permissions: PermissionRead,
        reader: RolePermissionRead,
        writer: RolePermissionWrite,
        account_roles: AccountRoleRead,
        sessions: SessionWrite,
    ) -> None:
        self.roles: RoleReader = roles
        self.permissions: PermissionReader = permissions
        self.reader: RolePermissionReader = reader
        self.writer: RolePermissionWriter = writer
        self.account_roles: AccountRoleReader = account_roles
        self.sessions: SessionWriter = sessions

    async def _ensure_exists(self, role_id: str, permission_id: str) -> None:
        if not await self.roles.find_by_id(role_id):
            raise NotFoundError("Role not found", resource="role", resource_id=role_id)
        if not await self.permissions.find_by_id(permission_id):
            raise NotFoundError(
                "Permission not found",
                resource="permission",
                resource_id=permission_id,
            )

    async def _revoke_role_holders(self, role_id: str) -> int:
        account_ids = await self.account_roles.account_ids_for_role(role_id)
        revoked = await self.sessions.revoke_all_for_accounts(account_ids)
        if revoked:
            logger.info(
                "sessions_revoked",
                reason="role_permissions_changed",
                role_id=role_id,
                account_ids=account_ids,
                count=revoked,
            )
        return revoked

    async def get_permissions(self, role_id: str) -> tuple[list[Permission], int]:
        """Get the permissions bundled in a role."""
        return await self.reader.fetch_by_role(role_id)

    async def get_roles(self, permission_id: str) -> tuple[list[Role], int]:
        """Get the roles that include a permission."""
        return await self.reader.fetch_by_permission(permission_id)

    async def find(self, role_id: str, permission_id: str) -> RolePermission:
        """Get an association.

        Raises:
            NotFoundError: If the role does not hold the permission
        """
        association = await self.reader.find(role_id, permission_id)
        if not association:
            raise NotFoundError(
                "Permission not assigned to role",
                resource="role_permission",
                details={"role_id": role_id, "permission_id": permission_id},
            )
        return association

    async def assign_permission(self, role_id: str, permission_id: str) -> RolePermission:
        """Add a permission to a role.

        Raises:
            NotFoundError: If the role or permission does not exist
            AlreadyAssignedError: If the role already holds the permission
        """
        await self._ensure_exists(role_id, permission_id)

        if await self.reader.find(role_id, permission_id):
            raise AlreadyAssignedError(
                "Permission already assigned to role",
                details={"role_id": role_id, "permission_id": permission_id},
            )

        association = await self.writer.assign(role_id, permission_id)
        await self._revoke_role_holders(role_id)
        logger.info("permission_assigned", role_id=role_id, permission_id=permission_id)
        return association

    async def remove_permission(self, role_id: str, permission_id: str) -> None:
        """Take a permission away from a role.

        Raises:
            NotFoundError: If the role does not hold the permission
        """
        association = await self.find(role_id, permission_id)
        await self.writer.remove(association)
        await self._revoke_role_holders(role_id)
        logger.info("permission_removed", role_id=role_id, permission_id=permission_id)


# Type aliases for dependency injection
RoleSvc = Annotated[RoleService, Depends(RoleService)]
RolePermissionSvc = Annotated[RolePermissionService, Depends(RolePermissionService)]
