"""Permission service for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from warden.core.errors import AlreadyExistsError, NotFoundError
from warden.modules.accounts.repos import SessionWrite, SessionWriter
from warden.modules.permissions.models import Permission
from warden.modules.permissions.repos import (
    PermissionRead,
    PermissionReader,
    PermissionWrite,
    PermissionWriter,
)
from warden.modules.permissions.schemas import PermissionCreate, PermissionUpdate
from warden.modules.roles.repos import (
    RolePermissionRead,
    RolePermissionReader,
    RolePermissionWrite,
    RolePermissionWriter,
)


logger = structlog.get_logger()


class PermissionService:
    """Service for permission catalog operations."""

    def __init__(
        self,
        reader: PermissionRead,
        writer: PermissionWrite,
        role_permission_reader: RolePermissionRead,
        role_permission_writer: RolePermissionWrite,
        sessions: SessionWrite,
    ) -> None:
        self.reader: PermissionReader = reader
        self.writer: PermissionWriter = writer
        self.role_permission_reader: RolePermissionReader = role_permission_reader
        self.role_permission_writer: RolePermissionWriter = role_permission_writer
        self.sessions: SessionWriter = sessions

    async def create_permission(self, data: PermissionCreate) -> Permission:
        """Create a new permission.

        Raises:
            AlreadyExistsError: If the url is already taken
        """
        if await self.reader.find_by_url(data.url):
            raise AlreadyExistsError(
                "Permission url already exists",
                details={"url": data.url},
            )

        permission = Permission(
            name=data.name,
            description=data.description,
            url=data.url,
        )
        permission = await self.writer.save(permission)
        logger.info("permission_created", permission_id=permission.id, url=permission.url)
        return permission

    async def get_permission(self, permission_id: str) -> Permission:
        """Get a permission by ID.

        Raises:
            NotFoundError: If the permission does not exist
        """
        permission = await self.reader.find_by_id(permission_id)
        if not permission:
            raise NotFoundError(
                "Permission not found",
                resource="permission",
                resource_id=permission_id,
            )
        return permission

    async def list_permissions(self) -> tuple[list[Permission], int]:
        return await self.reader.list_all()

    async def edit_permission(
        self,
        permission_id: str,
        data: PermissionUpdate,
    ) -> Permission:
        """Update name, description and url of a permission.

        Raises:
            NotFoundError: If the permission does not exist
            AlreadyExistsError: If the new url belongs to another permission
        """
        permission = await self.get_permission(permission_id)

        if data.url is not None and data.url != permission.url:
            existing = await self.reader.find_by_url(data.url)
            if existing and existing.id != permission.id:
                raise AlreadyExistsError(
                    "Permission url already exists",
                    details={"url": data.url},
                )
            permission.url = data.url
        if data.name is not None:
            permission.name = data.name
        if data.description is not None:
            permission.description = data.description

        return await self.writer.save(permission)

    async def delete_permission(self, permission_id: str) -> None:
        """Delete a permission and its role associations.

        Accounts that reached the permission through a role lose their
        sessions, since their grants still list it.

        Raises:
            NotFoundError: If the permission does not exist
        """
        permission = await self.get_permission(permission_id)

        affected = await self.role_permission_reader.account_ids_for_permission(
            permission_id
        )
        await self.role_permission_writer.remove_all_for_permission(permission_id)
        await self.writer.delete(permission)
        revoked = await self.sessions.revoke_all_for_accounts(affected)

        logger.info(
            "permission_deleted",
            permission_id=permission_id,
            sessions_revoked=revoked,
        )


# Type alias for dependency injection
PermissionSvc = Annotated[PermissionService, Depends(PermissionService)]
