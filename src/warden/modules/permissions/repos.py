"""Permission repository for database operations."""

from typing import Annotated, Protocol

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from warden.api.dependencies import DBSession
from warden.core.database.integrity import is_unique_violation
from warden.core.errors import AlreadyExistsError
from warden.modules.permissions.models import Permission


class PermissionReader(Protocol):
    async def find_by_id(self, permission_id: str) -> Permission | None: ...

    async def find_by_url(self, url: str) -> Permission | None: ...

    async def list_all(self) -> tuple[list[Permission], int]: ...


class PermissionWriter(Protocol):
    async def save(self, permission: Permission) -> Permission: ...

    async def delete(self, permission: Permission) -> None: ...


class PermissionRepository:
    """Repository for Permission database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def save(self, permission: Permission) -> Permission:
        """Insert a new permission or flush edits to an existing one.

        Raises:
            AlreadyExistsError: If another permission already uses the url
        """
        self.session.add(permission)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise AlreadyExistsError(
                    "Permission url already exists",
                    details={"url": permission.url},
                ) from exc
            raise
        await self.session.refresh(permission)
        return permission

    async def delete(self, permission: Permission) -> None:
        await self.session.delete(permission)
        await self.session.flush()

    async def find_by_id(self, permission_id: str) -> Permission | None:
        return await self.session.get(Permission, permission_id)

    async def find_by_url(self, url: str) -> Permission | None:
        result = await self.session.execute(
            select(Permission).where(Permission.url == url)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> tuple[list[Permission], int]:
        """List all permissions ordered by id.

        Returns:
            Tuple of (permissions list, total count)
        """
        count_result = await self.session.execute(
            select(func.count()).select_from(Permission)
        )
        total = count_result.scalar_one()
        if total == 0:
            return [], 0

        result = await self.session.execute(select(Permission).order_by(Permission.id))
        return list(result.scalars().all()), total


# Type aliases for dependency injection
PermissionRead = Annotated[PermissionReader, Depends(PermissionRepository)]
PermissionWrite = Annotated[PermissionWriter, Depends(PermissionRepository)]
