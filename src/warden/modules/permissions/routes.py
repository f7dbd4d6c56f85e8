"""Permission API routes."""

from fastapi import APIRouter, status

from warden.core.auth.dependencies import CurrentClaims
from warden.modules.permissions.schemas import (
    PermissionCreate,
    PermissionListResponse,
    PermissionResponse,
    PermissionUpdate,
)
from warden.modules.permissions.services import PermissionSvc


router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get(
    "",
    response_model=PermissionListResponse,
    summary="List permissions",
)
async def list_permissions(
    service: PermissionSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> PermissionListResponse:
    """List all permissions."""
    permissions, total = await service.list_permissions()
    return PermissionListResponse(
        items=[PermissionResponse.model_validate(p) for p in permissions],
        total=total,
    )


@router.post(
    "",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create permission",
)
async def create_permission(
    data: PermissionCreate,
    service: PermissionSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> PermissionResponse:
    """Create a permission."""
    permission = await service.create_permission(data)
    return PermissionResponse.model_validate(permission)


@router.get(
    "/{permission_id}",
    response_model=PermissionResponse,
    summary="Get permission by ID",
)
async def get_permission(
    permission_id: str,
    service: PermissionSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> PermissionResponse:
    """Get permission by ID."""
    permission = await service.get_permission(permission_id)
    return PermissionResponse.model_validate(permission)


@router.patch(
    "/{permission_id}",
    response_model=PermissionResponse,
    summary="Update permission",
)
async def update_permission(
    permission_id: str,
    data: PermissionUpdate,
    service: PermissionSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> PermissionResponse:
    """Update a permission."""
    permission = await service.edit_permission(permission_id, data)
    return PermissionResponse.model_validate(permission)


@router.delete(
    "/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete permission",
    description="Delete a permission and remove it from every role.",
)
async def delete_permission(
    permission_id: str,
    service: PermissionSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> None:
    """Delete a permission."""
    await service.delete_permission(permission_id)
