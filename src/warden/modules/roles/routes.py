"""Role API routes."""

from fastapi import APIRouter, status

from warden.core.auth.dependencies import CurrentClaims
from warden.modules.permissions.schemas import PermissionResponse
from warden.modules.roles.schemas import (
    PermissionRolesResponse,
    RoleCreate,
    RoleListResponse,
    RolePermissionRequest,
    RolePermissionResponse,
    RolePermissionsResponse,
    RoleResponse,
    RoleUpdate,
)
from warden.modules.roles.services import RolePermissionSvc, RoleSvc


router = APIRouter()

roles_router = APIRouter(prefix="/roles", tags=["roles"])
role_permissions_router = APIRouter(prefix="/role-permissions", tags=["role-permissions"])


# ============================================================
# Role Routes
# ============================================================


@roles_router.get(
    "",
    response_model=RoleListResponse,
    summary="List roles",
)
async def list_roles(
    service: RoleSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> RoleListResponse:
    """List all roles."""
    roles, total = await service.list_roles()
    return RoleListResponse(
        items=[RoleResponse.model_validate(r) for r in roles],
        total=total,
    )


@roles_router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
)
async def create_role(
    data: RoleCreate,
    service: RoleSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> RoleResponse:
    """Create a role."""
    role = await service.create_role(data)
    return RoleResponse.model_validate(role)


@roles_router.get(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Get role by ID",
)
async def get_role(
    role_id: str,
    service: RoleSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> RoleResponse:
    """Get role by ID."""
    role = await service.get_role(role_id)
    return RoleResponse.model_validate(role)


@roles_router.patch(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Update role",
)
async def update_role(
    role_id: str,
    data: RoleUpdate,
    service: RoleSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> RoleResponse:
    """Update a role."""
    role = await service.edit_role(role_id, data)
    return RoleResponse.model_validate(role)


@roles_router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete role",
    description=(
        "Delete a role and its permission and account assignments. "
        "Accounts that held the role are logged out."
    ),
)
async def delete_role(
    role_id: str,
    service: RoleSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> None:
    """Delete a role."""
    await service.delete_role(role_id)


# ============================================================
# Role-Permission Routes
# ============================================================


@role_permissions_router.post(
    "",
    response_model=RolePermissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign permission to role",
    description="Accounts holding the role are logged out so their grant is regenerated.",
)
async def assign_permission(
    data: RolePermissionRequest,
    service: RolePermissionSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> RolePermissionResponse:
    """Assign a permission to a role."""
    association = await service.assign_permission(data.role_id, data.permission_id)
    return RolePermissionResponse.model_validate(association)


@role_permissions_router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove permission from role",
    description="Accounts holding the role are logged out so their grant is regenerated.",
)
async def remove_permission(
    data: RolePermissionRequest,
    service: RolePermissionSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> None:
    """Remove a permission from a role."""
    await service.remove_permission(data.role_id, data.permission_id)


@role_permissions_router.get(
    "/{role_id}/permissions",
    response_model=RolePermissionsResponse,
    summary="List permissions of a role",
)
async def get_role_permissions(
    role_id: str,
    service: RolePermissionSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> RolePermissionsResponse:
    """List the permissions bundled in a role."""
    permissions, total = await service.get_permissions(role_id)
    return RolePermissionsResponse(
        role_id=role_id,
        items=[PermissionResponse.model_validate(p) for p in permissions],
        total=total,
    )


@role_permissions_router.get(
    "/{permission_id}/roles",
    response_model=PermissionRolesResponse,
    summary="List roles including a permission",
)
async def get_permission_roles(
    permission_id: str,
    service: RolePermissionSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> PermissionRolesResponse:
    """List the roles that include a permission."""
    roles, total = await service.get_roles(permission_id)
    return PermissionRolesResponse(
        permission_id=permission_id,
        items=[RoleResponse.model_validate(r) for r in roles],
        total=total,
    )


router.include_router(roles_router)
router.include_router(role_permissions_router)
