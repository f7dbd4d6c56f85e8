"""Pydantic schemas for role operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from warden.core.constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH
from warden.modules.permissions.schemas import PermissionResponse


class RoleCreate(BaseModel):
    """Schema for creating a role."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: str = Field("", max_length=MAX_DESCRIPTION_LENGTH)


class RoleUpdate(BaseModel):
    """Schema for editing a role; omitted fields are left untouched."""

    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


class RoleResponse(BaseModel):
    """Schema for role response data."""

    id: str
    name: str
    description: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoleListResponse(BaseModel):
    """Schema for listing roles."""

    items: list[RoleResponse]
    total: int


# ============================================================
# Role-Permission Schemas
# ============================================================


class RolePermissionRequest(BaseModel):
    """Schema for assigning or removing a permission on a role."""

    role_id: str = Field(..., min_length=1)
    permission_id: str = Field(..., min_length=1)


class RolePermissionResponse(BaseModel):
    """A role-permission association."""

    role_id: str
    permission_id: str

    model_config = ConfigDict(from_attributes=True)


class RolePermissionsResponse(BaseModel):
    """Permissions bundled in a role."""

    role_id: str
    items: list[PermissionResponse]
    total: int


class PermissionRolesResponse(BaseModel):
    """Roles that include a permission."""

    permission_id: str
    items: list[RoleResponse]
    total: int
