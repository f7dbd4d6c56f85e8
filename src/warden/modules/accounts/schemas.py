"""Pydantic schemas for account operations."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from warden.core.constants import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from warden.modules.roles.schemas import RoleResponse


# ============================================================
# Account Schemas
# ============================================================


class AccountCreate(BaseModel):
    """Schema for registering a new account."""

    email: EmailStr
    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )


class AccountPasswordUpdate(BaseModel):
    """Schema for replacing an account's password."""

    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )


class AccountResponse(BaseModel):
    """Public view of an account.

    Only the id and email are exposed; the password hash never leaves
    the service.
    """

    id: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class AccountListResponse(BaseModel):
    """Schema for listing accounts."""

    items: list[AccountResponse]
    total: int


# ============================================================
# Account-Role Schemas
# ============================================================


class AccountRoleRequest(BaseModel):
    """Schema for assigning or removing a role on an account."""

    account_id: str = Field(..., min_length=1)
    role_id: str = Field(..., min_length=1)


class AccountRoleResponse(BaseModel):
    """An account-role association."""

    account_id: str
    role_id: str

    model_config = ConfigDict(from_attributes=True)


class AccountRolesResponse(BaseModel):
    """Roles held by an account."""

    account_id: str
    items: list[RoleResponse]
    total: int


class RoleAccountsResponse(BaseModel):
    """Accounts holding a role."""

    role_id: str
    items: list[AccountResponse]
    total: int
