"""Pydantic schemas for permission operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from warden.core.constants import (
    GRANT_DELIMITER,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_URL_LENGTH,
)


def validate_permission_url(url: str) -> str:
    """Strip a url and reject values that cannot be a grant entry.

    Raises:
        ValueError: If the url is blank or contains the grant delimiter
    """
    url = url.strip()
    if not url:
        raise ValueError("Permission url must not be blank")
    if GRANT_DELIMITER in url:
        raise ValueError(f"Permission url must not contain '{GRANT_DELIMITER}'")
    return url


class PermissionCreate(BaseModel):
    """Schema for creating a permission.

    The url is the action slug checked by the permission gate,
    e.g. ``/manage-inventory``.
    """

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: str = Field("", max_length=MAX_DESCRIPTION_LENGTH)
    url: str = Field(..., min_length=1, max_length=MAX_URL_LENGTH)

    @field_validator("url")
    @classmethod
    def url_is_grant_safe(cls, v: str) -> str:
        """Validate the url can be carried in a grant."""
        return validate_permission_url(v)


class PermissionUpdate(BaseModel):
    """Schema for editing a permission; omitted fields are left untouched."""

    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    url: str | None = Field(None, min_length=1, max_length=MAX_URL_LENGTH)

    @field_validator("url")
    @classmethod
    def url_is_grant_safe(cls, v: str | None) -> str | None:
        """Validate the url can be carried in a grant."""
        return validate_permission_url(v) if v is not None else v


class PermissionResponse(BaseModel):
    """Schema for permission response data."""

    id: str
    name: str
    description: str
    url: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PermissionListResponse(BaseModel):
    """Schema for listing permissions."""

    items: list[PermissionResponse]
    total: int
