"""Authentication schemas for token handling."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from warden.core.constants import TOKEN_SCOPE, TOKEN_TYPE


class TokenClaims(BaseModel):
    """Data extracted from an access token.

    Attributes:
        account_id: The account's ULID (the ``sub`` claim)
        email: The account's email
        exp: Token expiration time
        session_id: Id of the refresh token the access token was minted for
    """

    account_id: str
    email: str
    exp: datetime
    session_id: str | None = None


class LoginBundle(BaseModel):
    """Everything handed back by a successful login.

    Attributes:
        access_token: Short-lived JWT for API access
        refresh_token: Opaque token for minting new access tokens
        token_type: Always "Bearer"
        expired_at: When the session (refresh token) expires
        scope: Token scope
        permissions: Effective permission urls of the account
        count: Number of effective permissions
    """

    access_token: str
    refresh_token: str
    token_type: str = TOKEN_TYPE
    expired_at: datetime
    scope: str = TOKEN_SCOPE
    permissions: list[str]
    count: int


class AccessToken(BaseModel):
    """A freshly minted access token."""

    access_token: str
    token_type: str = TOKEN_TYPE
    expired_at: datetime
    scope: str = TOKEN_SCOPE


# ============================================================
# Request / Response Schemas
# ============================================================


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    """Schema for exchanging a refresh token for a new access token.

    The expired access token goes in the Authorization header.
    """

    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(BaseModel):
    """Schema for ending a session."""

    refresh_token: str = Field(..., min_length=1)


class PermissionListResponse(BaseModel):
    """Effective permissions of the current account."""

    items: list[str]
    total: int
