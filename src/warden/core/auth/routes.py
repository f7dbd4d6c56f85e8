"""Authentication API routes.

Provides endpoints for:
- Login/logout (with the permission grant cookie)
- Access token refresh
- The current account and its permissions
"""

from fastapi import APIRouter, Response, status

from warden.api.dependencies import AppSettings
from warden.config import Settings
from warden.core.auth.dependencies import CurrentAccount, RefreshableClaims
from warden.core.auth.schemas import (
    AccessToken,
    LoginBundle,
    LoginRequest,
    LogoutRequest,
    PermissionListResponse,
    RefreshTokenRequest,
)
from warden.core.auth.service import SessionMgr
from warden.core.authorization.checker import Permissions
from warden.core.authorization.grant import encode_grant
from warden.modules.accounts.schemas import AccountResponse


router = APIRouter(prefix="/auth", tags=["auth"])


def _set_grant_cookie(
    response: Response, settings: Settings, permissions: list[str]
) -> None:
    response.set_cookie(
        key=settings.grant_cookie_name,
        value=encode_grant(permissions),
        max_age=settings.refresh_token_expire_days * 24 * 3600,
        path="/",
        httponly=True,
        secure=settings.grant_cookie_secure,
        samesite="lax",
    )


def _clear_grant_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.grant_cookie_name,
        path="/",
        httponly=True,
        secure=settings.grant_cookie_secure,
        samesite="lax",
    )


@router.post(
    "/login",
    response_model=LoginBundle,
    summary="Login with email and password",
    description=(
        "Authenticate with email and password to receive access and refresh "
        "tokens. The effective permissions are also set as an encoded cookie."
    ),
)
async def login(
    data: LoginRequest,
    service: SessionMgr,
    settings: AppSettings,
    response: Response,
) -> LoginBundle:
    """Login with email and password."""
    bundle = await service.login(email=data.email, password=data.password)
    _set_grant_cookie(response, settings, bundle.permissions)
    return bundle


@router.post(
    "/request-token",
    response_model=AccessToken,
    summary="Refresh access token",
    description=(
        "Exchange a live refresh token for a new access token. The previous "
        "access token goes in the Authorization header and may be expired."
    ),
)
async def request_token(
    data: RefreshTokenRequest,
    claims: RefreshableClaims,
    service: SessionMgr,
) -> AccessToken:
    """Refresh the access token."""
    return await service.refresh(
        refresh_token=data.refresh_token,
        account_id=claims.account_id,
        email=claims.email,
    )


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout",
    description="Revoke the refresh token and clear the permission cookie.",
)
async def logout(
    data: LogoutRequest,
    service: SessionMgr,
    settings: AppSettings,
    response: Response,
) -> None:
    """Logout by revoking the refresh token."""
    await service.logout(data.refresh_token)
    _clear_grant_cookie(response, settings)


@router.post(
    "/logout-all",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke all sessions",
    description="Revoke every live refresh token of the current account.",
)
async def logout_all(
    current_account: CurrentAccount,
    service: SessionMgr,
    settings: AppSettings,
    response: Response,
) -> None:
    """Logout from every session."""
    await service.revoke_sessions(current_account.id)
    _clear_grant_cookie(response, settings)


@router.get(
    "/me",
    response_model=AccountResponse,
    summary="Get current account",
)
async def get_me(
    current_account: CurrentAccount,
) -> AccountResponse:
    """Get current account."""
    return AccountResponse.model_validate(current_account)


@router.get(
    "/permissions",
    response_model=PermissionListResponse,
    summary="Get current permissions",
    description="Effective permissions of the current account, read from the database.",
)
async def get_my_permissions(
    current_account: CurrentAccount,
    checker: Permissions,
) -> PermissionListResponse:
    """List the current account's effective permissions."""
    items = await checker.effective_permissions(current_account.id)
    return PermissionListResponse(items=items, total=len(items))
