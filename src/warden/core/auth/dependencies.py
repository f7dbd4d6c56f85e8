"""FastAPI dependencies for authentication.

This module provides FastAPI dependency injection functions for:
- Building the token codec from settings
- Extracting and validating bearer access tokens
- Getting the current authenticated account
"""

from datetime import timedelta
from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from warden.api.dependencies import AppSettings
from warden.core.auth.backend import InvalidTokenError, TokenCodec, TokenExpiredError
from warden.core.auth.schemas import TokenClaims
from warden.core.errors import UnauthorizedError
from warden.modules.accounts.models import Account
from warden.modules.accounts.repos import AccountRead


logger = structlog.get_logger()

# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)

BearerCredentials = Annotated[
    HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
]


def get_token_codec(settings: AppSettings) -> TokenCodec:
    """Build the access token codec from application settings."""
    return TokenCodec(
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
        access_ttl=timedelta(hours=settings.access_token_expire_hours),
    )


Codec = Annotated[TokenCodec, Depends(get_token_codec)]


def _require_credentials(credentials: HTTPAuthorizationCredentials | None) -> str:
    if not credentials:
        raise UnauthorizedError(
            "Missing authentication token",
            error_code="missing_token",
        )
    return credentials.credentials


async def get_token_claims(
    request: Request,
    credentials: BearerCredentials,
    codec: Codec,
) -> TokenClaims:
    """Extract and validate the access token from the Authorization header.

    Args:
        request: The incoming request
        credentials: Bearer token credentials from the request
        codec: Token codec

    Returns:
        Decoded token claims

    Raises:
        UnauthorizedError: If the token is missing, invalid or expired
    """
    token = _require_credentials(credentials)

    try:
        claims = codec.decode_access_token(token)
    except TokenExpiredError as exc:
        raise UnauthorizedError(
            "Access token expired",
            error_code="token_expired",
        ) from exc
    except InvalidTokenError as exc:
        raise UnauthorizedError(
            "Invalid access token",
            error_code="invalid_token",
        ) from exc

    request.state.account_id = claims.account_id
    structlog.contextvars.bind_contextvars(account_id=claims.account_id)
    return claims


async def get_refreshable_claims(
    credentials: BearerCredentials,
    codec: Codec,
) -> TokenClaims:
    """Read claims from an access token that may already be expired.

    Used only when exchanging a refresh token; every validation failure
    other than expiry is still rejected.

    Raises:
        UnauthorizedError: If the token is missing or invalid
    """
    token = _require_credentials(credentials)

    try:
        return codec.decode_access_token(token, allow_expired=True)
    except InvalidTokenError as exc:
        raise UnauthorizedError(
            "Invalid access token",
            error_code="invalid_token",
        ) from exc


async def get_current_account(
    claims: Annotated[TokenClaims, Depends(get_token_claims)],
    accounts: AccountRead,
) -> Account:
    """Get the currently authenticated account.

    Raises:
        UnauthorizedError: If the account no longer exists
    """
    account = await accounts.find_by_id(claims.account_id)
    if not account:
        logger.warning("token_for_missing_account", account_id=claims.account_id)
        raise UnauthorizedError(
            "Account not found",
            error_code="account_not_found",
        )
    return account


# Type aliases for cleaner dependency injection
CurrentClaims = Annotated[TokenClaims, Depends(get_token_claims)]
RefreshableClaims = Annotated[TokenClaims, Depends(get_refreshable_claims)]
CurrentAccount = Annotated[Account, Depends(get_current_account)]
