"""Authentication module for tokens, passwords and sessions."""

from warden.core.auth.backend import (
    InvalidTokenError,
    TokenCodec,
    TokenExpiredError,
    generate_refresh_token,
    hash_password,
    verify_password,
)
from warden.core.auth.dependencies import (
    CurrentAccount,
    CurrentClaims,
    RefreshableClaims,
    get_current_account,
    get_token_claims,
    get_token_codec,
)
from warden.core.auth.middleware import RequestIdMiddleware
from warden.core.auth.schemas import AccessToken, LoginBundle, TokenClaims
from warden.core.auth.service import SessionManager


__all__ = [
    "AccessToken",
    "CurrentAccount",
    "CurrentClaims",
    "InvalidTokenError",
    "LoginBundle",
    "RefreshableClaims",
    "RequestIdMiddleware",
    "SessionManager",
    "TokenClaims",
    "TokenCodec",
    "TokenExpiredError",
    "generate_refresh_token",
    "get_current_account",
    "get_token_claims",
    "get_token_codec",
    "hash_password",
    "verify_password",
]
