"""Permission gate for route protection.

Protected routes pass three checks in order:
1. The bearer access token must be valid (signature and expiry).
2. The session the access token was minted for must still be live.
3. The permission grant cookie issued at login must contain the route's
   action slug.

The grant is a snapshot taken at login. Logout and any change to the
account's roles or their permissions revoke the session, which stops
the old access token and grant at step 2.
"""

from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request

from warden.api.dependencies import AppSettings
from warden.core.auth.dependencies import CurrentClaims
from warden.core.auth.schemas import TokenClaims
from warden.core.authorization.grant import InvalidGrantError, decode_grant, grant_allows
from warden.core.errors import ForbiddenError, UnauthorizedError
from warden.modules.accounts.repos import SessionRead, SessionReader


logger = structlog.get_logger()


def read_grant(request: Request, cookie_name: str) -> list[str]:
    """Decode the permission grant cookie of a request.

    Raises:
        UnauthorizedError: If the cookie is missing or malformed
    """
    value = request.cookies.get(cookie_name)
    if not value:
        raise UnauthorizedError(
            "Missing permission grant",
            error_code="missing_grant",
        )
    try:
        return decode_grant(value)
    except InvalidGrantError as exc:
        raise UnauthorizedError(
            "Invalid permission grant",
            error_code="invalid_grant",
        ) from exc


async def ensure_live_session(sessions: SessionReader, claims: TokenClaims) -> None:
    """Require the session behind an access token to be unrevoked and unexpired.

    Raises:
        UnauthorizedError: If the token names no session or the session ended
    """
    session = (
        await sessions.find_live_by_id(claims.session_id) if claims.session_id else None
    )
    if session is None or session.account_id != claims.account_id:
        logger.info(
            "session_rejected",
            account_id=claims.account_id,
            session_id=claims.session_id,
        )
        raise UnauthorizedError(
            "Session has ended, log in again",
            error_code="session_revoked",
        )


def require_permission(slug: str) -> Callable[..., Awaitable[TokenClaims]]:
    """Build a dependency that requires an action slug in the grant.

    Usage:
        @router.post(
            "/create-sale",
            dependencies=[Depends(require_permission("create-sale"))],
        )
        async def create_sale():
            ...

    Args:
        slug: The action being performed (e.g., "manage-inventory")

    Returns:
        Dependency resolving to the access token claims

    Raises:
        UnauthorizedError: If the access token or grant is missing or invalid,
            or the session has ended
        ForbiddenError: If the grant lacks the slug
    """

    async def check_grant(
        request: Request,
        claims: CurrentClaims,
        sessions: SessionRead,
        settings: AppSettings,
    ) -> TokenClaims:
        await ensure_live_session(sessions, claims)
        permissions = read_grant(request, settings.grant_cookie_name)

        if not grant_allows(permissions, slug):
            logger.warning(
                "permission_denied",
                account_id=claims.account_id,
                required_permission=slug,
                path=request.url.path,
            )
            raise ForbiddenError(
                f"Missing required permission: {slug}",
                error_code="permission_denied",
                details={"required_permission": slug},
            )

        return claims

    return check_grant
