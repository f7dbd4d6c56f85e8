"""Session manager for login, token refresh and logout."""

from datetime import UTC, datetime
from typing import Annotated

import structlog
from fastapi import Depends

from warden.api.dependencies import AppSettings
from warden.config import Settings
from warden.core.auth.backend import (
    TokenCodec,
    generate_refresh_token,
    get_token_expiration,
    verify_password,
)
from warden.core.auth.dependencies import Codec
from warden.core.auth.schemas import AccessToken, LoginBundle
from warden.core.authorization.checker import PermissionResolver, Permissions
from warden.core.database import generate_ulid
from warden.core.errors import AlreadyLoggedInError, NotFoundError, WrongPasswordError
from warden.modules.accounts.models import RefreshToken
from warden.modules.accounts.repos import (
    AccountRead,
    AccountReader,
    SessionRead,
    SessionReader,
    SessionWrite,
    SessionWriter,
)


logger = structlog.get_logger()


class SessionManager:
    """Issues, refreshes and revokes account sessions.

    An account holds at most one live refresh token at a time; logging in
    again requires logging out (or the session expiring) first.
    """

    def __init__(
        self,
        accounts: AccountRead,
        session_reader: SessionRead,
        session_writer: SessionWrite,
        permissions: Permissions,
        codec: Codec,
        settings: AppSettings,
    ) -> None:
        self.accounts: AccountReader = accounts
        self.session_reader: SessionReader = session_reader
        self.session_writer: SessionWriter = session_writer
        self.permissions: PermissionResolver = permissions
        self.codec: TokenCodec = codec
        self.settings: Settings = settings

    async def login(self, email: str, password: str) -> LoginBundle:
        """Authenticate an account and open a session.

        Args:
            email: Account email
            password: Plain text password

        Returns:
            Tokens plus the account's effective permissions

        Raises:
            WrongPasswordError: If the email is unknown or the password mismatches
            AlreadyLoggedInError: If the account already has a live session
        """
        account = await self.accounts.find_by_email(email, for_update=True)
        if not account or not verify_password(password, account.password_hash):
            logger.info("login_failed", email=email)
            raise WrongPasswordError()

        if await self.session_reader.find_live_by_account(account.id):
            logger.info("login_refused_active_session", account_id=account.id)
            raise AlreadyLoggedInError(details={"account_id": account.id})

        now = datetime.now(UTC)
        session_expires_at = get_token_expiration(
            self.settings.refresh_token_expire_days, now
        )

        refresh_token = RefreshToken(
            id=generate_ulid(),
            token_value=generate_refresh_token(),
            account_id=account.id,
            expires_at=session_expires_at,
        )
        await self.session_writer.create(refresh_token)
        access_token, _ = self.codec.create_access_token(
            account.id, account.email, now, session_id=refresh_token.id
        )

        permissions = await self.permissions.effective_permissions(account.id)

        logger.info(
            "login_succeeded",
            account_id=account.id,
            permission_count=len(permissions),
        )
        return LoginBundle(
            access_token=access_token,
            refresh_token=refresh_token.token_value,
            expired_at=session_expires_at,
            permissions=permissions,
            count=len(permissions),
        )

    async def refresh(
        self,
        refresh_token: str,
        account_id: str,
        email: str,
    ) -> AccessToken:
        """Mint a new access token for a live session.

        The refresh token itself is not rotated.

        Args:
            refresh_token: Opaque refresh token from login
            account_id: Subject read from the presented access token
            email: Email read from the presented access token

        Returns:
            A fresh access token for the same claims

        Raises:
            NotFoundError: If the refresh token is not live
        """
        stored = await self.session_reader.find_live_by_token(refresh_token)
        if not stored or stored.account_id != account_id:
            raise NotFoundError("Refresh token not found", resource="refresh_token")

        access_token, expires_at = self.codec.create_access_token(
            account_id, email, session_id=stored.id
        )
        logger.info("access_token_refreshed", account_id=account_id)
        return AccessToken(access_token=access_token, expired_at=expires_at)

    async def logout(self, refresh_token: str) -> str:
        """Revoke the session behind a refresh token.

        Returns:
            The id of the account that was logged out

        Raises:
            NotFoundError: If no live session matches the token
        """
        stored = await self.session_reader.find_live_by_token(refresh_token)
        if not stored:
            raise NotFoundError("Refresh token not found", resource="refresh_token")

        await self.session_writer.revoke(stored)
        logger.info("logout_succeeded", account_id=stored.account_id)
        return stored.account_id

    async def revoke_sessions(self, account_id: str) -> int:
        """Revoke every live session of an account.

        Returns:
            Number of sessions revoked
        """
        revoked = await self.session_writer.revoke_all_for_accounts([account_id])
        logger.info("sessions_revoked", account_ids=[account_id], count=revoked)
        return revoked


# Type alias for dependency injection
SessionMgr = Annotated[SessionManager, Depends(SessionManager)]
