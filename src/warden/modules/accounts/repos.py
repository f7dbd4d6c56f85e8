"""Account repositories for database operations.

Each repository is consumed through narrow capability protocols
(reader / writer) so services only depend on what they use.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Annotated, Protocol

import structlog
from fastapi import Depends
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql import ColumnElement

from warden.api.dependencies import DBSession
from warden.core.database.base import utcnow
from warden.core.database.integrity import is_unique_violation
from warden.core.errors import AlreadyAssignedError, DuplicateEmailError
from warden.modules.accounts.models import Account, AccountRole, RefreshToken
from warden.modules.roles.models import Role


logger = structlog.get_logger()


# ============================================================
# Capability protocols
# ============================================================


class AccountReader(Protocol):
    async def find_by_id(self, account_id: str) -> Account | None: ...

    async def find_by_email(
        self, email: str, *, for_update: bool = False
    ) -> Account | None: ...

    async def list_all(self) -> tuple[list[Account], int]: ...


class AccountWriter(Protocol):
    async def save(self, account: Account) -> Account: ...

    async def delete(self, account: Account) -> None: ...


class AccountRoleReader(Protocol):
    async def fetch_by_account(self, account_id: str) -> tuple[list[Role], int]: ...

    async def fetch_by_role(self, role_id: str) -> tuple[list[Account], int]: ...

    async def find(self, account_id: str, role_id: str) -> AccountRole | None: ...

    async def account_ids_for_role(self, role_id: str) -> list[str]: ...


class AccountRoleWriter(Protocol):
    async def assign(self, account_id: str, role_id: str) -> AccountRole: ...

    async def remove(self, association: AccountRole) -> None: ...

    async def remove_all_for_account(self, account_id: str) -> int: ...

    async def remove_all_for_role(self, role_id: str) -> int: ...


class SessionReader(Protocol):
    async def find_live_by_id(self, session_id: str) -> RefreshToken | None: ...

    async def find_live_by_token(self, token_value: str) -> RefreshToken | None: ...

    async def find_live_by_account(self, account_id: str) -> RefreshToken | None: ...


class SessionWriter(Protocol):
    async def create(self, token: RefreshToken) -> RefreshToken: ...

    async def revoke(self, token: RefreshToken) -> None: ...

    async def revoke_all_for_accounts(self, account_ids: Sequence[str]) -> int: ...

    async def delete_all_for_account(self, account_id: str) -> int: ...


# ============================================================
# Repositories
# ============================================================


def _live_filter(now: datetime) -> tuple[ColumnElement[bool], ...]:
    """Conditions a refresh token must meet to still be usable."""
    return (
        RefreshToken.revoked == False,  # noqa: E712
        RefreshToken.expires_at > now,
    )


class AccountRepository:
    """Repository for Account database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def save(self, account: Account) -> Account:
        """Insert a new account or flush changes to an existing one.

        Args:
            account: Account instance to persist

        Returns:
            The persisted account

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        self.session.add(account)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise DuplicateEmailError(details={"email": account.email}) from exc
            raise
        await self.session.refresh(account)
        return account

    async def delete(self, account: Account) -> None:
        await self.session.delete(account)
        await self.session.flush()

    async def find_by_id(self, account_id: str) -> Account | None:
        result = await self.session.execute(
            select(Account).where(Account.id == account_id)
        )
        return result.scalar_one_or_none()

    async def find_by_email(
        self, email: str, *, for_update: bool = False
    ) -> Account | None:
        """Get an account by email.

        Args:
            email: Account email
            for_update: Lock the row until the transaction ends, so
                concurrent logins of one account run one after another
        """
        stmt = select(Account).where(Account.email == email)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> tuple[list[Account], int]:
        """List all accounts ordered by id (creation order).

        Returns:
            Tuple of (accounts list, total count)
        """
        count_result = await self.session.execute(
            select(func.count()).select_from(Account)
        )
        total = count_result.scalar_one()
        if total == 0:
            return [], 0

        result = await self.session.execute(select(Account).order_by(Account.id))
        accounts = list(result.scalars().all())
        logger.debug("accounts_listed", count=total)
        return accounts, total


class AccountRoleRepository:
    """Repository for the account <-> role association."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def fetch_by_account(self, account_id: str) -> tuple[list[Role], int]:
        """Get all roles assigned to an account.

        Returns:
            Tuple of (roles list, total count)
        """
        stmt = (
            select(Role)
            .join(AccountRole, AccountRole.role_id == Role.id)
            .where(AccountRole.account_id == account_id)
            .order_by(Role.id)
        )
        result = await self.session.execute(stmt)
        roles = list(result.scalars().all())
        return roles, len(roles)

    async def fetch_by_role(self, role_id: str) -> tuple[list[Account], int]:
        """Get all accounts holding a role.

        Returns:
            Tuple of (accounts list, total count)
        """
        stmt = (
            select(Account)
            .join(AccountRole, AccountRole.account_id == Account.id)
            .where(AccountRole.role_id == role_id)
            .order_by(Account.id)
        )
        result = await self.session.execute(stmt)
        accounts = list(result.scalars().all())
        return accounts, len(accounts)

    async def find(self, account_id: str, role_id: str) -> AccountRole | None:
        result = await self.session.execute(
            select(AccountRole).where(
                AccountRole.account_id == account_id,
                AccountRole.role_id == role_id,
            )
        )
        return result.scalar_one_or_none()

    async def account_ids_for_role(self, role_id: str) -> list[str]:
        result = await self.session.execute(
            select(AccountRole.account_id).where(AccountRole.role_id == role_id)
        )
        return list(result.scalars().all())

    async def assign(self, account_id: str, role_id: str) -> AccountRole:
        """Create the association.

        Raises:
            AlreadyAssignedError: If the pair already exists
        """
        association = AccountRole(account_id=account_id, role_id=role_id)
        self.session.add(association)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise AlreadyAssignedError(
                    "Role already assigned to account",
                    details={"account_id": account_id, "role_id": role_id},
                ) from exc
            raise
        return association

    async def remove(self, association: AccountRole) -> None:
        await self.session.delete(association)
        await self.session.flush()

    async def remove_all_for_account(self, account_id: str) -> int:
        result = await self.session.execute(
            delete(AccountRole).where(AccountRole.account_id == account_id)
        )
        return result.rowcount

    async def remove_all_for_role(self, role_id: str) -> int:
        result = await self.session.execute(
            delete(AccountRole).where(AccountRole.role_id == role_id)
        )
        return result.rowcount


class RefreshTokenRepository:
    """Repository for RefreshToken database operations.

    Every lookup filters on liveness (unrevoked and unexpired).
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def find_live_by_token(self, token_value: str) -> RefreshToken | None:
        """Get a live refresh token by its value.

        Args:
            token_value: The opaque token string

        Returns:
            RefreshToken if found, unrevoked and unexpired; None otherwise
        """
        stmt = select(RefreshToken).where(
            RefreshToken.token_value == token_value,
            *_live_filter(utcnow()),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_live_by_id(self, session_id: str) -> RefreshToken | None:
        stmt = select(RefreshToken).where(
            RefreshToken.id == session_id,
            *_live_filter(utcnow()),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_live_by_account(self, account_id: str) -> RefreshToken | None:
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.account_id == account_id, *_live_filter(utcnow()))
            .order_by(RefreshToken.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def revoke(self, token: RefreshToken) -> None:
        token.revoked = True
        await self.session.flush()

    async def revoke_all_for_accounts(self, account_ids: Sequence[str]) -> int:
        """Revoke every live refresh token of the given accounts.

        Args:
            account_ids: Accounts whose sessions end

        Returns:
            Number of tokens revoked
        """
        if not account_ids:
            return 0
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.account_id.in_(list(account_ids)),
                RefreshToken.revoked == False,  # noqa: E712
            )
            .values(revoked=True)
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def delete_all_for_account(self, account_id: str) -> int:
        result = await self.session.execute(
            delete(RefreshToken).where(RefreshToken.account_id == account_id)
        )
        return result.rowcount


# Type aliases for dependency injection
AccountRead = Annotated[AccountReader, Depends(AccountRepository)]
AccountWrite = Annotated[AccountWriter, Depends(AccountRepository)]
AccountRoleRead = Annotated[AccountRoleReader, Depends(AccountRoleRepository)]
AccountRoleWrite = Annotated[AccountRoleWriter, Depends(AccountRoleRepository)]
SessionRead = Annotated[SessionReader, Depends(RefreshTokenRepository)]
SessionWrite = Annotated[SessionWriter, Depends(RefreshTokenRepository)]
