"""Account services for business logic."""

from typing import Annotated

import structlog
from fastapi import Depends

from warden.core.auth.backend import hash_password
from warden.core.errors import AlreadyAssignedError, DuplicateEmailError, NotFoundError
from warden.modules.accounts.models import Account, AccountRole
from warden.modules.accounts.repos import (
    AccountRead,
    AccountReader,
    AccountRoleRead,
    AccountRoleReader,
    AccountRoleWrite,
    AccountRoleWriter,
    AccountWrite,
    AccountWriter,
    SessionWrite,
    SessionWriter,
)
from warden.modules.roles.models import Role
from warden.modules.roles.repos import RoleRead, RoleReader


logger = structlog.get_logger()


class AccountService:
    """Service for account management operations.

    Passwords are hashed here; repositories only ever see the hash.
    """

    def __init__(
        self,
        reader: AccountRead,
        writer: AccountWrite,
        account_roles: AccountRoleWrite,
        sessions: SessionWrite,
    ) -> None:
        self.reader: AccountReader = reader
        self.writer: AccountWriter = writer
        self.account_roles: AccountRoleWriter = account_roles
        self.sessions: SessionWriter = sessions

    async def create_account(self, email: str, password: str) -> Account:
        """Register a new account.

        Args:
            email: Login email
            password: Plain text password

        Returns:
            The created account

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        if await self.reader.find_by_email(email):
            raise DuplicateEmailError(details={"email": email})

        account = Account(email=email, password_hash=hash_password(password))
        account = await self.writer.save(account)
        logger.info("account_created", account_id=account.id)
        return account

    async def get_account(self, account_id: str) -> Account:
        """Get an account by ID.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = await self.reader.find_by_id(account_id)
        if not account:
            raise NotFoundError(
                "Account not found",
                resource="account",
                resource_id=account_id,
            )
        return account

    async def list_accounts(self) -> tuple[list[Account], int]:
        return await self.reader.list_all()

    async def edit_password(self, account_id: str, password: str) -> Account:
        """Replace an account's password.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = await self.get_account(account_id)
        account.password_hash = hash_password(password)
        account = await self.writer.save(account)
        logger.info("account_password_changed", account_id=account_id)
        return account

    async def delete_account(self, account_id: str) -> None:
        """Delete an account with its role assignments and sessions.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = await self.get_account(account_id)
        await self.account_roles.remove_all_for_account(account_id)
        await self.sessions.delete_all_for_account(account_id)
        await self.writer.delete(account)
        logger.info("account_deleted", account_id=account_id)


class AccountRoleService:
    """Service for the account <-> role graph.

    Every change revokes the account's sessions so its next login carries
    a regenerated grant.
    """

    def __init__(
        self,
        accounts: AccountRead,
        roles: RoleRead,
        reader: AccountRoleRead,
        writer: AccountRoleWrite,
        sessions: SessionWrite,
    ) -> None:
        self.accounts: AccountReader = accounts
        self.roles: RoleReader = roles
        self.reader: AccountRoleReader = reader
        self.writer: AccountRoleWriter = writer
        self.sessions: SessionWriter = sessions

    async def _revoke(self, account_id: str) -> None:
        revoked = await self.sessions.revoke_all_for_accounts([account_id])
        if revoked:
            logger.info(
                "sessions_revoked",
                reason="account_roles_changed",
                account_ids=[account_id],
                count=revoked,
            )

    async def get_roles(self, account_id: str) -> tuple[list[Role], int]:
        """Get the roles assigned to an account."""
        return await self.reader.fetch_by_account(account_id)

    async def get_accounts(self, role_id: str) -> tuple[list[Account], int]:
        """Get the accounts holding a role."""
        return await self.reader.fetch_by_role(role_id)

    async def find(self, account_id: str, role_id: str) -> AccountRole:
        """Get an association.

        Raises:
            NotFoundError: If the account does not hold the role
        """
        association = await self.reader.find(account_id, role_id)
        if not association:
            raise NotFoundError(
                "Role not assigned to account",
                resource="account_role",
                details={"account_id": account_id, "role_id": role_id},
            )
        return association

    async def assign_role(self, account_id: str, role_id: str) -> AccountRole:
        """Give a role to an account.

        Raises:
            NotFoundError: If the account or role does not exist
            AlreadyAssignedError: If the account already holds the role
        """
        if not await self.accounts.find_by_id(account_id):
            raise NotFoundError(
                "Account not found",
                resource="account",
                resource_id=account_id,
            )
        if not await self.roles.find_by_id(role_id):
            raise NotFoundError("Role not found", resource="role", resource_id=role_id)

        if await self.reader.find(account_id, role_id):
            raise AlreadyAssignedError(
                "Role already assigned to account",
                details={"account_id": account_id, "role_id": role_id},
            )

        association = await self.writer.assign(account_id, role_id)
        await self._revoke(account_id)
        logger.info("role_assigned", account_id=account_id, role_id=role_id)
        return association

    async def remove_role(self, account_id: str, role_id: str) -> None:
        """Take a role away from an account.

        Raises:
            NotFoundError: If the account does not hold the role
        """
        association = await self.find(account_id, role_id)
        await self.writer.remove(association)
        await self._revoke(account_id)
        logger.info("role_removed", account_id=account_id, role_id=role_id)


# Type aliases for dependency injection
AccountSvc = Annotated[AccountService, Depends(AccountService)]
AccountRoleSvc = Annotated[AccountRoleService, Depends(AccountRoleService)]
