"""Account database models."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from warden.core.constants import (
    MAX_EMAIL_LENGTH,
    MAX_TOKEN_VALUE_LENGTH,
    ULID_LENGTH,
)
from warden.core.database.base import Base, CreatedAtMixin, ULIDMixin


class Account(Base, ULIDMixin, CreatedAtMixin):
    """Credential record for a user that can log in.

    Attributes:
        email: Unique login address
        password_hash: Bcrypt hash of the password; the plaintext is never stored
    """

    __tablename__ = "accounts"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, email={self.email})>"


class AccountRole(Base):
    """Junction table linking accounts to roles.

    An account's effective permissions are the union of the permissions
    of all its roles.
    """

    __tablename__ = "account_roles"
    __table_args__ = (
        UniqueConstraint("account_id", "role_id", name="uq_account_role"),
    )

    account_id: Mapped[str] = mapped_column(
        String(ULID_LENGTH),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    role_id: Mapped[str] = mapped_column(
        String(ULID_LENGTH),
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<AccountRole(account_id={self.account_id}, role_id={self.role_id})>"


class RefreshToken(Base, ULIDMixin, CreatedAtMixin):
    """Refresh token backing an account session.

    A token is live while it is unrevoked and unexpired; expiry is checked
    in every query rather than by a reaper.

    Attributes:
        token_value: Opaque random string handed to the client
        account_id: The account this session belongs to
        expires_at: When the token stops being usable
        revoked: Set on logout or when the account's grants change
    """

    __tablename__ = "refresh_tokens"

    token_value: Mapped[str] = mapped_column(
        String(MAX_TOKEN_VALUE_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    account_id: Mapped[str] = mapped_column(
        String(ULID_LENGTH),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    revoked: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, account_id={self.account_id}, revoked={self.revoked})>"
