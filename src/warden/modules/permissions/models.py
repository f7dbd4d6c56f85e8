"""Permission database model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from warden.core.constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH, MAX_URL_LENGTH
from warden.core.database.base import Base, CreatedAtMixin, ULIDMixin


class Permission(Base, ULIDMixin, CreatedAtMixin):
    """A protected action, identified by its URL.

    The url is what ends up in an account's grant, e.g. "/manage-inventory".

    Attributes:
        name: Display name
        description: Human-readable description
        url: The protected action string
    """

    __tablename__ = "permissions"

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=False,
        default="",
    )
    url: Mapped[str] = mapped_column(
        String(MAX_URL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Permission(id={self.id}, url={self.url})>"
