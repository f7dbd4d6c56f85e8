"""Permission grant encoding.

At login the effective permission set is handed to the client as an
opaque grant: the urls joined with commas, then base64-url encoded.
Protected actions decode the grant and look for their own slug in it.
"""

import base64
import binascii

from warden.core.constants import GRANT_DELIMITER


class InvalidGrantError(Exception):
    """Raised when a grant value cannot be decoded."""


def normalize_slug(value: str) -> str:
    """Strip surrounding whitespace and a single leading slash."""
    value = value.strip()
    return value[1:] if value.startswith("/") else value


def encode_grant(permissions: list[str]) -> str:
    """Encode a permission list into a grant string.

    Args:
        permissions: Permission urls in the order they should be returned

    Returns:
        Padded base64-url text
    """
    joined = GRANT_DELIMITER.join(permissions)
    return base64.urlsafe_b64encode(joined.encode("utf-8")).decode("ascii")


def decode_grant(value: str) -> list[str]:
    """Decode a grant string back into the permission list.

    Missing ``=`` padding is tolerated. The standard alphabet's ``+`` and
    ``/`` are not, since ``b64decode`` would map them onto ``-`` and ``_``.

    Raises:
        InvalidGrantError: If the value is not base64-url or not UTF-8
    """
    if "+" in value or "/" in value:
        raise InvalidGrantError("Permission grant is not base64-url")

    padded = value + "=" * (-len(value) % 4)
    try:
        raw = base64.b64decode(padded, altchars=b"-_", validate=True)
        joined = raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise InvalidGrantError("Permission grant is malformed") from exc

    if not joined:
        return []
    return joined.split(GRANT_DELIMITER)


def grant_allows(permissions: list[str], slug: str) -> bool:
    """Check whether a decoded grant contains an action slug.

    Membership is exact after normalizing a leading slash on both sides,
    so ``/edit-sale`` does not satisfy ``sale``.
    """
    wanted = normalize_slug(slug)
    if not wanted:
        return False
    return any(normalize_slug(entry) == wanted for entry in permissions)
