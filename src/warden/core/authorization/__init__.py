"""Role-based authorization: effective permissions and the grant gate."""

from warden.core.authorization.checker import PermissionChecker, Permissions
from warden.core.authorization.gate import read_grant, require_permission
from warden.core.authorization.grant import (
    InvalidGrantError,
    decode_grant,
    encode_grant,
    grant_allows,
)


__all__ = [
    "InvalidGrantError",
    "PermissionChecker",
    "Permissions",
    "decode_grant",
    "encode_grant",
    "grant_allows",
    "read_grant",
    "require_permission",
]
