"""Authentication backend for JWT and password handling.

This module provides core authentication utilities including:
- Password hashing with bcrypt
- Access token signing and verification
- Opaque refresh token generation
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from warden.core.auth.schemas import TokenClaims
from warden.core.constants import BCRYPT_ROUNDS, REFRESH_TOKEN_BYTES


# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


# ============================================================
# Password Utilities
# ============================================================


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash of the password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Bcrypt hash to verify against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


# ============================================================
# Token Utilities
# ============================================================


class InvalidTokenError(Exception):
    """Raised when an access token fails signature or claim validation."""


class TokenExpiredError(InvalidTokenError):
    """Raised when an access token is well-formed but past its expiry."""


def generate_refresh_token() -> str:
    """Create an opaque refresh token.

    The refresh token is a random string, not a JWT; it carries no claims
    and is only meaningful as a lookup key.
    """
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


class TokenCodec:
    """Signs and verifies access tokens with an injected secret.

    Attributes:
        secret_key: HMAC signing key
        algorithm: JWT signing algorithm
        access_ttl: Lifetime of a freshly minted access token
    """

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(hours=15),
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_ttl = access_ttl

    def create_access_token(
        self,
        account_id: str,
        email: str,
        now: datetime | None = None,
        *,
        session_id: str | None = None,
    ) -> tuple[str, datetime]:
        """Create a signed access token.

        Args:
            account_id: Subject of the token
            email: Account email, carried as a claim
            now: Issue time; defaults to the current UTC time
            session_id: Refresh token id the access token belongs to (``sid``)

        Returns:
            Tuple of (encoded token, expiry time)
        """
        issued_at = now or datetime.now(UTC)
        expire = issued_at + self.access_ttl

        to_encode: dict[str, Any] = {
            "sub": account_id,
            "email": email,
            "exp": expire,
            "iat": issued_at,
        }
        if session_id:
            to_encode["sid"] = session_id
        token = jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)
        return token, expire

    def decode_access_token(
        self,
        token: str,
        *,
        allow_expired: bool = False,
    ) -> TokenClaims:
        """Decode and validate an access token.

        Args:
            token: The encoded JWT
            allow_expired: Accept a token whose only fault is its expiry

        Returns:
            The token claims

        Raises:
            TokenExpiredError: If the token is expired and allow_expired is False
            InvalidTokenError: If the signature or claims are invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": not allow_expired},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Access token expired") from exc
        except JWTError as exc:
            raise InvalidTokenError("Invalid access token") from exc

        account_id = payload.get("sub")
        email = payload.get("email")
        exp = payload.get("exp")

        if not account_id or not email or exp is None:
            raise InvalidTokenError("Access token is missing required claims")

        return TokenClaims(
            account_id=account_id,
            email=email,
            exp=datetime.fromtimestamp(exp, tz=UTC),
            session_id=payload.get("sid"),
        )


def get_token_expiration(days: int, now: datetime | None = None) -> datetime:
    """Get the expiration datetime for a refresh token.

    Args:
        days: Number of days until expiration
        now: Reference time; defaults to the current UTC time

    Returns:
        Expiration datetime
    """
    return (now or datetime.now(UTC)) + timedelta(days=days)
