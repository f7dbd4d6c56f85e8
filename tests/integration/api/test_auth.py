"""Integration tests for auth endpoints."""

from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient, Response
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import TEST_PASSWORD, AccountFactory
from warden.core.auth.backend import TokenCodec
from warden.core.authorization.grant import decode_grant
from warden.modules.accounts.models import Account


pytestmark = pytest.mark.integration

LOGIN_URL = "/api/v1/auth/login"
REFRESH_URL = "/api/v1/auth/request-token"
LOGOUT_URL = "/api/v1/auth/logout"


def grant_cookie(response: Response) -> str:
    """Read the raw permission grant from a Set-Cookie header."""
    header = response.headers["set-cookie"]
    assert header.startswith("permissions=")
    return header.split(";", 1)[0].split("=", 1)[1].strip('"')


async def login(client: AsyncClient, email: str, password: str = TEST_PASSWORD) -> Response:
    return await client.post(LOGIN_URL, json={"email": email, "password": password})


class TestLogin:
    """Tests for the login endpoint."""

    async def test_login_returns_permissions(
        self, client: AsyncClient, db: AsyncSession, grant_role
    ):
        """POST /auth/login returns tokens plus the effective permissions."""
        account = AccountFactory.build(email="a@x.com")
        db.add(account)
        await db.flush()
        await grant_role(account, ["/manage-inventory"])

        response = await login(client, "a@x.com")

        assert response.status_code == 200
        data = response.json()
        assert data["permissions"] == ["/manage-inventory"]
        assert data["count"] == 1
        assert data["token_type"] == "Bearer"
        assert data["scope"] == "*"
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["expired_at"]

    async def test_login_sets_grant_cookie(
        self, client: AsyncClient, account: Account, grant_role
    ):
        """The grant cookie carries the encoded permission list."""
        await grant_role(account, ["/create-sale", "/edit-sale"])

        response = await login(client, account.email)

        assert response.status_code == 200
        assert decode_grant(grant_cookie(response)) == ["/create-sale", "/edit-sale"]
        header = response.headers["set-cookie"].lower()
        assert "httponly" in header
        assert "max-age=604800" in header
        assert "samesite=lax" in header

    async def test_login_without_roles(self, client: AsyncClient, account: Account):
        """An account without roles gets an empty permission set."""
        response = await login(client, account.email)

        assert response.status_code == 200
        assert response.json()["permissions"] == []
        assert response.json()["count"] == 0

    async def test_login_wrong_password(self, client: AsyncClient, account: Account):
        """POST /auth/login rejects a wrong password."""
        response = await login(client, account.email, "wrong-password")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/invalid_credentials")

    async def test_login_unknown_email(self, client: AsyncClient):
        """An unknown email fails exactly like a wrong password."""
        response = await login(client, "nobody@example.com")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/invalid_credentials")

    async def test_login_invalid_email(self, client: AsyncClient):
        """POST /auth/login validates the email format."""
        response = await login(client, "not-an-email")

        assert response.status_code == 422

    async def test_second_login_refused_until_logout(
        self, client: AsyncClient, account: Account
    ):
        """A live session blocks a new login; logging out lifts the block."""
        first = await login(client, account.email)
        assert first.status_code == 200

        second = await login(client, account.email)
        assert second.status_code == 409
        assert second.json()["type"].endswith("/already_logged_in")

        logout = await client.post(
            LOGOUT_URL, json={"refresh_token": first.json()["refresh_token"]}
        )
        assert logout.status_code == 204

        third = await login(client, account.email)
        assert third.status_code == 200


class TestRequestToken:
    """Tests for exchanging a refresh token."""

    async def test_refresh_with_expired_access_token(
        self,
        client: AsyncClient,
        account: Account,
        codec: TokenCodec,
    ):
        """An expired access token plus a live refresh token yields a new access token."""
        refresh_token = (await login(client, account.email)).json()["refresh_token"]
        expired, _ = codec.create_access_token(
            account.id, account.email, datetime.now(UTC) - timedelta(hours=16)
        )

        response = await client.post(
            REFRESH_URL,
            json={"refresh_token": refresh_token},
            headers={"Authorization": f"Bearer {expired}"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "Bearer"
        claims = codec.decode_access_token(data["access_token"])
        assert claims.account_id == account.id
        assert claims.email == account.email

    async def test_refresh_after_logout(self, client: AsyncClient, account: Account):
        """A revoked refresh token can no longer mint access tokens."""
        bundle = (await login(client, account.email)).json()
        headers = {"Authorization": f"Bearer {bundle['access_token']}"}
        await client.post(LOGOUT_URL, json={"refresh_token": bundle["refresh_token"]})

        response = await client.post(
            REFRESH_URL,
            json={"refresh_token": bundle["refresh_token"]},
            headers=headers,
        )

        assert response.status_code == 404

    async def test_refresh_requires_access_token(
        self, client: AsyncClient, account: Account
    ):
        """The previous access token must be presented."""
        bundle = (await login(client, account.email)).json()

        response = await client.post(
            REFRESH_URL, json={"refresh_token": bundle["refresh_token"]}
        )

        assert response.status_code == 401

    async def test_refresh_rejects_forged_access_token(
        self, client: AsyncClient, account: Account
    ):
        """Expiry is waived, the signature is not."""
        bundle = (await login(client, account.email)).json()
        forged, _ = TokenCodec("forged-secret-key-that-is-long-enough").create_access_token(
            account.id, account.email
        )

        response = await client.post(
            REFRESH_URL,
            json={"refresh_token": bundle["refresh_token"]},
            headers={"Authorization": f"Bearer {forged}"},
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/invalid_token")


class TestLogout:
    """Tests for logout endpoints."""

    async def test_logout_clears_cookie(self, client: AsyncClient, account: Account):
        bundle = (await login(client, account.email)).json()

        response = await client.post(
            LOGOUT_URL, json={"refresh_token": bundle["refresh_token"]}
        )

        assert response.status_code == 204
        assert "max-age=0" in response.headers["set-cookie"].lower()

    async def test_logout_twice(self, client: AsyncClient, account: Account):
        """The second logout with the same token is not found."""
        bundle = (await login(client, account.email)).json()
        await client.post(LOGOUT_URL, json={"refresh_token": bundle["refresh_token"]})

        response = await client.post(
            LOGOUT_URL, json={"refresh_token": bundle["refresh_token"]}
        )

        assert response.status_code == 404

    async def test_logout_all(self, client: AsyncClient, account: Account):
        """POST /auth/logout-all ends the current account's sessions."""
        bundle = (await login(client, account.email)).json()
        headers = {"Authorization": f"Bearer {bundle['access_token']}"}

        response = await client.post("/api/v1/auth/logout-all", headers=headers)
        assert response.status_code == 204

        again = await login(client, account.email)
        assert again.status_code == 200


class TestCurrentAccount:
    """Tests for /auth/me and /auth/permissions."""

    async def test_get_me(self, authenticated_client: AsyncClient, account: Account):
        response = await authenticated_client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json() == {"id": account.id, "email": account.email}

    async def test_get_me_unauthenticated(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/missing_token")

    async def test_get_me_expired_token(
        self, client: AsyncClient, account: Account, codec: TokenCodec
    ):
        expired, _ = codec.create_access_token(
            account.id, account.email, datetime.now(UTC) - timedelta(hours=16)
        )

        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {expired}"}
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/token_expired")

    async def test_get_my_permissions(
        self, authenticated_client: AsyncClient, account: Account, grant_role
    ):
        """Permissions are read live from the database, not from the grant."""
        await grant_role(account, ["/view-inventory", "/access-settings"])

        response = await authenticated_client.get("/api/v1/auth/permissions")

        assert response.status_code == 200
        assert response.json() == {
            "items": ["/access-settings", "/view-inventory"],
            "total": 2,
        }
