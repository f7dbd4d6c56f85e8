"""Integration tests for the permission gate on protected actions."""

from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient

from tests.factories import TEST_PASSWORD
from warden.core.auth.backend import TokenCodec
from warden.core.authorization.grant import encode_grant
from warden.modules.accounts.models import Account
from warden.modules.protected.routes import PROTECTED_ACTIONS


pytestmark = pytest.mark.integration

BASE = "/api/v1/protected"


def grant_header(*urls: str) -> dict[str, str]:
    return {"Cookie": f"permissions={encode_grant(list(urls))}"}


class TestGateRejections:
    """Requests that never reach the action."""

    async def test_missing_access_token(self, client: AsyncClient):
        response = await client.post(
            f"{BASE}/create-sale", headers=grant_header("/create-sale")
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/missing_token")

    async def test_expired_access_token(
        self, client: AsyncClient, account: Account, codec: TokenCodec
    ):
        expired, _ = codec.create_access_token(
            account.id, account.email, datetime.now(UTC) - timedelta(hours=16)
        )

        response = await client.post(
            f"{BASE}/create-sale",
            headers={
                "Authorization": f"Bearer {expired}",
                **grant_header("/create-sale"),
            },
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/token_expired")

    async def test_missing_grant(self, session_client: AsyncClient):
        response = await session_client.post(f"{BASE}/create-sale")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/missing_grant")

    async def test_malformed_grant(self, session_client: AsyncClient):
        response = await session_client.post(
            f"{BASE}/create-sale", headers={"Cookie": "permissions=%%%%"}
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/invalid_grant")

    async def test_slug_not_granted(self, session_client: AsyncClient):
        response = await session_client.post(
            f"{BASE}/create-sale", headers=grant_header("/view-inventory")
        )

        assert response.status_code == 403
        data = response.json()
        assert data["type"].endswith("/permission_denied")
        assert data["required_permission"] == "create-sale"

    async def test_substring_is_not_a_grant(self, session_client: AsyncClient):
        """Holding /generate-reports/{id} does not open /generate-reports."""
        response = await session_client.get(
            f"{BASE}/generate-reports", headers=grant_header("/generate-reports/{id}")
        )

        assert response.status_code == 403


class TestGateAllows:
    """Requests whose grant lists the action."""

    @pytest.mark.parametrize(
        ("method", "message"),
        [
            ("POST", "Adding items to Inventory"),
            ("PUT", "Updating Inventory"),
            ("DELETE", "Removing items from Inventory"),
        ],
    )
    async def test_one_slug_many_methods(
        self, session_client: AsyncClient, method: str, message: str
    ):
        response = await session_client.request(
            method, f"{BASE}/manage-inventory", headers=grant_header("/manage-inventory")
        )

        assert response.status_code == 200
        assert response.json() == {"action": "manage-inventory", "message": message}

    async def test_templated_action(self, session_client: AsyncClient):
        response = await session_client.get(
            f"{BASE}/generate-reports/42", headers=grant_header("/generate-reports/{id}")
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Generating Reports: 42"

    async def test_every_action_reachable(self, session_client: AsyncClient):
        """A grant listing every slug opens every registered action."""
        headers = grant_header(*{f"/{a.slug}" for a in PROTECTED_ACTIONS})

        for action in PROTECTED_ACTIONS:
            path = action.path.replace("{report_id}", "7")
            response = await session_client.request(
                action.method, f"{BASE}{path}", headers=headers
            )
            assert response.status_code == 200, action

    async def test_login_grant_opens_action(
        self, client: AsyncClient, account: Account, grant_role
    ):
        """The cookie issued at login is accepted by the gate."""
        await grant_role(account, ["/manage-inventory"])
        bundle = await client.post(
            "/api/v1/auth/login",
            json={"email": account.email, "password": TEST_PASSWORD},
        )
        grant = bundle.headers["set-cookie"].split(";", 1)[0]

        response = await client.put(
            f"{BASE}/manage-inventory",
            headers={
                "Authorization": f"Bearer {bundle.json()['access_token']}",
                "Cookie": grant,
            },
        )

        assert response.status_code == 200


async def login_for_action(
    client: AsyncClient, account: Account
) -> tuple[dict, dict[str, str]]:
    """Log in and return the bundle plus headers replaying its token and grant."""
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": account.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    bundle = response.json()
    headers = {
        "Authorization": f"Bearer {bundle['access_token']}",
        "Cookie": response.headers["set-cookie"].split(";", 1)[0],
    }
    return bundle, headers


class TestEndedSessions:
    """A grant stops working as soon as the session behind it ends."""

    async def test_token_without_session(self, authenticated_client: AsyncClient):
        """An access token minted outside login names no session."""
        response = await authenticated_client.post(
            f"{BASE}/create-sale", headers=grant_header("/create-sale")
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/session_revoked")

    async def test_grant_rejected_after_role_permission_removed(
        self,
        client: AsyncClient,
        authenticated_client: AsyncClient,
        account: Account,
        grant_role,
    ):
        role, (permission,) = await grant_role(account, ["/create-sale"])
        _, headers = await login_for_action(client, account)

        before = await client.post(f"{BASE}/create-sale", headers=headers)
        assert before.status_code == 200

        removed = await authenticated_client.request(
            "DELETE",
            "/api/v1/role-permissions",
            json={"role_id": role.id, "permission_id": permission.id},
        )
        assert removed.status_code == 204

        after = await client.post(f"{BASE}/create-sale", headers=headers)
        assert after.status_code == 401
        assert after.json()["type"].endswith("/session_revoked")

    async def test_grant_rejected_after_account_role_removed(
        self,
        client: AsyncClient,
        authenticated_client: AsyncClient,
        account: Account,
        grant_role,
    ):
        role, _ = await grant_role(account, ["/view-inventory"])
        _, headers = await login_for_action(client, account)

        removed = await authenticated_client.request(
            "DELETE",
            "/api/v1/account-roles",
            json={"account_id": account.id, "role_id": role.id},
        )
        assert removed.status_code == 204

        after = await client.get(f"{BASE}/view-inventory", headers=headers)
        assert after.status_code == 401

    async def test_grant_rejected_after_logout(
        self, client: AsyncClient, account: Account, grant_role
    ):
        await grant_role(account, ["/create-sale"])
        bundle, headers = await login_for_action(client, account)

        logout = await client.post(
            "/api/v1/auth/logout", json={"refresh_token": bundle["refresh_token"]}
        )
        assert logout.status_code == 204

        replay = await client.post(f"{BASE}/create-sale", headers=headers)
        assert replay.status_code == 401
        assert replay.json()["type"].endswith("/session_revoked")

    async def test_old_token_rejected_after_new_login(
        self, client: AsyncClient, account: Account, grant_role
    ):
        """Logging in again does not revive the previous session's token."""
        await grant_role(account, ["/create-sale"])
        bundle, old_headers = await login_for_action(client, account)
        await client.post(
            "/api/v1/auth/logout", json={"refresh_token": bundle["refresh_token"]}
        )
        _, new_headers = await login_for_action(client, account)

        old = await client.post(f"{BASE}/create-sale", headers=old_headers)
        new = await client.post(f"{BASE}/create-sale", headers=new_headers)

        assert old.status_code == 401
        assert new.status_code == 200

    async def test_refreshed_token_keeps_session(
        self, client: AsyncClient, account: Account, grant_role
    ):
        """An access token from request-token belongs to the same session."""
        await grant_role(account, ["/create-sale"])
        bundle, headers = await login_for_action(client, account)

        refreshed = await client.post(
            "/api/v1/auth/request-token",
            json={"refresh_token": bundle["refresh_token"]},
            headers={"Authorization": headers["Authorization"]},
        )
        assert refreshed.status_code == 200

        response = await client.post(
            f"{BASE}/create-sale",
            headers={
                "Authorization": f"Bearer {refreshed.json()['access_token']}",
                "Cookie": headers["Cookie"],
            },
        )
        assert response.status_code == 200
