#!/usr/bin/env python
"""
Generate seed data for development.

The default scenario creates one permission per point-of-sale action and
the standard roles. The demo scenario also creates one account per role.
"""

import argparse
import asyncio
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


# Add src to path for imports
sys.path.insert(0, "src")

from warden.core.auth.backend import hash_password  # noqa: E402
from warden.core.database import async_session_factory  # noqa: E402
from warden.modules.accounts.models import Account, AccountRole  # noqa: E402
from warden.modules.permissions.models import Permission  # noqa: E402
from warden.modules.protected.routes import PROTECTED_ACTIONS  # noqa: E402
from warden.modules.roles.models import Role, RolePermission  # noqa: E402


# Role name -> (description, action slugs); None grants every action
ROLES: dict[str, tuple[str, list[str] | None]] = {
    "admin": ("Full access to every action", None),
    "manager": (
        "Runs the store",
        [
            "create-sale",
            "edit-sale",
            "refund-transaction",
            "view-inventory",
            "manage-inventory",
            "generate-reports",
            "generate-reports/{id}",
            "customer-management",
        ],
    ),
    "cashier": ("Works the till", ["create-sale", "view-inventory"]),
}

DEMO_PASSWORD = "password123"


async def seed_catalog(session: AsyncSession) -> dict[str, Role]:
    """Create the action permissions and the standard roles.

    Existing rows (matched by url or role name) are reused, so the
    function can run repeatedly.

    Returns:
        Mapping of role name to role
    """
    permissions: dict[str, Permission] = {}
    for action in PROTECTED_ACTIONS:
        url = f"/{action.slug}"
        if url in permissions:
            continue
        result = await session.execute(select(Permission).where(Permission.url == url))
        permission = result.scalar_one_or_none()
        if permission is None:
            permission = Permission(name=action.name, description=action.description, url=url)
            session.add(permission)
            print(f"Created permission: {url}")
        permissions[url] = permission
    await session.flush()

    roles: dict[str, Role] = {}
    for name, (description, slugs) in ROLES.items():
        result = await session.execute(select(Role).where(Role.name == name))
        role = result.scalar_one_or_none()
        if role is not None:
            print(f"Role already exists: {name}")
            roles[name] = role
            continue

        role = Role(name=name, description=description)
        session.add(role)
        await session.flush()

        urls = list(permissions) if slugs is None else [f"/{slug}" for slug in slugs]
        session.add_all(
            RolePermission(role_id=role.id, permission_id=permissions[url].id)
            for url in urls
        )
        roles[name] = role
        print(f"Created role: {name} ({len(urls)} permissions)")

    await session.flush()
    return roles


async def seed_accounts(session: AsyncSession, roles: dict[str, Role]) -> list[Account]:
    """Create one demo account per role, e.g. cashier@example.com."""
    password_hash = hash_password(DEMO_PASSWORD)
    created: list[Account] = []

    for name, role in roles.items():
        email = f"{name}@example.com"
        result = await session.execute(select(Account).where(Account.email == email))
        if result.scalar_one_or_none() is not None:
            print(f"Account already exists: {email}")
            continue

        account = Account(email=email, password_hash=password_hash)
        session.add(account)
        await session.flush()
        session.add(AccountRole(account_id=account.id, role_id=role.id))
        created.append(account)
        print(f"Created account: {email} (role {name})")

    await session.flush()
    return created


async def main(scenario: str) -> None:
    """Run the seeding based on scenario."""
    if scenario not in ("default", "demo"):
        print(f"Unknown scenario: {scenario}")
        print("Available scenarios: default, demo")
        sys.exit(1)

    async with async_session_factory() as session:
        roles = await seed_catalog(session)
        if scenario == "demo":
            await seed_accounts(session, roles)
            print(f"Demo accounts use the password: {DEMO_PASSWORD}")
        await session.commit()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed database with roles and permissions")
    parser.add_argument(
        "--scenario",
        "-s",
        default="default",
        help="Seed scenario to run (default, demo)",
    )
    args = parser.parse_args()

    asyncio.run(main(args.scenario))
