"""Account API routes.

Registration is public; every other endpoint requires a valid access
token. Authentication itself (login, refresh, logout) lives in the
auth module.
"""

from fastapi import APIRouter, status

from warden.core.auth.dependencies import CurrentClaims
from warden.modules.accounts.schemas import (
    AccountCreate,
    AccountListResponse,
    AccountPasswordUpdate,
    AccountResponse,
    AccountRoleRequest,
    AccountRoleResponse,
    AccountRolesResponse,
    RoleAccountsResponse,
)
from warden.modules.accounts.services import AccountRoleSvc, AccountSvc
from warden.modules.roles.schemas import RoleResponse


router = APIRouter()

accounts_router = APIRouter(prefix="/accounts", tags=["accounts"])
account_roles_router = APIRouter(prefix="/account-roles", tags=["account-roles"])


# ============================================================
# Account Routes
# ============================================================


@accounts_router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register account",
    description="Create a new account with email and password.",
)
async def create_account(
    data: AccountCreate,
    service: AccountSvc,
) -> AccountResponse:
    """Register a new account."""
    account = await service.create_account(data.email, data.password)
    return AccountResponse.model_validate(account)


@accounts_router.get(
    "",
    response_model=AccountListResponse,
    summary="List accounts",
)
async def list_accounts(
    service: AccountSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> AccountListResponse:
    """List all accounts."""
    accounts, total = await service.list_accounts()
    return AccountListResponse(
        items=[AccountResponse.model_validate(a) for a in accounts],
        total=total,
    )


@accounts_router.get(
    "/{account_id}",
    response_model=AccountResponse,
    summary="Get account by ID",
)
async def get_account(
    account_id: str,
    service: AccountSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> AccountResponse:
    """Get account by ID."""
    account = await service.get_account(account_id)
    return AccountResponse.model_validate(account)


@accounts_router.patch(
    "/{account_id}/password",
    response_model=AccountResponse,
    summary="Change password",
)
async def edit_password(
    account_id: str,
    data: AccountPasswordUpdate,
    service: AccountSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> AccountResponse:
    """Replace an account's password."""
    account = await service.edit_password(account_id, data.password)
    return AccountResponse.model_validate(account)


@accounts_router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete account",
    description="Delete an account together with its role assignments and sessions.",
)
async def delete_account(
    account_id: str,
    service: AccountSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> None:
    """Delete an account."""
    await service.delete_account(account_id)


# ============================================================
# Account-Role Routes
# ============================================================


@account_roles_router.post(
    "",
    response_model=AccountRoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign role to account",
    description="Assigning a role ends the account's current session.",
)
async def assign_role(
    data: AccountRoleRequest,
    service: AccountRoleSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> AccountRoleResponse:
    """Assign a role to an account."""
    association = await service.assign_role(data.account_id, data.role_id)
    return AccountRoleResponse.model_validate(association)


@account_roles_router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove role from account",
    description="Removing a role ends the account's current session.",
)
async def remove_role(
    data: AccountRoleRequest,
    service: AccountRoleSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> None:
    """Remove a role from an account."""
    await service.remove_role(data.account_id, data.role_id)


@account_roles_router.get(
    "/{account_id}/roles",
    response_model=AccountRolesResponse,
    summary="List roles of an account",
)
async def get_account_roles(
    account_id: str,
    service: AccountRoleSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> AccountRolesResponse:
    """List the roles held by an account."""
    roles, total = await service.get_roles(account_id)
    return AccountRolesResponse(
        account_id=account_id,
        items=[RoleResponse.model_validate(r) for r in roles],
        total=total,
    )


@account_roles_router.get(
    "/{role_id}/accounts",
    response_model=RoleAccountsResponse,
    summary="List accounts holding a role",
)
async def get_role_accounts(
    role_id: str,
    service: AccountRoleSvc,
    claims: CurrentClaims,  # noqa: ARG001 - required for auth
) -> RoleAccountsResponse:
    """List the accounts that hold a role."""
    accounts, total = await service.get_accounts(role_id)
    return RoleAccountsResponse(
        role_id=role_id,
        items=[AccountResponse.model_validate(a) for a in accounts],
        total=total,
    )


router.include_router(accounts_router)
router.include_router(account_roles_router)
