"""Point-of-sale actions guarded by the permission gate.

Each action is registered from a table of (path, method, description,
slug). A request passes only with a valid access token and a grant
cookie that lists the slug.
"""

from collections.abc import Awaitable, Callable
from typing import NamedTuple

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from warden.core.authorization.gate import require_permission


class ProtectedAction(NamedTuple):
    """A guarded endpoint."""

    name: str
    path: str
    method: str
    description: str
    slug: str


class ActionResponse(BaseModel):
    """Result of a permitted action."""

    action: str
    message: str


PROTECTED_ACTIONS: list[ProtectedAction] = [
    ProtectedAction("Create Sale", "/create-sale", "POST", "Adding Sale", "create-sale"),
    ProtectedAction("Edit Sale", "/edit-sale", "PUT", "Editing Sale", "edit-sale"),
    ProtectedAction(
        "Refund Transaction",
        "/refund-transaction",
        "POST",
        "Processing Refunds",
        "refund-transaction",
    ),
    ProtectedAction(
        "View Inventory", "/view-inventory", "GET", "Viewing Inventory", "view-inventory"
    ),
    ProtectedAction(
        "Manage Inventory",
        "/manage-inventory",
        "POST",
        "Adding items to Inventory",
        "manage-inventory",
    ),
    ProtectedAction(
        "Manage Inventory",
        "/manage-inventory",
        "PUT",
        "Updating Inventory",
        "manage-inventory",
    ),
    ProtectedAction(
        "Manage Inventory",
        "/manage-inventory",
        "DELETE",
        "Removing items from Inventory",
        "manage-inventory",
    ),
    ProtectedAction(
        "Generate Reports",
        "/generate-reports",
        "GET",
        "Generating Reports",
        "generate-reports",
    ),
    ProtectedAction(
        "Generate Reports with ID",
        "/generate-reports/{report_id}",
        "GET",
        "Generating Reports: {report_id}",
        "generate-reports/{id}",
    ),
    ProtectedAction(
        "Customer Management",
        "/customer-management",
        "POST",
        "Adding Customers",
        "customer-management",
    ),
    ProtectedAction(
        "Customer Management",
        "/customer-management",
        "PUT",
        "Editing Customers",
        "customer-management",
    ),
    ProtectedAction(
        "Customer Management",
        "/customer-management",
        "DELETE",
        "Deleting Customers",
        "customer-management",
    ),
    ProtectedAction(
        "User Management", "/user-management", "POST", "Adding Users", "user-management"
    ),
    ProtectedAction(
        "User Management", "/user-management", "PUT", "Editing Users", "user-management"
    ),
    ProtectedAction(
        "User Management",
        "/user-management",
        "DELETE",
        "Deleting Users",
        "user-management",
    ),
    ProtectedAction(
        "Access Settings", "/access-settings", "GET", "Accessing Settings", "access-settings"
    ),
]


router = APIRouter(prefix="/protected", tags=["protected"])


def _make_endpoint(action: ProtectedAction) -> Callable[[Request], Awaitable[ActionResponse]]:
    async def endpoint(request: Request) -> ActionResponse:
        message = action.description.format(**request.path_params)
        return ActionResponse(action=action.slug, message=message)

    return endpoint


for _action in PROTECTED_ACTIONS:
    router.add_api_route(
        _action.path,
        _make_endpoint(_action),
        methods=[_action.method],
        response_model=ActionResponse,
        name=f"{_action.method.lower()}_{_action.slug}",
        summary=_action.name,
        description=_action.description,
        dependencies=[Depends(require_permission(_action.slug))],
    )
