"""
Permission matrix API endpoints.

The dashboard client builds its route guards and navigation from these
payloads.
"""

from fastapi import APIRouter, Depends

from fleetflow.app.core.dependencies import get_current_user
from fleetflow.app.core.permissions import (
    matrix_document, permissions_for, navigation_for, DEFAULT_ROUTES,
)
from fleetflow.app.models.user import User
from fleetflow.app.schemas.common import DataResponse
from fleetflow.app.schemas.permissions import PermissionMatrix, MyPermissions, NavItem

router = APIRouter(prefix="/permissions", tags=["Permissions"])


@router.get("", response_model=DataResponse[PermissionMatrix])
async def get_permission_matrix():
    """The full role matrix, navigation table and default routes."""
    return DataResponse[PermissionMatrix](data=PermissionMatrix.model_validate(matrix_document()))


@router.get("/me", response_model=DataResponse[MyPermissions])
async def get_my_permissions(current_user: User = Depends(get_current_user)):
    """What the caller may do and see."""
    role = current_user.role
    return DataResponse[MyPermissions](
        data=MyPermissions(
            role=role.value,
            permissions=permissions_for(role),
            navigation=[NavItem(**item) for item in navigation_for(role)],
            default_route=DEFAULT_ROUTES[role],
        )
    )
