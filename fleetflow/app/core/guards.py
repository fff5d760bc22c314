"""
Security guards for role-based access control (the `authorize` step).

Provides dependency factories for protecting endpoints.
"""

from typing import Iterable

from fastapi import Depends

from fleetflow.app.core.dependencies import get_current_user
from fleetflow.app.core.exceptions import InsufficientPermissionsError
from fleetflow.app.core.permissions import allowed_roles
from fleetflow.app.models.enums import UserRole
from fleetflow.app.models.user import User


def require_role(roles: Iterable[UserRole]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/dashboard/manager")
        async def manager_dashboard(current_user: User = Depends(require_role([UserRole.MANAGER]))):
            ...

    Args:
        roles: UserRole values allowed to access the endpoint

    Returns:
        FastAPI dependency that resolves to the authenticated User

    Raises:
        InsufficientPermissionsError (403) if the user's role is not allowed
    """
    allowed = frozenset(roles)

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise InsufficientPermissionsError(
                f"User role '{current_user.role.value}' is not authorized to access this route"
            )
        return current_user

    return role_checker


def require_permission(resource: str, action: str):
    """
    Dependency factory backed by the permission matrix.

    Usage:
        @router.delete("/{vehicle_id}")
        async def delete_vehicle(current_user: User = Depends(require_permission("vehicles", "delete"))):
            ...
    """
    return require_role(allowed_roles(resource, action))
