"""
Role-based permission matrix.

Single source of truth for who may do what. Route guards read it through
`require_permission`, and `GET /api/permissions` publishes the same table
(plus navigation and default landing routes) so the dashboard client
filters its routes and nav links from it instead of keeping its own copy.
"""

from typing import Dict, FrozenSet, List, Tuple

from fleetflow.app.models.enums import UserRole

MANAGER = UserRole.MANAGER
DISPATCHER = UserRole.DISPATCHER
SAFETY_OFFICER = UserRole.SAFETY_OFFICER
FINANCIAL_ANALYST = UserRole.FINANCIAL_ANALYST

ALL_ROLES: FrozenSet[UserRole] = frozenset(UserRole)


def _roles(*roles: UserRole) -> FrozenSet[UserRole]:
    return frozenset(roles)


# (resource, action) -> roles allowed
PERMISSION_MATRIX: Dict[Tuple[str, str], FrozenSet[UserRole]] = {
    # Vehicle registry
    ("vehicles", "read"): ALL_ROLES,
    ("vehicles", "create"): _roles(MANAGER, DISPATCHER),
    ("vehicles", "update"): _roles(MANAGER, DISPATCHER),
    ("vehicles", "delete"): _roles(MANAGER),
    ("vehicles", "update_status"): ALL_ROLES,

    # Drivers
    ("drivers", "read"): ALL_ROLES,
    ("drivers", "create"): _roles(MANAGER, DISPATCHER),
    ("drivers", "update"): _roles(MANAGER, DISPATCHER),
    ("drivers", "delete"): _roles(MANAGER),
    ("drivers", "update_status"): ALL_ROLES,

    # Trips
    ("trips", "read"): ALL_ROLES,
    ("trips", "create"): _roles(MANAGER, DISPATCHER),
    ("trips", "update"): _roles(MANAGER, DISPATCHER),
    ("trips", "delete"): _roles(MANAGER),
    ("trips", "update_status"): ALL_ROLES,
    ("trips", "update_progress"): ALL_ROLES,

    # Maintenance
    ("maintenance", "read"): _roles(MANAGER, SAFETY_OFFICER),
    ("maintenance", "create"): _roles(MANAGER, SAFETY_OFFICER),
    ("maintenance", "complete"): _roles(MANAGER, SAFETY_OFFICER),

    # Expenses
    ("expenses", "read"): _roles(MANAGER, DISPATCHER, FINANCIAL_ANALYST),
    ("expenses", "create"): _roles(MANAGER, DISPATCHER, FINANCIAL_ANALYST),

    # Dashboards (manager is allowed into every one)
    ("dashboard", "manager"): _roles(MANAGER),
    ("dashboard", "dispatcher"): _roles(DISPATCHER, MANAGER),
    ("dashboard", "safety"): _roles(SAFETY_OFFICER, MANAGER),
    ("dashboard", "financial"): _roles(FINANCIAL_ANALYST, MANAGER),

    # Fleet health history
    ("fleet_health", "read"): _roles(MANAGER),
    ("fleet_health", "record"): _roles(MANAGER),

    # Notifications
    ("notifications", "read"): ALL_ROLES,
}


# Client navigation: (path, label, roles)
NAVIGATION: List[Tuple[str, str, FrozenSet[UserRole]]] = [
    ("/dashboard", "Dashboard", _roles(MANAGER, FINANCIAL_ANALYST)),
    ("/inventory", "Vehicle Registry", _roles(MANAGER, DISPATCHER, SAFETY_OFFICER)),
    ("/trips", "Trip Dispatcher", _roles(MANAGER, DISPATCHER)),
    ("/maintenance", "Maintenance", _roles(MANAGER, SAFETY_OFFICER)),
    ("/expenses", "Fuel & Expenses", _roles(MANAGER, DISPATCHER, FINANCIAL_ANALYST)),
    ("/drivers", "Driver Safety", _roles(MANAGER, SAFETY_OFFICER)),
    ("/analytics", "Analytics & ROI", _roles(MANAGER, FINANCIAL_ANALYST)),
]

DEFAULT_ROUTES: Dict[UserRole, str] = {
    MANAGER: "/dashboard",
    DISPATCHER: "/trips",
    SAFETY_OFFICER: "/drivers",
    FINANCIAL_ANALYST: "/analytics",
}


def allowed_roles(resource: str, action: str) -> FrozenSet[UserRole]:
    """Roles allowed to perform `action` on `resource`.

    Raises KeyError for a pair missing from the matrix, so a typo in a
    route declaration fails at import time instead of silently denying.
    """
    return PERMISSION_MATRIX[(resource, action)]


def is_allowed(role: UserRole, resource: str, action: str) -> bool:
    return role in allowed_roles(resource, action)


def permissions_for(role: UserRole) -> Dict[str, List[str]]:
    """Allowed actions per resource for one role."""
    granted: Dict[str, List[str]] = {}
    for (resource, action), roles in PERMISSION_MATRIX.items():
        if role in roles:
            granted.setdefault(resource, []).append(action)
    return granted


def navigation_for(role: UserRole) -> List[Dict[str, str]]:
    return [{"path": path, "label": label} for path, label, roles in NAVIGATION if role in roles]


def _sorted_roles(roles: FrozenSet[UserRole]) -> List[str]:
    order = list(UserRole)
    return [role.value for role in sorted(roles, key=order.index)]


def matrix_document() -> Dict[str, object]:
    """The whole table in a JSON-friendly shape for the client."""
    permissions: Dict[str, Dict[str, List[str]]] = {}
    for (resource, action), roles in PERMISSION_MATRIX.items():
        permissions.setdefault(resource, {})[action] = _sorted_roles(roles)
    return {
        "roles": [role.value for role in UserRole],
        "permissions": permissions,
        "navigation": [
            {"path": path, "label": label, "roles": _sorted_roles(roles)}
            for path, label, roles in NAVIGATION
        ],
        "defaultRoutes": {role.value: route for role, route in DEFAULT_ROUTES.items()},
    }
