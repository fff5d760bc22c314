"""
Permission matrix schemas published to the dashboard client.
"""

from typing import Dict, List

from fleetflow.app.schemas.common import CamelModel


class NavItem(CamelModel):
    path: str
    label: str


class NavEntry(NavItem):
    roles: List[str]


class PermissionMatrix(CamelModel):
    roles: List[str]
    permissions: Dict[str, Dict[str, List[str]]]
    navigation: List[NavEntry]
    default_routes: Dict[str, str]


class MyPermissions(CamelModel):
    role: str
    permissions: Dict[str, List[str]]
    navigation: List[NavItem]
    default_route: str
