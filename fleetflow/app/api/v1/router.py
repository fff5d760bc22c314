"""
API v1 Router.

Aggregates all v1 API endpoints under the `/api` prefix.
"""

from fastapi import APIRouter
from fleetflow.app.api.v1.endpoints import (
    auth, vehicles, drivers, trips,
    maintenance, expenses,
    dashboard, fleet_health,
    notifications, permissions,
)

router = APIRouter()

# Authentication
router.include_router(auth.router)

# Fleet registry
router.include_router(vehicles.router)
router.include_router(drivers.router)

# Dispatching
router.include_router(trips.router)

# Maintenance and costs
router.include_router(maintenance.router)
router.include_router(expenses.router)

# Dashboards
router.include_router(dashboard.router)
router.include_router(fleet_health.router)

# Client support
router.include_router(notifications.router)
router.include_router(permissions.router)
