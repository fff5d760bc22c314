"""
Dashboard API Endpoints.

Read-only dashboard data; each dashboard admits its own role plus the
manager.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.guards import require_permission
from fleetflow.app.db.session import get_db
from fleetflow.app.models.user import User
from fleetflow.app.schemas.common import DataResponse
from fleetflow.app.schemas.dashboard import (
    ManagerDashboard, DispatcherDashboard, SafetyDashboard, FinancialDashboard,
)
from fleetflow.app.services.dashboard import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboards"])


@router.get("/manager", response_model=DataResponse[ManagerDashboard])
async def get_manager_dashboard(
    current_user: User = Depends(require_permission("dashboard", "manager")),
    db: AsyncSession = Depends(get_db)
):
    """Fleet utilization, maintenance queue, health trend and heatmap."""
    return DataResponse[ManagerDashboard](data=await DashboardService.get_manager_dashboard(db))


@router.get("/dispatcher", response_model=DataResponse[DispatcherDashboard])
async def get_dispatcher_dashboard(
    current_user: User = Depends(require_permission("dashboard", "dispatcher")),
    db: AsyncSession = Depends(get_db)
):
    """Cargo queue, active trips and weekly trip stats."""
    return DataResponse[DispatcherDashboard](data=await DashboardService.get_dispatcher_dashboard(db))


@router.get("/safety", response_model=DataResponse[SafetyDashboard])
async def get_safety_dashboard(
    current_user: User = Depends(require_permission("dashboard", "safety")),
    db: AsyncSession = Depends(get_db)
):
    """Driver compliance, license alerts and safety scores."""
    return DataResponse[SafetyDashboard](data=await DashboardService.get_safety_dashboard(db))


@router.get("/financial", response_model=DataResponse[FinancialDashboard])
async def get_financial_dashboard(
    current_user: User = Depends(require_permission("dashboard", "financial")),
    db: AsyncSession = Depends(get_db)
):
    """Spend breakdown, monthly trend and top spending vehicles."""
    return DataResponse[FinancialDashboard](data=await DashboardService.get_financial_dashboard(db))
