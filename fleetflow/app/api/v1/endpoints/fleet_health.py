"""
Fleet health snapshot API endpoints (Manager).
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.core.guards import require_permission
from fleetflow.app.db.session import get_db
from fleetflow.app.models.user import User
from fleetflow.app.schemas.common import DataResponse, ListResponse
from fleetflow.app.schemas.fleet_health import FleetHealthSnapshotResponse
from fleetflow.app.services.audit import log_user_action, AuditAction
from fleetflow.app.services.fleet_health import record_snapshot, list_snapshots

router = APIRouter(prefix="/fleet-health", tags=["Fleet Health"])


@router.get("/snapshots", response_model=ListResponse[FleetHealthSnapshotResponse])
async def get_snapshots(
    limit: int = Query(24, ge=1, le=120),
    current_user: User = Depends(require_permission("fleet_health", "read")),
    db: AsyncSession = Depends(get_db)
):
    """Recorded months, most recent first."""
    snapshots = await list_snapshots(db, limit)
    return ListResponse[FleetHealthSnapshotResponse](
        count=len(snapshots),
        data=[FleetHealthSnapshotResponse.model_validate(s) for s in snapshots],
    )


@router.post("/snapshots", response_model=DataResponse[FleetHealthSnapshotResponse], status_code=status.HTTP_201_CREATED)
async def create_snapshot(
    request: Request,
    current_user: User = Depends(require_permission("fleet_health", "record")),
    db: AsyncSession = Depends(get_db)
):
    """Record or refresh this month's snapshot."""
    snapshot = await record_snapshot(db)
    await log_user_action(
        db, current_user, AuditAction.FLEET_HEALTH_RECORDED,
        metadata={"period": snapshot.period, "average_health": snapshot.average_health},
        request=request,
    )
    return DataResponse[FleetHealthSnapshotResponse](data=FleetHealthSnapshotResponse.model_validate(snapshot))
