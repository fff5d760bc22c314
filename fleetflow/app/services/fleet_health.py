"""
Fleet health snapshots.

Records the fleet's average health once per calendar month so the
manager dashboard can chart real history. Recording again in the same
month refreshes that month's row.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, func, desc, case
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.models.fleet_health_snapshot import FleetHealthSnapshot
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.services.reporting import period_key, round_half_up

logger = logging.getLogger(__name__)

CRITICAL_HEALTH_THRESHOLD = 70


async def record_snapshot(db: AsyncSession, now: Optional[datetime] = None) -> FleetHealthSnapshot:
    """Upsert the snapshot for the month containing `now`."""
    now = now or datetime.utcnow()
    period = period_key(now)

    stats = (await db.execute(
        select(
            func.count(Vehicle.id),
            func.avg(Vehicle.health_score),
            func.count(case((Vehicle.health_score < CRITICAL_HEALTH_THRESHOLD, 1))),
        )
    )).one()
    vehicle_count = stats[0] or 0
    average = round_half_up(float(stats[1]), 1) if stats[1] is not None else 0.0
    critical = int(stats[2] or 0)

    result = await db.execute(select(FleetHealthSnapshot).where(FleetHealthSnapshot.period == period))
    snapshot = result.scalar_one_or_none()
    if snapshot is None:
        snapshot = FleetHealthSnapshot(period=period)
        db.add(snapshot)

    snapshot.average_health = average
    snapshot.vehicle_count = vehicle_count
    snapshot.critical_count = critical
    snapshot.recorded_at = now

    await db.commit()
    await db.refresh(snapshot)
    logger.info("Fleet health for %s: %.1f over %d vehicles", period, average, vehicle_count)
    return snapshot


async def list_snapshots(db: AsyncSession, limit: int = 24) -> List[FleetHealthSnapshot]:
    """Most recent months first."""
    result = await db.execute(
        select(FleetHealthSnapshot).order_by(desc(FleetHealthSnapshot.period)).limit(limit)
    )
    return list(result.scalars().all())
