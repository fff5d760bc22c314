"""
Record this month's fleet health snapshot.

Meant for a monthly (or daily) cron job; running it again in the same
month refreshes that month's row:

    python -m fleetflow.snapshot_fleet_health
"""

import asyncio
import logging

from fleetflow.app.core.config import settings
from fleetflow.app.core.logging_config import setup_logging
from fleetflow.app.db.session import AsyncSessionLocal, engine, Base
from fleetflow.app.models.vehicle import Vehicle  # noqa: F401
from fleetflow.app.models.fleet_health_snapshot import FleetHealthSnapshot  # noqa: F401
from fleetflow.app.services.fleet_health import record_snapshot

logger = logging.getLogger("fleetflow.snapshot")


async def main() -> FleetHealthSnapshot:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        async with AsyncSessionLocal() as db:
            snapshot = await record_snapshot(db)
    finally:
        await engine.dispose()

    logger.info(
        "Snapshot %s: average %.1f, %d vehicles, %d critical",
        snapshot.period, snapshot.average_health, snapshot.vehicle_count, snapshot.critical_count,
    )
    return snapshot


if __name__ == "__main__":
    setup_logging(settings.log_level)
    asyncio.run(main())
