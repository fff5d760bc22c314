"""
Fleet health snapshot schemas.
"""

from datetime import datetime

from fleetflow.app.schemas.common import CamelModel


class FleetHealthSnapshotResponse(CamelModel):
    id: int
    period: str
    average_health: float
    vehicle_count: int
    critical_count: int
    recorded_at: datetime
