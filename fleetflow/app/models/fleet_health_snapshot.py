"""
Fleet health snapshot model.

One row per calendar month holding the fleet's average health score, so
the manager dashboard can chart real history.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, DateTime
from fleetflow.app.db.session import Base


class FleetHealthSnapshot(Base):
    __tablename__ = "fleet_health_snapshots"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    period = Column(String(7), unique=True, nullable=False, index=True)  # YYYY-MM
    average_health = Column(Float, nullable=False)
    vehicle_count = Column(Integer, nullable=False)
    critical_count = Column(Integer, nullable=False)
    recorded_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<FleetHealthSnapshot(period='{self.period}', average_health={self.average_health})>"
