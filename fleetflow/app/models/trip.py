"""
Trip database model.

Trips are created in Draft by dispatchers and move through the lifecycle
in `services/trip_lifecycle.py`.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from fleetflow.app.db.session import Base
from fleetflow.app.models.trip_enums import TripStatus, TripPriority


class Trip(Base):
    """
    Trip model.

    `sequence_number` backs the public `trip_code` (TRP-0001, TRP-0002, ...).
    """
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sequence_number = Column(Integer, unique=True, nullable=False)
    trip_code = Column(String(20), unique=True, nullable=False, index=True)

    # Assignment
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False, index=True)

    # Route and cargo
    origin = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=False)
    cargo_weight = Column(Float, nullable=False)
    cargo_description = Column(Text, nullable=True)

    # Status
    status = Column(Enum(TripStatus), default=TripStatus.DRAFT, nullable=False, index=True)
    priority = Column(Enum(TripPriority), default=TripPriority.MEDIUM, nullable=False)
    progress = Column(Integer, default=0, nullable=False)

    # Odometer readings
    start_odometer = Column(Float, nullable=True)
    end_odometer = Column(Float, nullable=True)

    # Scheduling
    scheduled_date = Column(DateTime, nullable=True)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    estimated_duration = Column(Integer, nullable=True)  # minutes

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    vehicle = relationship("Vehicle", lazy="selectin")
    driver = relationship("Driver", lazy="selectin")

    def __repr__(self):
        return f"<Trip(id={self.id}, code='{self.trip_code}', status='{self.status.value}')>"
