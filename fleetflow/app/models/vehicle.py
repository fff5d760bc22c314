"""
Vehicle database model.

Vehicles carry cargo on trips; their status is driven by the trip
lifecycle and the maintenance workflow.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, CheckConstraint
from fleetflow.app.db.session import Base
from fleetflow.app.models.fleet_enums import VehicleType, VehicleStatus


class Vehicle(Base):
    """
    Vehicle model.

    `max_capacity` (kg) is the authoritative limit checked when a trip is
    created or re-assigned.
    """
    __tablename__ = "vehicles"
    __table_args__ = (
        CheckConstraint("health_score >= 0 AND health_score <= 100", name="ck_vehicle_health_range"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Identification
    name = Column(String(120), nullable=False)
    license_plate = Column(String(50), unique=True, nullable=False, index=True)
    type = Column(Enum(VehicleType), nullable=False, index=True)

    # Capacity and usage
    max_capacity = Column(Float, nullable=False)
    odometer = Column(Float, default=0, nullable=False)

    # Status
    status = Column(Enum(VehicleStatus), default=VehicleStatus.AVAILABLE, nullable=False, index=True)
    health_score = Column(Integer, default=100, nullable=False)

    # Acquisition
    acquisition_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    acquisition_cost = Column(Float, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Vehicle(id={self.id}, plate='{self.license_plate}', status='{self.status.value}')>"
