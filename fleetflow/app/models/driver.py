"""
Driver database model.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum
from fleetflow.app.db.session import Base
from fleetflow.app.models.fleet_enums import VehicleType, DriverStatus


class Driver(Base):
    """
    Driver model.

    A driver can only be put on a new trip while On Duty and holding an
    unexpired license.
    """
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Contact
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(50), nullable=False)

    # License
    license_number = Column(String(100), unique=True, nullable=False, index=True)
    license_expiry = Column(DateTime, nullable=False)
    license_category = Column(Enum(VehicleType), nullable=False)

    # Status and performance
    status = Column(Enum(DriverStatus), default=DriverStatus.OFF_DUTY, nullable=False, index=True)
    safety_score = Column(Integer, default=100, nullable=False)
    trip_completion_rate = Column(Float, default=100, nullable=False)
    total_trips = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Driver(id={self.id}, license='{self.license_number}', status='{self.status.value}')>"
