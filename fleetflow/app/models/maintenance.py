"""
Maintenance record database model.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, Text, Float, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from fleetflow.app.db.session import Base
from fleetflow.app.models.cost_enums import MaintenanceType, MaintenanceStatus


class MaintenanceRecord(Base):
    """
    Maintenance model.

    Open records (Pending / In Progress) keep their vehicle In Shop;
    completing one can log a Maintenance expense.
    """
    __tablename__ = "maintenance_records"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)

    type = Column(Enum(MaintenanceType), nullable=False)
    description = Column(Text, nullable=False)
    cost = Column(Float, default=0, nullable=False)

    scheduled_date = Column(DateTime, nullable=True)
    completed_date = Column(DateTime, nullable=True)
    status = Column(Enum(MaintenanceStatus), default=MaintenanceStatus.PENDING, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    vehicle = relationship("Vehicle", lazy="selectin")

    def __repr__(self):
        return f"<MaintenanceRecord(id={self.id}, vehicle_id={self.vehicle_id}, status='{self.status.value}')>"
