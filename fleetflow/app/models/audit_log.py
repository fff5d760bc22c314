"""
Audit Log Database Model.

Tracks security events and fleet lifecycle actions.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, JSON
from fleetflow.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - USER_CREATED / LOGIN_SUCCESS / LOGIN_FAILED / TOKEN_REVOKED
    - TRIP_CREATED / TRIP_STATUS_CHANGED / TRIP_DELETED
    - VEHICLE_DELETED / DRIVER_DELETED / MAINTENANCE_COMPLETED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for anonymous attempts)
    actor_id = Column(Integer, index=True, nullable=True)
    actor_email = Column(String(255), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    # IP address for login tracking
    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_email})>"
