"""
User database model.

Accounts for the people operating the fleet; the role decides which
dashboards and actions are open to them.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Enum
from fleetflow.app.db.session import Base
from fleetflow.app.models.enums import UserRole


class User(Base):
    """User model for authentication and role-based access."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.DISPATCHER, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role.value}')>"
