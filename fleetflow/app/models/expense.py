"""
Expense database model.

Expenses are append-only: logged once, then only read by the financial
dashboard.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from fleetflow.app.db.session import Base
from fleetflow.app.models.cost_enums import ExpenseType


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=True, index=True)

    type = Column(Enum(ExpenseType), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    quantity = Column(Float, nullable=True)  # liters, fuel only
    description = Column(Text, nullable=True)
    date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    receipt_number = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    vehicle = relationship("Vehicle", lazy="selectin")

    def __repr__(self):
        return f"<Expense(id={self.id}, type='{self.type.value}', amount={self.amount})>"
