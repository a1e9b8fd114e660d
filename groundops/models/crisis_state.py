"""SQLAlchemy model for the singleton fuel-crisis state row."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Integer

from groundops.models.base import Base


class CrisisState(Base):
    __tablename__ = "crisis_state"

    id = Column(Integer, primary_key=True, index=True)
    fuel_crisis_active = Column(Boolean, nullable=False, default=False)
    bowser_count = Column(Integer, nullable=False, default=4)
    manual_pump_speed = Column(Integer, nullable=False, default=500)
    activated_at = Column(DateTime, nullable=True)


__all__ = ["CrisisState"]
