"""SQLAlchemy model for flights and their last-computed turnaround prediction."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime
from sqlalchemy import Enum as SqlEnum
from sqlalchemy import Integer, String

from groundops.models.base import Base
from groundops.utils import utcnow


class FlightStatus(str, Enum):
    """Lifecycle of a flight on the apron."""

    SCHEDULED = "SCHEDULED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DIVERTED = "DIVERTED"
    FUEL_QUEUE = "FUEL_QUEUE"


class AircraftType(str, Enum):
    NARROW = "Narrow"
    WIDE = "Wide"


class Flight(Base):
    __tablename__ = "flights"

    id = Column(Integer, primary_key=True, index=True)
    flight_number = Column(String(32), nullable=False, index=True)
    airline = Column(String(120), nullable=False)
    aircraft_type = Column(String(16), nullable=False)
    arrival_time = Column(DateTime, nullable=False, default=utcnow)
    arrival_delay = Column(Integer, nullable=False, default=0)

    fuel_liters = Column(Integer, nullable=False)
    bags_count = Column(Integer, nullable=False)
    priority_bags = Column(Integer, nullable=False, default=0)
    meals_qty = Column(Integer, nullable=False)
    special_meals = Column(Integer, nullable=False, default=0)
    catering_required = Column(Boolean, nullable=False, default=True)
    safety_check = Column(Boolean, nullable=False, default=True)

    # Predictions
    predicted_tat = Column(Integer, nullable=True)
    bottleneck = Column(String(16), nullable=True)
    penalty_risk = Column(Integer, nullable=True)
    baggage_duration = Column(Integer, nullable=True)
    fuel_duration = Column(Integer, nullable=True)
    catering_duration = Column(Integer, nullable=True)
    safety_check_duration = Column(Integer, nullable=True)
    fuel_queue_delay = Column(Integer, nullable=True)

    actual_tat = Column(Integer, nullable=True)
    gate_id = Column(Integer, nullable=True, index=True)
    status = Column(
        SqlEnum(FlightStatus, name="flight_status", native_enum=False),
        nullable=False,
        default=FlightStatus.SCHEDULED,
        index=True,
    )
    penalty_rate_per_min = Column(Integer, nullable=False, default=5400)

    # Bowser slot (1..bowser_count) or domestic queue position; null when not queued.
    fuel_queue_position = Column(Integer, nullable=True)
    # When the bowser started fueling this flight.
    fuel_start_time = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)


__all__ = ["Flight", "FlightStatus", "AircraftType"]
