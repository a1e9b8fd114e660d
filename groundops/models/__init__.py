"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .crisis_state import CrisisState  # noqa: F401
from .flight import AircraftType, Flight, FlightStatus  # noqa: F401
from .gate import Gate, GateStatus  # noqa: F401

__all__ = [
    "Base",
    "AircraftType",
    "CrisisState",
    "Flight",
    "FlightStatus",
    "Gate",
    "GateStatus",
]
