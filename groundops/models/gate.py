"""SQLAlchemy model for apron gates."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Column
from sqlalchemy import Enum as SqlEnum
from sqlalchemy import Integer, String

from groundops.models.base import Base


class GateStatus(str, Enum):
    FREE = "FREE"
    ACTIVE = "ACTIVE"
    CLEARING = "CLEARING"


class Gate(Base):
    """A stand that holds at most one flight at a time."""

    __tablename__ = "gates"

    id = Column(Integer, primary_key=True, index=True)
    gate_number = Column(String(16), nullable=False, unique=True)
    status = Column(
        SqlEnum(GateStatus, name="gate_status", native_enum=False),
        nullable=False,
        default=GateStatus.FREE,
    )
    # Unique: a flight can be referenced by one gate only.
    current_flight_id = Column(Integer, nullable=True, unique=True)


__all__ = ["Gate", "GateStatus"]
