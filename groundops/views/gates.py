"""Pydantic schemas for the gate board."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from groundops.models import GateStatus
from groundops.views.flights import FlightResponse


class GateResponse(BaseModel):
    """A gate, its current flight and live turnaround progress."""

    id: int
    gateNumber: str = Field(
        ...,
        validation_alias=AliasChoices("gateNumber", "gate_number"),
        serialization_alias="gateNumber",
    )
    status: GateStatus
    currentFlightId: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("currentFlightId", "current_flight_id"),
        serialization_alias="currentFlightId",
    )
    flight: Optional[FlightResponse] = None
    elapsedMin: int = 0
    remainingMin: int = 0
    progressPct: int = 0

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class GateAssignRequest(BaseModel):
    """Payload to park a flight at a gate."""

    flightId: int = Field(
        ...,
        ge=1,
        validation_alias=AliasChoices("flightId", "flight_id"),
        serialization_alias="flightId",
    )

    model_config = ConfigDict(populate_by_name=True)
