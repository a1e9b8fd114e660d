"""Read-only flight endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter

from groundops.controllers.dependencies import RegistryDep
from groundops.errors import NotFound
from groundops.models import Flight, FlightStatus
from groundops.views import ErrorResponse, FlightResponse

router = APIRouter(prefix="/api/flights", tags=["flights"])

INCOMING_LIMIT = 5


def serialize_flight(flight: Flight, gate_number: Optional[str] = None) -> FlightResponse:
    response = FlightResponse.model_validate(flight)
    if gate_number is not None:
        response.gateNumber = gate_number
    return response


@router.get("/incoming", response_model=list[FlightResponse])
async def list_incoming_flights(registry: RegistryDep) -> list[FlightResponse]:
    """Next scheduled arrivals, soonest first."""

    flights = await registry.list_flights([FlightStatus.SCHEDULED])
    flights.sort(key=lambda flight: flight.arrival_time)
    return [serialize_flight(flight) for flight in flights[:INCOMING_LIMIT]]


@router.get("/all", response_model=list[FlightResponse])
async def list_all_flights(registry: RegistryDep) -> list[FlightResponse]:
    """Every flight, most recent arrival first."""

    flights = await registry.list_flights()
    flights.sort(key=lambda flight: flight.arrival_time, reverse=True)
    return [serialize_flight(flight) for flight in flights]


@router.get(
    "/{flight_id}",
    response_model=FlightResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_flight(flight_id: int, registry: RegistryDep) -> FlightResponse:
    flight = await registry.get_flight(flight_id)
    if flight is None:
        raise NotFound("Flight", flight_id)
    return serialize_flight(flight)
