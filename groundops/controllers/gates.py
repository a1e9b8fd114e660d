"""Gate board and gate assignment endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from groundops.controllers.dependencies import CrisisEngineDep, RegistryDep
from groundops.controllers.flights import serialize_flight
from groundops.services.gate_board import GateBoardEntry, assign_gate, gate_board, release_gate
from groundops.utils import utcnow
from groundops.views import ErrorResponse, GateAssignRequest, GateResponse

router = APIRouter(prefix="/api/gates", tags=["gates"])


def _serialize_entry(entry: GateBoardEntry) -> GateResponse:
    gate = entry.gate
    return GateResponse(
        id=gate.id,
        gateNumber=gate.gate_number,
        status=entry.status,
        currentFlightId=gate.current_flight_id,
        flight=(
            serialize_flight(entry.flight, gate.gate_number) if entry.flight is not None else None
        ),
        elapsedMin=entry.elapsed_min,
        remainingMin=entry.remaining_min,
        progressPct=entry.progress_pct,
    )


@router.get("", response_model=list[GateResponse])
async def list_gates(registry: RegistryDep) -> list[GateResponse]:
    """Return every gate with its flight and turnaround progress."""

    return [_serialize_entry(entry) for entry in await gate_board(registry, utcnow())]


@router.post(
    "/{gate_id}/assign",
    response_model=GateResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def assign_flight_to_gate(
    gate_id: int,
    payload: GateAssignRequest,
    registry: RegistryDep,
) -> GateResponse:
    """Park a flight at a free gate."""

    gate = await assign_gate(registry, gate_id, payload.flightId)
    flight = await registry.get_flight(payload.flightId)
    return _serialize_entry(GateBoardEntry(gate=gate, status=gate.status, flight=flight))


@router.post(
    "/{gate_id}/release",
    response_model=GateResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def release_flight_from_gate(
    gate_id: int,
    registry: RegistryDep,
    engine: CrisisEngineDep,
) -> GateResponse:
    """Complete the turnaround at a gate and free it."""

    gate = await release_gate(registry, gate_id, utcnow(), engine)
    return _serialize_entry(GateBoardEntry(gate=gate, status=gate.status, flight=None))
