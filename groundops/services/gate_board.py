"""Gate board and gate assignment.

A gate holds at most one flight and a flight sits at no more than one gate.
The ``gates.current_flight_id`` unique constraint backs this up at the
database level; the checks here turn violations into ``ConflictState``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from groundops.application.interfaces import GroundOpsRegistry
from groundops.errors import ConflictState, NotFound
from groundops.models import Flight, FlightStatus, Gate, GateStatus
from groundops.services.crisis import CrisisEngine
from groundops.services.stats import elapsed_minutes, progress_pct

logger = logging.getLogger(__name__)

DEFAULT_TAT_MIN = 45


@dataclass(frozen=True, slots=True)
class GateBoardEntry:
    gate: Gate
    status: GateStatus
    flight: Optional[Flight]
    elapsed_min: int = 0
    remaining_min: int = 0
    progress_pct: int = 0


async def gate_board(registry: GroundOpsRegistry, now: datetime) -> list[GateBoardEntry]:
    """Every gate with its current flight and live turnaround progress."""

    entries = []
    for gate in await registry.list_gates():
        flight = (
            await registry.get_flight(gate.current_flight_id)
            if gate.current_flight_id is not None
            else None
        )
        if flight is None:
            entries.append(GateBoardEntry(gate=gate, status=gate.status, flight=None))
            continue

        elapsed = elapsed_minutes(flight.arrival_time, now)
        total = flight.predicted_tat or flight.actual_tat or DEFAULT_TAT_MIN
        progress = progress_pct(elapsed, total)
        status = gate.status
        if progress >= 100 and status == GateStatus.ACTIVE:
            status = GateStatus.CLEARING
        entries.append(
            GateBoardEntry(
                gate=gate,
                status=status,
                flight=flight,
                elapsed_min=elapsed,
                remaining_min=max(0, total - elapsed),
                progress_pct=progress,
            )
        )
    return entries


async def _gate_or_404(registry: GroundOpsRegistry, gate_id: int) -> Gate:
    gate = await registry.get_gate(gate_id)
    if gate is None:
        raise NotFound("Gate", gate_id)
    return gate


async def assign_gate(registry: GroundOpsRegistry, gate_id: int, flight_id: int) -> Gate:
    """Park ``flight_id`` at ``gate_id``; a scheduled flight becomes ACTIVE."""

    gate = await _gate_or_404(registry, gate_id)
    flight = await registry.get_flight(flight_id)
    if flight is None:
        raise NotFound("Flight", flight_id)

    if gate.current_flight_id is not None or gate.status != GateStatus.FREE:
        raise ConflictState(f"Gate {gate.gate_number} is not free")
    if flight.status == FlightStatus.COMPLETED:
        raise ConflictState(f"Flight {flight.flight_number} has already completed its turnaround")
    occupied = [g for g in await registry.list_gates() if g.current_flight_id == flight.id]
    if occupied:
        raise ConflictState(
            f"Flight {flight.flight_number} is already at gate {occupied[0].gate_number}"
        )

    try:
        async with registry.transaction():
            gate = await registry.update_gate(
                gate.id, status=GateStatus.ACTIVE, current_flight_id=flight.id
            )
            status = FlightStatus.ACTIVE if flight.status == FlightStatus.SCHEDULED else flight.status
            await registry.update_flight(flight.id, gate_id=gate.id, status=status)
    except IntegrityError as exc:
        raise ConflictState(f"Flight {flight_id} is already assigned to a gate") from exc

    logger.info("Assigned %s to %s", flight.flight_number, gate.gate_number)
    return gate


async def release_gate(
    registry: GroundOpsRegistry, gate_id: int, now: datetime, crisis: CrisisEngine
) -> Gate:
    """Complete the turnaround at ``gate_id`` and free the gate.

    A flight still waiting on the domestic bowser leaves the queue, and the
    flights behind it move up.
    """

    async with crisis.lock:
        gate = await _gate_or_404(registry, gate_id)
        if gate.current_flight_id is None:
            raise ConflictState(f"Gate {gate.gate_number} is already free")

        flight = await registry.get_flight(gate.current_flight_id)
        if flight is not None and flight.status == FlightStatus.DIVERTED:
            raise ConflictState("Diverted flights leave their gate once fuelled")

        async with registry.transaction():
            if flight is not None:
                await crisis.dequeue(registry, flight, now)
                await registry.update_flight(
                    flight.id,
                    status=FlightStatus.COMPLETED,
                    actual_tat=elapsed_minutes(flight.arrival_time, now),
                )
            gate = await registry.update_gate(
                gate.id, status=GateStatus.FREE, current_flight_id=None
            )

    logger.info(
        "Released %s from %s",
        flight.flight_number if flight is not None else "unknown flight",
        gate.gate_number,
    )
    return gate


__all__ = ["GateBoardEntry", "gate_board", "assign_gate", "release_gate"]
