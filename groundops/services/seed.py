"""Startup seeding of gates and a domestic flight schedule."""

from __future__ import annotations

import logging
from datetime import datetime

from groundops.application.interfaces import GroundOpsRegistry
from groundops.config.rosters import ACTIVE_ARRIVAL_OFFSETS, SEED_FLIGHTS, SEED_GATES
from groundops.models import FlightStatus, GateStatus
from groundops.services.estimator import HYDRANT, FlightParameters, estimate
from groundops.utils import minutes_from

logger = logging.getLogger(__name__)

SEED_ACTIVE_GATES = 4


async def seed_database(registry: GroundOpsRegistry, now: datetime, penalty_rate: int) -> None:
    """Populate an empty database, then refresh the arrival times of ACTIVE flights.

    Seeding only happens when no gates exist, so restarts never duplicate
    data. The refresh runs on every start so the gate board always shows
    turnarounds in progress.
    """

    async with registry.transaction():
        if not await registry.list_gates():
            await _seed_gates_and_flights(registry, now, penalty_rate)

        active = await registry.list_flights([FlightStatus.ACTIVE])
        for flight, offset in zip(active, ACTIVE_ARRIVAL_OFFSETS):
            await registry.update_flight(flight.id, arrival_time=minutes_from(now, -offset))
        if active:
            logger.info("Refreshed arrival times for %d active flights", len(active))


async def _seed_gates_and_flights(
    registry: GroundOpsRegistry, now: datetime, penalty_rate: int
) -> None:
    gates = [await registry.create_gate(number) for number in SEED_GATES]

    scheduled = []
    for template in SEED_FLIGHTS:
        params = FlightParameters(
            aircraft_type=template.aircraft_type,
            bags_count=template.bags_count,
            priority_bags=template.priority_bags,
            fuel_liters=template.fuel_liters,
            meals_qty=template.meals_qty,
            special_meals=template.special_meals,
            catering_required=template.catering_required,
            safety_check=template.safety_check,
            penalty_rate_per_min=penalty_rate,
        )
        flight = await registry.create_flight(
            flight_number=template.flight_number,
            airline=template.airline,
            aircraft_type=template.aircraft_type,
            arrival_time=minutes_from(now, template.arrival_offset_min),
            arrival_delay=0,
            fuel_liters=template.fuel_liters,
            bags_count=template.bags_count,
            priority_bags=template.priority_bags,
            meals_qty=template.meals_qty,
            special_meals=template.special_meals,
            catering_required=template.catering_required,
            safety_check=template.safety_check,
            actual_tat=template.actual_tat,
            status=FlightStatus(template.status),
            penalty_rate_per_min=penalty_rate,
            **estimate(params, HYDRANT).as_flight_fields(),
        )
        if flight.status == FlightStatus.SCHEDULED:
            scheduled.append(flight)

    for gate, flight in zip(gates[:SEED_ACTIVE_GATES], scheduled):
        await registry.update_gate(gate.id, status=GateStatus.ACTIVE, current_flight_id=flight.id)
        await registry.update_flight(flight.id, gate_id=gate.id, status=FlightStatus.ACTIVE)

    logger.info("Seeded %d gates and %d flights", len(gates), len(SEED_FLIGHTS))


__all__ = ["seed_database"]
