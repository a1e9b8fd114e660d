"""Fuel-supply crisis state machine and bowser allocation.

During a crisis the hydrant system is offline and aircraft are fueled by a
small fleet of manual bowsers. International (diverted) flights get priority
slots; domestic flights share the remaining bowser through a FIFO queue.

The engine is the only writer of crisis state. ``activate``, ``deactivate``
and ``advance`` are serialised by an in-process lock and each runs inside a
single registry transaction. The ``*_view`` methods only read.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Sequence

from groundops.application.interfaces import GroundOpsRegistry
from groundops.config.rosters import DIVERTED_ROSTER, FlightTemplate
from groundops.config.settings import CrisisConfig
from groundops.models import CrisisState, Flight, FlightStatus, Gate, GateStatus
from groundops.services.estimator import (
    HYDRANT,
    FlightParameters,
    FuelingMode,
    estimate,
    penalty_for,
)
from groundops.services.stats import elapsed_minutes, progress_pct, round_half_up
from groundops.telemetry import record_crisis_transition
from groundops.utils import minutes_from, utcnow

logger = logging.getLogger(__name__)

DOMESTIC_STATUSES = (FlightStatus.ACTIVE, FlightStatus.SCHEDULED, FlightStatus.FUEL_QUEUE)


@dataclass(frozen=True, slots=True)
class CrisisSnapshot:
    fuel_crisis_active: bool
    bowser_count: int
    manual_pump_speed: int
    activated_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class CrisisTransition:
    state: CrisisSnapshot
    message: str
    changed: bool


@dataclass(frozen=True, slots=True)
class AdvanceResult:
    state: CrisisSnapshot
    message: str
    international_assigned: list[str] = field(default_factory=list)
    domestic_completed: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DivertedFlightView:
    flight: Flight
    has_landed: bool
    elapsed_min: int
    mins_until_arrival: int
    penalty_accrued: int
    fuel_duration: int
    bowser_slot: Optional[int]
    gate_number: Optional[str]
    fuel_elapsed: int
    fuel_remaining: int
    fuel_progress: int

    @property
    def is_being_fuelled(self) -> bool:
        return self.bowser_slot is not None


@dataclass(frozen=True, slots=True)
class FuelQueueEntry:
    flight: Flight
    position: int
    fuel_duration: int
    estimated_wait_mins: int
    is_currently_fuelling: bool
    fuel_elapsed: int
    fuel_remaining: int
    fuel_progress: int


@dataclass(frozen=True, slots=True)
class FuelQueueView:
    crisis: CrisisSnapshot
    bowser_allocation: dict[str, list[int]]
    domestic_queue: list[FuelQueueEntry]

    @property
    def domestic_queue_length(self) -> int:
        return len(self.domestic_queue)


@dataclass(frozen=True, slots=True)
class CohortPenalty:
    count: int
    total_penalty: int
    rate_per_min: int


@dataclass(frozen=True, slots=True)
class PenaltySummary:
    international: CohortPenalty
    domestic: CohortPenalty
    allocation_rule: str

    @property
    def grand_total(self) -> int:
        return self.international.total_penalty + self.domestic.total_penalty


class CrisisEngine:
    """Owns the NORMAL <-> CRISIS_ACTIVE transitions and bowser bookkeeping."""

    def __init__(
        self,
        config: CrisisConfig,
        roster: Sequence[FlightTemplate] = DIVERTED_ROSTER,
        clock: Callable[[], datetime] = utcnow,
        domestic_penalty_rate: int = 5400,
    ) -> None:
        self.config = config
        self.roster = tuple(roster)
        self.domestic_penalty_rate = domestic_penalty_rate
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def lock(self) -> asyncio.Lock:
        """Held by every writer of bowser bookkeeping, including gate release."""

        return self._lock

    @property
    def fueling(self) -> FuelingMode:
        return FuelingMode.bowser(self.config.manual_pump_speed)

    @property
    def allocation_rule(self) -> str:
        intl = len(self.config.international_slots)
        return (
            f"{intl} bowsers -> INT ({self.config.international_penalty_rate}/min) | "
            f"1 bowser -> DOM ({self.domestic_penalty_rate}/min)"
        )

    def snapshot(self, state: Optional[CrisisState]) -> CrisisSnapshot:
        if state is None:
            return CrisisSnapshot(
                fuel_crisis_active=False,
                bowser_count=self.config.bowser_count,
                manual_pump_speed=self.config.manual_pump_speed,
            )
        return CrisisSnapshot(
            fuel_crisis_active=bool(state.fuel_crisis_active),
            bowser_count=state.bowser_count,
            manual_pump_speed=state.manual_pump_speed,
            activated_at=state.activated_at,
        )

    async def current_state(self, registry: GroundOpsRegistry) -> CrisisSnapshot:
        return self.snapshot(await registry.get_crisis_state())

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def activate(self, registry: GroundOpsRegistry) -> CrisisTransition:
        """Enter crisis mode; a repeat call leaves everything untouched."""

        async with self._lock:
            state = await registry.get_crisis_state()
            if state is not None and state.fuel_crisis_active:
                logger.debug("Fuel crisis already active; activation is a no-op")
                record_crisis_transition("activate", "noop")
                return CrisisTransition(
                    self.snapshot(state), "Fuel crisis already active.", changed=False
                )

            now = self._clock()
            async with registry.transaction():
                state = await registry.upsert_crisis_state(
                    fuel_crisis_active=True,
                    bowser_count=self.config.bowser_count,
                    manual_pump_speed=self.config.manual_pump_speed,
                    activated_at=now,
                )
                diverted = await registry.list_flights([FlightStatus.DIVERTED])
                if not diverted:
                    diverted = await self._synthesize_roster(registry, now)
                await self._allocate_international(registry, diverted, now)
                queued = await self._rebuild_domestic_queue(registry, now)
                snapshot = self.snapshot(state)

            record_crisis_transition("activate", "changed")
            logger.info(
                "Fuel crisis activated: %d diverted flights, %d domestic flights queued on bowser %d",
                len(diverted),
                queued,
                self.config.domestic_slot,
            )
            intl = ",".join(str(slot) for slot in self.config.international_slots)
            return CrisisTransition(
                snapshot,
                f"Crisis activated. INT gets bowsers {intl}, DOM gets bowser {self.config.domestic_slot}.",
                changed=True,
            )

    async def deactivate(self, registry: GroundOpsRegistry) -> CrisisTransition:
        """Leave crisis mode and restore hydrant predictions; no-op if inactive."""

        async with self._lock:
            state = await registry.get_crisis_state()
            if state is None or not state.fuel_crisis_active:
                logger.debug("Fuel crisis not active; deactivation is a no-op")
                record_crisis_transition("deactivate", "noop")
                return CrisisTransition(
                    self.snapshot(state), "Fuel crisis is not active.", changed=False
                )

            async with registry.transaction():
                state = await registry.upsert_crisis_state(fuel_crisis_active=False)
                diverted = await registry.list_flights([FlightStatus.DIVERTED])
                diverted_ids = {flight.id for flight in diverted}

                for gate in await registry.list_gates():
                    if gate.current_flight_id in diverted_ids:
                        await registry.update_gate(
                            gate.id, status=GateStatus.FREE, current_flight_id=None
                        )
                removed = await registry.delete_flights(diverted_ids)

                for flight in await registry.list_flights(DOMESTIC_STATUSES):
                    prediction = estimate(FlightParameters.from_flight(flight), HYDRANT)
                    status = flight.status
                    # The engine never writes FUEL_QUEUE, but imported rows
                    # may carry it; they go back to their gate-derived status.
                    if status == FlightStatus.FUEL_QUEUE:
                        status = FlightStatus.ACTIVE if flight.gate_id else FlightStatus.SCHEDULED
                    await registry.update_flight(
                        flight.id,
                        status=status,
                        fuel_queue_position=None,
                        fuel_start_time=None,
                        fuel_queue_delay=None,
                        **prediction.as_flight_fields(),
                    )
                snapshot = self.snapshot(state)

            record_crisis_transition("deactivate", "changed")
            logger.info(
                "Fuel crisis resolved: removed %d diverted flights, hydrant fueling restored",
                removed,
            )
            return CrisisTransition(
                snapshot,
                "Crisis resolved. Diverted flights cleared. Normal hydrant fuelling restored.",
                changed=True,
            )

    async def advance(self, registry: GroundOpsRegistry) -> AdvanceResult:
        """Move bowsers forward to the current time.

        Releases international bowsers whose fueling has finished, hands free
        slots to diverted flights that have landed since the last poll, and
        pops finished flights off the head of the domestic queue.
        """

        async with self._lock:
            state = await registry.get_crisis_state()
            if state is None or not state.fuel_crisis_active:
                return AdvanceResult(self.snapshot(state), "Fuel crisis is not active.")

            now = self._clock()
            async with registry.transaction():
                diverted = await registry.list_flights([FlightStatus.DIVERTED])
                assigned = await self._allocate_international(registry, diverted, now)
                completed = await self._advance_domestic_queue(registry, now)
                snapshot = self.snapshot(state)

            if assigned or completed:
                logger.info(
                    "Bowsers advanced: %d INT assigned, %d DOM completed",
                    len(assigned),
                    len(completed),
                )
            return AdvanceResult(
                snapshot,
                f"{len(assigned)} international flights assigned, "
                f"{len(completed)} domestic flights finished fueling.",
                international_assigned=[flight.flight_number for flight in assigned],
                domestic_completed=[flight.flight_number for flight in completed],
            )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    async def diverted_view(
        self, registry: GroundOpsRegistry, now: Optional[datetime] = None
    ) -> list[DivertedFlightView]:
        now = now or self._clock()
        state = await registry.get_crisis_state()
        if state is None or not state.fuel_crisis_active:
            return []

        gate_numbers = {gate.id: gate.gate_number for gate in await registry.list_gates()}
        views = []
        for flight in await registry.list_flights([FlightStatus.DIVERTED]):
            has_landed = flight.arrival_time <= now
            elapsed = elapsed_minutes(flight.arrival_time, now) if has_landed else 0
            until_arrival = (
                0 if has_landed
                else round_half_up((flight.arrival_time - now).total_seconds() / 60)
            )
            fuel_duration = self._fuel_duration(flight)
            slot = flight.fuel_queue_position
            bowser_slot = slot if slot in self.config.international_slots else None
            fuel_elapsed = min(elapsed_minutes(flight.fuel_start_time, now), fuel_duration)
            views.append(
                DivertedFlightView(
                    flight=flight,
                    has_landed=has_landed,
                    elapsed_min=elapsed,
                    mins_until_arrival=until_arrival,
                    penalty_accrued=elapsed * flight.penalty_rate_per_min,
                    fuel_duration=fuel_duration,
                    bowser_slot=bowser_slot,
                    gate_number=gate_numbers.get(flight.gate_id),
                    fuel_elapsed=fuel_elapsed,
                    fuel_remaining=max(0, fuel_duration - fuel_elapsed),
                    fuel_progress=(
                        progress_pct(fuel_elapsed, fuel_duration)
                        if flight.fuel_start_time is not None
                        else 0
                    ),
                )
            )
        views.sort(key=lambda view: (not view.has_landed, view.flight.arrival_time))
        return views

    async def fuel_queue_view(
        self, registry: GroundOpsRegistry, now: Optional[datetime] = None
    ) -> FuelQueueView:
        now = now or self._clock()
        state = await registry.get_crisis_state()
        allocation = {
            "international": list(self.config.international_slots),
            "domestic": [self.config.domestic_slot],
        }
        snapshot = self.snapshot(state)
        if not snapshot.fuel_crisis_active:
            return FuelQueueView(snapshot, allocation, [])

        entries = []
        wait = 0
        for index, flight in enumerate(await self._domestic_queue(registry)):
            fuel_duration = self._fuel_duration(flight)
            is_head = index == 0
            fuel_elapsed = (
                min(elapsed_minutes(flight.fuel_start_time, now), fuel_duration) if is_head else 0
            )
            entries.append(
                FuelQueueEntry(
                    flight=flight,
                    position=flight.fuel_queue_position,
                    fuel_duration=fuel_duration,
                    estimated_wait_mins=wait,
                    is_currently_fuelling=is_head,
                    fuel_elapsed=fuel_elapsed,
                    fuel_remaining=max(0, fuel_duration - fuel_elapsed),
                    fuel_progress=progress_pct(fuel_elapsed, fuel_duration) if is_head else 0,
                )
            )
            wait += fuel_duration
        return FuelQueueView(snapshot, allocation, entries)

    async def penalty_summary(
        self, registry: GroundOpsRegistry, now: Optional[datetime] = None
    ) -> PenaltySummary:
        now = now or self._clock()
        state = await registry.get_crisis_state()
        intl_rate = self.config.international_penalty_rate
        if state is None or not state.fuel_crisis_active:
            return PenaltySummary(
                international=CohortPenalty(0, 0, intl_rate),
                domestic=CohortPenalty(0, 0, self.domestic_penalty_rate),
                allocation_rule=self.allocation_rule,
            )

        international = await registry.list_flights([FlightStatus.DIVERTED])
        intl_total = sum(
            elapsed_minutes(flight.arrival_time, now) * flight.penalty_rate_per_min
            for flight in international
        )
        domestic = [
            flight
            for flight in await registry.list_flights(DOMESTIC_STATUSES)
            if (flight.penalty_risk or 0) > 0
        ]
        return PenaltySummary(
            international=CohortPenalty(len(international), intl_total, intl_rate),
            domestic=CohortPenalty(
                len(domestic),
                sum(flight.penalty_risk for flight in domestic),
                self.domestic_penalty_rate,
            ),
            allocation_rule=self.allocation_rule,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fuel_duration(self, flight: Flight) -> int:
        if flight.fuel_duration is not None:
            return flight.fuel_duration
        return round_half_up(self.fueling.minutes(flight.fuel_liters))

    async def _synthesize_roster(
        self, registry: GroundOpsRegistry, now: datetime
    ) -> list[Flight]:
        rate = self.config.international_penalty_rate
        created = []
        for template in self.roster:
            params = FlightParameters(
                aircraft_type=template.aircraft_type,
                bags_count=template.bags_count,
                priority_bags=template.priority_bags,
                fuel_liters=template.fuel_liters,
                meals_qty=template.meals_qty,
                special_meals=template.special_meals,
                catering_required=template.catering_required,
                safety_check=True,
                penalty_rate_per_min=rate,
            )
            prediction = estimate(params, self.fueling)
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
                safety_check=True,
                status=FlightStatus.DIVERTED,
                penalty_rate_per_min=rate,
                **prediction.as_flight_fields(),
            )
            created.append(flight)
        logger.info("Synthesised %d diverted international flights", len(created))
        return created

    def _free_international_gate(self, gates: Sequence[Gate], taken: set[int]) -> Optional[Gate]:
        by_number = {gate.gate_number: gate for gate in gates}
        for number in self.config.international_gates:
            gate = by_number.get(number)
            if (
                gate is not None
                and gate.id not in taken
                and gate.status == GateStatus.FREE
                and gate.current_flight_id is None
            ):
                return gate
        return None

    async def _allocate_international(
        self, registry: GroundOpsRegistry, diverted: Sequence[Flight], now: datetime
    ) -> list[Flight]:
        """Give free international bowsers to landed diverted flights, first-landed first."""

        slots = list(self.config.international_slots)
        busy: set[int] = set()
        for flight in diverted:
            slot = flight.fuel_queue_position
            if slot not in slots:
                continue
            if elapsed_minutes(flight.fuel_start_time, now) >= self._fuel_duration(flight):
                # A fuelled flight leaves its stand so the next arrival can use it.
                if flight.gate_id is not None:
                    await registry.update_gate(
                        flight.gate_id, status=GateStatus.FREE, current_flight_id=None
                    )
                await registry.update_flight(flight.id, fuel_queue_position=None, gate_id=None)
                logger.info("%s finished fueling, bowser %d released", flight.flight_number, slot)
            else:
                busy.add(slot)

        waiting = sorted(
            (
                flight
                for flight in diverted
                if flight.arrival_time <= now
                and flight.fuel_queue_position is None
                and flight.fuel_start_time is None
            ),
            key=lambda flight: flight.arrival_time,
        )
        free_slots = [slot for slot in slots if slot not in busy]
        gates = await registry.list_gates()
        taken: set[int] = set()
        assigned = []
        for flight in waiting:
            if not free_slots:
                break
            gate = None
            if flight.gate_id is None:
                gate = self._free_international_gate(gates, taken)
                if gate is None:
                    logger.info("No free international gate for %s", flight.flight_number)
                    break
                taken.add(gate.id)
                await registry.update_gate(
                    gate.id, status=GateStatus.ACTIVE, current_flight_id=flight.id
                )
            slot = free_slots.pop(0)
            await registry.update_flight(
                flight.id,
                gate_id=gate.id if gate is not None else flight.gate_id,
                fuel_queue_position=slot,
                fuel_start_time=now,
            )
            logger.info(
                "%s assigned to %s, bowser %d",
                flight.flight_number,
                gate.gate_number if gate is not None else f"gate {flight.gate_id}",
                slot,
            )
            assigned.append(flight)
        return assigned

    async def _rebuild_domestic_queue(self, registry: GroundOpsRegistry, now: datetime) -> int:
        """Queue every domestic flight on the domestic bowser, in registry order.

        Each flight waits for the manual fuel durations of all flights ahead
        of it; that wait is added to its TAT before the penalty is computed.
        """

        fueling = self.fueling
        wait = 0
        flights = await registry.list_flights(DOMESTIC_STATUSES)
        for position, flight in enumerate(flights, start=1):
            prediction = estimate(FlightParameters.from_flight(flight), fueling)
            fields = prediction.as_flight_fields()
            fields["predicted_tat"] = prediction.predicted_tat + wait
            fields["penalty_risk"] = penalty_for(
                fields["predicted_tat"], flight.aircraft_type, flight.penalty_rate_per_min
            )
            await registry.update_flight(
                flight.id,
                fuel_queue_position=position,
                fuel_queue_delay=wait,
                fuel_start_time=now if position == 1 else None,
                **fields,
            )
            wait += prediction.fuel_duration
        return len(flights)

    async def dequeue(self, registry: GroundOpsRegistry, flight: Flight, now: datetime) -> bool:
        """Take a domestic flight off the bowser queue and re-plan the flights behind it.

        Callers hold ``lock`` and an open registry transaction. When the head
        leaves, the next flight starts fueling at ``now``. Returns whether
        ``flight`` was queued at all.
        """

        queue = await self._domestic_queue(registry)
        if not any(queued.id == flight.id for queued in queue):
            return False

        was_head = queue[0].id == flight.id
        await registry.update_flight(
            flight.id, fuel_queue_position=None, fuel_queue_delay=None, fuel_start_time=None
        )
        wait = 0
        for position, queued in enumerate(
            (queued for queued in queue if queued.id != flight.id), start=1
        ):
            predicted_tat = (queued.predicted_tat or 0) - (queued.fuel_queue_delay or 0) + wait
            fields = {
                "fuel_queue_position": position,
                "fuel_queue_delay": wait,
                "predicted_tat": predicted_tat,
                "penalty_risk": penalty_for(
                    predicted_tat, queued.aircraft_type, queued.penalty_rate_per_min
                ),
            }
            if position == 1 and was_head:
                fields["fuel_start_time"] = now
            await registry.update_flight(queued.id, **fields)
            wait += self._fuel_duration(queued)

        logger.info("%s left the domestic fuel queue", flight.flight_number)
        return True

    async def _domestic_queue(self, registry: GroundOpsRegistry) -> list[Flight]:
        flights = await registry.list_flights(DOMESTIC_STATUSES)
        queued = [flight for flight in flights if flight.fuel_queue_position is not None]
        return sorted(queued, key=lambda flight: flight.fuel_queue_position)

    async def _advance_domestic_queue(
        self, registry: GroundOpsRegistry, now: datetime
    ) -> list[Flight]:
        queue = await self._domestic_queue(registry)
        completed = []
        # Finished heads hand over at their scheduled end time, so several
        # can complete within a single poll.
        while queue:
            head = queue[0]
            if head.fuel_start_time is None:
                await registry.update_flight(head.id, fuel_start_time=now)
                break
            end = minutes_from(head.fuel_start_time, self._fuel_duration(head))
            if end > now:
                break
            queue.pop(0)
            await registry.update_flight(head.id, fuel_queue_position=None)
            completed.append(head)
            if queue:
                await registry.update_flight(queue[0].id, fuel_start_time=end)

        if completed:
            for position, flight in enumerate(queue, start=1):
                if flight.fuel_queue_position != position:
                    await registry.update_flight(flight.id, fuel_queue_position=position)
        return completed


__all__ = [
    "CrisisEngine",
    "CrisisSnapshot",
    "CrisisTransition",
    "AdvanceResult",
    "DivertedFlightView",
    "FuelQueueEntry",
    "FuelQueueView",
    "CohortPenalty",
    "PenaltySummary",
    "DOMESTIC_STATUSES",
]
