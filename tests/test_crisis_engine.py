"""Fuel crisis state machine against a real (SQLite) registry."""

from __future__ import annotations

import pytest

from groundops.config.rosters import DIVERTED_ROSTER, FlightTemplate
from groundops.config.settings import CrisisConfig
from groundops.errors import InvalidParameters
from groundops.models import FlightStatus
from groundops.services.crisis import DOMESTIC_STATUSES, CrisisEngine
from groundops.services.estimator import FlightParameters, estimate
from groundops.services.gate_board import release_gate
from groundops.services.seed import seed_database


def _engine(clock, roster=DIVERTED_ROSTER) -> CrisisEngine:
    return CrisisEngine(CrisisConfig(), roster=roster, clock=clock)


def _assert_gates_exclusive(gates) -> None:
    referenced = [gate.current_flight_id for gate in gates if gate.current_flight_id is not None]
    assert len(referenced) == len(set(referenced))


def test_views_before_first_activation_are_inactive(run_with_registry, clock) -> None:
    engine = _engine(clock)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        return (
            await engine.current_state(registry),
            await engine.diverted_view(registry),
            await engine.fuel_queue_view(registry),
            await engine.penalty_summary(registry),
            await engine.deactivate(registry),
            await engine.advance(registry),
        )

    state, diverted, queue, summary, deactivated, advanced = run_with_registry(scenario)

    assert state.fuel_crisis_active is False
    assert state.bowser_count == 4
    assert state.manual_pump_speed == 500
    assert diverted == []
    assert queue.domestic_queue == []
    assert queue.bowser_allocation == {"international": [1, 2, 3], "domestic": [4]}
    assert summary.grand_total == 0
    assert summary.international.rate_per_min == 15000
    assert summary.domestic.rate_per_min == 5400
    assert deactivated.changed is False
    assert advanced.international_assigned == []


def test_activation_is_idempotent(run_with_registry, clock) -> None:
    engine = _engine(clock)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        first = await engine.activate(registry)
        ids_after_first = [f.id for f in await registry.list_flights([FlightStatus.DIVERTED])]
        second = await engine.activate(registry)
        ids_after_second = [f.id for f in await registry.list_flights([FlightStatus.DIVERTED])]
        return first, second, ids_after_first, ids_after_second

    first, second, ids_after_first, ids_after_second = run_with_registry(scenario)

    assert first.changed is True
    assert first.state.fuel_crisis_active is True
    assert second.changed is False
    assert len(ids_after_first) == len(DIVERTED_ROSTER)
    assert ids_after_first == ids_after_second


def test_landed_diverted_flights_get_bowsers_and_gates_in_arrival_order(
    run_with_registry, clock
) -> None:
    engine = _engine(clock)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        await engine.activate(registry)
        return await engine.diverted_view(registry), await registry.list_gates()

    views, gates = run_with_registry(scenario)
    by_number = {view.flight.flight_number: view for view in views}

    assert [view.flight.flight_number for view in views] == [
        "INT-1015-003",
        "INT-1015-004",
        "INT-1015-002",
        "INT-1015-001",
        "INT-1015-000",
    ]
    assert [view.bowser_slot for view in views] == [1, 2, 3, None, None]
    assert [view.gate_number for view in views] == ["G5", "G6", "G7", None, None]

    air_france = by_number["INT-1015-003"]
    assert air_france.has_landed is True
    assert air_france.elapsed_min == 25
    assert air_france.penalty_accrued == 25 * 15000
    assert air_france.fuel_duration == 84
    assert air_france.is_being_fuelled is True
    assert air_france.flight.penalty_rate_per_min == 15000
    # Manual fuel plus the mandatory safety check.
    assert air_france.flight.safety_check_duration == 15

    emirates = by_number["INT-1015-001"]
    assert emirates.has_landed is False
    assert emirates.mins_until_arrival == 95
    assert emirates.penalty_accrued == 0

    _assert_gates_exclusive(gates)


def test_domestic_queue_waits_are_cumulative(run_with_registry, clock) -> None:
    engine = _engine(clock)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        await engine.activate(registry)
        return await engine.fuel_queue_view(registry)

    view = run_with_registry(scenario)
    entries = view.domestic_queue

    # Manual durations at 500 L/min for the six open domestic flights.
    assert [entry.fuel_duration for entry in entries] == [14, 25, 28, 16, 30, 12]
    assert [entry.estimated_wait_mins for entry in entries] == [0, 14, 39, 67, 83, 113]
    assert [entry.position for entry in entries] == [1, 2, 3, 4, 5, 6]
    assert entries[0].is_currently_fuelling is True
    assert not any(entry.is_currently_fuelling for entry in entries[1:])
    assert view.domestic_queue_length == 6

    third = entries[2].flight
    assert third.fuel_queue_delay == 39
    hydrant = estimate(FlightParameters.from_flight(third))
    assert third.predicted_tat == hydrant.predicted_tat + 39


def test_three_flight_queue_wait(run_with_registry, clock) -> None:
    engine = _engine(clock, roster=())

    async def scenario(registry):
        for number, liters in (("DQ-1", 5000), ("DQ-2", 7000), ("DQ-3", 4000)):
            await registry.create_flight(
                flight_number=number,
                airline="Test Air",
                aircraft_type="Narrow",
                arrival_time=clock(),
                fuel_liters=liters,
                bags_count=50,
                meals_qty=60,
                status=FlightStatus.SCHEDULED,
            )
        await registry.create_gate("G5")
        await engine.activate(registry)
        return await engine.fuel_queue_view(registry)

    view = run_with_registry(scenario)

    assert [entry.fuel_duration for entry in view.domestic_queue] == [10, 14, 8]
    assert view.domestic_queue[2].estimated_wait_mins == 24


def test_deactivation_restores_hydrant_predictions(run_with_registry, clock) -> None:
    engine = _engine(clock)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        before = {
            flight.id: flight.predicted_tat for flight in await registry.list_flights(DOMESTIC_STATUSES)
        }
        await engine.activate(registry)
        result = await engine.deactivate(registry)
        return (
            before,
            result,
            await registry.list_flights(),
            await registry.list_gates(),
            await engine.penalty_summary(registry),
        )

    before, result, flights, gates, summary = run_with_registry(scenario)

    assert result.changed is True
    assert result.state.fuel_crisis_active is False
    assert not [flight for flight in flights if flight.status == FlightStatus.DIVERTED]
    assert summary.grand_total == 0

    international_gates = [gate for gate in gates if gate.gate_number in {"G5", "G6", "G7", "G8"}]
    assert all(gate.current_flight_id is None for gate in international_gates)

    for flight in flights:
        if flight.status not in DOMESTIC_STATUSES:
            continue
        hydrant = estimate(FlightParameters.from_flight(flight))
        assert flight.fuel_duration == hydrant.fuel_duration
        assert flight.predicted_tat == before[flight.id] == hydrant.predicted_tat
        assert flight.fuel_queue_position is None
        assert flight.fuel_queue_delay is None


def test_reactivation_after_deactivation_rebuilds_roster(run_with_registry, clock) -> None:
    engine = _engine(clock)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        await engine.activate(registry)
        await engine.deactivate(registry)
        again = await engine.activate(registry)
        return again, await registry.list_flights([FlightStatus.DIVERTED])

    again, diverted = run_with_registry(scenario)

    assert again.changed is True
    assert len(diverted) == len(DIVERTED_ROSTER)


def test_advance_releases_bowsers_and_drains_domestic_queue(run_with_registry, clock) -> None:
    engine = _engine(clock)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        await engine.activate(registry)
        clock.advance(100)
        result = await engine.advance(registry)
        return result, await engine.diverted_view(registry), await engine.fuel_queue_view(registry)

    result, diverted, queue = run_with_registry(scenario)

    # Emirates landed at +95; the first three bowsers finished after 84, 90 and 92 minutes.
    assert result.international_assigned == ["INT-1015-001"]
    slots = {view.flight.flight_number: view.bowser_slot for view in diverted}
    assert slots == {
        "INT-1015-003": None,
        "INT-1015-004": None,
        "INT-1015-002": None,
        "INT-1015-001": 1,
        "INT-1015-000": None,
    }
    gates = {view.flight.flight_number: view.gate_number for view in diverted}
    # Finished flights left G5-G7, so Emirates takes the first international gate.
    assert gates["INT-1015-001"] == "G5"
    assert gates["INT-1015-003"] is None

    # Domestic heads finished at +14, +39, +67 and +83.
    assert result.domestic_completed == ["AM-1001-031", "AM-1001-063", "AM-1001-098", "DL-1002-010"]
    head = queue.domestic_queue[0]
    assert head.flight.flight_number == "DL-1002-012"
    assert head.position == 1
    assert head.fuel_elapsed == 17
    assert head.fuel_remaining == 13
    assert head.fuel_progress == 57
    assert queue.domestic_queue[1].estimated_wait_mins == 30


def test_failed_roster_synthesis_leaves_no_partial_state(run_with_registry, clock) -> None:
    broken_roster = DIVERTED_ROSTER[:2] + (
        FlightTemplate("INT-BAD-001", "Nowhere Air", "Jumbo", 40000, 300, 20, 250, 10, -5),
    )
    engine = _engine(clock, roster=broken_roster)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        with pytest.raises(InvalidParameters):
            await engine.activate(registry)
        return (
            await registry.list_flights([FlightStatus.DIVERTED]),
            await engine.current_state(registry),
            await registry.list_flights(DOMESTIC_STATUSES),
        )

    diverted, state, domestic = run_with_registry(scenario)

    assert diverted == []
    assert state.fuel_crisis_active is False
    assert all(flight.fuel_queue_position is None for flight in domestic)


def test_fuelled_diverted_flights_free_their_gates_for_later_arrivals(
    run_with_registry, clock
) -> None:
    engine = _engine(clock)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        await engine.activate(registry)
        _assert_gates_exclusive(await registry.list_gates())

        clock.advance(100)
        first = await engine.advance(registry)
        _assert_gates_exclusive(await registry.list_gates())

        # Lufthansa lands at +144 while Emirates is still on bowser 1.
        clock.advance(60)
        second = await engine.advance(registry)
        gates = await registry.list_gates()
        return first, second, await engine.diverted_view(registry), gates

    first, second, diverted, gates = run_with_registry(scenario)

    assert first.international_assigned == ["INT-1015-001"]
    assert second.international_assigned == ["INT-1015-000"]

    by_number = {view.flight.flight_number: view for view in diverted}
    lufthansa = by_number["INT-1015-000"]
    assert lufthansa.has_landed is True
    assert lufthansa.bowser_slot == 2
    assert lufthansa.gate_number == "G6"
    assert lufthansa.is_being_fuelled is True
    assert by_number["INT-1015-001"].bowser_slot == 1
    assert by_number["INT-1015-001"].gate_number == "G5"
    for number in ("INT-1015-003", "INT-1015-004", "INT-1015-002"):
        assert by_number[number].bowser_slot is None
        assert by_number[number].gate_number is None

    occupied = {gate.gate_number for gate in gates if gate.current_flight_id is not None}
    assert {"G5", "G6"} <= occupied
    assert not {"G7", "G8"} & occupied
    _assert_gates_exclusive(gates)


def test_releasing_the_fuelling_flight_hands_the_bowser_to_the_next(
    run_with_registry, clock
) -> None:
    engine = _engine(clock)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        await engine.activate(registry)
        # G1 holds AM-1001-031, the head of the domestic queue.
        await release_gate(registry, 1, clock(), engine)
        released = await registry.get_flight(1)
        after_release = await engine.fuel_queue_view(registry)

        clock.advance(10)
        ten_minutes_in = await engine.fuel_queue_view(registry)

        clock.advance(490)
        result = await engine.advance(registry)
        drained = await engine.fuel_queue_view(registry)
        return released, after_release, ten_minutes_in, result, drained, await registry.list_gates()

    released, after_release, ten_minutes_in, result, drained, gates = run_with_registry(scenario)

    assert released.status == FlightStatus.COMPLETED
    assert released.fuel_queue_position is None

    entries = after_release.domestic_queue
    assert [entry.fuel_duration for entry in entries] == [25, 28, 16, 30, 12]
    assert [entry.estimated_wait_mins for entry in entries] == [0, 25, 53, 69, 99]
    assert [entry.position for entry in entries] == [1, 2, 3, 4, 5]
    head = entries[0]
    assert head.flight.flight_number == "AM-1001-063"
    assert head.is_currently_fuelling is True
    assert head.flight.fuel_start_time is not None
    assert head.flight.fuel_queue_delay == 0
    manual = estimate(FlightParameters.from_flight(head.flight), engine.fueling)
    assert head.flight.predicted_tat == manual.predicted_tat

    assert ten_minutes_in.domestic_queue[0].fuel_elapsed == 10
    assert ten_minutes_in.domestic_queue[0].fuel_progress == 40

    assert len(result.domestic_completed) == 5
    assert "AM-1001-031" not in result.domestic_completed
    assert drained.domestic_queue == []
    _assert_gates_exclusive(gates)


def test_releasing_a_waiting_flight_closes_the_gap(run_with_registry, clock) -> None:
    engine = _engine(clock)

    async def scenario(registry):
        await seed_database(registry, clock(), 5400)
        await engine.activate(registry)
        # G3 holds AM-1001-098, third in the domestic queue.
        await release_gate(registry, 3, clock(), engine)
        return await engine.fuel_queue_view(registry)

    view = run_with_registry(scenario)
    entries = view.domestic_queue

    assert entries[0].flight.flight_number == "AM-1001-031"
    assert entries[0].is_currently_fuelling is True
    assert [entry.fuel_duration for entry in entries] == [14, 25, 16, 30, 12]
    assert [entry.estimated_wait_mins for entry in entries] == [0, 14, 39, 55, 85]
    assert [entry.flight.fuel_queue_delay for entry in entries] == [0, 14, 39, 55, 85]
    assert [entry.position for entry in entries] == [1, 2, 3, 4, 5]


def test_deactivation_restores_status_of_imported_fuel_queue_rows(
    run_with_registry, clock
) -> None:
    engine = _engine(clock, roster=())

    async def scenario(registry):
        parked = await registry.create_gate("G1")
        for number, gate_id in (("FQ-1", parked.id), ("FQ-2", None)):
            await registry.create_flight(
                flight_number=number,
                airline="Test Air",
                aircraft_type="Narrow",
                arrival_time=clock(),
                fuel_liters=5000,
                bags_count=50,
                meals_qty=60,
                gate_id=gate_id,
                status=FlightStatus.FUEL_QUEUE,
            )
        await engine.activate(registry)
        queued = (await engine.fuel_queue_view(registry)).domestic_queue_length
        await engine.deactivate(registry)
        return queued, await registry.list_flights()

    queued, flights = run_with_registry(scenario)

    assert queued == 2
    statuses = {flight.flight_number: flight.status for flight in flights}
    assert statuses == {"FQ-1": FlightStatus.ACTIVE, "FQ-2": FlightStatus.SCHEDULED}
