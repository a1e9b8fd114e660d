"""Deterministic TAT estimator behaviour."""

from __future__ import annotations

import math

import pytest

from groundops.errors import InvalidParameters
from groundops.services.estimator import (
    BASE_PAD_MIN,
    HYDRANT,
    Bottleneck,
    FlightParameters,
    FuelingMode,
    estimate,
    penalty_for,
    target_tat,
)


def _wide_body(**overrides) -> FlightParameters:
    fields = dict(
        aircraft_type="Wide",
        bags_count=245,
        priority_bags=22,
        fuel_liters=15200,
        meals_qty=248,
        special_meals=14,
        catering_required=True,
        safety_check=True,
    )
    fields.update(overrides)
    return FlightParameters(**fields)


def test_wide_body_turnaround_breakdown() -> None:
    result = estimate(_wide_body())

    assert result.baggage_duration == 39
    assert result.fuel_duration == 30
    assert result.catering_duration == 21
    assert result.safety_check_duration == 15
    assert result.predicted_tat == 115
    assert result.bottleneck == Bottleneck.BAGGAGE
    assert result.penalty_risk == 297000
    assert result.is_manual_fueling is False


@pytest.mark.parametrize(
    "params",
    [
        _wide_body(),
        _wide_body(aircraft_type="Narrow", catering_required=False),
        _wide_body(safety_check=False, fuel_liters=40000, penalty_rate_per_min=15000),
        _wide_body(bags_count=0, priority_bags=0, meals_qty=0, special_meals=0),
    ],
)
def test_duration_and_penalty_invariants(params: FlightParameters) -> None:
    result = estimate(params)

    assert result.predicted_tat == (
        result.baggage_duration
        + result.fuel_duration
        + result.catering_duration
        + result.safety_check_duration
        + BASE_PAD_MIN
    )
    expected_penalty = max(0, result.predicted_tat - target_tat(params.aircraft_type))
    assert result.penalty_risk == expected_penalty * params.penalty_rate_per_min


def test_estimate_is_pure() -> None:
    params = _wide_body()
    assert estimate(params) == estimate(params)


def test_baggage_wins_tie_with_fuel() -> None:
    params = FlightParameters(
        aircraft_type="Narrow",
        bags_count=100,
        priority_bags=50,
        fuel_liters=10000,
        meals_qty=10,
        special_meals=0,
    )
    result = estimate(params)

    assert result.baggage_duration == result.fuel_duration == 20
    assert result.catering_duration < 20
    assert result.bottleneck == Bottleneck.BAGGAGE


def test_fuel_beats_baggage_only_when_strictly_longer() -> None:
    result = estimate(_wide_body(bags_count=10, priority_bags=0, fuel_liters=40000))
    assert result.bottleneck == Bottleneck.FUEL


def test_no_bottleneck_when_all_services_are_instant() -> None:
    params = FlightParameters(
        aircraft_type="Narrow",
        bags_count=0,
        priority_bags=0,
        fuel_liters=0,
        meals_qty=0,
        special_meals=0,
        catering_required=False,
    )
    result = estimate(params)

    assert result.bottleneck is None
    assert result.predicted_tat == 25
    assert result.penalty_risk == 0


def test_catering_skipped_when_not_required() -> None:
    result = estimate(_wide_body(catering_required=False))
    assert result.catering_duration == 0
    assert result.predicted_tat == 39 + 30 + 15 + BASE_PAD_MIN


def test_manual_bowser_fueling() -> None:
    result = estimate(_wide_body(), FuelingMode.bowser(400))

    assert result.fuel_duration == 38
    assert result.is_manual_fueling is True
    assert result.predicted_tat == 39 + 38 + 21 + 15 + BASE_PAD_MIN


def test_hydrant_rate_is_explicit() -> None:
    assert estimate(_wide_body(), HYDRANT).fuel_duration == 30
    assert estimate(_wide_body(), FuelingMode.hydrant(0.004)).fuel_duration == 61


def test_bowser_requires_positive_pump_speed() -> None:
    with pytest.raises(InvalidParameters) as exc:
        FuelingMode.bowser(0)
    assert exc.value.field == "manualPumpSpeed"


def test_penalty_is_zero_at_target() -> None:
    assert penalty_for(60, "Wide", 5400) == 0
    assert penalty_for(35, "Narrow", 5400) == 0
    assert penalty_for(36, "Narrow", 5400) == 5400


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"aircraft_type": "Jumbo"}, "aircraftType"),
        ({"bags_count": -1}, "bagsCount"),
        ({"priority_bags": -3}, "priorityBags"),
        ({"fuel_liters": math.nan}, "fuelLiters"),
        ({"meals_qty": math.inf}, "mealsQty"),
        ({"special_meals": -0.5}, "specialMeals"),
        ({"penalty_rate_per_min": -1}, "penaltyRatePerMin"),
    ],
)
def test_invalid_parameters_name_the_field(overrides: dict, field: str) -> None:
    with pytest.raises(InvalidParameters) as exc:
        estimate(_wide_body(**overrides))
    assert exc.value.field == field
    assert exc.value.status_code == 400


def test_first_invalid_field_is_reported() -> None:
    with pytest.raises(InvalidParameters) as exc:
        estimate(_wide_body(bags_count=-1, fuel_liters=-1))
    assert exc.value.field == "bagsCount"
