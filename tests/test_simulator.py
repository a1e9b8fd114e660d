"""Monte Carlo simulator properties."""

from __future__ import annotations

import random

import pytest

from groundops.errors import InvalidParameters
from groundops.services.estimator import FlightParameters, FuelingMode, penalty_for
from groundops.services.simulator import simulate


@pytest.fixture
def narrow_body() -> FlightParameters:
    return FlightParameters(
        aircraft_type="Narrow",
        bags_count=150,
        priority_bags=20,
        fuel_liters=5000,
        meals_qty=180,
        special_meals=5,
        catering_required=True,
        safety_check=True,
    )


def test_percentiles_are_ordered_and_histogram_covers_all_trials(narrow_body) -> None:
    for _ in range(5):
        result = simulate(narrow_body, trials=1000)

        assert result.p50 <= result.p75 <= result.p90
        assert result.trials == 1000
        assert sum(item.count for item in result.histogram) == 1000


def test_histogram_is_sparse_sorted_and_even_binned(narrow_body) -> None:
    result = simulate(narrow_body, trials=1000, rng=random.Random(7))
    bins = [item.bin for item in result.histogram]

    assert bins == sorted(bins)
    assert len(bins) == len(set(bins))
    assert all(item.bin % 2 == 0 for item in result.histogram)
    assert all(item.count > 0 for item in result.histogram)


def test_percentile_penalties_follow_the_estimator_rule(narrow_body) -> None:
    result = simulate(narrow_body, trials=500, rng=random.Random(11))

    assert result.p50_penalty == penalty_for(result.p50, "Narrow", 5400)
    assert result.p75_penalty == penalty_for(result.p75, "Narrow", 5400)
    assert result.p90_penalty == penalty_for(result.p90, "Narrow", 5400)


def test_distribution_shape_matches_base_durations(narrow_body) -> None:
    # Mean of the noisy sum is 24.5 + 10 + 14.9 + 15 + 10 = 74.4 with a
    # standard deviation of roughly 3.4 minutes.
    result = simulate(narrow_body, trials=20000, rng=random.Random(2024))

    assert 72 <= result.p50 <= 77
    assert 2 <= result.p90 - result.p50 <= 7


def test_baggage_dominates_when_it_is_far_longest(narrow_body) -> None:
    result = simulate(narrow_body, trials=1000, rng=random.Random(3))
    assert result.bottleneck_consistency >= 95


def test_seeded_runs_are_reproducible(narrow_body) -> None:
    first = simulate(narrow_body, trials=300, rng=random.Random(42))
    second = simulate(narrow_body, trials=300, rng=random.Random(42))
    assert first == second


def test_manual_fueling_shifts_the_distribution(narrow_body) -> None:
    hydrant = simulate(narrow_body, trials=5000, rng=random.Random(5))
    manual = simulate(narrow_body, trials=5000, fueling=FuelingMode.bowser(100), rng=random.Random(5))

    # 5000 L at 100 L/min is 50 minutes instead of 10.
    assert manual.p50 - hydrant.p50 >= 30


def test_single_trial(narrow_body) -> None:
    result = simulate(narrow_body, trials=1, rng=random.Random(1))

    assert result.p50 == result.p75 == result.p90
    assert len(result.histogram) == 1
    assert result.histogram[0].count == 1


@pytest.mark.parametrize("trials", [0, -5])
def test_non_positive_trials_are_rejected(narrow_body, trials: int) -> None:
    with pytest.raises(InvalidParameters) as exc:
        simulate(narrow_body, trials=trials)
    assert exc.value.field == "trials"


def test_invalid_parameters_are_rejected_before_sampling() -> None:
    params = FlightParameters(
        aircraft_type="Narrow",
        bags_count=-1,
        priority_bags=0,
        fuel_liters=0,
        meals_qty=0,
        special_meals=0,
    )
    with pytest.raises(InvalidParameters) as exc:
        simulate(params, trials=10)
    assert exc.value.field == "bagsCount"
