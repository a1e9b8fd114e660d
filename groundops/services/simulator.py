"""Monte Carlo turnaround risk simulation.

Each trial perturbs the estimator's real-valued sub-durations with normal
noise and sums them. Noisy components are not clamped, so a
trial can produce an implausibly low (even negative) component; percentiles
are read off the sorted trial TATs as plain order statistics.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional

from groundops.errors import InternalComputationError, InvalidParameters
from groundops.services.estimator import (
    BASE_PAD_MIN,
    HYDRANT,
    FlightParameters,
    FuelingMode,
    baggage_minutes,
    catering_minutes,
    penalty_for,
    safety_minutes,
)
from groundops.services.stats import histogram, normal_sample, order_statistic, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_TRIALS = 1000
HISTOGRAM_BIN_WIDTH = 2

BAGGAGE_SIGMA = 0.10
FUEL_SIGMA = 0.05
CATERING_SIGMA = 0.08
SAFETY_STD_DEV = 2.0

PERCENTILES = (0.50, 0.75, 0.90)


@dataclass(frozen=True, slots=True)
class HistogramBin:
    bin: int
    count: int


@dataclass(frozen=True, slots=True)
class SimulationResult:
    p50: int
    p75: int
    p90: int
    p50_penalty: int
    p75_penalty: int
    p90_penalty: int
    bottleneck_consistency: int
    trials: int
    histogram: list[HistogramBin] = field(default_factory=list)


def simulate(
    params: FlightParameters,
    trials: int = DEFAULT_TRIALS,
    fueling: FuelingMode = HYDRANT,
    rng: Optional[random.Random] = None,
) -> SimulationResult:
    """Run ``trials`` noisy turnarounds and aggregate percentiles and a histogram."""

    params.validate()
    if isinstance(trials, bool) or not isinstance(trials, int) or trials < 1:
        raise InvalidParameters("trials", "trials must be a positive integer")

    rng = rng or random.Random()

    base_baggage = baggage_minutes(params)
    base_fuel = fueling.minutes(params.fuel_liters)
    base_catering = catering_minutes(params)
    base_safety = float(safety_minutes(params))

    outcomes: list[int] = []
    baggage_dominant = 0
    for _ in range(trials):
        baggage = normal_sample(rng, base_baggage, base_baggage * BAGGAGE_SIGMA)
        fuel = normal_sample(rng, base_fuel, base_fuel * FUEL_SIGMA)
        catering = normal_sample(rng, base_catering, base_catering * CATERING_SIGMA)
        safety = normal_sample(rng, base_safety, SAFETY_STD_DEV)

        total = baggage + fuel + catering + safety + BASE_PAD_MIN
        if not math.isfinite(total):
            raise InternalComputationError("Simulation produced a non-finite trial")
        outcomes.append(round_half_up(total))
        if baggage > fuel and baggage > catering:
            baggage_dominant += 1

    outcomes.sort()
    p50, p75, p90 = (order_statistic(outcomes, fraction) for fraction in PERCENTILES)
    rate = params.penalty_rate_per_min

    logger.debug(
        "Simulated %d trials (%s fueling): p50=%d p75=%d p90=%d",
        trials,
        fueling.label,
        p50,
        p75,
        p90,
    )

    return SimulationResult(
        p50=p50,
        p75=p75,
        p90=p90,
        p50_penalty=penalty_for(p50, params.aircraft_type, rate),
        p75_penalty=penalty_for(p75, params.aircraft_type, rate),
        p90_penalty=penalty_for(p90, params.aircraft_type, rate),
        bottleneck_consistency=round_half_up(baggage_dominant / trials * 100),
        trials=trials,
        histogram=[
            HistogramBin(bin=bin_start, count=count)
            for bin_start, count in histogram(outcomes, HISTOGRAM_BIN_WIDTH)
        ],
    )


__all__ = ["HistogramBin", "SimulationResult", "simulate", "DEFAULT_TRIALS"]
