"""Deterministic turnaround-time (TAT) estimator.

The estimator is a closed-form heuristic: each ground service contributes a
linear duration, a fixed pad is added, and the contractual penalty is charged
per minute above the aircraft-class target. Fuel duration depends on the
fueling mode, which callers pass explicitly (hydrant vs. manual bowser).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from groundops.errors import InvalidParameters
from groundops.services.stats import ensure_finite, round_half_up

BASE_PAD_MIN = 10
SAFETY_CHECK_MIN = 15

BAG_MIN_PER_BAG = 0.15
BAG_MIN_PER_PRIORITY_BAG = 0.1
CATERING_MIN_PER_MEAL = 0.08
CATERING_MIN_PER_SPECIAL_MEAL = 0.1

HYDRANT_MIN_PER_LITER = 0.002
MANUAL_PUMP_SPEED_LPM = 500

DOMESTIC_PENALTY_RATE = 5400

TARGET_TAT_MIN = {"Narrow": 35, "Wide": 60}


class Bottleneck(str, Enum):
    BAGGAGE = "BAGGAGE"
    FUEL = "FUEL"
    CATERING = "CATERING"


@dataclass(frozen=True, slots=True)
class FuelingMode:
    """How fuel is delivered: fixed hydrant rate or a manual bowser pump."""

    manual: bool
    rate: float

    @classmethod
    def hydrant(cls, minutes_per_liter: float = HYDRANT_MIN_PER_LITER) -> "FuelingMode":
        return cls(manual=False, rate=minutes_per_liter)

    @classmethod
    def bowser(cls, pump_speed: float = MANUAL_PUMP_SPEED_LPM) -> "FuelingMode":
        if pump_speed <= 0:
            raise InvalidParameters("manualPumpSpeed", "Pump speed must be positive")
        return cls(manual=True, rate=pump_speed)

    @property
    def label(self) -> str:
        return "manual" if self.manual else "hydrant"

    def minutes(self, fuel_liters: float) -> float:
        if self.manual:
            return fuel_liters / self.rate
        return fuel_liters * self.rate


HYDRANT = FuelingMode.hydrant()


@dataclass(frozen=True, slots=True)
class FlightParameters:
    """Ground-service inputs for a single prediction."""

    aircraft_type: str
    bags_count: float
    priority_bags: float
    fuel_liters: float
    meals_qty: float
    special_meals: float
    catering_required: bool = True
    safety_check: bool = True
    arrival_delay: float = 0
    penalty_rate_per_min: float = DOMESTIC_PENALTY_RATE

    def validate(self) -> "FlightParameters":
        """Raise ``InvalidParameters`` naming the first offending field."""

        if self.aircraft_type not in TARGET_TAT_MIN:
            raise InvalidParameters(
                "aircraftType", "aircraftType must be 'Narrow' or 'Wide'"
            )
        for field, value in (
            ("bagsCount", self.bags_count),
            ("priorityBags", self.priority_bags),
            ("fuelLiters", self.fuel_liters),
            ("mealsQty", self.meals_qty),
            ("specialMeals", self.special_meals),
            ("penaltyRatePerMin", self.penalty_rate_per_min),
        ):
            ensure_finite(value, field)
            if value < 0:
                raise InvalidParameters(field, f"'{field}' must not be negative")
        ensure_finite(self.arrival_delay, "arrivalDelay")
        return self

    @classmethod
    def from_flight(cls, flight, penalty_rate: Optional[float] = None) -> "FlightParameters":
        """Build parameters from a persisted flight row."""

        return cls(
            aircraft_type=flight.aircraft_type,
            bags_count=flight.bags_count,
            priority_bags=flight.priority_bags,
            fuel_liters=flight.fuel_liters,
            meals_qty=flight.meals_qty,
            special_meals=flight.special_meals,
            catering_required=flight.catering_required,
            safety_check=flight.safety_check,
            arrival_delay=flight.arrival_delay or 0,
            penalty_rate_per_min=(
                penalty_rate if penalty_rate is not None else flight.penalty_rate_per_min
            ),
        )


@dataclass(frozen=True, slots=True)
class PredictionResult:
    predicted_tat: int
    bottleneck: Optional[Bottleneck]
    penalty_risk: int
    baggage_duration: int
    fuel_duration: int
    catering_duration: int
    safety_check_duration: int
    is_manual_fueling: bool = False

    def as_flight_fields(self) -> dict:
        """Prediction columns as stored on a flight record."""

        return {
            "predicted_tat": self.predicted_tat,
            "bottleneck": self.bottleneck.value if self.bottleneck else None,
            "penalty_risk": self.penalty_risk,
            "baggage_duration": self.baggage_duration,
            "fuel_duration": self.fuel_duration,
            "catering_duration": self.catering_duration,
            "safety_check_duration": self.safety_check_duration,
        }


def target_tat(aircraft_type: str) -> int:
    return TARGET_TAT_MIN["Wide"] if aircraft_type == "Wide" else TARGET_TAT_MIN["Narrow"]


def penalty_for(tat: float, aircraft_type: str, rate: float) -> int:
    return int(round_half_up(max(0, tat - target_tat(aircraft_type)) * rate))


def baggage_minutes(params: FlightParameters) -> float:
    return params.bags_count * BAG_MIN_PER_BAG + params.priority_bags * BAG_MIN_PER_PRIORITY_BAG


def catering_minutes(params: FlightParameters) -> float:
    if not params.catering_required:
        return 0.0
    return params.meals_qty * CATERING_MIN_PER_MEAL + params.special_meals * CATERING_MIN_PER_SPECIAL_MEAL


def safety_minutes(params: FlightParameters) -> int:
    return SAFETY_CHECK_MIN if params.safety_check else 0


def select_bottleneck(baggage: float, fuel: float, catering: float) -> Optional[Bottleneck]:
    """Largest variable duration; ties go to the earlier of baggage, fuel, catering."""

    bottleneck, longest = Bottleneck.BAGGAGE, baggage
    if fuel > longest:
        bottleneck, longest = Bottleneck.FUEL, fuel
    if catering > longest:
        bottleneck, longest = Bottleneck.CATERING, catering
    if longest <= 0:
        return None
    return bottleneck


def estimate(params: FlightParameters, fueling: FuelingMode = HYDRANT) -> PredictionResult:
    """Predict TAT, bottleneck and penalty risk for ``params``."""

    params.validate()

    baggage = round_half_up(baggage_minutes(params))
    fuel = round_half_up(fueling.minutes(params.fuel_liters))
    catering = round_half_up(catering_minutes(params)) if params.catering_required else 0
    safety = safety_minutes(params)
    predicted_tat = baggage + fuel + catering + safety + BASE_PAD_MIN

    return PredictionResult(
        predicted_tat=predicted_tat,
        bottleneck=select_bottleneck(baggage, fuel, catering),
        penalty_risk=penalty_for(predicted_tat, params.aircraft_type, params.penalty_rate_per_min),
        baggage_duration=baggage,
        fuel_duration=fuel,
        catering_duration=catering,
        safety_check_duration=safety,
        is_manual_fueling=fueling.manual,
    )


__all__ = [
    "BASE_PAD_MIN",
    "Bottleneck",
    "FuelingMode",
    "HYDRANT",
    "FlightParameters",
    "PredictionResult",
    "estimate",
    "target_tat",
    "penalty_for",
    "select_bottleneck",
    "baggage_minutes",
    "catering_minutes",
    "safety_minutes",
]
