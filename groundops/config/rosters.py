"""Declarative flight fixtures: the startup seed and the diverted-flight roster.

Arrival times are expressed as minute offsets relative to the moment the
roster is materialised (negative = already landed).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class FlightTemplate:
    """Static ground-service parameters for a flight that is created on demand."""

    flight_number: str
    airline: str
    aircraft_type: str
    fuel_liters: int
    bags_count: int
    priority_bags: int
    meals_qty: int
    special_meals: int
    arrival_offset_min: int
    catering_required: bool = True
    safety_check: bool = True
    actual_tat: Optional[int] = None
    status: str = "SCHEDULED"


# Diverted international arrivals synthesised on crisis activation, in the
# order they were recorded. The first three have already landed.
DIVERTED_ROSTER: tuple[FlightTemplate, ...] = (
    FlightTemplate("INT-1015-003", "Air France", "Wide", 42000, 309, 25, 280, 20, -25),
    FlightTemplate("INT-1015-004", "Singapore Air", "Wide", 45000, 437, 25, 329, 20, -10),
    FlightTemplate("INT-1015-002", "British Airways", "Wide", 46000, 342, 25, 261, 20, -8),
    FlightTemplate("INT-1015-001", "Emirates", "Wide", 48000, 410, 25, 305, 20, 95),
    FlightTemplate("INT-1015-000", "Lufthansa", "Wide", 44000, 412, 25, 327, 20, 144),
)


SEED_GATES: tuple[str, ...] = tuple(f"G{number}" for number in range(1, 9))

SEED_FLIGHTS: tuple[FlightTemplate, ...] = (
    FlightTemplate("AM-1001-031", "American", "Narrow", 7048, 123, 14, 151, 7, -5, actual_tat=42),
    FlightTemplate("AM-1001-063", "American", "Narrow", 12489, 90, 10, 199, 17, -10, actual_tat=36),
    FlightTemplate("AM-1001-098", "American", "Narrow", 13836, 76, 8, 151, 7, -8, actual_tat=38),
    FlightTemplate("DL-1002-010", "Delta", "Narrow", 8200, 110, 12, 165, 9, -15, actual_tat=35),
    FlightTemplate("DL-1002-012", "Delta", "Wide", 15200, 245, 22, 248, 14, 45, actual_tat=55),
    FlightTemplate("WN-1003-001", "Southwest", "Narrow", 6100, 95, 6, 140, 5, 90, actual_tat=28),
    FlightTemplate(
        "WN-1003-075", "Southwest", "Narrow", 5800, 88, 5, 130, 3, -240,
        catering_required=False, actual_tat=25, status="COMPLETED",
    ),
    FlightTemplate(
        "UA-1004-059", "United", "Wide", 14500, 260, 25, 262, 16, -120,
        actual_tat=58, status="COMPLETED",
    ),
    FlightTemplate(
        "UA-1004-112", "United", "Narrow", 7300, 105, 9, 158, 8, -180,
        safety_check=False, actual_tat=30, status="COMPLETED",
    ),
    FlightTemplate(
        "DL-1005-088", "Delta", "Narrow", 9100, 130, 15, 175, 11, -300,
        actual_tat=40, status="COMPLETED",
    ),
)

# Offsets (minutes before now) applied to ACTIVE flights on every start so the
# gate board shows turnarounds in progress.
ACTIVE_ARRIVAL_OFFSETS: tuple[int, ...] = (5, 10, 8, 15, 12, 7, 3, 20)


__all__ = [
    "FlightTemplate",
    "DIVERTED_ROSTER",
    "SEED_GATES",
    "SEED_FLIGHTS",
    "ACTIVE_ARRIVAL_OFFSETS",
]
