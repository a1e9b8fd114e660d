"""Historical turnaround analytics over the flight registry."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from groundops.models import Flight
from groundops.services.stats import round_half_up


@dataclass(frozen=True, slots=True)
class DailyTat:
    date: str
    avg_tat: int


@dataclass(frozen=True, slots=True)
class BottleneckCount:
    bottleneck: str
    count: int


@dataclass(frozen=True, slots=True)
class HourlyArrivals:
    gate: str
    hour: int
    count: int


@dataclass(frozen=True, slots=True)
class Kpis:
    avg_tat: int = 0
    total_penalties: int = 0
    most_delayed_airline: str = "N/A"
    peak_delay_hour: str = "N/A"


@dataclass(frozen=True, slots=True)
class AnalyticsReport:
    avg_tat_per_day: list[DailyTat] = field(default_factory=list)
    bottleneck_frequency: list[BottleneckCount] = field(default_factory=list)
    gate_utilization: list[HourlyArrivals] = field(default_factory=list)
    kpis: Kpis = field(default_factory=Kpis)


def _turnaround(flight: Flight) -> Optional[int]:
    # Observed TAT wins over the prediction when both exist.
    return flight.actual_tat if flight.actual_tat is not None else flight.predicted_tat


def _mean(values: list[int]) -> float:
    return sum(values) / len(values)


def build_report(flights: Iterable[Flight]) -> AnalyticsReport:
    flights = list(flights)
    if not flights:
        return AnalyticsReport()

    tat_by_day: dict[str, list[int]] = defaultdict(list)
    tat_by_airline: dict[str, list[int]] = defaultdict(list)
    bottlenecks: dict[str, int] = defaultdict(int)
    arrivals_by_hour: dict[int, int] = defaultdict(int)
    tats: list[int] = []

    for flight in flights:
        tat = _turnaround(flight)
        if tat is not None:
            tat_by_day[flight.arrival_time.date().isoformat()].append(tat)
            tat_by_airline[flight.airline].append(tat)
            tats.append(tat)
        if flight.bottleneck:
            bottlenecks[flight.bottleneck.capitalize()] += 1
        arrivals_by_hour[flight.arrival_time.hour] += 1

    avg_tat_per_day = [
        DailyTat(date=day, avg_tat=round_half_up(_mean(values)))
        for day, values in sorted(tat_by_day.items())
    ]
    bottleneck_frequency = sorted(
        (BottleneckCount(bottleneck=name, count=count) for name, count in bottlenecks.items()),
        key=lambda item: item.count,
        reverse=True,
    )
    gate_utilization = [
        HourlyArrivals(gate=f"H{hour}", hour=hour, count=count)
        for hour, count in sorted(arrivals_by_hour.items())
    ]

    most_delayed, worst_avg = "N/A", 0.0
    for airline, values in tat_by_airline.items():
        avg = _mean(values)
        if avg > worst_avg:
            most_delayed, worst_avg = airline, avg

    peak = max(gate_utilization, key=lambda item: item.count)

    return AnalyticsReport(
        avg_tat_per_day=avg_tat_per_day,
        bottleneck_frequency=bottleneck_frequency,
        gate_utilization=gate_utilization,
        kpis=Kpis(
            avg_tat=round_half_up(_mean(tats)) if tats else 0,
            total_penalties=sum(flight.penalty_risk or 0 for flight in flights),
            most_delayed_airline=most_delayed,
            peak_delay_hour=f"{peak.hour:02d}:00",
        ),
    )


__all__ = ["AnalyticsReport", "Kpis", "build_report"]
