"""Numeric and statistics helpers shared by the estimator, simulator and crisis engine."""

from __future__ import annotations

import math
import random
from collections import Counter
from datetime import datetime
from typing import Iterable, Sequence

from groundops.errors import InvalidParameters


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going towards +infinity."""

    return int(math.floor(value + 0.5))


def ensure_finite(value: float, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameters(field, f"'{field}' must be a number")
    if not math.isfinite(value):
        raise InvalidParameters(field, f"'{field}' must be a finite number")
    return value


def standard_normal(rng: random.Random) -> float:
    """Draw a standard-normal deviate with the Box-Muller transform."""

    # 1 - random() lies in (0, 1], which keeps log() finite.
    u = 1.0 - rng.random()
    v = rng.random()
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


def normal_sample(rng: random.Random, mean: float, std_dev: float) -> float:
    return standard_normal(rng) * std_dev + mean


def order_statistic(sorted_values: Sequence[int], fraction: float) -> int:
    """Return ``sorted_values[floor(n * fraction)]`` without interpolation."""

    if not sorted_values:
        raise ValueError("order_statistic requires at least one value")
    index = min(int(math.floor(len(sorted_values) * fraction)), len(sorted_values) - 1)
    return sorted_values[index]


def histogram_bin(value: int, width: int = 2) -> int:
    return (value // width) * width


def histogram(values: Iterable[int], width: int = 2) -> list[tuple[int, int]]:
    """Sparse ``(bin, count)`` pairs in ascending bin order."""

    counts = Counter(histogram_bin(value, width) for value in values)
    return sorted(counts.items())


def elapsed_minutes(start: datetime | None, now: datetime) -> int:
    """Whole minutes between ``start`` and ``now``, never negative."""

    if start is None:
        return 0
    return max(0, round_half_up((now - start).total_seconds() / 60))


def progress_pct(elapsed: float, total: float) -> int:
    if total <= 0:
        return 0
    return min(100, round_half_up(elapsed / total * 100))


__all__ = [
    "round_half_up",
    "ensure_finite",
    "standard_normal",
    "normal_sample",
    "order_statistic",
    "histogram_bin",
    "histogram",
    "elapsed_minutes",
    "progress_pct",
]
