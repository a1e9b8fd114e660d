"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "area", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route", "area"),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

PREDICTION_COUNTER = Counter(
    "tat_predictions_total",
    "Deterministic turnaround predictions served",
    ("fueling",),
)

SIMULATION_COUNTER = Counter(
    "tat_simulations_total",
    "Monte Carlo turnaround simulations served",
)

SIMULATION_TRIALS = Histogram(
    "tat_simulation_trials",
    "Number of trials per Monte Carlo simulation",
    buckets=(100, 500, 1000, 5000, 10000, 50000, 100000),
)

CRISIS_TRANSITIONS = Counter(
    "fuel_crisis_transitions_total",
    "Fuel crisis state machine transitions",
    ("transition", "outcome"),
)


def observe_request(
    method: str,
    route: str,
    area: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request; ``area`` is the router tag."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        area=area,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
        area=area,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def record_prediction(fueling: str) -> None:
    PREDICTION_COUNTER.labels(fueling=fueling).inc()


def record_simulation(trials: int) -> None:
    SIMULATION_COUNTER.inc()
    SIMULATION_TRIALS.observe(trials)


def record_crisis_transition(transition: str, outcome: str) -> None:
    """Count an activate/deactivate call; ``outcome`` is ``changed`` or ``noop``."""

    CRISIS_TRANSITIONS.labels(transition=transition, outcome=outcome).inc()
