"""Telemetry helpers and metrics."""

from .metrics import (
    CRISIS_TRANSITIONS,
    ERROR_COUNTER,
    PREDICTION_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SIMULATION_COUNTER,
    observe_request,
    record_crisis_transition,
    record_prediction,
    record_simulation,
)

__all__ = [
    "CRISIS_TRANSITIONS",
    "ERROR_COUNTER",
    "PREDICTION_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SIMULATION_COUNTER",
    "observe_request",
    "record_crisis_transition",
    "record_prediction",
    "record_simulation",
]
