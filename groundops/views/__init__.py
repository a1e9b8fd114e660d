"""Pydantic schemas used as views in the MVC architecture."""

from .analytics import (
    AnalyticsResponse,
    BottleneckFrequencyResponse,
    DailyTatResponse,
    HourlyArrivalsResponse,
    KpiResponse,
)
from .common import ErrorResponse
from .crisis import (
    BowserAllocationResponse,
    CohortPenaltyResponse,
    CrisisAdvanceResponse,
    CrisisStateResponse,
    CrisisTransitionResponse,
    DivertedFlightResponse,
    FuelQueueEntryResponse,
    FuelQueueResponse,
    PenaltySummaryResponse,
)
from .flights import FlightResponse
from .gates import GateAssignRequest, GateResponse
from .predictions import (
    HistogramBinResponse,
    MonteCarloResponse,
    PredictRequest,
    PredictResponse,
)

__all__ = [
    "AnalyticsResponse",
    "BottleneckFrequencyResponse",
    "DailyTatResponse",
    "HourlyArrivalsResponse",
    "KpiResponse",
    "ErrorResponse",
    "BowserAllocationResponse",
    "CohortPenaltyResponse",
    "CrisisAdvanceResponse",
    "CrisisStateResponse",
    "CrisisTransitionResponse",
    "DivertedFlightResponse",
    "FuelQueueEntryResponse",
    "FuelQueueResponse",
    "PenaltySummaryResponse",
    "FlightResponse",
    "GateAssignRequest",
    "GateResponse",
    "HistogramBinResponse",
    "MonteCarloResponse",
    "PredictRequest",
    "PredictResponse",
]
