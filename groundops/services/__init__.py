"""Domain services: estimation, simulation, crisis handling and gate operations."""

from .crisis import CrisisEngine
from .estimator import HYDRANT, FlightParameters, FuelingMode, PredictionResult, estimate
from .simulator import SimulationResult, simulate

__all__ = [
    "CrisisEngine",
    "HYDRANT",
    "FlightParameters",
    "FuelingMode",
    "PredictionResult",
    "estimate",
    "SimulationResult",
    "simulate",
]
