"""Pydantic schemas for the fuel crisis endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from groundops.views.flights import FlightResponse


class CrisisStateResponse(BaseModel):
    fuelCrisisActive: bool
    bowserCount: int
    manualPumpSpeed: int
    activatedAt: Optional[datetime] = None


class CrisisTransitionResponse(BaseModel):
    """Outcome of activate/deactivate; ``changed`` is false for a repeated call."""

    success: bool = True
    changed: bool
    state: CrisisStateResponse
    message: str


class CrisisAdvanceResponse(BaseModel):
    state: CrisisStateResponse
    message: str
    internationalAssigned: list[str] = []
    domesticCompleted: list[str] = []


class DivertedFlightResponse(FlightResponse):
    """A diverted international flight with live penalty and bowser progress."""

    hasLanded: bool
    elapsedMin: int
    minsUntilArrival: int
    penaltyAccrued: int
    bowserSlot: Optional[int] = None
    isBeingFuelled: bool
    fuelElapsed: int = 0
    fuelRemaining: int = 0
    fuelProgress: int = 0


class FuelQueueEntryResponse(FlightResponse):
    """A domestic flight waiting on (or being served by) the domestic bowser."""

    estimatedWaitMins: int
    isCurrentlyFuelling: bool
    fuelElapsed: int = 0
    fuelRemaining: int = 0
    fuelProgress: int = 0


class BowserAllocationResponse(BaseModel):
    international: list[int]
    domestic: list[int]


class FuelQueueResponse(BaseModel):
    crisis: CrisisStateResponse
    bowserAllocation: BowserAllocationResponse
    domesticQueue: list[FuelQueueEntryResponse]
    domesticQueueLength: int


class CohortPenaltyResponse(BaseModel):
    count: int
    totalPenalty: int
    ratePerMin: int


class PenaltySummaryResponse(BaseModel):
    international: CohortPenaltyResponse
    domestic: CohortPenaltyResponse
    grandTotal: int
    allocationRule: str
