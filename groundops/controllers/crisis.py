"""Fuel crisis state machine and derived bowser views."""

from __future__ import annotations

from fastapi import APIRouter

from groundops.controllers.dependencies import CrisisEngineDep, RegistryDep
from groundops.controllers.flights import serialize_flight
from groundops.services.crisis import (
    CohortPenalty,
    CrisisSnapshot,
    CrisisTransition,
    DivertedFlightView,
    FuelQueueEntry,
)
from groundops.views import (
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

router = APIRouter(prefix="/api", tags=["crisis"])


def _serialize_state(snapshot: CrisisSnapshot) -> CrisisStateResponse:
    return CrisisStateResponse(
        fuelCrisisActive=snapshot.fuel_crisis_active,
        bowserCount=snapshot.bowser_count,
        manualPumpSpeed=snapshot.manual_pump_speed,
        activatedAt=snapshot.activated_at,
    )


def _serialize_transition(transition: CrisisTransition) -> CrisisTransitionResponse:
    return CrisisTransitionResponse(
        changed=transition.changed,
        state=_serialize_state(transition.state),
        message=transition.message,
    )


def _serialize_diverted(view: DivertedFlightView) -> DivertedFlightResponse:
    base = serialize_flight(view.flight, view.gate_number).model_dump()
    base["fuelDuration"] = view.fuel_duration
    return DivertedFlightResponse(
        **base,
        hasLanded=view.has_landed,
        elapsedMin=view.elapsed_min,
        minsUntilArrival=view.mins_until_arrival,
        penaltyAccrued=view.penalty_accrued,
        bowserSlot=view.bowser_slot,
        isBeingFuelled=view.is_being_fuelled,
        fuelElapsed=view.fuel_elapsed,
        fuelRemaining=view.fuel_remaining,
        fuelProgress=view.fuel_progress,
    )


def _serialize_queue_entry(entry: FuelQueueEntry) -> FuelQueueEntryResponse:
    base = serialize_flight(entry.flight).model_dump()
    base["fuelDuration"] = entry.fuel_duration
    base["fuelQueuePosition"] = entry.position
    return FuelQueueEntryResponse(
        **base,
        estimatedWaitMins=entry.estimated_wait_mins,
        isCurrentlyFuelling=entry.is_currently_fuelling,
        fuelElapsed=entry.fuel_elapsed,
        fuelRemaining=entry.fuel_remaining,
        fuelProgress=entry.fuel_progress,
    )


def _serialize_cohort(cohort: CohortPenalty) -> CohortPenaltyResponse:
    return CohortPenaltyResponse(
        count=cohort.count,
        totalPenalty=cohort.total_penalty,
        ratePerMin=cohort.rate_per_min,
    )


@router.get("/crisis", response_model=CrisisStateResponse)
async def get_crisis_state(
    registry: RegistryDep, engine: CrisisEngineDep
) -> CrisisStateResponse:
    """Current crisis flag; defaults when the crisis was never activated."""

    return _serialize_state(await engine.current_state(registry))


@router.post("/crisis/activate", response_model=CrisisTransitionResponse)
async def activate_crisis(
    registry: RegistryDep, engine: CrisisEngineDep
) -> CrisisTransitionResponse:
    return _serialize_transition(await engine.activate(registry))


@router.post("/crisis/deactivate", response_model=CrisisTransitionResponse)
async def deactivate_crisis(
    registry: RegistryDep, engine: CrisisEngineDep
) -> CrisisTransitionResponse:
    return _serialize_transition(await engine.deactivate(registry))


@router.post("/crisis/advance", response_model=CrisisAdvanceResponse)
async def advance_crisis(
    registry: RegistryDep, engine: CrisisEngineDep
) -> CrisisAdvanceResponse:
    """Release finished bowsers and hand free slots to newly landed flights."""

    result = await engine.advance(registry)
    return CrisisAdvanceResponse(
        state=_serialize_state(result.state),
        message=result.message,
        internationalAssigned=result.international_assigned,
        domesticCompleted=result.domestic_completed,
    )


@router.get("/crisis/penalty-summary", response_model=PenaltySummaryResponse)
async def get_penalty_summary(
    registry: RegistryDep, engine: CrisisEngineDep
) -> PenaltySummaryResponse:
    summary = await engine.penalty_summary(registry)
    return PenaltySummaryResponse(
        international=_serialize_cohort(summary.international),
        domestic=_serialize_cohort(summary.domestic),
        grandTotal=summary.grand_total,
        allocationRule=summary.allocation_rule,
    )


@router.get("/diverted", response_model=list[DivertedFlightResponse])
async def list_diverted_flights(
    registry: RegistryDep, engine: CrisisEngineDep
) -> list[DivertedFlightResponse]:
    """Diverted international flights, landed first."""

    return [_serialize_diverted(view) for view in await engine.diverted_view(registry)]


@router.get("/fuel-queue", response_model=FuelQueueResponse)
async def get_fuel_queue(registry: RegistryDep, engine: CrisisEngineDep) -> FuelQueueResponse:
    """Domestic bowser queue with estimated waits."""

    view = await engine.fuel_queue_view(registry)
    return FuelQueueResponse(
        crisis=_serialize_state(view.crisis),
        bowserAllocation=BowserAllocationResponse(**view.bowser_allocation),
        domesticQueue=[_serialize_queue_entry(entry) for entry in view.domestic_queue],
        domesticQueueLength=view.domestic_queue_length,
    )
