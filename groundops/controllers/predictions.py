"""Endpoints for deterministic TAT prediction and Monte Carlo risk simulation."""

from __future__ import annotations

from fastapi import APIRouter

from groundops.config.settings import settings
from groundops.controllers.dependencies import CrisisEngineDep
from groundops.services.estimator import HYDRANT, estimate
from groundops.services.simulator import simulate
from groundops.telemetry import record_prediction, record_simulation
from groundops.views import (
    ErrorResponse,
    HistogramBinResponse,
    MonteCarloResponse,
    PredictRequest,
    PredictResponse,
)

router = APIRouter(prefix="/api", tags=["predictions"])


@router.post(
    "/predict",
    response_model=PredictResponse,
    responses={400: {"model": ErrorResponse}},
)
async def predict_tat(payload: PredictRequest, engine: CrisisEngineDep) -> PredictResponse:
    """Estimate TAT; ``fuelCrisisActive`` switches to manual bowser fueling."""

    fueling = engine.fueling if payload.fuelCrisisActive else HYDRANT
    result = estimate(payload.to_parameters(engine.domestic_penalty_rate), fueling)
    record_prediction(fueling.label)

    return PredictResponse(
        predictedTat=result.predicted_tat,
        bottleneck=result.bottleneck,
        penaltyRisk=result.penalty_risk,
        baggageDuration=result.baggage_duration,
        fuelDuration=result.fuel_duration,
        cateringDuration=result.catering_duration,
        safetyCheckDuration=result.safety_check_duration,
        isManualFueling=result.is_manual_fueling,
    )


@router.post(
    "/montecarlo",
    response_model=MonteCarloResponse,
    responses={400: {"model": ErrorResponse}},
)
async def monte_carlo(payload: PredictRequest, engine: CrisisEngineDep) -> MonteCarloResponse:
    """Run a Monte Carlo simulation and return percentiles plus a histogram."""

    fueling = engine.fueling if payload.fuelCrisisActive else HYDRANT
    trials = payload.trials or settings.simulation_trials
    params = payload.to_parameters(engine.domestic_penalty_rate)
    result = simulate(params, trials=trials, fueling=fueling)
    record_simulation(result.trials)

    return MonteCarloResponse(
        p50=result.p50,
        p75=result.p75,
        p90=result.p90,
        p50Penalty=result.p50_penalty,
        p75Penalty=result.p75_penalty,
        p90Penalty=result.p90_penalty,
        bottleneckConsistency=result.bottleneck_consistency,
        trials=result.trials,
        histogramData=[
            HistogramBinResponse(bin=item.bin, count=item.count) for item in result.histogram
        ],
    )
