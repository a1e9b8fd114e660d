"""Pydantic schemas for TAT prediction and Monte Carlo simulation."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from groundops.models import AircraftType
from groundops.services.estimator import Bottleneck, FlightParameters


class PredictRequest(BaseModel):
    """Ground-service parameters for a single turnaround."""

    aircraftType: AircraftType = Field(
        ...,
        validation_alias=AliasChoices("aircraftType", "aircraft_type"),
        serialization_alias="aircraftType",
    )
    fuelLiters: float = Field(
        ...,
        validation_alias=AliasChoices("fuelLiters", "fuel_liters"),
        serialization_alias="fuelLiters",
    )
    bagsCount: float = Field(
        ...,
        validation_alias=AliasChoices("bagsCount", "bags_count"),
        serialization_alias="bagsCount",
    )
    priorityBags: float = Field(
        0,
        validation_alias=AliasChoices("priorityBags", "priority_bags"),
        serialization_alias="priorityBags",
    )
    mealsQty: float = Field(
        ...,
        validation_alias=AliasChoices("mealsQty", "meals_qty"),
        serialization_alias="mealsQty",
    )
    specialMeals: float = Field(
        0,
        validation_alias=AliasChoices("specialMeals", "special_meals"),
        serialization_alias="specialMeals",
    )
    cateringRequired: bool = Field(
        True,
        validation_alias=AliasChoices("cateringRequired", "catering_required"),
        serialization_alias="cateringRequired",
    )
    safetyCheck: bool = Field(
        True,
        validation_alias=AliasChoices("safetyCheck", "safety_check"),
        serialization_alias="safetyCheck",
    )
    arrivalDelay: float = Field(
        0,
        validation_alias=AliasChoices("arrivalDelay", "arrival_delay"),
        serialization_alias="arrivalDelay",
    )
    penaltyRatePerMin: Optional[float] = Field(
        None,
        validation_alias=AliasChoices("penaltyRatePerMin", "penalty_rate_per_min"),
        serialization_alias="penaltyRatePerMin",
    )
    fuelCrisisActive: bool = Field(
        False,
        validation_alias=AliasChoices("fuelCrisisActive", "fuel_crisis_active"),
        serialization_alias="fuelCrisisActive",
    )
    trials: Optional[int] = Field(
        None,
        ge=1,
        le=100_000,
        description="Monte Carlo trial count; ignored by /predict",
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_parameters(self, default_penalty_rate: float) -> FlightParameters:
        """Build estimator input; an omitted rate falls back to ``default_penalty_rate``."""

        return FlightParameters(
            aircraft_type=self.aircraftType.value,
            bags_count=self.bagsCount,
            priority_bags=self.priorityBags,
            fuel_liters=self.fuelLiters,
            meals_qty=self.mealsQty,
            special_meals=self.specialMeals,
            catering_required=self.cateringRequired,
            safety_check=self.safetyCheck,
            arrival_delay=self.arrivalDelay,
            penalty_rate_per_min=(
                self.penaltyRatePerMin
                if self.penaltyRatePerMin is not None
                else default_penalty_rate
            ),
        )


class PredictResponse(BaseModel):
    """Deterministic estimate with its sub-process breakdown."""

    predictedTat: int
    bottleneck: Optional[Bottleneck] = None
    penaltyRisk: int
    baggageDuration: int
    fuelDuration: int
    cateringDuration: int
    safetyCheckDuration: int
    isManualFueling: bool = False


class HistogramBinResponse(BaseModel):
    bin: int
    count: int


class MonteCarloResponse(BaseModel):
    """Percentile outcomes of a Monte Carlo run."""

    p50: int
    p75: int
    p90: int
    p50Penalty: int
    p75Penalty: int
    p90Penalty: int
    bottleneckConsistency: int = Field(
        ..., description="Percentage of trials in which baggage dominated"
    )
    trials: int
    histogramData: list[HistogramBinResponse]
