"""Pydantic schemas for flight records."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from groundops.models import FlightStatus


class FlightResponse(BaseModel):
    """A persisted flight with its last-computed prediction."""

    id: int
    flightNumber: str = Field(
        ...,
        validation_alias=AliasChoices("flightNumber", "flight_number"),
        serialization_alias="flightNumber",
    )
    airline: str
    aircraftType: str = Field(
        ...,
        validation_alias=AliasChoices("aircraftType", "aircraft_type"),
        serialization_alias="aircraftType",
    )
    arrivalTime: datetime = Field(
        ...,
        validation_alias=AliasChoices("arrivalTime", "arrival_time"),
        serialization_alias="arrivalTime",
    )
    arrivalDelay: int = Field(
        0,
        validation_alias=AliasChoices("arrivalDelay", "arrival_delay"),
        serialization_alias="arrivalDelay",
    )
    fuelLiters: int = Field(
        ...,
        validation_alias=AliasChoices("fuelLiters", "fuel_liters"),
        serialization_alias="fuelLiters",
    )
    bagsCount: int = Field(
        ...,
        validation_alias=AliasChoices("bagsCount", "bags_count"),
        serialization_alias="bagsCount",
    )
    priorityBags: int = Field(
        0,
        validation_alias=AliasChoices("priorityBags", "priority_bags"),
        serialization_alias="priorityBags",
    )
    mealsQty: int = Field(
        ...,
        validation_alias=AliasChoices("mealsQty", "meals_qty"),
        serialization_alias="mealsQty",
    )
    specialMeals: int = Field(
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
    predictedTat: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("predictedTat", "predicted_tat"),
        serialization_alias="predictedTat",
    )
    bottleneck: Optional[str] = None
    penaltyRisk: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("penaltyRisk", "penalty_risk"),
        serialization_alias="penaltyRisk",
    )
    baggageDuration: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("baggageDuration", "baggage_duration"),
        serialization_alias="baggageDuration",
    )
    fuelDuration: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("fuelDuration", "fuel_duration"),
        serialization_alias="fuelDuration",
    )
    cateringDuration: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("cateringDuration", "catering_duration"),
        serialization_alias="cateringDuration",
    )
    safetyCheckDuration: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("safetyCheckDuration", "safety_check_duration"),
        serialization_alias="safetyCheckDuration",
    )
    fuelQueueDelay: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("fuelQueueDelay", "fuel_queue_delay"),
        serialization_alias="fuelQueueDelay",
    )
    actualTat: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("actualTat", "actual_tat"),
        serialization_alias="actualTat",
    )
    gateId: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("gateId", "gate_id"),
        serialization_alias="gateId",
    )
    status: FlightStatus
    penaltyRatePerMin: int = Field(
        ...,
        validation_alias=AliasChoices("penaltyRatePerMin", "penalty_rate_per_min"),
        serialization_alias="penaltyRatePerMin",
    )
    fuelQueuePosition: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("fuelQueuePosition", "fuel_queue_position"),
        serialization_alias="fuelQueuePosition",
    )
    fuelStartTime: Optional[datetime] = Field(
        None,
        validation_alias=AliasChoices("fuelStartTime", "fuel_start_time"),
        serialization_alias="fuelStartTime",
    )
    gateNumber: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("gateNumber", "gate_number"),
        serialization_alias="gateNumber",
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
