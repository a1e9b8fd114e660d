"""Pydantic schemas for historical analytics."""

from pydantic import BaseModel


class DailyTatResponse(BaseModel):
    date: str
    avgTat: int


class BottleneckFrequencyResponse(BaseModel):
    bottleneck: str
    count: int


class HourlyArrivalsResponse(BaseModel):
    gate: str
    hour: int
    count: int


class KpiResponse(BaseModel):
    avgTat: int
    totalPenalties: int
    mostDelayedAirline: str
    peakDelayHour: str


class AnalyticsResponse(BaseModel):
    avgTatPerDay: list[DailyTatResponse]
    bottleneckFrequency: list[BottleneckFrequencyResponse]
    gateUtilization: list[HourlyArrivalsResponse]
    kpis: KpiResponse
