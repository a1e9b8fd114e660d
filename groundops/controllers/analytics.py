"""Historical turnaround analytics endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from groundops.controllers.dependencies import RegistryDep
from groundops.services.analytics import build_report
from groundops.views import (
    AnalyticsResponse,
    BottleneckFrequencyResponse,
    DailyTatResponse,
    HourlyArrivalsResponse,
    KpiResponse,
)

router = APIRouter(prefix="/api", tags=["analytics"])


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(registry: RegistryDep) -> AnalyticsResponse:
    """Average TAT per day, bottleneck frequency, hourly arrivals and KPIs."""

    report = build_report(await registry.list_flights())
    return AnalyticsResponse(
        avgTatPerDay=[
            DailyTatResponse(date=item.date, avgTat=item.avg_tat)
            for item in report.avg_tat_per_day
        ],
        bottleneckFrequency=[
            BottleneckFrequencyResponse(bottleneck=item.bottleneck, count=item.count)
            for item in report.bottleneck_frequency
        ],
        gateUtilization=[
            HourlyArrivalsResponse(gate=item.gate, hour=item.hour, count=item.count)
            for item in report.gate_utilization
        ],
        kpis=KpiResponse(
            avgTat=report.kpis.avg_tat,
            totalPenalties=report.kpis.total_penalties,
            mostDelayedAirline=report.kpis.most_delayed_airline,
            peakDelayHour=report.kpis.peak_delay_hour,
        ),
    )
