"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import (
    ElectricityReadingPayload,
    MeterReadingsPayload,
    PricePlanComparison,
    PricePlanSummary,
    Recommendation,
)
from services.price_plans import PricePlanService, build_default_price_plan_service
from services.readings import MeterReadingService, build_default_reading_service

router = APIRouter()


def get_reading_service() -> MeterReadingService:
    return build_default_reading_service()


def get_price_plan_service() -> PricePlanService:
    return build_default_price_plan_service()


def _not_found(smart_meter_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"No readings found for smart meter {smart_meter_id!r}.",
    )


@router.post(
    "/readings/store",
    status_code=status.HTTP_200_OK,
    summary="Store electricity readings for a smart meter, replacing its history.",
)
async def store_readings(
    payload: MeterReadingsPayload,
    service: MeterReadingService = Depends(get_reading_service),
) -> None:
    try:
        service.store_readings(payload.smart_meter_id, payload.domain_readings())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


@router.get(
    "/readings/read/{smart_meter_id}",
    response_model=List[ElectricityReadingPayload],
    summary="Fetch the stored readings for a smart meter.",
)
async def read_readings(
    smart_meter_id: str,
    service: MeterReadingService = Depends(get_reading_service),
) -> List[ElectricityReadingPayload]:
    readings = service.fetch_readings(smart_meter_id)
    if readings is None:
        raise _not_found(smart_meter_id)
    return [ElectricityReadingPayload.from_domain(reading) for reading in readings]


@router.get(
    "/price-plans",
    response_model=List[PricePlanSummary],
    summary="List the configured price plans.",
)
async def list_price_plans(
    service: PricePlanService = Depends(get_price_plan_service),
) -> List[PricePlanSummary]:
    return [PricePlanSummary.from_domain(plan) for plan in service.price_plans]


@router.get(
    "/price-plans/compare-all/{smart_meter_id}",
    response_model=PricePlanComparison,
    summary="Cost of the meter's consumption under every price plan.",
)
async def compare_all(
    smart_meter_id: str,
    service: PricePlanService = Depends(get_price_plan_service),
) -> PricePlanComparison:
    costs = service.compare_all(smart_meter_id)
    if costs is None:
        raise _not_found(smart_meter_id)
    return PricePlanComparison(
        price_plan_id=service.current_plan_id(smart_meter_id),
        price_plan_comparisons=costs,
    )


@router.get(
    "/price-plans/recommend/{smart_meter_id}",
    response_model=List[Recommendation],
    summary="Cheapest price plans for the meter, in ascending cost order.",
)
async def recommend(
    smart_meter_id: str,
    limit: Optional[int] = Query(default=None, ge=0, description="Maximum plans to return."),
    service: PricePlanService = Depends(get_price_plan_service),
) -> List[Recommendation]:
    ranking = service.recommend(smart_meter_id, limit=limit)
    if ranking is None:
        raise _not_found(smart_meter_id)
    return [{plan_id: cost} for plan_id, cost in ranking]


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
