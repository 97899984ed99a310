"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from models.records import ElectricityReading, PricePlan

# Costs and readings travel as JSON numbers rather than pydantic's default string form.
JsonDecimal = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ElectricityReadingPayload(_CamelModel):
    """A single power sample as sent and returned over HTTP."""

    time: datetime = Field(..., description="Sample instant; naive values are treated as UTC.")
    reading: JsonDecimal = Field(..., ge=0, description="Power draw in kW.")

    @field_validator("time")
    @classmethod
    def _normalize_time(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @classmethod
    def from_domain(cls, reading: ElectricityReading) -> "ElectricityReadingPayload":
        return cls(time=reading.time, reading=reading.reading)

    def to_domain(self) -> ElectricityReading:
        return ElectricityReading(time=self.time, reading=self.reading)


class MeterReadingsPayload(_CamelModel):
    """Request body for storing readings.

    Blank ids and empty reading lists are rejected by the reading service with
    a 400, so both fields are optional at the schema level.
    """

    smart_meter_id: Optional[str] = Field(default=None, alias="smartMeterId")
    electricity_readings: Optional[List[ElectricityReadingPayload]] = Field(
        default=None, alias="electricityReadings"
    )

    def domain_readings(self) -> List[ElectricityReading]:
        return [item.to_domain() for item in self.electricity_readings or []]


class PricePlanComparison(_CamelModel):
    """Costs for every plan, labelled with the account's current plan."""

    price_plan_id: Optional[str] = Field(default=None, alias="pricePlanId")
    price_plan_comparisons: Dict[str, JsonDecimal] = Field(
        default_factory=dict, alias="pricePlanComparisons"
    )


class TariffSummary(_CamelModel):
    energy_type: str = Field(..., alias="energyType")
    unit_rate: JsonDecimal = Field(..., alias="unitRate")


class PricePlanSummary(_CamelModel):
    plan_id: str = Field(..., alias="planId")
    supplier: str
    tariffs: List[TariffSummary] = Field(default_factory=list)
    peak_multipliers: Dict[str, JsonDecimal] = Field(
        default_factory=dict, alias="peakTimeMultipliers"
    )

    @classmethod
    def from_domain(cls, plan: PricePlan) -> "PricePlanSummary":
        return cls(
            plan_id=plan.plan_id,
            supplier=plan.supplier,
            tariffs=[
                TariffSummary(energy_type=tariff.energy_type.value, unit_rate=tariff.unit_rate)
                for tariff in plan.tariffs
            ],
            peak_multipliers={
                day.name: multiplier for day, multiplier in sorted(plan.peak_multipliers.items())
            },
        )


Recommendation = Dict[str, JsonDecimal]
