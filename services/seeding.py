"""Demo price plans, accounts and generated readings loaded at startup."""

from __future__ import annotations

import json
import logging
import random
from datetime import datetime, timedelta, timezone
from decimal import ROUND_CEILING, Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from models.records import DayOfWeek, ElectricityReading, EnergyType, PricePlan, Tariff
from settings import get_settings

logger = logging.getLogger(__name__)

MOST_EVIL_PRICE_PLAN_ID = "price-plan-0"
RENEWABLES_PRICE_PLAN_ID = "price-plan-1"
STANDARD_PRICE_PLAN_ID = "price-plan-2"

READING_INTERVAL = timedelta(seconds=10)
_READING_PRECISION = Decimal("0.0001")


class _ReadingSink(Protocol):
    def put(self, smart_meter_id: str, readings: List[ElectricityReading]) -> None: ...


def default_price_plans() -> List[PricePlan]:
    weekend_peak = {DayOfWeek.SATURDAY: Decimal(2), DayOfWeek.SUNDAY: Decimal(2)}
    return [
        PricePlan.single_rate(
            MOST_EVIL_PRICE_PLAN_ID,
            "Dr Evil's Dark Energy",
            Decimal(10),
            peak_multipliers=weekend_peak,
        ),
        PricePlan(
            plan_id=RENEWABLES_PRICE_PLAN_ID,
            supplier="The Green Eco",
            tariffs=(
                Tariff(EnergyType.ELECTRICITY, Decimal(2)),
                Tariff(EnergyType.GAS, Decimal("1.5")),
            ),
        ),
        PricePlan.single_rate(STANDARD_PRICE_PLAN_ID, "Power for Everyone", Decimal(1)),
    ]


def default_accounts() -> Dict[str, str]:
    return {
        "smart-meter-0": MOST_EVIL_PRICE_PLAN_ID,
        "smart-meter-1": RENEWABLES_PRICE_PLAN_ID,
        "smart-meter-2": MOST_EVIL_PRICE_PLAN_ID,
        "smart-meter-3": STANDARD_PRICE_PLAN_ID,
        "smart-meter-4": RENEWABLES_PRICE_PLAN_ID,
    }


class ElectricityReadingsGenerator:
    """Produces plausible readings spaced ten seconds apart, ending now."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def generate(self, count: int, end: Optional[datetime] = None) -> List[ElectricityReading]:
        end = end or datetime.now(timezone.utc)
        readings = []
        for index in range(count):
            offset = READING_INTERVAL * (count - 1 - index)
            value = Decimal(str(abs(self._rng.gauss(0.0, 1.0))))
            readings.append(
                ElectricityReading(
                    time=end - offset,
                    reading=value.quantize(_READING_PRECISION, rounding=ROUND_CEILING),
                )
            )
        return readings


def seed_store(
    store: _ReadingSink,
    meter_ids: Optional[List[str]] = None,
    count: Optional[int] = None,
    generator: Optional[ElectricityReadingsGenerator] = None,
) -> None:
    """Fill ``store`` with generated readings for each demo meter."""
    count = get_settings().seed_readings_per_meter if count is None else count
    if count <= 0:
        logger.info("Reading seeding disabled")
        return

    generator = generator or ElectricityReadingsGenerator()
    for smart_meter_id in meter_ids if meter_ids is not None else default_accounts():
        store.put(smart_meter_id, generator.generate(count))
    logger.info("Seeded demo readings", extra={"reading_count": count})


def _parse_decimal(value: Any, what: str) -> Decimal:
    try:
        parsed = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid {what}: {value!r}") from exc
    if not parsed.is_finite() or parsed < 0:
        raise ValueError(f"Invalid {what}: {value!r}")
    return parsed


def _plan_from_payload(payload: Dict[str, Any]) -> PricePlan:
    try:
        plan_id = str(payload["plan_id"]).strip()
        tariffs = [
            Tariff(
                EnergyType(str(item["energy_type"]).upper()),
                _parse_decimal(item["unit_rate"], "unit rate"),
            )
            for item in payload["tariffs"]
        ]
        multipliers = {
            DayOfWeek[str(day).upper()]: _parse_decimal(value, "peak multiplier")
            for day, value in (payload.get("peak_multipliers") or {}).items()
        }
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed price plan entry: {payload!r}") from exc
    if not plan_id:
        raise ValueError("Price plan entry is missing a plan_id.")
    return PricePlan(
        plan_id=plan_id,
        supplier=str(payload.get("supplier") or plan_id),
        tariffs=tuple(tariffs),
        peak_multipliers=multipliers,
    )


def load_price_plans(path: Path) -> List[PricePlan]:
    """Read plans from a JSON list; raises ``ValueError`` on any malformed entry."""
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Unable to read price plans from {path}: {exc}") from exc
    if not isinstance(data, list):
        raise ValueError(f"Price plan file {path} must contain a JSON list.")

    plans = [_plan_from_payload(entry) for entry in data]
    seen: set[str] = set()
    for plan in plans:
        if plan.plan_id in seen:
            raise ValueError(f"Duplicate price plan id {plan.plan_id!r} in {path}.")
        seen.add(plan.plan_id)
    logger.info("Loaded price plans from %s", path, extra={"plan_count": len(plans)})
    return plans


def configured_price_plans() -> List[PricePlan]:
    path = get_settings().price_plans_path
    if path is None:
        return default_price_plans()
    return load_price_plans(Path(path))
