"""Interval integration of meter readings into consumption and cost."""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Context, Decimal, localcontext
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from models.records import DayOfWeek, ElectricityReading, EnergyType, PricePlan

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")
_TWO = Decimal(2)
_SECONDS_PER_HOUR = Decimal(3600)
_ZERO = Decimal(0)
_PRECISION = Context(prec=28)


def _elapsed_hours(start: datetime, end: datetime) -> Decimal:
    delta = end - start
    seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / 1_000_000
    return seconds / _SECONDS_PER_HOUR


class CostEngine:
    """Pure cost component that can be unit tested in isolation.

    Power readings are integrated with the trapezoidal rule between each pair of
    chronologically adjacent samples. The peak multiplier for an interval is
    chosen by the calendar day of its first reading in ``tz``; ``None`` means
    the host's local time zone, so callers wanting reproducible results should
    pin one.
    """

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self.tz = tz

    def cost(
        self,
        readings: Sequence[ElectricityReading],
        plan: PricePlan,
        energy_type: EnergyType = EnergyType.ELECTRICITY,
    ) -> Decimal:
        """Total cost of ``readings`` under ``plan``, rounded half-up to cents."""
        total = _ZERO
        if len(readings) < 2:
            return total.quantize(_CENTS)

        unit_rate = plan.unit_rate_for(energy_type)
        with localcontext(_PRECISION):
            for start, end, energy in self._intervals(readings):
                day = DayOfWeek.of(start.time, self.tz)
                total += energy * unit_rate * plan.multiplier_for(day)
        return total.quantize(_CENTS, rounding=ROUND_HALF_UP)

    def consumption(self, readings: Sequence[ElectricityReading]) -> Decimal:
        """Unrounded energy in kWh across all intervals."""
        with localcontext(_PRECISION):
            return sum((energy for _, _, energy in self._intervals(readings)), _ZERO)

    def _intervals(
        self, readings: Iterable[ElectricityReading]
    ) -> Iterator[Tuple[ElectricityReading, ElectricityReading, Decimal]]:
        ordered: List[ElectricityReading] = sorted(readings, key=lambda reading: reading.time)
        for start, end in zip(ordered, ordered[1:]):
            hours = _elapsed_hours(start.time, end.time)
            if hours <= 0:
                logger.debug(
                    "Skipping interval without elapsed time",
                    extra={"reason": f"{start.time.isoformat()} -> {end.time.isoformat()}"},
                )
                continue
            average_power = (start.reading + end.reading) / _TWO
            yield start, end, average_power * hours
