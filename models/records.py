"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from decimal import Decimal
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class EnergyType(str, Enum):
    """Kinds of energy a tariff can price."""

    ELECTRICITY = "ELECTRICITY"
    GAS = "GAS"


class DayOfWeek(IntEnum):
    """Calendar days, numbered like ``datetime.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, moment: datetime, tz: Optional[tzinfo] = None) -> "DayOfWeek":
        """Day of ``moment`` in ``tz``; ``None`` converts to the host's local zone."""
        return cls(moment.astimezone(tz).weekday())


@dataclass(frozen=True, slots=True)
class ElectricityReading:
    """Instantaneous power draw (kW) sampled at ``time``."""

    time: datetime
    reading: Decimal


@dataclass(frozen=True, slots=True)
class Tariff:
    energy_type: EnergyType
    unit_rate: Decimal


_ONE = Decimal(1)
_ZERO = Decimal(0)


@dataclass(frozen=True)
class PricePlan:
    """A supplier's plan: per-energy unit rates plus optional peak-day multipliers."""

    plan_id: str
    supplier: str
    tariffs: Tuple[Tariff, ...]
    peak_multipliers: Mapping[DayOfWeek, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tariffs", tuple(self.tariffs))
        object.__setattr__(
            self,
            "peak_multipliers",
            MappingProxyType(
                {DayOfWeek(day): Decimal(value) for day, value in self.peak_multipliers.items()}
            ),
        )

    @classmethod
    def single_rate(
        cls,
        plan_id: str,
        supplier: str,
        unit_rate: Decimal,
        peak_multipliers: Optional[Mapping[DayOfWeek, Decimal]] = None,
        energy_type: EnergyType = EnergyType.ELECTRICITY,
    ) -> "PricePlan":
        return cls(
            plan_id=plan_id,
            supplier=supplier,
            tariffs=(Tariff(energy_type, Decimal(unit_rate)),),
            peak_multipliers=peak_multipliers or {},
        )

    def unit_rate_for(self, energy_type: EnergyType) -> Decimal:
        """Sum of unit rates of tariffs for ``energy_type``; zero when there are none."""
        return sum(
            (tariff.unit_rate for tariff in self.tariffs if tariff.energy_type == energy_type),
            _ZERO,
        )

    def multiplier_for(self, day: DayOfWeek) -> Decimal:
        return self.peak_multipliers.get(day, _ONE)

    def price_at(
        self,
        moment: datetime,
        energy_type: EnergyType = EnergyType.ELECTRICITY,
        tz: Optional[tzinfo] = None,
    ) -> Decimal:
        """Effective unit rate at ``moment``, peak multiplier included."""
        return self.unit_rate_for(energy_type) * self.multiplier_for(DayOfWeek.of(moment, tz))
