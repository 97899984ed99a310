"""Unit tests for the interval cost integration."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from models.records import DayOfWeek, ElectricityReading, EnergyType, PricePlan, Tariff
from services.cost_engine import CostEngine

FRIDAY = datetime(2024, 4, 26, 10, 0, tzinfo=timezone.utc)
SATURDAY = datetime(2024, 4, 27, 10, 0, tzinfo=timezone.utc)


def _reading(moment: datetime, value: str) -> ElectricityReading:
    return ElectricityReading(time=moment, reading=Decimal(value))


def _plan(rate: str, peak: dict | None = None, plan_id: str = "plan") -> PricePlan:
    return PricePlan.single_rate(plan_id, "Supplier", Decimal(rate), peak_multipliers=peak)


@pytest.fixture()
def engine() -> CostEngine:
    return CostEngine(tz=timezone.utc)


def test_fewer_than_two_readings_costs_nothing(engine: CostEngine) -> None:
    plan = _plan("10")

    assert engine.cost([], plan) == Decimal("0.00")
    assert engine.cost([_reading(FRIDAY, "5")], plan) == Decimal("0.00")
    assert str(engine.cost([], plan)) == "0.00"


def test_trapezoidal_integration_over_short_intervals(engine: CostEngine) -> None:
    readings = [
        _reading(FRIDAY, "10"),
        _reading(FRIDAY + timedelta(seconds=10), "20"),
        _reading(FRIDAY + timedelta(seconds=20), "30"),
    ]

    assert engine.cost(readings, _plan("1")) == Decimal("0.11")
    assert engine.cost(readings, _plan("2")) == Decimal("0.22")
    assert engine.cost(readings, _plan("10")) == Decimal("1.11")


def test_average_power_over_one_hour(engine: CostEngine) -> None:
    readings = [_reading(FRIDAY, "15"), _reading(FRIDAY + timedelta(hours=1), "5")]

    assert engine.cost(readings, _plan("10")) == Decimal("100.00")
    assert engine.cost(readings, _plan("1")) == Decimal("10.00")
    assert engine.consumption(readings) == Decimal("10")


def test_peak_multiplier_applies_on_matching_day(engine: CostEngine) -> None:
    plan = _plan("10", peak={DayOfWeek.SATURDAY: Decimal("2")})
    saturday = [_reading(SATURDAY, "0.5"), _reading(SATURDAY + timedelta(seconds=1800), "0.5")]
    friday = [_reading(FRIDAY, "0.5"), _reading(FRIDAY + timedelta(seconds=1800), "0.5")]

    assert engine.cost(saturday, plan) == Decimal("5.00")
    assert engine.cost(friday, plan) == Decimal("2.50")


def test_interval_day_is_taken_from_its_first_reading(engine: CostEngine) -> None:
    plan = _plan("1", peak={DayOfWeek.SATURDAY: Decimal("3")})
    start = datetime(2024, 4, 26, 23, 30, tzinfo=timezone.utc)
    readings = [_reading(start, "2"), _reading(start + timedelta(hours=1), "2")]

    assert engine.cost(readings, plan) == Decimal("2.00")


def test_day_lookup_follows_configured_time_zone() -> None:
    plan = _plan("10", peak={DayOfWeek.SATURDAY: Decimal("2")})
    start = datetime(2024, 4, 27, 2, 0, tzinfo=timezone.utc)
    readings = [_reading(start, "0.5"), _reading(start + timedelta(minutes=30), "0.5")]

    utc_engine = CostEngine(tz=timezone.utc)
    eastern_engine = CostEngine(tz=timezone(timedelta(hours=-5)))

    assert utc_engine.cost(readings, plan) == Decimal("5.00")
    assert eastern_engine.cost(readings, plan) == Decimal("2.50")


def test_plan_without_matching_tariff_costs_nothing(engine: CostEngine) -> None:
    gas_only = PricePlan(
        plan_id="gas",
        supplier="Gas Co",
        tariffs=(Tariff(EnergyType.GAS, Decimal("5")),),
    )
    readings = [_reading(FRIDAY, "15"), _reading(FRIDAY + timedelta(hours=1), "5")]

    assert engine.cost(readings, gas_only) == Decimal("0.00")
    assert engine.cost(readings, gas_only, energy_type=EnergyType.GAS) == Decimal("50.00")


def test_rates_for_the_same_energy_type_are_summed(engine: CostEngine) -> None:
    plan = PricePlan(
        plan_id="dual",
        supplier="Dual",
        tariffs=(
            Tariff(EnergyType.ELECTRICITY, Decimal("1")),
            Tariff(EnergyType.ELECTRICITY, Decimal("0.5")),
            Tariff(EnergyType.GAS, Decimal("100")),
        ),
    )
    readings = [_reading(FRIDAY, "2"), _reading(FRIDAY + timedelta(hours=1), "2")]

    assert engine.cost(readings, plan) == Decimal("3.00")


def test_cost_does_not_depend_on_input_order(engine: CostEngine) -> None:
    plan = _plan("3", peak={DayOfWeek.FRIDAY: Decimal("1.2")})
    ordered = [
        _reading(FRIDAY, "1.5"),
        _reading(FRIDAY + timedelta(minutes=7), "0.25"),
        _reading(FRIDAY + timedelta(minutes=19), "4"),
        _reading(FRIDAY + timedelta(minutes=45), "2.75"),
    ]
    shuffled = [ordered[2], ordered[0], ordered[3], ordered[1]]

    assert engine.cost(shuffled, plan) == engine.cost(ordered, plan)


def test_duplicate_timestamps_contribute_nothing(engine: CostEngine) -> None:
    readings = [
        _reading(FRIDAY, "10"),
        _reading(FRIDAY, "20"),
        _reading(FRIDAY + timedelta(hours=1), "30"),
    ]

    assert engine.cost(readings, _plan("1")) == Decimal("25.00")


def test_sub_second_intervals_are_counted(engine: CostEngine) -> None:
    readings = [
        _reading(FRIDAY, "3600"),
        _reading(FRIDAY + timedelta(milliseconds=500), "3600"),
    ]

    assert engine.cost(readings, _plan("1")) == Decimal("0.50")


def test_total_rounds_half_up_to_cents(engine: CostEngine) -> None:
    readings = [_reading(FRIDAY, "0.02"), _reading(FRIDAY + timedelta(hours=1), "0.03")]

    assert engine.cost(readings, _plan("1")) == Decimal("0.03")


def test_rounding_happens_once_on_the_total(engine: CostEngine) -> None:
    # Each ten-second interval is worth 0.004; rounding per interval would give zero.
    readings = [
        _reading(FRIDAY + timedelta(seconds=10 * index), "1.44") for index in range(11)
    ]

    assert engine.cost(readings, _plan("1")) == Decimal("0.04")


def test_cost_is_monotonic_in_rate_and_multiplier(engine: CostEngine) -> None:
    readings = [
        _reading(SATURDAY, "0.7"),
        _reading(SATURDAY + timedelta(minutes=20), "1.3"),
        _reading(SATURDAY + timedelta(minutes=50), "0.9"),
    ]
    rates = ["0.5", "1", "1.25", "4"]
    multipliers = ["1", "1.5", "2", "3"]

    by_rate = [engine.cost(readings, _plan(rate)) for rate in rates]
    by_multiplier = [
        engine.cost(readings, _plan("1", peak={DayOfWeek.SATURDAY: Decimal(value)}))
        for value in multipliers
    ]

    assert by_rate == sorted(by_rate)
    assert by_multiplier == sorted(by_multiplier)
    assert by_rate[-1] > by_rate[0]


def test_price_at_includes_peak_multiplier() -> None:
    plan = _plan("10", peak={DayOfWeek.SATURDAY: Decimal("2")})

    assert plan.price_at(SATURDAY, tz=timezone.utc) == Decimal("20")
    assert plan.price_at(FRIDAY, tz=timezone.utc) == Decimal("10")
    assert plan.multiplier_for(DayOfWeek.MONDAY) == Decimal("1")
