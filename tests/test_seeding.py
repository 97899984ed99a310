from __future__ import annotations

import json
import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from datastore.meter_readings import MeterReadingStore
from models.records import DayOfWeek, EnergyType
from services.seeding import (
    ElectricityReadingsGenerator,
    default_accounts,
    default_price_plans,
    load_price_plans,
    seed_store,
)


def test_default_price_plans() -> None:
    plans = {plan.plan_id: plan for plan in default_price_plans()}

    assert list(plans) == ["price-plan-0", "price-plan-1", "price-plan-2"]
    assert plans["price-plan-0"].unit_rate_for(EnergyType.ELECTRICITY) == Decimal("10")
    assert plans["price-plan-0"].multiplier_for(DayOfWeek.SATURDAY) == Decimal("2")
    assert plans["price-plan-1"].unit_rate_for(EnergyType.GAS) == Decimal("1.5")
    assert plans["price-plan-2"].peak_multipliers == {}


def test_default_accounts_reference_known_plans() -> None:
    plan_ids = {plan.plan_id for plan in default_price_plans()}

    accounts = default_accounts()

    assert len(accounts) == 5
    assert set(accounts.values()) <= plan_ids


def test_generator_spaces_readings_ten_seconds_apart() -> None:
    end = datetime(2024, 4, 26, 12, 0, tzinfo=timezone.utc)
    generator = ElectricityReadingsGenerator(rng=random.Random(7))

    readings = generator.generate(20, end=end)

    assert len(readings) == 20
    assert readings[-1].time == end
    assert readings[0].time == end - timedelta(seconds=190)
    assert all(reading.reading >= 0 for reading in readings)
    assert all(reading.reading.as_tuple().exponent >= -4 for reading in readings)


def test_generator_is_reproducible_with_seeded_rng() -> None:
    end = datetime(2024, 4, 26, 12, 0, tzinfo=timezone.utc)

    first = ElectricityReadingsGenerator(rng=random.Random(42)).generate(5, end=end)
    second = ElectricityReadingsGenerator(rng=random.Random(42)).generate(5, end=end)

    assert first == second


def test_seed_store_populates_each_demo_meter() -> None:
    store = MeterReadingStore()

    seed_store(store, count=4)

    assert store.meter_ids() == sorted(default_accounts())
    assert all(len(store.get(meter_id) or ()) == 4 for meter_id in store.meter_ids())


def test_seed_store_can_be_disabled() -> None:
    store = MeterReadingStore()

    seed_store(store, count=0)

    assert store.meter_ids() == []


def test_load_price_plans_from_json(tmp_path) -> None:
    path = tmp_path / "plans.json"
    path.write_text(
        json.dumps(
            [
                {
                    "plan_id": "night-owl",
                    "supplier": "Night Owl Energy",
                    "tariffs": [{"energy_type": "electricity", "unit_rate": "0.25"}],
                    "peak_multipliers": {"saturday": "1.5"},
                },
                {
                    "plan_id": "flat",
                    "tariffs": [{"energy_type": "ELECTRICITY", "unit_rate": 0.3}],
                },
            ]
        )
    )

    plans = load_price_plans(path)

    assert [plan.plan_id for plan in plans] == ["night-owl", "flat"]
    assert plans[0].multiplier_for(DayOfWeek.SATURDAY) == Decimal("1.5")
    assert plans[1].supplier == "flat"
    assert plans[1].unit_rate_for(EnergyType.ELECTRICITY) == Decimal("0.3")


@pytest.mark.parametrize(
    "payload",
    [
        {"plans": []},
        [{"supplier": "missing id", "tariffs": []}],
        [{"plan_id": "x", "tariffs": [{"energy_type": "COAL", "unit_rate": "1"}]}],
        [{"plan_id": "x", "tariffs": [{"energy_type": "GAS", "unit_rate": "-1"}]}],
        [{"plan_id": "x", "tariffs": [], "peak_multipliers": {"FUNDAY": "2"}}],
        [{"plan_id": "x", "tariffs": []}, {"plan_id": "x", "tariffs": []}],
    ],
)
def test_load_price_plans_rejects_malformed_files(tmp_path, payload) -> None:
    path = tmp_path / "plans.json"
    path.write_text(json.dumps(payload))

    with pytest.raises(ValueError):
        load_price_plans(path)


def test_load_price_plans_reports_unreadable_file(tmp_path) -> None:
    with pytest.raises(ValueError, match="Unable to read price plans"):
        load_price_plans(tmp_path / "missing.json")
