"""Cost comparison and recommendation across the configured price plans."""

from __future__ import annotations

import logging
from decimal import Decimal
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from datastore.accounts import AccountStore, build_default_accounts
from datastore.meter_readings import MeterReadingStore, build_default_store
from models.records import PricePlan
from services.cost_engine import CostEngine
from services.seeding import configured_price_plans
from settings import get_settings

logger = logging.getLogger(__name__)


class PricePlanService:
    """Runs the cost engine for one meter against every plan and ranks the results.

    A meter without readings, or whose stored history is empty, yields ``None``
    from both ``compare_all`` and ``recommend``. That is distinct from a present
    result whose costs are all zero.
    """

    def __init__(
        self,
        price_plans: Sequence[PricePlan],
        store: MeterReadingStore,
        accounts: AccountStore,
        engine: Optional[CostEngine] = None,
    ) -> None:
        self._price_plans: Tuple[PricePlan, ...] = tuple(price_plans)
        plan_ids = [plan.plan_id for plan in self._price_plans]
        if len(set(plan_ids)) != len(plan_ids):
            raise ValueError(f"Price plan ids must be unique: {plan_ids}")
        self.store = store
        self.accounts = accounts
        self.engine = engine or CostEngine()

    @property
    def price_plans(self) -> Tuple[PricePlan, ...]:
        return self._price_plans

    def current_plan_id(self, smart_meter_id: str) -> Optional[str]:
        return self.accounts.price_plan_id_for(smart_meter_id)

    def compare_all(self, smart_meter_id: str) -> Optional[Dict[str, Decimal]]:
        """Cost per plan id, in plan order."""
        readings = self.store.get(smart_meter_id)
        if not readings:
            logger.info(
                "No readings to compare",
                extra={"smart_meter_id": smart_meter_id, "reason": "not found"},
            )
            return None

        costs = {plan.plan_id: self.engine.cost(readings, plan) for plan in self._price_plans}
        logger.info(
            "Compared price plans",
            extra={
                "smart_meter_id": smart_meter_id,
                "reading_count": len(readings),
                "plan_count": len(costs),
                "consumption_kwh": self.engine.consumption(readings),
            },
        )
        return costs

    def recommend(
        self, smart_meter_id: str, limit: Optional[int] = None
    ) -> Optional[List[Tuple[str, Decimal]]]:
        """Plans ordered cheapest first; equal costs keep plan order."""
        costs = self.compare_all(smart_meter_id)
        if costs is None:
            return None

        ranking = sorted(costs.items(), key=lambda item: item[1])
        if limit is not None and limit >= 0:
            ranking = ranking[:limit]
        logger.debug(
            "Ranked price plans",
            extra={"smart_meter_id": smart_meter_id, "limit": limit},
        )
        return ranking


@lru_cache
def build_default_price_plan_service() -> PricePlanService:
    """Factory that wires the comparator with the configured plans and stores."""
    settings = get_settings()
    return PricePlanService(
        price_plans=configured_price_plans(),
        store=build_default_store(),
        accounts=build_default_accounts(),
        engine=CostEngine(tz=settings.resolve_timezone()),
    )
