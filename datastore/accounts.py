from __future__ import annotations

from functools import lru_cache
from threading import Lock
from typing import Dict, Mapping, Optional

from services.seeding import default_accounts


class AccountStore:
    """Maps smart meter ids to the price plan the account is currently on."""

    def __init__(self, accounts: Optional[Mapping[str, str]] = None) -> None:
        self._accounts: Dict[str, str] = dict(accounts or {})
        self._lock = Lock()

    def price_plan_id_for(self, smart_meter_id: str) -> Optional[str]:
        with self._lock:
            return self._accounts.get(smart_meter_id)

    def assign(self, smart_meter_id: str, price_plan_id: str) -> None:
        with self._lock:
            self._accounts[smart_meter_id] = price_plan_id

    def meter_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._accounts)


@lru_cache
def build_default_accounts() -> AccountStore:
    return AccountStore(default_accounts())
