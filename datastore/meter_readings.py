from __future__ import annotations

import logging
from functools import lru_cache
from threading import Lock
from typing import Dict, Iterable, Optional, Tuple

from models.records import ElectricityReading
from services.seeding import seed_store

logger = logging.getLogger(__name__)


class MeterReadingStore:
    """In-memory readings keyed by smart meter id.

    Each meter's history is held as an immutable tuple and replaced wholesale on
    ``put``, so a ``get`` always sees the last completed write for that meter.
    """

    def __init__(self, name: str = "meter_readings") -> None:
        self.name = name
        self._items: Dict[str, Tuple[ElectricityReading, ...]] = {}
        self._lock = Lock()

    def put(self, smart_meter_id: str, readings: Iterable[ElectricityReading]) -> None:
        snapshot = tuple(readings)
        with self._lock:
            self._items[smart_meter_id] = snapshot
        logger.debug(
            "Stored readings",
            extra={"smart_meter_id": smart_meter_id, "reading_count": len(snapshot)},
        )

    def get(self, smart_meter_id: str) -> Optional[Tuple[ElectricityReading, ...]]:
        with self._lock:
            return self._items.get(smart_meter_id)

    def meter_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._items)


@lru_cache
def build_default_store() -> MeterReadingStore:
    """Store pre-populated with generated readings for the demo accounts."""
    store = MeterReadingStore()
    seed_store(store)
    return store
