"""Validation and access for stored meter readings."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Optional, Sequence

from datastore.meter_readings import MeterReadingStore, build_default_store
from models.records import ElectricityReading

logger = logging.getLogger(__name__)


class InvalidReadingsError(ValueError):
    """Raised when a reading batch cannot be accepted for storage."""


class MeterReadingService:
    def __init__(self, store: MeterReadingStore) -> None:
        self.store = store

    def store_readings(
        self, smart_meter_id: Optional[str], readings: Optional[Sequence[ElectricityReading]]
    ) -> None:
        """Replace the meter's history with ``readings``."""
        if smart_meter_id is None or not smart_meter_id.strip():
            logger.warning("Rejected readings", extra={"reason": "blank smart meter id"})
            raise InvalidReadingsError("Smart meter id must not be blank.")
        if not readings:
            logger.warning(
                "Rejected readings",
                extra={"smart_meter_id": smart_meter_id, "reason": "no readings"},
            )
            raise InvalidReadingsError("At least one electricity reading is required.")

        self.store.put(smart_meter_id, readings)
        logger.info(
            "Accepted readings",
            extra={"smart_meter_id": smart_meter_id, "reading_count": len(readings)},
        )

    def fetch_readings(self, smart_meter_id: str) -> Optional[List[ElectricityReading]]:
        readings = self.store.get(smart_meter_id)
        if readings is None:
            return None
        return list(readings)


@lru_cache
def build_default_reading_service() -> MeterReadingService:
    return MeterReadingService(store=build_default_store())
