from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


_PRICE_PLANS_PATH_ENV = "PRICE_PLANS_PATH"
_TIMEZONE_ENV = "PRICING_TIMEZONE"
_SEED_COUNT_ENV = "SEED_READINGS_PER_METER"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    price_plans_path: Optional[str]
    pricing_timezone: Optional[str]
    seed_readings_per_meter: int
    log_level: str

    def resolve_timezone(self) -> Optional[tzinfo]:
        """Return the zone used for peak-day lookups; ``None`` means host local time."""
        if self.pricing_timezone is None:
            return None
        if self.pricing_timezone.upper() in {"UTC", "Z"}:
            return timezone.utc
        try:
            return ZoneInfo(self.pricing_timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(
                f"Unknown pricing time zone {self.pricing_timezone!r}."
            ) from exc


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_seed_count(default: int) -> int:
    value = os.getenv(_SEED_COUNT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        price_plans_path=_read_optional_env(_PRICE_PLANS_PATH_ENV, None),
        pricing_timezone=_read_optional_env(_TIMEZONE_ENV, None),
        seed_readings_per_meter=_read_seed_count(20),
        log_level=_read_log_level("INFO"),
    )
