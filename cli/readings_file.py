"""Parse a local CSV of meter readings into request payload items."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List


@dataclass
class RowError:
    row_number: int
    reason: str


@dataclass
class ParsedReadings:
    readings: List[Dict[str, Any]]
    errors: List[RowError]


def parse_timestamp(value: str) -> datetime:
    candidate = value.strip()
    if not candidate:
        raise ValueError("Timestamp is empty.")

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError("Invalid timestamp format") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


def load_readings(path: Path) -> ParsedReadings:
    """Read ``time,reading`` rows; bad rows are collected rather than raised.

    A missing header row or missing required columns raises ``ValueError``.
    """
    with path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValueError("CSV file is missing a header row.")

        normalized = {name.lower().strip(): name for name in reader.fieldnames}
        missing = sorted({"time", "reading"} - normalized.keys())
        if missing:
            raise ValueError(f"CSV missing required columns: {', '.join(missing)}")

        time_col = normalized["time"]
        reading_col = normalized["reading"]

        readings: List[Dict[str, Any]] = []
        errors: List[RowError] = []
        for row_number, row in enumerate(reader, start=2):
            time_raw = (row.get(time_col) or "").strip()
            reading_raw = (row.get(reading_col) or "").strip()

            if not time_raw:
                errors.append(RowError(row_number, "missing time"))
                continue
            try:
                moment = parse_timestamp(time_raw)
            except ValueError:
                errors.append(RowError(row_number, "invalid timestamp"))
                continue

            if not reading_raw:
                errors.append(RowError(row_number, "missing reading"))
                continue
            try:
                value = Decimal(reading_raw)
            except InvalidOperation:
                errors.append(RowError(row_number, "invalid numeric value"))
                continue
            if not value.is_finite() or value < 0:
                errors.append(RowError(row_number, "negative or non-finite reading"))
                continue

            readings.append({"time": moment.isoformat(), "reading": str(value)})

    return ParsedReadings(readings=readings, errors=errors)
