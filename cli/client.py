from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the price plan comparator service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def store_readings(self, smart_meter_id: str, readings: List[Dict[str, Any]]) -> None:
        payload = {"smartMeterId": smart_meter_id, "electricityReadings": readings}
        try:
            response = self._client.post("/readings/store", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)

    def get_readings(self, smart_meter_id: str) -> List[Dict[str, Any]]:
        return self._get_for_meter(f"/readings/read/{smart_meter_id}", smart_meter_id)

    def compare_all(self, smart_meter_id: str) -> Dict[str, Any]:
        return self._get_for_meter(f"/price-plans/compare-all/{smart_meter_id}", smart_meter_id)

    def recommend(self, smart_meter_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit is not None else None
        return self._get_for_meter(
            f"/price-plans/recommend/{smart_meter_id}", smart_meter_id, params=params
        )

    def _get_for_meter(
        self, path: str, smart_meter_id: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        try:
            response = self._client.get(path, params=params)
            if response.status_code == 404:
                raise typer.BadParameter(f"No readings found for smart meter {smart_meter_id}.")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: Any = None
        try:
            detail = exc.response.json().get("detail")
        except (ValueError, AttributeError):
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
