from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _format_cost(value: Any) -> str:
    try:
        return f"{float(value):.2f}"
    except (TypeError, ValueError):
        return str(value)


def render_readings(smart_meter_id: str, readings: List[Dict[str, Any]]) -> None:
    echo_heading(f"Readings for {smart_meter_id}")
    if not readings:
        typer.echo("No readings stored.")
        return
    for reading in readings:
        typer.echo(f"  - {reading.get('time')}: {reading.get('reading')} kW")


def render_comparison(smart_meter_id: str, payload: Dict[str, Any]) -> None:
    echo_heading(f"Price Plan Comparison for {smart_meter_id}")
    echo_key_values([("current_plan", payload.get("pricePlanId") or "none")])
    typer.echo()
    costs = payload.get("pricePlanComparisons") or {}
    for plan_id, cost in costs.items():
        typer.echo(f"  - {plan_id}: {_format_cost(cost)}")


def render_recommendations(smart_meter_id: str, entries: List[Dict[str, Any]]) -> None:
    echo_heading(f"Recommended Price Plans for {smart_meter_id}")
    if not entries:
        typer.echo("No price plans to recommend.")
        return
    for rank, entry in enumerate(entries, start=1):
        for plan_id, cost in entry.items():
            typer.echo(f"  {rank}. {plan_id}: {_format_cost(cost)}")
