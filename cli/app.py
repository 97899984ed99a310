from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.readings_file import load_readings
from cli.render import render_comparison, render_readings, render_recommendations


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the price plan comparator service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Comparator API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("store")
def store_command(
    ctx: typer.Context,
    smart_meter_id: str = typer.Argument(..., help="Smart meter identifier."),
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="CSV file with time,reading columns."
    ),
) -> None:
    """Upload readings from a CSV file, replacing the meter's history."""
    state = _get_state(ctx)
    try:
        parsed = load_readings(file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="FILE") from exc

    for error in parsed.errors:
        typer.secho(
            f"Skipping row {error.row_number}: {error.reason}", fg=typer.colors.YELLOW, err=True
        )
    if not parsed.readings:
        typer.secho("No valid readings found in file.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Storing {len(parsed.readings)} readings for {smart_meter_id} ...")
    state.client.store_readings(smart_meter_id, parsed.readings)
    typer.secho("Readings stored.", fg=typer.colors.GREEN)


@app.command("readings")
def readings_command(
    ctx: typer.Context,
    smart_meter_id: str = typer.Argument(..., help="Smart meter identifier."),
) -> None:
    """Show the readings stored for a meter."""
    state = _get_state(ctx)
    render_readings(smart_meter_id, state.client.get_readings(smart_meter_id))


@app.command("compare")
def compare_command(
    ctx: typer.Context,
    smart_meter_id: str = typer.Argument(..., help="Smart meter identifier."),
) -> None:
    """Show the cost of the meter's consumption under every price plan."""
    state = _get_state(ctx)
    render_comparison(smart_meter_id, state.client.compare_all(smart_meter_id))


@app.command("recommend")
def recommend_command(
    ctx: typer.Context,
    smart_meter_id: str = typer.Argument(..., help="Smart meter identifier."),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", min=0, help="Maximum number of plans to show."
    ),
) -> None:
    """Show the cheapest price plans for a meter."""
    state = _get_state(ctx)
    render_recommendations(smart_meter_id, state.client.recommend(smart_meter_id, limit=limit))
