from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_alerts, render_forecast, render_reading


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Terminal dashboard for the air quality aggregator service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Seconds between readings in watch mode.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Per-request timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(
        base_url=base_url,
        poll_interval=poll_interval,
        request_timeout=timeout,
    )
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("current")
def current_command(
    ctx: typer.Context,
    lat: Optional[float] = typer.Option(None, "--lat", min=-90, max=90, help="Latitude."),
    lng: Optional[float] = typer.Option(None, "--lng", min=-180, max=180, help="Longitude."),
    zip_code: Optional[str] = typer.Option(None, "--zip", help="US ZIP code for ground sensors."),
) -> None:
    """Show the current merged reading for a location."""
    state = _get_state(ctx)
    render_reading(state.client.get_reading(lat=lat, lng=lng, zip_code=zip_code))


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    lat: Optional[float] = typer.Option(None, "--lat", min=-90, max=90, help="Latitude."),
    lng: Optional[float] = typer.Option(None, "--lng", min=-180, max=180, help="Longitude."),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        min=1,
        help="Stop after this many readings (default: run until interrupted).",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Override poll interval.",
    ),
) -> None:
    """Refresh the reading on a fixed interval."""
    state = _get_state(ctx)
    interval = poll_interval if poll_interval is not None else state.config.poll_interval
    typer.echo(f"Polling {state.config.base_url} every {interval}s ...")
    for index, reading in enumerate(
        state.client.watch_readings(interval, count=count, lat=lat, lng=lng)
    ):
        if index:
            typer.echo()
        render_reading(reading)


@app.command("forecast")
def forecast_command(
    ctx: typer.Context,
    timeframe: str = typer.Option("24h", "--timeframe", "-t", help="One of 6h, 24h or 48h."),
) -> None:
    """Show the hourly forecast."""
    state = _get_state(ctx)
    render_forecast(state.client.get_forecast(timeframe))


@app.command("alerts")
def alerts_command(
    ctx: typer.Context,
    aqi: int = typer.Option(85, "--aqi", min=0, max=500, help="AQI to assess."),
) -> None:
    """Show health alerts and the impact assessment for an AQI."""
    state = _get_state(ctx)
    render_alerts(state.client.get_alerts(aqi))
