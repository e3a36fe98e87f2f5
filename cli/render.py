from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

_MEASUREMENT_UNITS = (
    ("pm25", "µg/m³"),
    ("pm10", "µg/m³"),
    ("no2", "ppb"),
    ("o3", "ppb"),
    ("co", "ppm"),
)

_CATEGORY_COLORS = (
    (50, typer.colors.GREEN),
    (100, typer.colors.YELLOW),
    (150, typer.colors.BRIGHT_RED),
    (200, typer.colors.RED),
    (300, typer.colors.MAGENTA),
)


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _aqi_color(aqi: int) -> str:
    for upper, color in _CATEGORY_COLORS:
        if aqi <= upper:
            return color
    return typer.colors.BRIGHT_MAGENTA


def _format_value(value: Any, unit: str) -> str:
    if value is None:
        return "N/A"
    return f"{float(value):.1f} {unit}"


def render_reading(payload: Dict[str, Any]) -> None:
    location = payload.get("location") or {}
    measurements = payload.get("measurements") or {}
    aqi = int(measurements.get("aqi") or 0)

    echo_heading(f"Air Quality: {location.get('name', 'Unknown location')}")
    echo_key_values(
        [
            ("location", f"{location.get('lat')}, {location.get('lng')}"),
            ("source", payload.get("source")),
            ("timestamp", payload.get("timestamp")),
        ]
    )
    typer.secho(f"aqi: {aqi}", fg=_aqi_color(aqi), bold=True)
    echo_key_values(
        (name, _format_value(measurements.get(name), unit)) for name, unit in _MEASUREMENT_UNITS
    )
    if not payload.get("dataAvailable", False):
        typer.secho(
            "No live data available; showing simulated values.",
            fg=typer.colors.YELLOW,
        )


def render_forecast(payload: Dict[str, Any]) -> None:
    metadata = payload.get("metadata") or {}
    echo_heading(f"Forecast ({metadata.get('timeframe', '?')}, {metadata.get('data_source', 'unknown')} data)")
    for point in payload.get("forecast") or []:
        aqi = int(point.get("aqi") or 0)
        typer.secho(
            f"  {point.get('timestamp')}  aqi={aqi:>3}  confidence={float(point.get('confidence') or 0):.2f}",
            fg=_aqi_color(aqi),
        )


def render_alerts(payload: Dict[str, Any]) -> None:
    metadata = payload.get("metadata") or {}
    echo_heading(
        f"Health Alerts ({metadata.get('alertCount', 0)}, highest severity: "
        f"{metadata.get('highestSeverity', 'info')})"
    )
    alerts = payload.get("alerts") or []
    if alerts:
        for alert in alerts:
            typer.echo(f"  - [{alert.get('severity')}] {alert.get('title')}")
            for recommendation in alert.get("recommendations") or []:
                typer.echo(f"      * {recommendation}")
    else:
        typer.echo("No active alerts.")

    impact = payload.get("healthImpact") or {}
    typer.echo()
    echo_heading("Health Impact")
    for key, label in (
        ("immediateEffects", "Immediate effects"),
        ("longTermRisks", "Long-term risks"),
        ("vulnerablePopulations", "Vulnerable populations"),
        ("protectiveMeasures", "Protective measures"),
    ):
        typer.echo(f"{label}: {', '.join(impact.get(key) or [])}")
