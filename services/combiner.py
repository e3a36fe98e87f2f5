"""Merge per-source measurement vectors into one reading.

Priority is ground sensors, then satellite, then the weather provider, then
fixed typical-urban defaults. A field counts as unset while it is exactly 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from app.schemas import SourceTag
from models.measurements import POLLUTANT_FIELDS, MeasurementVector
from services.aqi import round_half_up
from services.transformers import clamp

TYPICAL_URBAN_DEFAULTS: Dict[str, float] = {
    "pm25": 12.5,
    "pm10": 23.8,
    "co": 0.8,
    "no2": 18.2,
    "o3": 34.7,
}

DEFAULT_AQI_FLOOR = 20
DEFAULT_AQI_CEILING = 200

_SATELLITE_FIELDS = ("no2", "o3")


@dataclass
class CombinedMeasurements:
    """Result of merging whatever sources answered for one request."""

    measurements: MeasurementVector = field(default_factory=MeasurementVector)
    source: SourceTag = SourceTag.simulated
    data_available: bool = False


def combine_sources(
    ground: Optional[MeasurementVector] = None,
    satellite: Optional[MeasurementVector] = None,
    weather: Optional[MeasurementVector] = None,
) -> CombinedMeasurements:
    """Merge up to three vectors; never raises, whatever is missing."""
    merged = MeasurementVector()
    has_ground = ground is not None
    has_satellite = satellite is not None
    has_weather = weather is not None

    if ground is not None:
        for name in POLLUTANT_FIELDS:
            setattr(merged, name, getattr(ground, name))
        merged.aqi = max(merged.aqi, ground.aqi)

    if satellite is not None:
        for name in _SATELLITE_FIELDS:
            if getattr(merged, name) == 0:
                setattr(merged, name, getattr(satellite, name))
        if not has_ground:
            merged.aqi = satellite.aqi

    if weather is not None:
        for name in ("aqi",) + POLLUTANT_FIELDS:
            if getattr(merged, name) == 0:
                setattr(merged, name, getattr(weather, name))

    for name, default in TYPICAL_URBAN_DEFAULTS.items():
        if getattr(merged, name) == 0:
            setattr(merged, name, default)

    if merged.aqi == 0:
        peak = max(merged.pm25, merged.pm10, merged.no2, merged.o3)
        merged.aqi = round_half_up(clamp(DEFAULT_AQI_FLOOR, DEFAULT_AQI_CEILING, 2 * peak))

    return CombinedMeasurements(
        measurements=merged,
        source=_source_tag(has_ground, has_satellite, has_weather),
        data_available=has_ground or has_satellite or has_weather,
    )


def _source_tag(has_ground: bool, has_satellite: bool, has_weather: bool) -> SourceTag:
    if has_ground and has_satellite:
        return SourceTag.ground_sensors_satellite
    if has_ground:
        return SourceTag.ground_sensors
    if has_satellite:
        return SourceTag.satellite
    if has_weather:
        return SourceTag.weather_derived
    return SourceTag.simulated
