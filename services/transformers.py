"""Per-provider conversion of raw payloads into measurement vectors.

Missing or malformed fields are left at 0, which downstream code treats as
"unset".
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from app.schemas import (
    Location,
    QualityFlags,
    SatelliteDataSource,
    SatelliteLocation,
    SatelliteMeasurements,
    SatellitePayload,
)
from models.measurements import MeasurementVector
from services.aqi import calculate_overall_aqi, calculate_sub_index, round_half_up

# Substring needles checked in order; the first hit wins.
_GROUND_PARAMETERS = (
    ("pm2.5", "pm25"),
    ("pm10", "pm10"),
    ("ozone", "o3"),
    ("o3", "o3"),
    ("no2", "no2"),
    ("co", "co"),
)

_WEATHER_COMPONENTS = (
    ("pm2_5", "pm25"),
    ("pm10", "pm10"),
    ("no2", "no2"),
    ("o3", "o3"),
    ("co", "co"),
)

OPENWEATHER_INDEX_SCALE = 50

SATELLITE_NO2_FACTOR = 0.8
SATELLITE_O3_FACTOR = 0.6
SATELLITE_AQI_FLOOR = 20
SATELLITE_AQI_CEILING = 200


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _first_number(source: Mapping[str, Any], keys: Iterable[str]) -> float:
    for key in keys:
        value = _as_number(source.get(key))
        if value:
            return value
    return 0.0


def _match_parameter(name: str) -> Optional[str]:
    lowered = name.lower()
    for needle, field in _GROUND_PARAMETERS:
        if needle in lowered:
            return field
    return None


def clamp(low: float, high: float, value: float) -> float:
    return max(low, min(high, value))


def transform_ground_sensors(payload: Any) -> MeasurementVector:
    """Map AirNow observations onto a vector.

    ``aqi`` is the highest reported index among recognized pollutants; an
    observation that carries a concentration but no usable index contributes
    its calculated sub-index instead.
    """
    vector = MeasurementVector()
    if not isinstance(payload, list):
        return vector

    for observation in payload:
        if not isinstance(observation, Mapping):
            continue
        field = _match_parameter(str(observation.get("ParameterName") or ""))
        if field is None:
            continue

        concentration = _first_number(observation, ("Value", "Concentration", "value"))
        if concentration > 0:
            setattr(vector, field, concentration)

        index = _as_number(observation.get("AQI"))
        if index is None or index < 0:
            index = float(calculate_sub_index(field, concentration)) if concentration > 0 else None
        if index is not None:
            vector.aqi = max(vector.aqi, round_half_up(index))

    return vector


def transform_weather(payload: Any) -> MeasurementVector:
    """Map an OpenWeather air-pollution body onto a vector.

    The ``{"list": [...]}`` envelope is unwrapped to its first entry. The
    provider's 1-5 index is scaled by 50; without it the index is calculated
    from the components.
    """
    vector = MeasurementVector()
    entry = payload
    if isinstance(payload, Mapping) and isinstance(payload.get("list"), list):
        entries = payload["list"]
        entry = entries[0] if entries else {}
    if not isinstance(entry, Mapping):
        return vector

    components = entry.get("components")
    if isinstance(components, Mapping):
        for key, field in _WEATHER_COMPONENTS:
            value = _as_number(components.get(key))
            if value and value > 0:
                setattr(vector, field, value)

    main = entry.get("main")
    index = _as_number(main.get("aqi")) if isinstance(main, Mapping) else None
    if index is None:
        index = _as_number(entry.get("aqi"))

    if index and index > 0:
        vector.aqi = round_half_up(index * OPENWEATHER_INDEX_SCALE)
    else:
        vector.aqi = calculate_overall_aqi(vector.concentrations())
    return vector


def normalize_satellite_payload(
    raw: Any,
    location: Location,
    now: Optional[datetime] = None,
) -> SatellitePayload:
    """Map a TEMPO response body onto the standardized satellite payload."""
    now = now or datetime.now(timezone.utc)
    body: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    nested = body.get("measurements")
    values = {**nested, **body} if isinstance(nested, Mapping) else dict(body)

    return SatellitePayload(
        timestamp=body.get("timestamp") or now,
        location=SatelliteLocation(latitude=location.lat, longitude=location.lng),
        measurements=SatelliteMeasurements(
            no2_column=_first_number(values, ("no2_tropospheric_column", "no2_column")),
            o3_column=_first_number(values, ("o3_tropospheric_column", "o3_column")),
            so2_column=_first_number(values, ("so2_tropospheric_column", "so2_column")),
            hcho_column=_first_number(values, ("hcho_tropospheric_column", "hcho_column")),
            aerosol_optical_depth=_first_number(values, ("aerosol_optical_depth",)),
            cloud_fraction=_first_number(values, ("cloud_fraction",)),
        ),
        quality_flags=QualityFlags(
            no2_quality=body.get("no2_quality_flag") or "unknown",
            o3_quality=body.get("o3_quality_flag") or "unknown",
            overall_quality=body.get("overall_quality_flag") or "unknown",
        ),
        spatial_resolution=body.get("spatial_resolution") or "2.1km x 4.4km",
        overpass_time=body.get("overpass_time") or now,
        data_source=SatelliteDataSource.real,
    )


def satellite_derived_aqi(measurements: SatelliteMeasurements) -> int:
    estimate = max(
        measurements.no2_column * 2,
        measurements.o3_column * 1.5,
        measurements.aerosol_optical_depth * 100,
    )
    return round_half_up(clamp(SATELLITE_AQI_FLOOR, SATELLITE_AQI_CEILING, estimate))


def transform_satellite(measurements: SatelliteMeasurements) -> MeasurementVector:
    """Approximate surface NO2/O3 from column values; ``aqi`` is the derived estimate."""
    return MeasurementVector(
        aqi=satellite_derived_aqi(measurements),
        no2=max(0.0, measurements.no2_column * SATELLITE_NO2_FACTOR),
        o3=max(0.0, measurements.o3_column * SATELLITE_O3_FACTOR),
    )
