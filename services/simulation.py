"""Synthetic stand-ins for the satellite feed, the forecast model and history.

Values combine diurnal/seasonal sinusoids, rush-hour boosts and bounded
uniform noise drawn from the ``random.Random`` passed in. Every payload is
labelled as simulated.
"""

from __future__ import annotations

import math
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from app.schemas import (
    ForecastPoint,
    ForecastWeather,
    Location,
    QualityFlags,
    SatelliteDataSource,
    SatelliteLocation,
    SatelliteMeasurements,
    SatellitePayload,
    SourceWeights,
    TrendPoint,
)
from services.aqi import round_half_up
from services.transformers import clamp

FORECAST_TIMEFRAMES: Dict[str, int] = {"6h": 6, "24h": 24, "48h": 48}
DEFAULT_FORECAST_HOURS = 48

FORECAST_MODEL_METADATA: Dict[str, Any] = {
    "model_version": "v2.1.0",
    "last_trained": "2024-01-15T10:00:00Z",
    "accuracy": 87.3,
    "rmse": 12.4,
    "data_sources": ["TEMPO", "EPA_AirNow", "NOAA_Weather"],
    "update_frequency": "5min",
}

BASELINE_AQI = 65
CONFIDENCE_CEILING = 0.95
CONFIDENCE_FLOOR = 0.6
CONFIDENCE_DECAY = 0.3
CONFIDENCE_NOISE = 0.1

SATELLITE_RUSH_HOUR_NO2 = 3.0
MORNING_RUSH_BOOST = 20
EVENING_RUSH_BOOST = 15


def forecast_hours(timeframe: str) -> int:
    return FORECAST_TIMEFRAMES.get(timeframe, DEFAULT_FORECAST_HOURS)


def _local_now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc).astimezone()


def _is_morning_rush(hour: int) -> bool:
    return 7 <= hour <= 9


def _is_evening_rush(hour: int) -> bool:
    return 17 <= hour <= 19


def _noise(rng: random.Random, spread: float) -> float:
    return (rng.random() - 0.5) * spread


def generate_satellite_payload(
    location: Location,
    rng: random.Random,
    now: Optional[datetime] = None,
) -> SatellitePayload:
    """Fabricate a TEMPO-shaped observation with plausible column values."""
    now = _local_now(now)
    hour = now.hour

    base_no2 = 15 + math.sin((hour - 8) / 12 * math.pi) * 8
    if _is_morning_rush(hour) or _is_evening_rush(hour):
        base_no2 += SATELLITE_RUSH_HOUR_NO2
    base_o3 = 40 + math.sin((hour - 14) / 12 * math.pi) * 20
    base_so2 = 5 + rng.random() * 3
    base_hcho = 2 + rng.random() * 1.5

    measurements = SatelliteMeasurements(
        no2_column=max(0.0, base_no2 + _noise(rng, 4)),
        o3_column=max(0.0, base_o3 + _noise(rng, 8)),
        so2_column=max(0.0, base_so2 + _noise(rng, 2)),
        hcho_column=max(0.0, base_hcho + _noise(rng, 1)),
        aerosol_optical_depth=0.1 + rng.random() * 0.3,
        cloud_fraction=rng.random() * 0.8,
    )
    quality_flags = QualityFlags(
        no2_quality="good" if rng.random() > 0.2 else "moderate",
        o3_quality="good" if rng.random() > 0.15 else "moderate",
        overall_quality="good" if rng.random() > 0.1 else "moderate",
    )
    return SatellitePayload(
        timestamp=now,
        location=SatelliteLocation(latitude=location.lat, longitude=location.lng),
        measurements=measurements,
        quality_flags=quality_flags,
        overpass_time=now,
        data_source=SatelliteDataSource.simulated,
    )


def _describe_weather(temperature: float, humidity: float, wind_speed: float) -> str:
    if wind_speed > 9:
        return "Windy"
    if humidity > 80:
        return "Humid"
    if temperature > 25:
        return "Warm"
    return "Mild"


def _weather_impact(temperature: float, humidity: float, wind_speed: float, pressure: float) -> float:
    impact = 0.0
    if temperature > 25:
        impact += 10
    if humidity > 80:
        impact += 8
    impact -= min(wind_speed * 2, 20)
    if pressure < 1010:
        impact += 5
    return impact


def generate_forecast(
    hours: int,
    rng: random.Random,
    now: Optional[datetime] = None,
) -> List[ForecastPoint]:
    """Produce ``hours`` hourly points starting at ``now``.

    Confidence starts at most 0.95, decays linearly over the horizon minus up
    to 0.1 of noise, and never drops below 0.6.
    """
    now = _local_now(now)
    seasonal = math.sin((now.month - 1) / 12 * 2 * math.pi) * 15
    points: List[ForecastPoint] = []

    for step in range(hours):
        timestamp = now + timedelta(hours=step)
        hour = timestamp.hour
        weekend = timestamp.weekday() >= 5

        diurnal = math.sin((hour - 6) / 24 * 2 * math.pi) * 20
        weekly = -15 if weekend else 10

        temperature = 15 + math.sin((hour - 6) / 24 * 2 * math.pi) * 8 + rng.random() * 4
        humidity = 60 + math.sin(hour / 12 * math.pi) * 20 + rng.random() * 10
        wind_speed = 3 + rng.random() * 8 + math.sin(step / 6) * 3
        pressure = 1013 + math.sin(step / 12) * 10 + rng.random() * 5

        tempo_weight = 0.4 + rng.random() * 0.2
        ground_weight = 0.3 + rng.random() * 0.2
        weather_weight = 0.2 + rng.random() * 0.1

        aqi = BASELINE_AQI + seasonal + diurnal + weekly
        aqi += _weather_impact(temperature, humidity, wind_speed, pressure)
        aqi += _noise(rng, 20)
        aqi = clamp(20, 200, aqi)

        confidence = max(
            CONFIDENCE_FLOOR,
            CONFIDENCE_CEILING - (step / hours) * CONFIDENCE_DECAY - rng.random() * CONFIDENCE_NOISE,
        )

        pm25 = aqi * 0.35 + rng.random() * 8
        no2 = aqi * 0.4 + rng.random() * 12
        o3 = aqi * 0.6 + (15 if temperature > 20 else 0) + rng.random() * 15

        points.append(
            ForecastPoint(
                timestamp=timestamp,
                aqi=round_half_up(aqi),
                confidence=round(confidence, 2),
                pm25=round(pm25, 1),
                no2=round(no2, 1),
                o3=round(o3, 1),
                weather=ForecastWeather(
                    temperature=round(temperature, 1),
                    humidity=round(humidity),
                    wind_speed=round(wind_speed, 1),
                    pressure=round(pressure, 1),
                    description=_describe_weather(temperature, humidity, wind_speed),
                ),
                sources=SourceWeights(
                    tempo=round(tempo_weight, 2),
                    ground=round(ground_weight, 2),
                    weather=round(weather_weight, 2),
                ),
            )
        )

    return points


def generate_history(
    rng: random.Random,
    now: Optional[datetime] = None,
    hours: int = 24,
) -> List[TrendPoint]:
    """Hourly trend points for the last ``hours`` hours, oldest first."""
    now = _local_now(now)
    trends: List[TrendPoint] = []

    for offset in range(hours - 1, -1, -1):
        moment = now - timedelta(hours=offset)
        hour = moment.hour

        base = 50 + math.sin((hour - 6) / 24 * 2 * math.pi) * 25
        if _is_morning_rush(hour):
            base += MORNING_RUSH_BOOST
        if _is_evening_rush(hour):
            base += EVENING_RUSH_BOOST

        trends.append(
            TrendPoint(
                timestamp=moment,
                time=moment.strftime("%H:%M"),
                aqi=max(20, round_half_up(base + _noise(rng, 20))),
                pm25=max(5, round_half_up(base * 0.4 + _noise(rng, 10))),
                no2=max(10, round_half_up(base * 0.5 + _noise(rng, 15))),
            )
        )

    return trends
