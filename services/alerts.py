"""Health alerts and impact assessment for a given AQI."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from app.schemas import Alert, HealthImpact, Severity

DEFAULT_ALERT_LOCATION = "Washington, DC"

FORECAST_ALERT_PROBABILITY = 0.4
SMOKE_ADVISORY_PROBABILITY = 0.2


def _alert_id(prefix: str, now: datetime) -> str:
    return f"{prefix}-{int(now.timestamp() * 1000)}"


def generate_alerts(
    aqi: int,
    rng: random.Random,
    now: Optional[datetime] = None,
    location: str = DEFAULT_ALERT_LOCATION,
) -> List[Alert]:
    """Build current-condition alerts plus randomly simulated advisories."""
    now = now or datetime.now(timezone.utc)
    alerts: List[Alert] = []

    if aqi > 150:
        hazardous = aqi > 200
        alerts.append(
            Alert(
                id=_alert_id("current", now),
                severity=Severity.emergency if hazardous else Severity.danger,
                title=(
                    "EMERGENCY: Hazardous Air Quality"
                    if hazardous
                    else "Unhealthy Air Quality Alert"
                ),
                description=f"Current AQI of {aqi} poses health risks to all individuals",
                recommendations=[
                    "Avoid all outdoor activities",
                    "Keep windows and doors closed",
                    "Use air purifiers if available",
                    "Seek medical attention if experiencing symptoms",
                ],
                affected_groups=["Everyone"],
                timestamp=now,
                location=location,
                pollutants=["PM2.5", "PM10", "Ozone"],
            )
        )
    elif aqi > 100:
        alerts.append(
            Alert(
                id=_alert_id("moderate", now),
                severity=Severity.warning,
                title="Air Quality Alert for Sensitive Groups",
                description=f"AQI of {aqi} may cause health effects for sensitive individuals",
                recommendations=[
                    "Sensitive groups should limit outdoor activities",
                    "Consider moving exercise indoors",
                    "Monitor air quality throughout the day",
                ],
                affected_groups=["Children", "Elderly", "People with respiratory conditions"],
                timestamp=now,
                location=location,
                pollutants=["PM2.5", "Ozone"],
            )
        )

    if rng.random() < FORECAST_ALERT_PROBABILITY:
        alerts.append(
            Alert(
                id=_alert_id("forecast", now),
                severity=Severity.warning,
                title="Air Quality Expected to Deteriorate",
                description=(
                    "Forecast models predict AQI will exceed 120 in the next 4 hours "
                    "due to stagnant weather conditions"
                ),
                recommendations=[
                    "Complete outdoor activities before conditions worsen",
                    "Prepare indoor alternatives for planned activities",
                    "Close windows and prepare air filtration systems",
                ],
                affected_groups=["Sensitive groups", "Outdoor workers", "Athletes"],
                timestamp=now,
                expires_at=now + timedelta(hours=8),
                location=location,
            )
        )

    if rng.random() < SMOKE_ADVISORY_PROBABILITY:
        alerts.append(
            Alert(
                id=_alert_id("event", now),
                severity=Severity.danger,
                title="Wildfire Smoke Advisory",
                description="Smoke from regional wildfires is affecting local air quality",
                recommendations=[
                    "Stay indoors with windows closed",
                    "Avoid outdoor exercise and activities",
                    "Use air purifiers with HEPA filters",
                    "Check on vulnerable family members and neighbors",
                ],
                affected_groups=["Everyone", "Especially sensitive groups"],
                timestamp=now,
                expires_at=now + timedelta(hours=24),
                location="Regional",
                pollutants=["PM2.5", "PM10", "Carbon Monoxide"],
            )
        )

    if aqi > 80:
        alerts.append(
            Alert(
                id=_alert_id("pollutant", now),
                severity=Severity.info,
                title="Elevated Ozone Levels",
                description=(
                    "Ground-level ozone concentrations are elevated due to sunny, warm conditions"
                ),
                recommendations=[
                    "Limit outdoor activities during peak sun hours (10 AM - 4 PM)",
                    "Choose early morning or evening for outdoor exercise",
                    "Stay hydrated and take frequent breaks if outdoors",
                ],
                affected_groups=["People with asthma", "Children", "Outdoor workers"],
                timestamp=now,
                expires_at=now + timedelta(hours=12),
                pollutants=["Ozone"],
            )
        )

    return alerts


def highest_severity(alerts: Iterable[Alert]) -> Severity:
    return max((alert.severity for alert in alerts), key=lambda s: s.rank, default=Severity.info)


def _immediate_effects(aqi: int) -> List[str]:
    if aqi <= 50:
        return ["None for healthy individuals"]
    if aqi <= 100:
        return ["Possible minor irritation for sensitive individuals"]
    if aqi <= 150:
        return ["Eye irritation", "Throat irritation", "Coughing for sensitive groups"]
    if aqi <= 200:
        return ["Breathing difficulties", "Chest tightness", "Reduced lung function"]
    return [
        "Serious respiratory symptoms",
        "Cardiovascular stress",
        "Emergency medical attention may be needed",
    ]


def _long_term_risks(aqi: int) -> List[str]:
    if aqi <= 100:
        return ["Minimal long-term health risks"]
    if aqi <= 150:
        return ["Increased risk of respiratory infections", "Accelerated lung function decline"]
    return ["Cardiovascular disease", "Chronic respiratory conditions", "Premature mortality risk"]


def _vulnerable_populations(aqi: int) -> List[str]:
    groups = ["Children", "Elderly (65+)", "Pregnant women"]
    if aqi > 50:
        groups += ["People with asthma", "Heart disease patients"]
    if aqi > 100:
        groups += ["Outdoor workers", "Athletes"]
    return groups


def _protective_measures(aqi: int) -> List[str]:
    measures = ["Monitor air quality regularly"]
    if aqi > 50:
        measures.append("Limit prolonged outdoor exertion")
    if aqi > 100:
        measures += ["Use air purifiers indoors", "Keep windows closed"]
    if aqi > 150:
        measures += ["Wear N95 masks outdoors", "Avoid all outdoor activities"]
    return measures


def assess_health_impact(aqi: int) -> HealthImpact:
    return HealthImpact(
        immediate_effects=_immediate_effects(aqi),
        long_term_risks=_long_term_risks(aqi),
        vulnerable_populations=_vulnerable_populations(aqi),
        protective_measures=_protective_measures(aqi),
    )
