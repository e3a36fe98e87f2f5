from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.schemas import Severity
from services.alerts import assess_health_impact, generate_alerts, highest_severity

NOW = datetime(2024, 7, 10, 15, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("aqi", "expected"),
    [
        (250, [Severity.emergency, Severity.info]),
        (175, [Severity.danger, Severity.info]),
        (120, [Severity.warning, Severity.info]),
        (90, [Severity.info]),
        (40, []),
    ],
)
def test_condition_alerts_follow_aqi(fixed_rng, aqi: int, expected: list[Severity]) -> None:
    alerts = generate_alerts(aqi, fixed_rng(0.99), now=NOW)

    assert [alert.severity for alert in alerts] == expected


def test_hazardous_alert_content(fixed_rng) -> None:
    alerts = generate_alerts(250, fixed_rng(0.99), now=NOW)

    current = alerts[0]
    assert current.title == "EMERGENCY: Hazardous Air Quality"
    assert "250" in current.description
    assert current.affected_groups == ["Everyone"]
    assert current.id.startswith("current-")


def test_simulated_advisories_follow_random_source(fixed_rng) -> None:
    alerts = generate_alerts(40, fixed_rng(0.0), now=NOW)

    titles = [alert.title for alert in alerts]
    assert titles == ["Air Quality Expected to Deteriorate", "Wildfire Smoke Advisory"]
    assert alerts[0].expires_at == NOW + timedelta(hours=8)
    assert alerts[1].expires_at == NOW + timedelta(hours=24)
    assert alerts[1].location == "Regional"


def test_highest_severity() -> None:
    assert highest_severity([]) is Severity.info


def test_highest_severity_picks_most_urgent(fixed_rng) -> None:
    alerts = generate_alerts(175, fixed_rng(0.0), now=NOW)

    assert highest_severity(alerts) is Severity.danger


def test_health_impact_scales_with_aqi() -> None:
    clean = assess_health_impact(30)
    unhealthy = assess_health_impact(180)

    assert clean.immediate_effects == ["None for healthy individuals"]
    assert clean.long_term_risks == ["Minimal long-term health risks"]
    assert clean.vulnerable_populations == ["Children", "Elderly (65+)", "Pregnant women"]
    assert clean.protective_measures == ["Monitor air quality regularly"]

    assert "Chest tightness" in unhealthy.immediate_effects
    assert "Premature mortality risk" in unhealthy.long_term_risks
    assert "Athletes" in unhealthy.vulnerable_populations
    assert "Wear N95 masks outdoors" in unhealthy.protective_measures
