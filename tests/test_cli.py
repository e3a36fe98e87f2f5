from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

import pytest
from typer.testing import CliRunner

from cli.app import app


def _reading(aqi: int = 112, source: str = "GroundSensors", available: bool = True) -> Dict[str, Any]:
    return {
        "location": {"lat": 38.9072, "lng": -77.0369, "name": "Washington, DC"},
        "measurements": {"aqi": aqi, "pm25": 40.0, "pm10": 23.8, "no2": 18.2, "o3": 34.7, "co": 0.8},
        "source": source,
        "timestamp": "2024-07-10T08:00:00Z",
        "dataAvailable": available,
    }


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.reading_calls: List[Dict[str, Any]] = []
        self.watch_calls: List[tuple[float, Optional[int]]] = []
        self.forecast_calls: List[str] = []
        self.alert_calls: List[int] = []
        self.reading_payload = _reading()
        self.closed = False

    def get_reading(self, lat=None, lng=None, zip_code=None) -> Dict[str, Any]:
        self.reading_calls.append({"lat": lat, "lng": lng, "zip_code": zip_code})
        return self.reading_payload

    def watch_readings(self, interval: float, count=None, lat=None, lng=None) -> Iterator[Dict[str, Any]]:
        self.watch_calls.append((interval, count))
        for aqi in (40, 60, 80)[: count or 3]:
            yield _reading(aqi=aqi)

    def get_forecast(self, timeframe: str) -> Dict[str, Any]:
        self.forecast_calls.append(timeframe)
        return {
            "forecast": [
                {"timestamp": "2024-07-10T08:00:00Z", "aqi": 70, "confidence": 0.93},
                {"timestamp": "2024-07-10T09:00:00Z", "aqi": 75, "confidence": 0.88},
            ],
            "metadata": {"timeframe": "6h", "data_source": "Simulated"},
        }

    def get_alerts(self, aqi: int) -> Dict[str, Any]:
        self.alert_calls.append(aqi)
        return {
            "alerts": [
                {
                    "severity": "warning",
                    "title": "Air Quality Alert for Sensitive Groups",
                    "recommendations": ["Consider moving exercise indoors"],
                }
            ],
            "healthImpact": {
                "immediateEffects": ["Eye irritation"],
                "longTermRisks": ["Minimal long-term health risks"],
                "vulnerablePopulations": ["Children"],
                "protectiveMeasures": ["Keep windows closed"],
            },
            "metadata": {"alertCount": 1, "highestSeverity": "warning"},
        }

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    instance = StubClient(config=None)

    def factory(config):
        instance.config = config
        return instance

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return instance


def test_current_renders_reading(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["current", "--lat", "40", "--lng", "-75", "--zip", "19104"])

    assert result.exit_code == 0
    assert "Air Quality: Washington, DC" in result.stdout
    assert "aqi: 112" in result.stdout
    assert "source: GroundSensors" in result.stdout
    assert "simulated" not in result.stdout
    assert stub.reading_calls == [{"lat": 40.0, "lng": -75.0, "zip_code": "19104"}]
    assert stub.closed is True


def test_current_flags_simulated_data(runner: CliRunner, stub: StubClient) -> None:
    stub.reading_payload = _reading(aqi=69, source="Simulated", available=False)

    result = runner.invoke(app, ["current"])

    assert result.exit_code == 0
    assert "showing simulated values" in result.stdout


def test_watch_polls_on_interval(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["--poll-interval", "5", "watch", "--count", "2"])

    assert result.exit_code == 0
    assert stub.watch_calls == [(5.0, 2)]
    assert "aqi: 40" in result.stdout
    assert "aqi: 60" in result.stdout
    assert "aqi: 80" not in result.stdout


def test_forecast_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["forecast", "--timeframe", "6h"])

    assert result.exit_code == 0
    assert stub.forecast_calls == ["6h"]
    assert "confidence=0.93" in result.stdout


def test_alerts_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["alerts", "--aqi", "120"])

    assert result.exit_code == 0
    assert stub.alert_calls == [120]
    assert "[warning] Air Quality Alert for Sensitive Groups" in result.stdout
    assert "Protective measures: Keep windows closed" in result.stdout
