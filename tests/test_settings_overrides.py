from __future__ import annotations

from typing import Iterator

import pytest

from cli.config import DEFAULT_POLL_INTERVAL, load_config
from services.pipeline import build_default_service
from settings import get_settings

_PROVIDER_ENV = (
    "EPA_AIRNOW_BASE_URL",
    "EPA_AIRNOW_API_KEY",
    "OPENWEATHER_BASE_URL",
    "OPENWEATHER_API_KEY",
    "TEMPO_BASE_URL",
    "TEMPO_API_KEY",
    "UPSTREAM_TIMEOUT_SECONDS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> Iterator[None]:
    for name in _PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    build_default_service.cache_clear()
    yield
    get_settings.cache_clear()
    build_default_service.cache_clear()


def test_defaults_leave_every_provider_disabled() -> None:
    settings = get_settings()

    assert settings.available_providers() == {"airnow": False, "openweather": False, "tempo": False}
    assert settings.airnow.base_url == "https://www.airnowapi.org"
    assert settings.upstream_timeout == 10.0
    assert settings.log_level == "INFO"


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("EPA_AIRNOW_API_KEY", " airnow-key ")
    monkeypatch.setenv("TEMPO_BASE_URL", "https://tempo.example/")
    monkeypatch.setenv("TEMPO_API_KEY", "tempo-key")
    monkeypatch.setenv("OPENWEATHER_API_KEY", "   ")
    monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    service = build_default_service()
    settings = service.settings

    assert settings.airnow.api_key == "airnow-key"
    assert settings.tempo.base_url == "https://tempo.example"
    assert settings.openweather.api_key is None
    assert settings.available_providers() == {"airnow": True, "openweather": False, "tempo": True}
    assert settings.upstream_timeout == 2.5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["abc", "0", "-3", ""])
def test_invalid_timeout_falls_back_to_default(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", raw)

    assert get_settings().upstream_timeout == 10.0


def test_cli_config_overrides(monkeypatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "http://aq.internal:9000/")
    monkeypatch.setenv("CLI_POLL_INTERVAL", "nope")

    config = load_config(request_timeout=3.0)

    assert config.base_url == "http://aq.internal:9000"
    assert config.poll_interval == DEFAULT_POLL_INTERVAL
    assert config.request_timeout == 3.0
