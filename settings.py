from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional


_AIRNOW_URL_ENV = "EPA_AIRNOW_BASE_URL"
_AIRNOW_KEY_ENV = "EPA_AIRNOW_API_KEY"
_OPENWEATHER_URL_ENV = "OPENWEATHER_BASE_URL"
_OPENWEATHER_KEY_ENV = "OPENWEATHER_API_KEY"
_TEMPO_URL_ENV = "TEMPO_BASE_URL"
_TEMPO_KEY_ENV = "TEMPO_API_KEY"
_TIMEOUT_ENV = "UPSTREAM_TIMEOUT_SECONDS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class ProviderSettings:
    name: str
    base_url: str
    api_key: Optional[str]

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class Settings:
    airnow: ProviderSettings
    openweather: ProviderSettings
    tempo: ProviderSettings
    upstream_timeout: float
    log_level: str

    def available_providers(self) -> Dict[str, bool]:
        return {
            provider.name: provider.configured
            for provider in (self.airnow, self.openweather, self.tempo)
        }


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_timeout(default: float) -> float:
    value = os.getenv(_TIMEOUT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        airnow=ProviderSettings(
            name="airnow",
            base_url=_read_str_env(_AIRNOW_URL_ENV, "https://www.airnowapi.org").rstrip("/"),
            api_key=_read_optional_env(_AIRNOW_KEY_ENV, None),
        ),
        openweather=ProviderSettings(
            name="openweather",
            base_url=_read_str_env(
                _OPENWEATHER_URL_ENV, "https://api.openweathermap.org/data/2.5"
            ).rstrip("/"),
            api_key=_read_optional_env(_OPENWEATHER_KEY_ENV, None),
        ),
        tempo=ProviderSettings(
            name="tempo",
            base_url=_read_str_env(_TEMPO_URL_ENV, "https://api.nasa.gov/tempo").rstrip("/"),
            api_key=_read_optional_env(_TEMPO_KEY_ENV, None),
        ),
        upstream_timeout=_read_timeout(10.0),
        log_level=_read_log_level("INFO"),
    )
