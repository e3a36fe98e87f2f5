from __future__ import annotations

import random
from typing import Callable, Optional

import pytest

from settings import ProviderSettings, Settings

AIRNOW_URL = "https://airnow.test"
OPENWEATHER_URL = "https://openweather.test/data/2.5"
TEMPO_URL = "https://tempo.test"


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def factory(
        airnow_key: Optional[str] = None,
        openweather_key: Optional[str] = None,
        tempo_key: Optional[str] = None,
    ) -> Settings:
        return Settings(
            airnow=ProviderSettings(name="airnow", base_url=AIRNOW_URL, api_key=airnow_key),
            openweather=ProviderSettings(
                name="openweather", base_url=OPENWEATHER_URL, api_key=openweather_key
            ),
            tempo=ProviderSettings(name="tempo", base_url=TEMPO_URL, api_key=tempo_key),
            upstream_timeout=5.0,
            log_level="INFO",
        )

    return factory


@pytest.fixture
def fixed_rng() -> Callable[[float], random.Random]:
    return FixedRandom
