"""Request-scoped orchestration: upstream fan-out, transforms and merge."""

from __future__ import annotations

import asyncio
import logging
import random
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, AsyncIterator, Callable, Optional

import httpx

from app.schemas import Location, Measurements, Reading, SatellitePayload
from models.measurements import MeasurementVector
from services.combiner import combine_sources
from services.errors import AirQualityError, ConfigurationError, NetworkError, UpstreamError
from services.gateway import UpstreamGateway
from services.simulation import generate_satellite_payload
from services.transformers import (
    normalize_satellite_payload,
    transform_ground_sensors,
    transform_satellite,
    transform_weather,
)
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


class AirQualityService:
    """Builds readings and satellite payloads from whichever providers answer.

    Each call opens its own ``httpx.AsyncClient`` and closes it before
    returning, whatever the outcome of the upstream requests.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    @asynccontextmanager
    async def _gateway(self) -> AsyncIterator[UpstreamGateway]:
        async with httpx.AsyncClient(
            timeout=self.settings.upstream_timeout,
            transport=self._transport,
        ) as client:
            yield UpstreamGateway(self.settings, client)

    async def get_reading(self, location: Location) -> Reading:
        """Fetch all three sources concurrently and merge what arrives."""
        async with self._gateway() as gateway:
            ground_raw, satellite_raw, weather_raw = await asyncio.gather(
                gateway.fetch_ground_sensors(location),
                self._fetch_satellite(gateway, location),
                gateway.fetch_weather(location),
                return_exceptions=True,
            )

        ground = self._settle("airnow", ground_raw, transform_ground_sensors)
        satellite = self._settle(
            "tempo",
            satellite_raw,
            lambda raw: transform_satellite(normalize_satellite_payload(raw, location).measurements),
        )
        weather = self._settle("openweather", weather_raw, transform_weather)

        combined = combine_sources(ground=ground, satellite=satellite, weather=weather)
        logger.info(
            "Built air quality reading",
            extra={
                "source": combined.source.value,
                "aqi": combined.measurements.aqi,
                "lat": location.lat,
                "lng": location.lng,
            },
        )
        return Reading(
            location=location,
            measurements=Measurements(**combined.measurements.as_dict()),
            source=combined.source,
            timestamp=datetime.now(timezone.utc),
            data_available=combined.data_available,
        )

    async def get_satellite(
        self,
        location: Location,
        rng: random.Random,
        date: Optional[str] = None,
    ) -> SatellitePayload:
        """Real TEMPO data when available, a simulated payload otherwise."""
        if self.settings.tempo.configured:
            try:
                async with self._gateway() as gateway:
                    raw = await self._fetch_satellite(gateway, location, date)
                return normalize_satellite_payload(raw, location)
            except (AirQualityError, ValueError) as exc:
                logger.warning(
                    "Satellite data unavailable, using simulated data",
                    extra={"provider": "tempo", "reason": str(exc)},
                )
        else:
            logger.info(
                "Satellite provider not configured, using simulated data",
                extra={"provider": "tempo"},
            )
        return generate_satellite_payload(location, rng)

    @staticmethod
    async def _fetch_satellite(
        gateway: UpstreamGateway,
        location: Location,
        date: Optional[str] = None,
    ) -> Any:
        try:
            return await gateway.fetch_satellite(location, date)
        except (UpstreamError, NetworkError) as exc:
            logger.info(
                "Satellite endpoint failed, trying tropospheric endpoint",
                extra={"provider": "tempo", "reason": str(exc)},
            )
            return await gateway.fetch_tropospheric(location)

    @staticmethod
    def _settle(
        provider: str,
        outcome: Any,
        transform: Callable[[Any], MeasurementVector],
    ) -> Optional[MeasurementVector]:
        if isinstance(outcome, ConfigurationError):
            logger.info("Provider not configured", extra={"provider": provider})
            return None
        if isinstance(outcome, UpstreamError):
            logger.warning(
                "Provider request failed",
                extra={"provider": provider, "status": outcome.status},
            )
            return None
        if isinstance(outcome, AirQualityError):
            logger.warning(
                "Provider unreachable",
                extra={"provider": provider, "reason": str(outcome)},
            )
            return None
        if isinstance(outcome, BaseException):
            raise outcome

        try:
            vector = transform(outcome)
        except ValueError as exc:
            logger.warning(
                "Provider payload could not be parsed",
                extra={"provider": provider, "reason": str(exc)},
            )
            return None
        if vector.is_empty():
            logger.info("Provider returned no measurements", extra={"provider": provider})
            return None
        return vector


@lru_cache
def build_default_service() -> AirQualityService:
    """Factory that wires the service with environment settings."""
    return AirQualityService(settings=get_settings())
