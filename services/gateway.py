"""Thin HTTP wrappers around the three upstream air-quality providers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from app.schemas import Location
from services.errors import ConfigurationError, NetworkError, UpstreamError
from settings import ProviderSettings, Settings

AIRNOW_ZIP_CURRENT = "/aq/observation/zipCode/current"
AIRNOW_LATLONG_CURRENT = "/aq/observation/latLong/current"
OPENWEATHER_AIR_POLLUTION = "/air_pollution"
TEMPO_SATELLITE = "/satellite/air-quality"
TEMPO_TROPOSPHERIC = "/tropospheric/pollution"

SEARCH_RADIUS_MILES = "25"


class UpstreamGateway:
    """Issues one GET per call on a caller-owned ``httpx.AsyncClient``.

    Every operation checks the provider key first and raises
    ``ConfigurationError`` without touching the network when it is missing.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient) -> None:
        self.settings = settings
        self._client = client

    async def fetch_ground_sensors(self, location: Location) -> Any:
        provider = self._require_key(self.settings.airnow)
        params: Dict[str, str] = {
            "format": "application/json",
            "distance": SEARCH_RADIUS_MILES,
            "API_KEY": provider.api_key or "",
        }
        if location.zip_code:
            endpoint = AIRNOW_ZIP_CURRENT
            params["zipCode"] = location.zip_code
        else:
            endpoint = AIRNOW_LATLONG_CURRENT
            params["latitude"] = str(location.lat)
            params["longitude"] = str(location.lng)
        return await self._get_json(provider, endpoint, params)

    async def fetch_weather(self, location: Location) -> Any:
        provider = self._require_key(self.settings.openweather)
        params = {
            "lat": str(location.lat),
            "lon": str(location.lng),
            "appid": provider.api_key or "",
        }
        return await self._get_json(provider, OPENWEATHER_AIR_POLLUTION, params)

    async def fetch_satellite(self, location: Location, date: Optional[str] = None) -> Any:
        provider = self._require_key(self.settings.tempo)
        target_date = date or datetime.now(timezone.utc).date().isoformat()
        params = {
            "lat": str(location.lat),
            "lon": str(location.lng),
            "date": target_date,
            "api_key": provider.api_key or "",
        }
        return await self._get_json(provider, TEMPO_SATELLITE, params)

    async def fetch_tropospheric(self, location: Location) -> Any:
        provider = self._require_key(self.settings.tempo)
        params = {
            "latitude": str(location.lat),
            "longitude": str(location.lng),
            "api_key": provider.api_key or "",
            "format": "json",
        }
        return await self._get_json(provider, TEMPO_TROPOSPHERIC, params)

    @staticmethod
    def _require_key(provider: ProviderSettings) -> ProviderSettings:
        if not provider.configured:
            raise ConfigurationError(provider.name)
        return provider

    async def _get_json(
        self, provider: ProviderSettings, endpoint: str, params: Dict[str, str]
    ) -> Any:
        try:
            response = await self._client.get(
                f"{provider.base_url}{endpoint}",
                params=params,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TransportError as exc:
            raise NetworkError(provider.name, str(exc)) from exc

        if not response.is_success:
            raise UpstreamError(provider.name, response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(provider.name, "response body is not valid JSON") from exc
