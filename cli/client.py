from __future__ import annotations

import time
from typing import Any, Dict, Iterator, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the air quality service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.request_timeout)

    def close(self) -> None:
        self._client.close()

    def get_reading(
        self,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        zip_code: Optional[str] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if lat is not None:
            params["lat"] = lat
        if lng is not None:
            params["lng"] = lng
        if zip_code:
            params["zipCode"] = zip_code
        return self._get("/airquality", params)

    def get_forecast(self, timeframe: str) -> Dict[str, Any]:
        return self._get("/forecast", {"timeframe": timeframe})

    def get_alerts(self, aqi: int) -> Dict[str, Any]:
        return self._get("/health-alerts", {"aqi": aqi})

    def watch_readings(
        self,
        interval: float,
        count: Optional[int] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
    ) -> Iterator[Dict[str, Any]]:
        """Yield a fresh reading every ``interval`` seconds, forever or ``count`` times."""
        polled = 0
        while count is None or polled < count:
            yield self.get_reading(lat=lat, lng=lng)
            polled += 1
            if count is None or polled < count:
                time.sleep(interval)

    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
