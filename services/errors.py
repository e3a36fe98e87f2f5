"""Exception hierarchy for upstream access and request validation."""

from __future__ import annotations

from typing import Optional


class AirQualityError(Exception):
    """Base class for errors raised by the aggregation services."""


class ConfigurationError(AirQualityError):
    """A provider was called without its API key being configured."""

    def __init__(self, provider: str) -> None:
        super().__init__(f"{provider} API key not configured")
        self.provider = provider


class UpstreamError(AirQualityError):
    """A provider answered with a non-success HTTP status."""

    def __init__(self, provider: str, status: int) -> None:
        super().__init__(f"{provider} returned HTTP {status}")
        self.provider = provider
        self.status = status


class NetworkError(AirQualityError):
    """The request to a provider failed below the HTTP layer."""

    def __init__(self, provider: str, detail: Optional[str] = None) -> None:
        super().__init__(f"Network error calling {provider}: {detail or 'unknown error'}")
        self.provider = provider
        self.detail = detail


class ValidationError(AirQualityError, ValueError):
    """A request body is missing required fields or has malformed values."""
