"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import (
    DEFAULT_LATITUDE,
    DEFAULT_LOCATION_NAME,
    DEFAULT_LONGITUDE,
    AlertMetadata,
    EmailNotificationRequest,
    ForecastMetadata,
    ForecastResponse,
    HealthAlertsResponse,
    HistoricalResponse,
    Location,
    NotificationResponse,
    PushNotificationRequest,
    Reading,
    SatellitePayload,
    SMSNotificationRequest,
)
from services.alerts import assess_health_impact, generate_alerts, highest_severity
from services.aqi import aqi_category
from services.errors import ValidationError
from services.notifications import NotificationService
from services.pipeline import AirQualityService, build_default_service
from services.simulation import (
    FORECAST_MODEL_METADATA,
    forecast_hours,
    generate_forecast,
    generate_history,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_rng = random.Random()

LatitudeQuery = Query(DEFAULT_LATITUDE, ge=-90, le=90, description="Latitude in degrees.")
LongitudeQuery = Query(DEFAULT_LONGITUDE, ge=-180, le=180, description="Longitude in degrees.")


def get_service() -> AirQualityService:
    return build_default_service()


def get_rng() -> random.Random:
    return _rng


def get_notifier(rng: random.Random = Depends(get_rng)) -> NotificationService:
    return NotificationService(rng)


@router.get(
    "/airquality",
    response_model=Reading,
    summary="Current air quality merged from every available source.",
)
async def air_quality(
    lat: float = LatitudeQuery,
    lng: float = LongitudeQuery,
    zip_code: Optional[str] = Query(None, alias="zipCode", description="US ZIP code."),
    name: str = Query(DEFAULT_LOCATION_NAME, description="Display name for the location."),
    service: AirQualityService = Depends(get_service),
) -> Reading:
    location = Location(lat=lat, lng=lng, name=name, zip_code=zip_code)
    return await service.get_reading(location)


@router.get(
    "/satellite",
    response_model=SatellitePayload,
    summary="TEMPO satellite observation, simulated when the provider is unavailable.",
)
async def satellite(
    lat: float = LatitudeQuery,
    lng: float = LongitudeQuery,
    date: Optional[str] = Query(None, description="Observation date in YYYY-MM-DD format."),
    service: AirQualityService = Depends(get_service),
    rng: random.Random = Depends(get_rng),
) -> SatellitePayload:
    location = Location(lat=lat, lng=lng)
    return await service.get_satellite(location, rng, date=date)


@router.get(
    "/forecast",
    response_model=ForecastResponse,
    summary="Simulated hourly air quality forecast.",
)
async def forecast(
    timeframe: str = Query("24h", description="One of 6h, 24h or 48h."),
    lat: float = LatitudeQuery,
    lng: float = LongitudeQuery,
    rng: random.Random = Depends(get_rng),
) -> ForecastResponse:
    hours = forecast_hours(timeframe)
    logger.info("Generating forecast", extra={"timeframe": timeframe, "lat": lat, "lng": lng})
    return ForecastResponse(
        forecast=generate_forecast(hours, rng),
        metadata=ForecastMetadata(
            **FORECAST_MODEL_METADATA,
            timeframe=f"{hours}h",
            location=Location(lat=lat, lng=lng),
        ),
    )


@router.get(
    "/historical",
    response_model=HistoricalResponse,
    summary="Simulated air quality trends for the last 24 hours.",
)
async def historical(rng: random.Random = Depends(get_rng)) -> HistoricalResponse:
    return HistoricalResponse(trends=generate_history(rng))


@router.get(
    "/health-alerts",
    response_model=HealthAlertsResponse,
    summary="Health alerts and impact assessment for an AQI value.",
)
async def health_alerts(
    aqi: int = Query(85, ge=0, le=500, description="Current AQI."),
    rng: random.Random = Depends(get_rng),
) -> HealthAlertsResponse:
    now = datetime.now(timezone.utc)
    alerts = generate_alerts(aqi, rng, now=now)
    return HealthAlertsResponse(
        alerts=alerts,
        health_impact=assess_health_impact(aqi),
        metadata=AlertMetadata(
            generated_at=now,
            alert_count=len(alerts),
            highest_severity=highest_severity(alerts),
            category=aqi_category(aqi),
        ),
    )


def _notification_result(delivered: bool, channel: str) -> NotificationResponse:
    if not delivered:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to send {channel} notification",
        )
    return NotificationResponse(
        success=True,
        message=f"{channel[0].upper()}{channel[1:]} notification sent successfully",
        timestamp=datetime.now(timezone.utc),
    )


@router.post(
    "/notifications/email",
    response_model=NotificationResponse,
    summary="Simulate sending an email alert.",
)
async def notify_email(
    request: EmailNotificationRequest,
    notifier: NotificationService = Depends(get_notifier),
) -> NotificationResponse:
    try:
        delivered = notifier.send_email(request)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _notification_result(delivered, "email")


@router.post(
    "/notifications/sms",
    response_model=NotificationResponse,
    summary="Simulate sending an SMS alert.",
)
async def notify_sms(
    request: SMSNotificationRequest,
    notifier: NotificationService = Depends(get_notifier),
) -> NotificationResponse:
    try:
        delivered = notifier.send_sms(request)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _notification_result(delivered, "SMS")


@router.post(
    "/notifications/push",
    response_model=NotificationResponse,
    summary="Simulate sending a push notification.",
)
async def notify_push(
    request: PushNotificationRequest,
    notifier: NotificationService = Depends(get_notifier),
) -> NotificationResponse:
    try:
        delivered = notifier.send_push(request)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _notification_result(delivered, "push")


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(
    service: AirQualityService = Depends(get_service),
) -> dict[str, Any]:
    return {"status": "ok", "providers": service.settings.available_providers()}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
