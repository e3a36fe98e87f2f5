"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LATITUDE = 38.9072
DEFAULT_LONGITUDE = -77.0369
DEFAULT_LOCATION_NAME = "Washington, DC"


class SourceTag(str, Enum):
    """Provenance of the measurements in a reading."""

    ground_sensors = "GroundSensors"
    ground_sensors_satellite = "GroundSensors+Satellite"
    satellite = "Satellite"
    weather_derived = "WeatherDerived"
    combined = "Combined"
    simulated = "Simulated"


class Severity(str, Enum):
    """Alert and notification severities, ordered from least to most urgent."""

    info = "info"
    warning = "warning"
    danger = "danger"
    emergency = "emergency"

    @property
    def rank(self) -> int:
        return list(Severity).index(self)


class Location(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lat: float = Field(DEFAULT_LATITUDE, ge=-90, le=90)
    lng: float = Field(DEFAULT_LONGITUDE, ge=-180, le=180)
    name: str = DEFAULT_LOCATION_NAME
    zip_code: Optional[str] = Field(default=None, alias="zipCode")


class Measurements(BaseModel):
    aqi: int = Field(0, ge=0)
    pm25: float = Field(0.0, ge=0)
    pm10: float = Field(0.0, ge=0)
    no2: float = Field(0.0, ge=0)
    o3: float = Field(0.0, ge=0)
    co: float = Field(0.0, ge=0)


class Reading(BaseModel):
    """Normalized air-quality reading returned to the dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    location: Location
    measurements: Measurements
    source: SourceTag
    timestamp: datetime
    data_available: bool = Field(..., alias="dataAvailable")


class SatelliteLocation(BaseModel):
    latitude: float
    longitude: float


class SatelliteMeasurements(BaseModel):
    no2_column: float = 0.0
    o3_column: float = 0.0
    so2_column: float = 0.0
    hcho_column: float = 0.0
    aerosol_optical_depth: float = 0.0
    cloud_fraction: float = 0.0


class QualityFlags(BaseModel):
    no2_quality: str = "unknown"
    o3_quality: str = "unknown"
    overall_quality: str = "unknown"


class SatelliteDataSource(str, Enum):
    real = "NASA_TEMPO_Real"
    simulated = "NASA_TEMPO_Simulated"


class SatellitePayload(BaseModel):
    """Standardized TEMPO satellite observation."""

    satellite: str = "TEMPO"
    timestamp: datetime
    location: SatelliteLocation
    measurements: SatelliteMeasurements
    quality_flags: QualityFlags
    spatial_resolution: str = "2.1km x 4.4km"
    overpass_time: datetime
    data_source: SatelliteDataSource


class ForecastWeather(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    temperature: float
    humidity: float
    wind_speed: float = Field(..., alias="windSpeed")
    pressure: float
    description: Optional[str] = None


class SourceWeights(BaseModel):
    tempo: float
    ground: float
    weather: float


class ForecastPoint(BaseModel):
    timestamp: datetime
    aqi: int
    confidence: float = Field(..., ge=0, le=1)
    pm25: float
    no2: float
    o3: float
    weather: ForecastWeather
    sources: SourceWeights


class ForecastMetadata(BaseModel):
    model_version: str
    last_trained: str
    accuracy: float
    rmse: float
    data_sources: List[str]
    update_frequency: str
    data_source: str = "Simulated"
    timeframe: str
    location: Location


class ForecastResponse(BaseModel):
    forecast: List[ForecastPoint]
    metadata: ForecastMetadata


class TrendPoint(BaseModel):
    timestamp: datetime
    time: str
    aqi: int
    pm25: int
    no2: int


class HistoricalResponse(BaseModel):
    trends: List[TrendPoint]
    source: str = "Simulated"


class Alert(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    severity: Severity
    title: str
    description: str
    recommendations: List[str]
    affected_groups: List[str] = Field(..., alias="affectedGroups")
    timestamp: datetime
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")
    location: Optional[str] = None
    pollutants: Optional[List[str]] = None


class HealthImpact(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    immediate_effects: List[str] = Field(..., alias="immediateEffects")
    long_term_risks: List[str] = Field(..., alias="longTermRisks")
    vulnerable_populations: List[str] = Field(..., alias="vulnerablePopulations")
    protective_measures: List[str] = Field(..., alias="protectiveMeasures")


class AlertMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generated_at: datetime = Field(..., alias="generatedAt")
    alert_count: int = Field(..., alias="alertCount")
    highest_severity: Severity = Field(..., alias="highestSeverity")
    category: str


class HealthAlertsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    alerts: List[Alert]
    health_impact: HealthImpact = Field(..., alias="healthImpact")
    metadata: AlertMetadata


class EmailNotificationRequest(BaseModel):
    to: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    severity: Severity = Severity.info


class SMSNotificationRequest(BaseModel):
    to: Optional[str] = None
    message: Optional[str] = None
    severity: Severity = Severity.info


class PushNotificationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    message: Optional[str] = None
    severity: Severity = Severity.info
    user_id: Optional[str] = Field(default=None, alias="userId")
    tag: Optional[str] = None


class NotificationResponse(BaseModel):
    success: bool
    message: str
    timestamp: datetime


