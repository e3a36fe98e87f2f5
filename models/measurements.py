"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Tuple

POLLUTANT_FIELDS: Tuple[str, ...] = ("pm25", "pm10", "no2", "o3", "co")


@dataclass(slots=True)
class MeasurementVector:
    """Pollutant concentrations plus the derived index; zero means unset."""

    aqi: int = 0
    pm25: float = 0.0
    pm10: float = 0.0
    no2: float = 0.0
    o3: float = 0.0
    co: float = 0.0

    def concentrations(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in POLLUTANT_FIELDS}

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def is_empty(self) -> bool:
        return self.aqi == 0 and not any(self.concentrations().values())
