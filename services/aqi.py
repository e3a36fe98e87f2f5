"""EPA Air Quality Index calculation.

Each pollutant has an ascending table of ``(c_low, c_high, i_low, i_high)``
bands. A concentration inside a band maps linearly onto that band's index
range::

    I = (I_high - I_low) / (C_high - C_low) * (C - C_low) + I_low

Bands share their boundary concentration with the next band so the covered
domain has no holes. Concentrations outside every band yield 0 rather than an
extrapolated index.

Units: PM2.5 and PM10 in µg/m³, NO2 and O3 in ppb, CO in ppm.
"""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional, Tuple

Breakpoint = Tuple[float, float, int, int]

BREAKPOINTS: Dict[str, Tuple[Breakpoint, ...]] = {
    "pm25": (
        (0.0, 12.0, 0, 50),
        (12.0, 35.4, 51, 100),
        (35.4, 55.4, 101, 150),
        (55.4, 150.4, 151, 200),
        (150.4, 250.4, 201, 300),
        (250.4, 500.4, 301, 500),
    ),
    "pm10": (
        (0.0, 54.0, 0, 50),
        (54.0, 154.0, 51, 100),
        (154.0, 254.0, 101, 150),
        (254.0, 354.0, 151, 200),
        (354.0, 424.0, 201, 300),
        (424.0, 604.0, 301, 500),
    ),
    "o3": (
        (0.0, 54.0, 0, 50),
        (54.0, 70.0, 51, 100),
        (70.0, 85.0, 101, 150),
        (85.0, 105.0, 151, 200),
        (105.0, 200.0, 201, 300),
    ),
    "no2": (
        (0.0, 53.0, 0, 50),
        (53.0, 100.0, 51, 100),
        (100.0, 360.0, 101, 150),
        (360.0, 649.0, 151, 200),
        (649.0, 1249.0, 201, 300),
        (1249.0, 2049.0, 301, 500),
    ),
    "co": (
        (0.0, 4.4, 0, 50),
        (4.4, 9.4, 51, 100),
        (9.4, 12.4, 101, 150),
        (12.4, 15.4, 151, 200),
        (15.4, 30.4, 201, 300),
        (30.4, 50.4, 301, 500),
    ),
}

_CATEGORIES = (
    (50, "Good"),
    (100, "Moderate"),
    (150, "Unhealthy for Sensitive Groups"),
    (200, "Unhealthy"),
    (300, "Very Unhealthy"),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (12.5 -> 13)."""
    return math.floor(value + 0.5)


def _find_band(pollutant: str, concentration: float) -> Optional[Breakpoint]:
    for band in BREAKPOINTS.get(pollutant, ()):
        c_low, c_high, _, _ = band
        if c_low <= concentration <= c_high:
            return band
    return None


def calculate_sub_index(pollutant: str, concentration: float) -> int:
    """Return the index for one pollutant, or 0 when no band covers ``concentration``."""
    band = _find_band(pollutant, concentration)
    if band is None:
        return 0
    c_low, c_high, i_low, i_high = band
    return round_half_up((i_high - i_low) / (c_high - c_low) * (concentration - c_low) + i_low)


def calculate_overall_aqi(concentrations: Mapping[str, float]) -> int:
    """Maximum sub-index across the pollutants with a known, non-zero concentration."""
    sub_indices = [
        calculate_sub_index(pollutant, value)
        for pollutant, value in concentrations.items()
        if value
    ]
    return max(sub_indices, default=0)


def aqi_category(aqi: int) -> str:
    for upper, label in _CATEGORIES:
        if aqi <= upper:
            return label
    return "Hazardous"
