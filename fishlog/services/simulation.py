"""
Simulated environmental readings.

Used when the upstream services cannot be reached (or, for weather, when no
API key is configured) so that a journal entry or a graph always has a
plausible value. These are presentation placeholders, not a hydrological or
meteorological model; callers label the results as simulated.
"""

import math
import random
from datetime import date, datetime
from typing import Optional, Union

BASE_FLOW_CFS = 500.0
MIN_FLOW_CFS = 50.0
SEASONAL_AMPLITUDE_CFS = 200.0
RANDOM_SPREAD_CFS = 50.0

STANDARD_PRESSURE_INHG = 29.92
COMPASS_POINTS = ['N', 'NE', 'E', 'SE', 'S', 'SW', 'W', 'NW']

_rng = random.Random()


def _site_variation(site_number: str) -> float:
    try:
        return (int(site_number) % 1000) / 10
    except (TypeError, ValueError):
        return 0.0


def simulate_flow(
    site_number: str,
    when: Union[date, datetime, None] = None,
    rng: Optional[random.Random] = None,
) -> float:
    """
    Simulated discharge for a gauge, in CFS.

    base + site variation (site number mod 1000) + seasonal sine of the month
    + uniform jitter of +/-50, floored at 50.
    """
    rng = rng or _rng
    when = when or date.today()
    month_index = when.month - 1

    seasonal = math.sin(month_index * math.pi / 6) * SEASONAL_AMPLITUDE_CFS
    jitter = rng.uniform(-RANDOM_SPREAD_CFS, RANDOM_SPREAD_CFS)
    flow = BASE_FLOW_CFS + _site_variation(site_number) + seasonal + jitter
    return float(round(max(MIN_FLOW_CFS, flow)))


def simulate_hourly_series(
    site_number: str,
    when: Union[date, datetime, None] = None,
    rng: Optional[random.Random] = None,
) -> list[dict]:
    """A flat 24-hour series built from one simulated flow value."""
    flow = simulate_flow(site_number, when, rng)
    return [{"time": f"{hour:02d}:00", "flow": flow} for hour in range(24)]


def _base_temperature(latitude: float) -> float:
    if latitude >= 45:
        return 50.0
    if latitude >= 40:
        return 60.0
    if latitude >= 35:
        return 70.0
    if latitude >= 30:
        return 75.0
    return 80.0


def simulate_weather(
    latitude: Optional[float],
    on: Union[date, datetime, None] = None,
    rng: Optional[random.Random] = None,
) -> dict:
    """
    Simulated weather conditions (imperial units).

    Temperature is banded by latitude with seasonal and daily sinusoids;
    pressure jitters around standard atmosphere; wind is bounded random.
    """
    rng = rng or _rng
    on = on or date.today()
    lat = latitude if latitude is not None else 44.0

    seasonal = math.sin((on.month - 4) * math.pi / 6) * 30
    daily = math.sin(on.day * math.pi / 15) * 5
    air_temp = round(_base_temperature(lat) + seasonal + daily)

    pressure = round(STANDARD_PRESSURE_INHG + rng.uniform(-1, 1), 2)

    return {
        "air_temp": max(10, min(105, air_temp)),
        "barometric_pressure": max(28.5, min(31.0, pressure)),
        "wind_direction": rng.choice(COMPASS_POINTS),
        "wind_speed": round(rng.random() * 15 + 5),
        "simulated": True,
    }
