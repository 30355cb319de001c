"""
Weather conditions for journal entries.

Current conditions come from OpenWeatherMap (imperial units). Without an API
key, or when the call fails, simulated conditions are returned instead and
flagged with ``simulated=True``.
"""

import random
from datetime import date
from typing import Optional

import httpx

from fishlog.config import settings
from fishlog.services.simulation import simulate_weather
from fishlog.utils.logging_config import get_logger

logger = get_logger(__name__)

HPA_TO_INHG = 0.02953
WIND_DIRECTIONS = [
    'N', 'NNE', 'NE', 'ENE', 'E', 'ESE', 'SE', 'SSE',
    'S', 'SSW', 'SW', 'WSW', 'W', 'WNW', 'NW', 'NNW',
]


def wind_direction(degrees: Optional[float]) -> Optional[str]:
    """16-point compass direction for a bearing in degrees."""
    if degrees is None:
        return None
    return WIND_DIRECTIONS[round(degrees / 22.5) % 16]


def parse_current_weather(data: dict) -> dict:
    """Normalize an OpenWeatherMap current-weather payload."""
    main = data["main"]
    wind = data.get("wind") or {}
    sys_info = data.get("sys") or {}

    location = data.get("name")
    if location and sys_info.get("country"):
        location = f"{location}, {sys_info['country']}"

    return {
        "air_temp": round(main["temp"]),
        "barometric_pressure": round(main["pressure"] * HPA_TO_INHG, 2),
        "wind_direction": wind_direction(wind.get("deg")),
        "wind_speed": round(wind.get("speed", 0)),
        "location": location,
        "simulated": False,
    }


class WeatherClient:
    """OpenWeatherMap client with a simulated fallback."""

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        *,
        api_key: Optional[str] = settings.OPENWEATHER_API_KEY,
        url: str = settings.OPENWEATHER_URL,
        timeout: float = settings.WEATHER_TIMEOUT_SECONDS,
        rng: Optional[random.Random] = None,
    ):
        self.http = http
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.rng = rng

    async def _fetch(self, latitude: float, longitude: float) -> dict:
        params = {
            "lat": latitude,
            "lon": longitude,
            "appid": self.api_key,
            "units": "imperial",
        }
        if self.http is not None:
            response = await self.http.get(self.url, params=params, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url, params=params)
        response.raise_for_status()
        return response.json()

    async def get_conditions(self, latitude: float, longitude: float, on: Optional[date] = None) -> dict:
        """
        Weather conditions at a location.

        Args:
            latitude: Decimal degrees
            longitude: Decimal degrees
            on: Date used to shape simulated conditions

        Returns:
            Dict with air_temp (F), barometric_pressure (inHg), wind_direction,
            wind_speed (mph) and simulated flag
        """
        if not self.api_key:
            logger.debug("No OpenWeatherMap API key configured, using simulated weather")
            return simulate_weather(latitude, on, self.rng)

        try:
            return parse_current_weather(await self._fetch(latitude, longitude))
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Weather lookup failed for ({latitude}, {longitude}): {e!r}")
            logger.info("Falling back to simulated weather data")
            return simulate_weather(latitude, on, self.rng)
