"""
Tests for the OpenWeatherMap client.
"""

import random
from datetime import date

import httpx
import pytest

from fishlog.services.weather import WeatherClient, parse_current_weather, wind_direction

OWM_PAYLOAD = {
    "name": "Saint Paul",
    "sys": {"country": "US"},
    "main": {"temp": 71.6, "pressure": 1013},
    "wind": {"speed": 8.4, "deg": 200},
}


@pytest.mark.parametrize("degrees,direction", [
    (0, "N"),
    (11, "N"),
    (12, "NNE"),
    (90, "E"),
    (200, "SSW"),
    (348.75, "N"),
    (359, "N"),
    (None, None),
])
def test_wind_direction(degrees, direction):
    assert wind_direction(degrees) == direction


def test_parse_current_weather():
    assert parse_current_weather(OWM_PAYLOAD) == {
        "air_temp": 72,
        "barometric_pressure": 29.91,
        "wind_direction": "SSW",
        "wind_speed": 8,
        "location": "Saint Paul, US",
        "simulated": False,
    }


async def test_live_weather_request():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=OWM_PAYLOAD)

    client = WeatherClient(
        httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        api_key="secret",
        url="https://api.openweathermap.org/data/2.5/weather",
    )
    data = await client.get_conditions(44.95, -93.09)

    assert data["simulated"] is False
    assert seen[0].url.params["units"] == "imperial"
    assert seen[0].url.params["appid"] == "secret"


async def test_failure_falls_back_to_simulation():
    client = WeatherClient(
        httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(401))),
        api_key="bad-key",
        rng=random.Random(1),
    )
    data = await client.get_conditions(44.95, -93.09, date(2024, 7, 4))
    assert data["simulated"] is True


async def test_malformed_payload_falls_back_to_simulation():
    client = WeatherClient(
        httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"cod": 200}))),
        api_key="secret",
        rng=random.Random(1),
    )
    data = await client.get_conditions(44.95, -93.09, date(2024, 7, 4))
    assert data["simulated"] is True


async def test_no_api_key_never_calls_out():
    def handler(request):
        raise AssertionError("unexpected request")

    client = WeatherClient(
        httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        api_key=None,
        rng=random.Random(1),
    )
    assert (await client.get_conditions(44.95, -93.09))["simulated"] is True
