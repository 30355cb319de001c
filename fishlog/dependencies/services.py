"""
Service dependencies.

Routers receive the flow resolver and weather client through these
providers so tests can override them with instances backed by
``httpx.MockTransport``.
"""

from fishlog.services.flow import FlowResolver
from fishlog.services.usgs import UsgsClient
from fishlog.services.weather import WeatherClient


def get_flow_resolver() -> FlowResolver:
    return FlowResolver(UsgsClient())


def get_weather_client() -> WeatherClient:
    return WeatherClient()
