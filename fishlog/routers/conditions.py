"""
Conditions router.

Moon phase, river flow and weather lookups for a date and place, used to
pre-fill a journal entry before it is saved.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from fishlog.config import settings
from fishlog.dependencies.auth import get_current_user
from fishlog.dependencies.params import require_coordinates, require_date, require_site_number
from fishlog.dependencies.services import get_flow_resolver, get_weather_client
from fishlog.models.user import User
from fishlog.schemas.conditions import (
    FlowResponse, HourlySeriesResponse, MoonPhaseResponse, WeatherResponse,
)
from fishlog.services.flow import FlowResolver
from fishlog.services.moon import compute_phase
from fishlog.services.weather import WeatherClient

router = APIRouter(
    prefix="/conditions",
    tags=["conditions"],
    responses={
        400: {"description": "Missing or invalid parameters"},
        401: {"description": "Unauthorized"},
    },
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.get("/moon-phase", response_model=MoonPhaseResponse)
@limiter.limit("120/minute")
async def get_moon_phase(
    request: Request,
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    current_user: User = Depends(get_current_user),
):
    """Moon phase for a calendar date."""
    on = require_date(date)
    phase = compute_phase(on)
    return MoonPhaseResponse(date=on, label=phase.label, **phase.to_dict())


@router.get("/flow", response_model=FlowResponse)
@limiter.limit("60/minute")
async def get_flow(
    request: Request,
    site_number: Optional[str] = Query(None, description="USGS gauge site number"),
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    current_user: User = Depends(get_current_user),
    resolver: FlowResolver = Depends(get_flow_resolver),
):
    """
    Discharge for a gauge on a date.

    Falls back to a simulated value (``simulated: true``) when USGS cannot
    be reached; ``no_data: true`` means USGS has nothing for that date.
    """
    site = require_site_number(site_number)
    on = require_date(date)
    flow = await resolver.resolve_flow_or_simulate(site, on)
    return FlowResponse(
        site_number=site,
        date=on,
        flow_cfs=flow.flow_cfs,
        no_data=flow.no_data,
        simulated=flow.simulated,
        display=flow.display(on),
    )


@router.get("/flow/hourly", response_model=HourlySeriesResponse)
@limiter.limit("60/minute")
async def get_hourly_flow(
    request: Request,
    site_number: Optional[str] = Query(None, description="USGS gauge site number"),
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    current_user: User = Depends(get_current_user),
    resolver: FlowResolver = Depends(get_flow_resolver),
):
    """24 hourly readings for a gauge and date."""
    site = require_site_number(site_number)
    on = require_date(date)
    series = await resolver.resolve_hourly_series(site, on)
    return HourlySeriesResponse(
        site_number=site,
        date=on,
        source=series.source,
        simulated=series.simulated,
        readings=series.to_list(),
    )


@router.get("/weather", response_model=WeatherResponse)
@limiter.limit("30/minute")
async def get_weather(
    request: Request,
    latitude: Optional[float] = Query(None, description="Decimal degrees"),
    longitude: Optional[float] = Query(None, description="Decimal degrees"),
    date: Optional[str] = Query(None, description="YYYY-MM-DD, defaults to today"),
    current_user: User = Depends(get_current_user),
    weather: WeatherClient = Depends(get_weather_client),
):
    """Weather conditions at a location (simulated when no API key is configured)."""
    lat, lon = require_coordinates(latitude, longitude)
    on = require_date(date) if date else None
    return await weather.get_conditions(lat, lon, on)
