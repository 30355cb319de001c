"""
Environmental conditions schemas: moon phase, flow and weather.
"""

from datetime import date as DateType
from typing import List, Optional
from pydantic import BaseModel, Field


class MoonPhaseResponse(BaseModel):
    date: DateType
    emoji: str
    name: str
    illumination_percent: int = Field(..., ge=0, le=100)
    age_days: float
    label: str = Field(..., description='Display form, e.g. "🌕 Full Moon (98%)"')


class MoonPhaseView(BaseModel):
    """A stored moon phase, whichever form it was saved in."""
    emoji: str
    title: str
    name: Optional[str] = None


class FlowResponse(BaseModel):
    site_number: str
    date: DateType
    flow_cfs: Optional[float] = None
    no_data: bool
    simulated: bool = False
    display: str


class FlowReading(BaseModel):
    time: str = Field(..., description="Hour label, 00:00 through 23:00")
    flow: Optional[float] = None


class HourlySeriesResponse(BaseModel):
    site_number: str
    date: DateType
    source: str = Field(..., description="instantaneous, daily_mean, simulated or cache")
    simulated: bool = False
    from_cache: bool = False
    readings: List[FlowReading]


class WeatherResponse(BaseModel):
    air_temp: Optional[float] = None
    barometric_pressure: Optional[float] = None
    wind_direction: Optional[str] = None
    wind_speed: Optional[float] = None
    location: Optional[str] = None
    simulated: bool = False
