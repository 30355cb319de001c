"""
Journal entry schemas.
"""

from datetime import date as DateType
from typing import Optional
from pydantic import Field, computed_field, field_validator

from fishlog.schemas.base import BaseSchema, IDSchema, TimestampSchema
from fishlog.schemas.conditions import MoonPhaseView
from fishlog.services.moon import parse_stored_phase

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
SITE_NUMBER_PATTERN = r"^\d{8,15}$"


def blank_to_none(v):
    """Treat an empty form field as not given."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


class JournalEntryBase(BaseSchema):
    """Fields an angler fills in for an outing."""
    date: DateType
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    angler: Optional[str] = Field(None, max_length=200)
    species: Optional[str] = Field(None, max_length=100)
    length: Optional[float] = Field(None, ge=0, description="Inches")
    weight: Optional[float] = Field(None, ge=0, description="Pounds")

    city_state: Optional[str] = Field(None, max_length=200)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    site_number: Optional[str] = Field(None, pattern=SITE_NUMBER_PATTERN, description="USGS gauge site number")
    river_name: Optional[str] = Field(None, max_length=200)

    weather_temp: Optional[float] = Field(None, description="Fahrenheit")
    barometric_pressure: Optional[float] = Field(None, ge=20, le=35, description="inHg")
    wind_speed: Optional[float] = Field(None, ge=0, description="mph")
    wind_direction: Optional[str] = Field(None, max_length=4)

    flies_used: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("site_number", mode="before")
    @classmethod
    def blank_site_is_none(cls, v):
        return blank_to_none(v)


class JournalEntryCreate(JournalEntryBase):
    pass


class JournalEntryUpdate(BaseSchema):
    """Partial update; only the fields sent are changed."""
    date: Optional[DateType] = None
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    angler: Optional[str] = Field(None, max_length=200)
    species: Optional[str] = Field(None, max_length=100)
    length: Optional[float] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    city_state: Optional[str] = Field(None, max_length=200)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    site_number: Optional[str] = Field(None, pattern=SITE_NUMBER_PATTERN)
    river_name: Optional[str] = Field(None, max_length=200)
    weather_temp: Optional[float] = None
    barometric_pressure: Optional[float] = Field(None, ge=20, le=35)
    wind_speed: Optional[float] = Field(None, ge=0)
    wind_direction: Optional[str] = Field(None, max_length=4)
    flies_used: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("site_number", mode="before")
    @classmethod
    def blank_site_is_none(cls, v):
        return blank_to_none(v)


class JournalEntry(JournalEntryBase, IDSchema, TimestampSchema):
    """Journal entry as returned by the API."""
    # Stored values may predate current validation rules
    site_number: Optional[str] = None
    barometric_pressure: Optional[float] = None
    water_flow: Optional[str] = None
    moon_phase: Optional[str] = None
    cached_flow_data: Optional[str] = Field(None, exclude=True)

    @computed_field
    @property
    def moon(self) -> Optional[MoonPhaseView]:
        stored = parse_stored_phase(self.moon_phase)
        if stored is None:
            return None
        return MoonPhaseView(emoji=stored.emoji, title=stored.title, name=stored.name)

    @computed_field
    @property
    def has_flow_cache(self) -> bool:
        return bool(self.cached_flow_data)
