"""
Query parameter checks shared by the flow and conditions endpoints.

Missing or malformed caller input is rejected with HTTP 400 before any
upstream request is made.
"""

import re
from datetime import date
from typing import Optional

from fastapi import HTTPException, status

SITE_NUMBER_RE = re.compile(r"^\d{8,15}$")


def require_date(value: Optional[str], field: str = "date") -> date:
    if not value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Please select a {field}",
        )
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {field} '{value}', expected YYYY-MM-DD",
        )


def require_site_number(value: Optional[str]) -> str:
    if not value or not value.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please select a river gauge",
        )
    value = value.strip()
    if not SITE_NUMBER_RE.match(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid USGS site number '{value}'",
        )
    return value


def require_coordinates(latitude: Optional[float], longitude: Optional[float]) -> tuple[float, float]:
    if latitude is None or longitude is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Latitude and longitude are required",
        )
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Latitude or longitude out of range",
        )
    return latitude, longitude
