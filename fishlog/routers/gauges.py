"""
Gauge search router.

Autocomplete over the curated list of popular USGS river gauges.
"""

from typing import List
from fastapi import APIRouter, Query, Request
from pydantic import BaseModel
from slowapi import Limiter
from slowapi.util import get_remote_address

from fishlog.config import settings
from fishlog.services.gauges import MAX_RESULTS, search_gauges

router = APIRouter(
    prefix="/gauges",
    tags=["gauges"],
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


class GaugeSiteResponse(BaseModel):
    site_number: str
    display_name: str
    state: str


@router.get("/search", response_model=List[GaugeSiteResponse])
@limiter.limit("120/minute")
async def search(
    request: Request,
    q: str = Query("", description="Part of a river name or site number (at least 3 characters)"),
    limit: int = Query(MAX_RESULTS, ge=1, le=MAX_RESULTS),
):
    """
    Search the reference gauges by name.

    Fewer than three characters returns an empty list.
    """
    return [
        GaugeSiteResponse(site_number=g.site_number, display_name=g.display_name, state=g.state)
        for g in search_gauges(q, limit=limit)
    ]
