"""
Journal entries router.

Saving an entry fills in what can be derived from its date and place: the
moon phase, the river flow display string, missing weather fields, and a
snapshot of the day's hourly flow graph.
"""

import io
from typing import List

import pandas as pd
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import Limiter
from slowapi.util import get_remote_address

from fishlog.config import settings
from fishlog.crud.journal import journal_entry as crud_entry
from fishlog.database import get_db
from fishlog.dependencies.auth import get_current_user
from fishlog.dependencies.services import get_flow_resolver, get_weather_client
from fishlog.models.journal_entry import JournalEntry
from fishlog.models.user import User
from fishlog.schemas.conditions import HourlySeriesResponse
from fishlog.schemas.journal import (
    JournalEntry as JournalEntrySchema, JournalEntryCreate, JournalEntryUpdate,
)
from fishlog.services.flow import FlowResolver
from fishlog.services.flow_cache import capture_flow_cache, load_flow_series
from fishlog.services.moon import StructuredPhase, compute_phase
from fishlog.services.weather import WeatherClient
from fishlog.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/entries",
    tags=["journal"],
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "Entry not found"},
    },
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

WEATHER_FIELDS = {
    "weather_temp": "air_temp",
    "barometric_pressure": "barometric_pressure",
    "wind_speed": "wind_speed",
    "wind_direction": "wind_direction",
}

EXPORT_COLUMNS = [
    "date", "start_time", "end_time", "angler", "species", "length", "weight",
    "city_state", "latitude", "longitude", "site_number", "river_name", "water_flow",
    "weather_temp", "barometric_pressure", "wind_speed", "wind_direction",
    "moon_phase", "flies_used", "notes",
]


async def _derive_fields(
    data: dict,
    resolver: FlowResolver,
    weather: WeatherClient,
    date_changed: bool,
    refresh_flow: bool,
) -> dict:
    """
    Compute moon phase, flow and missing weather for an entry's field values.

    The moon phase and weather only depend on the day, so they are left as
    stored unless ``date_changed``; imported phase strings stay verbatim.
    """
    on = data["date"]
    if date_changed:
        data["moon_phase"] = StructuredPhase(compute_phase(on)).serialize()

        lat, lon = data.get("latitude"), data.get("longitude")
        missing_weather = [f for f in WEATHER_FIELDS if data.get(f) is None]
        if lat is not None and lon is not None and missing_weather:
            conditions = await weather.get_conditions(lat, lon, on)
            for field in missing_weather:
                data[field] = conditions.get(WEATHER_FIELDS[field])

    if refresh_flow:
        site = data.get("site_number")
        if site:
            flow = await resolver.resolve_flow_or_simulate(site, on)
            data["water_flow"] = flow.display(on)
        else:
            data["water_flow"] = None
        data["cached_flow_data"] = await capture_flow_cache(resolver, site, on)
    return data


async def _get_owned_entry(db: AsyncSession, entry_id: int, user: User) -> JournalEntry:
    entry = await crud_entry.get_for_user(db, id=entry_id, user_id=user.id)
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Journal entry {entry_id} not found"
        )
    return entry


@router.get("", response_model=List[JournalEntrySchema])
@limiter.limit("60/minute")
async def list_entries(
    request: Request,
    skip: int = 0,
    limit: int = 100,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The current user's journal, newest outing first."""
    return await crud_entry.get_multi_for_user(db, user_id=current_user.id, skip=skip, limit=limit)


@router.get("/export")
@limiter.limit("10/minute")
async def export_entries(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Download the journal as CSV."""
    entries = await crud_entry.get_all_for_user(db, user_id=current_user.id)
    df = pd.DataFrame(
        [{col: getattr(e, col) for col in EXPORT_COLUMNS} for e in entries],
        columns=EXPORT_COLUMNS,
    )
    buffer = io.StringIO()
    df.to_csv(buffer, index=False)
    return Response(
        content=buffer.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="fishing_journal.csv"'},
    )


@router.post("", response_model=JournalEntrySchema, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def create_entry(
    request: Request,
    entry_in: JournalEntryCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    resolver: FlowResolver = Depends(get_flow_resolver),
    weather: WeatherClient = Depends(get_weather_client),
):
    """
    Record an outing.

    The moon phase, water flow and flow snapshot are derived from the date
    and gauge; weather fields left empty are looked up from the coordinates.
    """
    data = await _derive_fields(
        entry_in.model_dump(), resolver, weather, date_changed=True, refresh_flow=True
    )
    entry = await crud_entry.create_for_user(db, obj_in=data, user_id=current_user.id)
    logger.info(f"Created journal entry {entry.id} for user {current_user.id}")
    return entry


@router.get("/{entry_id}", response_model=JournalEntrySchema)
@limiter.limit("60/minute")
async def get_entry(
    request: Request,
    entry_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _get_owned_entry(db, entry_id, current_user)


@router.put("/{entry_id}", response_model=JournalEntrySchema)
@limiter.limit("30/minute")
async def update_entry(
    request: Request,
    entry_id: int,
    entry_in: JournalEntryUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    resolver: FlowResolver = Depends(get_flow_resolver),
    weather: WeatherClient = Depends(get_weather_client),
):
    """
    Update an outing.

    Moon phase and missing weather are re-derived only when the date
    changes; flow and its snapshot when the date or gauge changes.
    """
    entry = await _get_owned_entry(db, entry_id, current_user)
    changes = entry_in.model_dump(exclude_unset=True)

    merged = {c.name: getattr(entry, c.name) for c in JournalEntry.__table__.columns}
    merged.update(changes)
    if merged["date"] is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please select a date")

    date_changed = merged["date"] != entry.date
    refresh_flow = date_changed or merged.get("site_number") != entry.site_number
    merged = await _derive_fields(
        merged, resolver, weather, date_changed=date_changed, refresh_flow=refresh_flow
    )

    derived = {"moon_phase", "water_flow", "cached_flow_data", *WEATHER_FIELDS}
    update_data = {**changes, **{k: merged[k] for k in derived if k in merged}}
    return await crud_entry.update(db, db_obj=entry, obj_in=update_data)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
async def delete_entry(
    request: Request,
    entry_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    entry = await _get_owned_entry(db, entry_id, current_user)
    await crud_entry.remove(db, db_obj=entry)


@router.get("/{entry_id}/flow-series", response_model=HourlySeriesResponse)
@limiter.limit("60/minute")
async def get_entry_flow_series(
    request: Request,
    entry_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    resolver: FlowResolver = Depends(get_flow_resolver),
):
    """
    The hourly flow graph for an entry's day.

    Served from the entry's snapshot when it has one, otherwise resolved
    from USGS.
    """
    entry = await _get_owned_entry(db, entry_id, current_user)
    if not entry.site_number or not entry.date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Missing river or date information for this entry (site: {entry.site_number}, date: {entry.date})",
        )

    series, from_cache = await load_flow_series(entry, resolver)
    return HourlySeriesResponse(
        site_number=entry.site_number,
        date=entry.date,
        source=series.source,
        simulated=series.simulated,
        from_cache=from_cache,
        readings=series.to_list(),
    )


@router.post("/{entry_id}/flow-cache", response_model=JournalEntrySchema)
@limiter.limit("10/minute")
async def recapture_flow_cache(
    request: Request,
    entry_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    resolver: FlowResolver = Depends(get_flow_resolver),
):
    """
    Re-capture an entry's hourly flow snapshot, replacing the stored one.

    The existing snapshot is kept if USGS cannot provide a fresh series.
    """
    entry = await _get_owned_entry(db, entry_id, current_user)
    if not entry.site_number:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="This entry has no river gauge",
        )

    snapshot = await capture_flow_cache(resolver, entry.site_number, entry.date)
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Flow data is currently unavailable; the existing snapshot was kept",
        )
    return await crud_entry.update(db, db_obj=entry, obj_in={"cached_flow_data": snapshot})
