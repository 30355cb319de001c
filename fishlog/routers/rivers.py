"""
Saved rivers router.

A user's followed USGS gauges: current flow with trend, a dashboard
summary, today's hourly graph and per-gauge flow alerts.
"""

from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from slowapi import Limiter
from slowapi.util import get_remote_address

from fishlog.config import settings
from fishlog.crud.alert import flow_alert as crud_alert
from fishlog.crud.river import saved_river as crud_river
from fishlog.database import get_db
from fishlog.dependencies.auth import get_current_user
from fishlog.dependencies.params import require_site_number
from fishlog.dependencies.services import get_flow_resolver
from fishlog.models.saved_river import SavedRiver
from fishlog.models.user import User
from fishlog.schemas.conditions import HourlySeriesResponse
from fishlog.schemas.river import (
    AlertConfigResponse, AlertConfigUpdate, AlertRuleOut, DashboardStats,
    RiverRefreshResponse, SavedRiver as SavedRiverSchema, SavedRiverCreate,
)
from fishlog.services.alerts import AlertKind
from fishlog.services.flow import FlowResolver
from fishlog.services.rivers import RiverRefresh, dashboard_stats, refresh_all, refresh_river
from fishlog.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/rivers",
    tags=["rivers"],
    responses={
        401: {"description": "Unauthorized"},
        404: {"description": "River not found"},
    },
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


async def _get_owned_river(db: AsyncSession, river_id: int, user: User) -> SavedRiver:
    river = await crud_river.get_for_user(db, id=river_id, user_id=user.id)
    if not river:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Saved river {river_id} not found"
        )
    return river


def _refresh_response(result: RiverRefresh) -> RiverRefreshResponse:
    return RiverRefreshResponse(
        river=SavedRiverSchema.model_validate(result.river),
        trend=result.trend,
        alerts=[alert.to_dict() for alert in result.alerts],
    )


@router.get("", response_model=List[SavedRiverSchema])
@limiter.limit("60/minute")
async def list_rivers(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await crud_river.get_multi_for_user(db, user_id=current_user.id, limit=500)


@router.post("", response_model=SavedRiverSchema, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def add_river(
    request: Request,
    river_in: SavedRiverCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Follow a gauge. Saving a gauge that is already followed updates its
    name and location.
    """
    return await crud_river.upsert(db, obj_in=river_in, user_id=current_user.id)


@router.get("/dashboard", response_model=DashboardStats)
@limiter.limit("60/minute")
async def get_dashboard(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Total gauges, average current flow and how many are in an alert band."""
    rivers = await crud_river.get_multi_for_user(db, user_id=current_user.id, limit=500)
    return dashboard_stats(rivers)


@router.post("/refresh", response_model=List[RiverRefreshResponse])
@limiter.limit("6/minute")
async def refresh_all_rivers(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    resolver: FlowResolver = Depends(get_flow_resolver),
):
    """Refresh every followed gauge and run its alert rules."""
    rivers = await crud_river.get_multi_for_user(db, user_id=current_user.id, limit=500)
    rules = await crud_alert.get_by_site_for_user(db, user_id=current_user.id)
    results = await refresh_all(rivers, resolver, rules, now=datetime.now(timezone.utc))
    await db.commit()
    return [_refresh_response(r) for r in results]


@router.get("/alerts/{site_number}", response_model=AlertConfigResponse)
@limiter.limit("60/minute")
async def get_alert_config(
    request: Request,
    site_number: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    site = require_site_number(site_number)
    rules = await crud_alert.get_for_site(db, user_id=current_user.id, site_number=site)
    return AlertConfigResponse(
        site_number=site,
        **{kind: AlertRuleOut.model_validate(rule) for kind, rule in rules.items()},
    )


@router.put("/alerts/{site_number}", response_model=AlertConfigResponse)
@limiter.limit("30/minute")
async def set_alert_config(
    request: Request,
    site_number: str,
    config: AlertConfigUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Replace a gauge's alert rules.

    Kinds that are omitted or disabled are removed.
    """
    site = require_site_number(site_number)
    saved = {}
    for kind in AlertKind:
        rule_in = getattr(config, kind.value)
        rule = await crud_alert.set_rule(
            db,
            user_id=current_user.id,
            site_number=site,
            kind=kind,
            threshold_cfs=rule_in.threshold_cfs if rule_in else None,
            enabled=bool(rule_in and rule_in.enabled),
        )
        if rule is not None:
            saved[kind.value] = rule
    await db.commit()
    return AlertConfigResponse(
        site_number=site,
        **{kind: AlertRuleOut.model_validate(rule) for kind, rule in saved.items()},
    )


@router.delete("/{river_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
async def delete_river(
    request: Request,
    river_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Stop following a gauge; its alert rules are removed too."""
    river = await _get_owned_river(db, river_id, current_user)
    await crud_alert.remove_for_site(db, user_id=current_user.id, site_number=river.site_number)
    await crud_river.remove(db, db_obj=river)


@router.post("/{river_id}/refresh", response_model=RiverRefreshResponse)
@limiter.limit("30/minute")
async def refresh_one_river(
    request: Request,
    river_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    resolver: FlowResolver = Depends(get_flow_resolver),
):
    """Fetch today's flow for one gauge, with trend and any alerts that fired."""
    river = await _get_owned_river(db, river_id, current_user)
    rules = await crud_alert.get_for_site(db, user_id=current_user.id, site_number=river.site_number)
    result = await refresh_river(river, resolver, rules, now=datetime.now(timezone.utc))
    await db.commit()
    return _refresh_response(result)


@router.get("/{river_id}/hourly", response_model=HourlySeriesResponse)
@limiter.limit("60/minute")
async def get_river_hourly(
    request: Request,
    river_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    resolver: FlowResolver = Depends(get_flow_resolver),
):
    """Today's hourly flow graph for a followed gauge."""
    river = await _get_owned_river(db, river_id, current_user)
    today = resolver.clock().date()
    series = await resolver.resolve_hourly_series(river.site_number, today)
    return HourlySeriesResponse(
        site_number=river.site_number,
        date=today,
        source=series.source,
        simulated=series.simulated,
        readings=series.to_list(),
    )
