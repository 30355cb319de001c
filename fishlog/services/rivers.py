"""
Saved river gauges: refreshing current flow and dashboard figures.

A refresh resolves today's flow for a gauge, records it on the saved river,
compares it with the previous reading to get a trend, and runs the gauge's
alert rules. Refreshing every saved gauge dispatches one request per gauge,
spaced out by a short stagger, and waits for all of them.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from fishlog.config import settings
from fishlog.services.alerts import TriggeredAlert, as_utc, evaluate
from fishlog.services.flow import FlowResolver
from fishlog.services.usgs import UpstreamUnavailable
from fishlog.utils.logging_config import get_logger

logger = get_logger(__name__)

STATUS_ACTIVE = "Active"
STATUS_NO_DATA = "No Data"
STATUS_ERROR = "Error"

TREND_THRESHOLD_PERCENT = 5.0

# Upper bounds (exclusive) of the low/normal/high flow bands, in CFS
LOW_FLOW_CFS = 100
NORMAL_FLOW_CFS = 1000
HIGH_FLOW_CFS = 5000


@dataclass
class RiverRefresh:
    """Outcome of refreshing one saved river."""

    river: Any
    trend: int = 0
    alerts: list[TriggeredAlert] = field(default_factory=list)


def compute_trend(previous_cfs: Optional[float], current_cfs: Optional[float]) -> int:
    """
    +1 rising, -1 falling, 0 stable or unknown.

    Only a change of more than 5% relative to the previous reading counts.
    """
    if previous_cfs is None or current_cfs is None or previous_cfs == 0:
        return 0
    change = (current_cfs - previous_cfs) / previous_cfs * 100
    if abs(change) <= TREND_THRESHOLD_PERCENT:
        return 0
    return 1 if change > 0 else -1


def classify_flow(flow_cfs: Optional[float]) -> str:
    """Band a flow as low, normal, high or flood; ``unknown`` without a reading."""
    if flow_cfs is None:
        return "unknown"
    if flow_cfs < LOW_FLOW_CFS:
        return "low"
    if flow_cfs < NORMAL_FLOW_CFS:
        return "normal"
    if flow_cfs < HIGH_FLOW_CFS:
        return "high"
    return "flood"


def flow_display(river: Any) -> str:
    """What a river card shows for the current flow."""
    if river.flow_status == STATUS_ACTIVE and river.current_flow_cfs is not None:
        return f"{round(river.current_flow_cfs)} CFS"
    return river.flow_status or STATUS_NO_DATA


async def refresh_river(
    river: Any,
    resolver: FlowResolver,
    alert_rules: Optional[Mapping[str, Any]] = None,
    now: Optional[datetime] = None,
) -> RiverRefresh:
    """
    Refresh one saved river in place.

    Args:
        river: SavedRiver (or any object with the same attributes)
        resolver: Flow resolver
        alert_rules: The gauge's alert rules keyed by kind
        now: Refresh time, defaults to current UTC time

    Returns:
        RiverRefresh with the trend and any alerts that fired
    """
    now = now or datetime.now(timezone.utc)
    previous = river.current_flow_cfs if river.flow_status == STATUS_ACTIVE else None
    result = RiverRefresh(river=river)

    try:
        flow = await resolver.resolve_flow(river.site_number, resolver.clock().date())
    except UpstreamUnavailable as e:
        logger.warning(f"Refresh failed for site {river.site_number}: {e}")
        river.current_flow_cfs = None
        river.flow_status = STATUS_ERROR
        river.last_updated_at = now
        return result

    river.last_updated_at = now
    if flow.no_data:
        river.current_flow_cfs = None
        river.flow_status = STATUS_NO_DATA
        return result

    current = float(round(flow.flow_cfs))
    river.current_flow_cfs = current
    river.flow_status = STATUS_ACTIVE
    result.trend = compute_trend(previous, current)

    if alert_rules:
        result.alerts = evaluate(river.site_number, current, alert_rules, now=now)
    return result


async def refresh_all(
    rivers: Sequence[Any],
    resolver: FlowResolver,
    rules_by_site: Optional[Mapping[str, Mapping[str, Any]]] = None,
    stagger_seconds: float = settings.REFRESH_STAGGER_SECONDS,
    now: Optional[datetime] = None,
) -> list[RiverRefresh]:
    """
    Refresh every river, starting one request per gauge ``stagger_seconds`` apart.

    Results come back in the same order as ``rivers``.
    """
    rules_by_site = rules_by_site or {}
    tasks = []
    for index, river in enumerate(rivers):
        if index and stagger_seconds:
            await asyncio.sleep(stagger_seconds)
        tasks.append(asyncio.create_task(
            refresh_river(river, resolver, rules_by_site.get(river.site_number), now=now)
        ))
    results = await asyncio.gather(*tasks)
    logger.info(f"Refreshed {len(results)} saved rivers")
    return list(results)


def dashboard_stats(rivers: Sequence[Any]) -> dict:
    """
    Summary figures for the saved-rivers dashboard.

    ``average_flow_cfs`` covers rivers with an active reading (None if there
    are none); ``alert_count`` counts rivers in the low, high or flood band.
    """
    flows = [
        r.current_flow_cfs for r in rivers
        if r.flow_status == STATUS_ACTIVE and r.current_flow_cfs is not None
    ]
    alert_count = sum(1 for f in flows if classify_flow(f) in ("low", "high", "flood"))
    return {
        "total_rivers": len(rivers),
        "average_flow_cfs": round(sum(flows) / len(flows)) if flows else None,
        "alert_count": alert_count,
        "last_updated_at": max(
            (as_utc(r.last_updated_at) for r in rivers if r.last_updated_at is not None),
            default=None,
        ),
    }
