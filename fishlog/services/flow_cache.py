"""
Per-entry snapshot of the hourly flow graph.

When a journal entry is saved, its day's hourly series is captured into the
entry's ``cached_flow_data`` column so later views do not depend on USGS.
Capturing is best-effort: a failure is logged and leaves the snapshot empty,
never failing the save.
"""

import json
from datetime import date
from typing import Any, Optional

from fishlog.services.flow import HOUR_LABELS, FlowReading, FlowResolver, HourlySeries
from fishlog.utils.logging_config import get_logger

logger = get_logger(__name__)


def serialize_series(readings: list[FlowReading]) -> str:
    return json.dumps([r.to_dict() for r in readings])


def deserialize_series(raw: str) -> list[FlowReading]:
    """
    Parse a stored snapshot.

    Raises:
        ValueError: If the snapshot is not 24 ``{time, flow}`` records in hour order
    """
    data = json.loads(raw)
    if not isinstance(data, list) or len(data) != len(HOUR_LABELS):
        raise ValueError("Flow snapshot must hold 24 readings")

    readings = []
    for label, item in zip(HOUR_LABELS, data):
        if not isinstance(item, dict) or item.get("time") != label:
            raise ValueError(f"Flow snapshot reading out of order at {label}")
        flow = item.get("flow")
        if flow is not None and not isinstance(flow, (int, float)):
            raise ValueError(f"Flow snapshot value at {label} is not numeric")
        readings.append(FlowReading(time=label, flow=None if flow is None else float(flow)))
    return readings


async def capture_flow_cache(resolver: FlowResolver, site_number: Optional[str], on: Optional[date]) -> Optional[str]:
    """
    Resolve and serialize the hourly series for an entry.

    Returns None when site or date is missing, when the series could only be
    simulated, or when anything goes wrong.
    """
    if not site_number or not on:
        return None

    try:
        series = await resolver.resolve_hourly_series(site_number, on)
        if series.simulated:
            logger.info(f"Not caching simulated flow series for site {site_number} on {on}")
            return None
        return serialize_series(series.readings)
    except Exception as e:
        logger.warning(f"Failed to cache flow data for site {site_number} on {on}: {e}")
        return None


async def load_flow_series(entry: Any, resolver: FlowResolver) -> tuple[HourlySeries, bool]:
    """
    Hourly series for a journal entry, preferring its snapshot.

    Args:
        entry: Object with ``cached_flow_data``, ``site_number`` and ``date``
        resolver: Used when there is no usable snapshot

    Returns:
        (series, from_cache)
    """
    raw = getattr(entry, "cached_flow_data", None)
    if raw:
        try:
            return HourlySeries(readings=deserialize_series(raw), source="cache"), True
        except (ValueError, TypeError) as e:
            logger.warning(f"Ignoring malformed flow snapshot on entry {getattr(entry, 'id', '?')}: {e}")

    return await resolver.resolve_hourly_series(entry.site_number, entry.date), False
