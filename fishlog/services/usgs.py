"""
USGS NWIS water services client.

Two read-only query shapes are used, both keyed by gauge site number and the
stream discharge parameter (00060, cubic feet per second):

- Instantaneous values (``/nwis/iv/``): sub-daily readings, typically every
  15 minutes, available for roughly the last 120 days.
- Daily values (``/nwis/dv/``) with statistic 00003: one mean per day.

Both answer with the same JSON envelope::

    {"value": {"timeSeries": [{"values": [{"value": [
        {"dateTime": "2024-07-04T00:15:00.000-05:00", "value": "1400"}, ...
    ]}]}]}}

An empty or absent ``timeSeries`` means the site has no data for the range.
Transport problems (network errors, timeouts, non-2xx responses, bodies that
are not the envelope above) raise `UpstreamUnavailable` instead.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

import httpx

from fishlog.config import settings
from fishlog.utils.cache import RedisCache, cache as default_cache, make_cache_key, CACHE_TTL
from fishlog.utils.logging_config import get_logger

logger = get_logger(__name__)

DISCHARGE_PARAMETER = "00060"  # stream discharge, cfs
MEAN_STATISTIC = "00003"
NO_DATA_VALUE = -999999.0


class UpstreamUnavailable(Exception):
    """The USGS service could not be reached or returned an unusable response."""


@dataclass(frozen=True)
class Observation:
    """A single valid discharge reading."""

    observed_at: datetime
    flow_cfs: float


def parse_series_payload(payload: Any) -> list[dict[str, Any]]:
    """
    Extract the raw ``{dateTime, value}`` points from a water services payload.

    Returns an empty list when the site has no time series for the range.

    Raises:
        UpstreamUnavailable: If the payload is not a water services envelope
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("value"), dict):
        raise UpstreamUnavailable("Unexpected USGS response body")

    ts_list = payload["value"].get("timeSeries") or []
    if not isinstance(ts_list, list):
        raise UpstreamUnavailable("Unexpected USGS timeSeries shape")
    if not ts_list:
        return []

    try:
        values = ts_list[0].get("values") or []
        points = (values[0].get("value") or []) if values else []
    except (AttributeError, IndexError, TypeError) as e:
        raise UpstreamUnavailable(f"Malformed USGS time series: {e}") from e

    return [p for p in points if isinstance(p, dict)]


def parse_flow(raw: Any) -> Optional[float]:
    """Numeric flow from a raw value string, or None for sentinels and junk."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value) or value == NO_DATA_VALUE:
        return None
    return value


def valid_observations(points: list[dict[str, Any]]) -> list[Observation]:
    """Keep only readings with a parseable timestamp and a numeric value."""
    observations = []
    for point in points:
        flow = parse_flow(point.get("value"))
        if flow is None:
            continue
        try:
            observed_at = datetime.fromisoformat(str(point.get("dateTime")))
        except ValueError:
            continue
        observations.append(Observation(observed_at=observed_at, flow_cfs=flow))
    return observations


def valid_flows(points: list[dict[str, Any]]) -> list[float]:
    """Numeric values of the points, regardless of timestamp."""
    flows = [parse_flow(point.get("value")) for point in points]
    return [f for f in flows if f is not None]


class UsgsClient:
    """
    Async client for the USGS instantaneous and daily value services.

    An ``httpx.AsyncClient`` may be injected (tests pass one backed by
    ``httpx.MockTransport``); otherwise a short-lived client is opened per
    request. Every request is bounded by ``timeout`` seconds.
    """

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        *,
        iv_url: str = settings.USGS_IV_URL,
        dv_url: str = settings.USGS_DV_URL,
        timeout: float = settings.USGS_TIMEOUT_SECONDS,
        cache: Optional[RedisCache] = None,
    ):
        self.http = http
        self.iv_url = iv_url
        self.dv_url = dv_url
        self.timeout = timeout
        self.cache = cache if cache is not None else default_cache

    async def _get_json(self, url: str, params: dict[str, str]) -> Any:
        try:
            if self.http is not None:
                response = await self.http.get(url, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"USGS request failed: {e.response.status_code} for {url}")
            raise UpstreamUnavailable(
                f"USGS request failed: {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"USGS request error for {url}: {e!r}")
            raise UpstreamUnavailable(f"USGS request error: {e!r}") from e
        except ValueError as e:
            logger.warning(f"USGS response from {url} is not JSON: {e}")
            raise UpstreamUnavailable("USGS response is not JSON") from e

    async def _fetch_points(self, url: str, params: dict[str, str], cache_key: str, ttl: int) -> list[dict]:
        cached = await self.cache.get(cache_key)
        if cached is not None:
            return cached

        logger.debug(f"USGS request {url} {params}")
        points = parse_series_payload(await self._get_json(url, params))
        await self.cache.set(cache_key, points, ttl=ttl)
        return points

    async def fetch_instantaneous(self, site_number: str, start: str, end: str) -> list[dict]:
        """
        Raw instantaneous discharge points between ``start`` and ``end``.

        ``start``/``end`` are passed through as ``startDT``/``endDT`` and may
        be plain dates (``2024-07-04``) or local times (``2024-07-04T00:00``).
        """
        params = {
            "format": "json",
            "sites": site_number,
            "parameterCd": DISCHARGE_PARAMETER,
            "startDT": start,
            "endDT": end,
        }
        key = make_cache_key("usgs", "iv", site_number, start, end)
        return await self._fetch_points(self.iv_url, params, key, CACHE_TTL["instantaneous"])

    async def fetch_daily_mean(self, site_number: str, day: date) -> list[dict]:
        """Raw daily-mean discharge points for a single day (zero or one point)."""
        params = {
            "format": "json",
            "sites": site_number,
            "parameterCd": DISCHARGE_PARAMETER,
            "startDT": day.isoformat(),
            "endDT": day.isoformat(),
            "statCd": MEAN_STATISTIC,
        }
        key = make_cache_key("usgs", "dv", site_number, day.isoformat())
        return await self._fetch_points(self.dv_url, params, key, CACHE_TTL["daily_mean"])
