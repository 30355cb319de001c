"""
Flow data resolver.

Chooses between the USGS instantaneous and daily-mean services based on how
far back the requested date is, and turns their raw points into either a
single discharge value or a 24-slot hourly series.

Three outcomes are kept apart:

- a value (or series) built from real readings,
- NoData: the service answered but has nothing usable for that date,
- `UpstreamUnavailable`: the service could not be reached.

`resolve_flow` lets `UpstreamUnavailable` propagate; callers that must always
show something use `resolve_flow_or_simulate`. `resolve_hourly_series`
substitutes a flat simulated series on transport failure and flags it.
"""

import random
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Optional

from fishlog.config import settings
from fishlog.services.simulation import simulate_flow, simulate_hourly_series
from fishlog.services.usgs import UsgsClient, UpstreamUnavailable, valid_flows, valid_observations
from fishlog.utils.logging_config import get_logger

logger = get_logger(__name__)

HOURS_PER_DAY = 24


def hour_label(hour: int) -> str:
    return f"{hour:02d}:00"


HOUR_LABELS = [hour_label(h) for h in range(HOURS_PER_DAY)]


@dataclass(frozen=True)
class FlowValue:
    """Discharge for one gauge and date; ``flow_cfs`` is None for NoData."""

    flow_cfs: Optional[float]
    simulated: bool = False

    @property
    def no_data(self) -> bool:
        return self.flow_cfs is None

    def display(self, on: date) -> str:
        """
        Human-readable form stored on journal entries.

        Examples: ``"1400 CFS"``, ``"512 CFS (simulated)"``,
        ``"No data for 2024-07-04"``.
        """
        if self.flow_cfs is None:
            return f"No data for {on.isoformat()}"
        text = f"{round(self.flow_cfs)} CFS"
        if self.simulated:
            text += " (simulated)"
        return text


@dataclass(frozen=True)
class FlowReading:
    """One hourly slot of a day's flow graph."""

    time: str
    flow: Optional[float]

    def to_dict(self) -> dict:
        return {"time": self.time, "flow": self.flow}


@dataclass
class HourlySeries:
    """Exactly 24 readings, ``"00:00"`` through ``"23:00"``."""

    readings: list[FlowReading] = field(default_factory=list)
    simulated: bool = False
    source: str = "instantaneous"

    def to_list(self) -> list[dict]:
        return [r.to_dict() for r in self.readings]


def empty_series() -> list[FlowReading]:
    return [FlowReading(time=label, flow=None) for label in HOUR_LABELS]


def flat_series(flow: Optional[float]) -> list[FlowReading]:
    return [FlowReading(time=label, flow=flow) for label in HOUR_LABELS]


def bucket_hourly(points: list[dict]) -> list[FlowReading]:
    """
    Average valid readings into hourly buckets.

    A reading lands in the hour of its own timestamp, in the UTC offset the
    service reported it with. Hours with no valid reading get ``None``.
    """
    buckets: dict[int, list[float]] = defaultdict(list)
    for obs in valid_observations(points):
        buckets[obs.observed_at.hour].append(obs.flow_cfs)

    readings = []
    for hour in range(HOURS_PER_DAY):
        values = buckets.get(hour)
        flow = round(sum(values) / len(values), 2) if values else None
        readings.append(FlowReading(time=hour_label(hour), flow=flow))
    return readings


def _local_now() -> datetime:
    return datetime.now()


class FlowResolver:
    """
    Resolve discharge for a gauge and date.

    Args:
        client: USGS client used for upstream queries
        clock: Returns "now"; injectable so the service-selection windows are testable
        instantaneous_window_days: Dates at most this many days back use the
            instantaneous service for single values
        hourly_window_days: Dates at most this many days back use the
            instantaneous service for hourly series
        rng: Random source for simulated fallbacks
    """

    def __init__(
        self,
        client: Optional[UsgsClient] = None,
        clock: Callable[[], datetime] = _local_now,
        instantaneous_window_days: int = settings.INSTANTANEOUS_WINDOW_DAYS,
        hourly_window_days: int = settings.HOURLY_WINDOW_DAYS,
        rng: Optional[random.Random] = None,
    ):
        self.client = client or UsgsClient()
        self.clock = clock
        self.instantaneous_window_days = instantaneous_window_days
        self.hourly_window_days = hourly_window_days
        self.rng = rng

    def days_ago(self, on: date) -> int:
        return (self.clock().date() - on).days

    async def resolve_flow(self, site_number: str, on: date) -> FlowValue:
        """
        Discharge for a gauge on a date.

        Recent dates average every instantaneous reading of that day; older
        dates use the daily mean.

        Raises:
            UpstreamUnavailable: If the USGS service cannot be reached
        """
        if self.days_ago(on) <= self.instantaneous_window_days:
            day = on.isoformat()
            points = await self.client.fetch_instantaneous(site_number, day, day)
            flows = valid_flows(points)
            if not flows:
                logger.info(f"No instantaneous data for site {site_number} on {day}")
                return FlowValue(flow_cfs=None)
            return FlowValue(flow_cfs=sum(flows) / len(flows))

        points = await self.client.fetch_daily_mean(site_number, on)
        flows = valid_flows(points)
        if not flows:
            logger.info(f"No daily mean for site {site_number} on {on.isoformat()}")
            return FlowValue(flow_cfs=None)
        return FlowValue(flow_cfs=flows[0])

    async def resolve_flow_or_simulate(self, site_number: str, on: date) -> FlowValue:
        """Like `resolve_flow`, but substitutes a simulated value when USGS is unreachable."""
        try:
            return await self.resolve_flow(site_number, on)
        except UpstreamUnavailable as e:
            logger.info(f"Using simulated flow for site {site_number} on {on}: {e}")
            return FlowValue(flow_cfs=simulate_flow(site_number, on, self.rng), simulated=True)

    async def resolve_hourly_series(self, site_number: str, on: date) -> HourlySeries:
        """
        Hourly discharge for a gauge and date, always 24 readings.

        Within the instantaneous retention window readings are bucketed by
        hour. Older dates only have a daily mean, which is repeated across
        all 24 hours. If USGS cannot be reached, a flat simulated series is
        returned with ``simulated=True``.
        """
        try:
            if self.days_ago(on) <= self.hourly_window_days:
                day = on.isoformat()
                points = await self.client.fetch_instantaneous(
                    site_number, f"{day}T00:00", f"{day}T23:59"
                )
                return HourlySeries(readings=bucket_hourly(points), source="instantaneous")

            points = await self.client.fetch_daily_mean(site_number, on)
            flows = valid_flows(points)
            if not flows:
                return HourlySeries(readings=empty_series(), source="daily_mean")
            return HourlySeries(readings=flat_series(flows[0]), source="daily_mean")
        except UpstreamUnavailable as e:
            logger.info(f"Using simulated hourly series for site {site_number} on {on}: {e}")
            readings = [
                FlowReading(time=r["time"], flow=r["flow"])
                for r in simulate_hourly_series(site_number, on, self.rng)
            ]
            return HourlySeries(readings=readings, simulated=True, source="simulated")
