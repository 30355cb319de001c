"""
Flow alert evaluation.

Each saved gauge can carry up to three alert rules (high, low, flood), each
with a CFS threshold. A rule fires when the current flow crosses its
threshold, at most once per cooldown window (one hour by default).
"""

import enum
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Protocol

from fishlog.config import settings
from fishlog.utils.logging_config import get_logger

logger = get_logger(__name__)


class AlertKind(str, enum.Enum):
    HIGH = "high"
    LOW = "low"
    FLOOD = "flood"


SEVERITY = {
    AlertKind.HIGH: "warning",
    AlertKind.LOW: "info",
    AlertKind.FLOOD: "critical",
}

MESSAGES = {
    AlertKind.HIGH: "High water alert",
    AlertKind.LOW: "Low water alert",
    AlertKind.FLOOD: "Flood warning",
}

DEFAULT_COOLDOWN = timedelta(minutes=settings.ALERT_COOLDOWN_MINUTES)


class AlertRuleLike(Protocol):
    threshold_cfs: float
    enabled: bool
    last_triggered_at: Optional[datetime]


@dataclass
class AlertRule:
    """In-memory alert rule; ORM rows with the same attributes work too."""

    threshold_cfs: float
    enabled: bool = True
    last_triggered_at: Optional[datetime] = None


@dataclass(frozen=True)
class TriggeredAlert:
    site_number: str
    kind: AlertKind
    severity: str
    message: str
    flow_cfs: float
    threshold_cfs: float
    triggered_at: datetime

    def to_dict(self) -> dict:
        return {
            "site_number": self.site_number,
            "kind": self.kind.value,
            "severity": self.severity,
            "message": self.message,
            "flow_cfs": self.flow_cfs,
            "threshold_cfs": self.threshold_cfs,
            "triggered_at": self.triggered_at,
        }


def parse_flow_value(value: Any) -> Optional[float]:
    """
    Numeric flow from a float or a display string such as ``"1400 CFS"``.

    Sentinels (``"No Data"``, ``"Error"``), infinities, NaN and anything
    else non-numeric give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        flow = float(value)
    else:
        text = str(value).strip()
        if text.upper().endswith("CFS"):
            text = text[:-3].strip()
        try:
            flow = float(text.replace(",", ""))
        except ValueError:
            return None
    return flow if math.isfinite(flow) else None


def as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _crossed(kind: AlertKind, flow: float, threshold: float) -> bool:
    if kind is AlertKind.LOW:
        return flow <= threshold
    return flow >= threshold


def evaluate(
    site_number: str,
    current_flow: Any,
    configs: Mapping[Any, AlertRuleLike],
    now: Optional[datetime] = None,
    cooldown: timedelta = DEFAULT_COOLDOWN,
) -> list[TriggeredAlert]:
    """
    Evaluate a gauge's alert rules against its current flow.

    Rules that fire get ``last_triggered_at`` set to ``now``. A rule that fired
    within ``cooldown`` is suppressed. Non-numeric flows fire nothing and
    mutate nothing.

    Args:
        site_number: Gauge the flow belongs to
        current_flow: Float or display string
        configs: Rules keyed by AlertKind or its string value
        now: Evaluation time (defaults to current UTC time)
        cooldown: Minimum spacing between two firings of one rule

    Returns:
        Alerts that fired, in high/low/flood order
    """
    flow = parse_flow_value(current_flow)
    if flow is None or not configs:
        return []

    now = as_utc(now or datetime.now(timezone.utc))
    window_start = now - cooldown

    triggered = []
    for kind in AlertKind:
        rule = configs.get(kind, configs.get(kind.value))
        if rule is None or not rule.enabled:
            continue
        threshold = float(rule.threshold_cfs)
        if not _crossed(kind, flow, threshold):
            continue

        last = rule.last_triggered_at
        if last is not None and as_utc(last) >= window_start:
            logger.debug(f"{kind.value} alert for site {site_number} suppressed (cooldown)")
            continue

        rule.last_triggered_at = now
        logger.info(f"{MESSAGES[kind]} for site {site_number}: {flow} CFS (threshold {threshold})")
        triggered.append(TriggeredAlert(
            site_number=site_number,
            kind=kind,
            severity=SEVERITY[kind],
            message=f"{MESSAGES[kind]}: flow is {round(flow)} CFS (threshold {round(threshold)} CFS)",
            flow_cfs=flow,
            threshold_cfs=threshold,
            triggered_at=now,
        ))
    return triggered
