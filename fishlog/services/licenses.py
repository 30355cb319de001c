"""
Fishing license expiration tracking.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

CRITICAL_DAYS = 7
WARNING_DAYS = 30


@dataclass(frozen=True)
class LicenseStatus:
    status: str  # expired, critical, warning, valid
    days_until_expiration: int


def days_until_expiration(end_date: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    return (end_date - today).days


def expiration_status(end_date: date, today: Optional[date] = None) -> LicenseStatus:
    """
    Classify a license by how soon it expires.

    Expired once the end date has passed; critical within a week; warning
    within 30 days; otherwise valid.
    """
    days = days_until_expiration(end_date, today)
    if days < 0:
        status = "expired"
    elif days <= CRITICAL_DAYS:
        status = "critical"
    elif days <= WARNING_DAYS:
        status = "warning"
    else:
        status = "valid"
    return LicenseStatus(status=status, days_until_expiration=days)


def summarize(end_dates: Iterable[date], today: Optional[date] = None) -> dict:
    """Counts of valid, expiring (critical or warning) and expired licenses."""
    summary = {"total": 0, "valid": 0, "expiring": 0, "expired": 0}
    for end_date in end_dates:
        status = expiration_status(end_date, today).status
        summary["total"] += 1
        if status == "expired":
            summary["expired"] += 1
        elif status == "valid":
            summary["valid"] += 1
        else:
            summary["expiring"] += 1
    return summary
