"""
Expiration status classification.

Every view that buckets certifications by urgency goes through this module, so
the cut points below are the only ones in the code base:

    days <  0        -> expired
    0  <= days <= 30 -> critical
    31 <= days <= 60 -> warning
    61 <= days <= 90 -> soon
    days >  90       -> active

``days`` is the whole number of calendar days from ``today`` to the expiration
date. Callers resolve ``today`` once (see :func:`reference_today`) and pass the
same value for a whole batch.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional, Union
from zoneinfo import ZoneInfo

from certtrack.core.config import settings

CRITICAL_DAYS = 30
WARNING_DAYS = 60
SOON_DAYS = 90

DateLike = Union[date, str]


class ExpirationStatus(str, Enum):
    """Five-way urgency bucket"""
    EXPIRED = "expired"
    CRITICAL = "critical"
    WARNING = "warning"
    SOON = "soon"
    ACTIVE = "active"


class StatusFilter(str, Enum):
    """Coarse filter used by list views; the three near-expiry buckets collapse into one"""
    ALL = "all"
    ACTIVE = "active"
    EXPIRING = "expiring"
    EXPIRED = "expired"


def reference_today(tz_name: Optional[str] = None) -> date:
    """Today's calendar date in the configured reference timezone."""
    return datetime.now(ZoneInfo(tz_name or settings.REFERENCE_TIMEZONE)).date()


def parse_date(value: DateLike) -> date:
    """Accept a date or a YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def days_until_expiration(expiration_date: DateLike, today: date) -> int:
    """Whole days from today until expiration; negative once expired."""
    return (parse_date(expiration_date) - today).days


def classify_days(days: int) -> ExpirationStatus:
    if days < 0:
        return ExpirationStatus.EXPIRED
    if days <= CRITICAL_DAYS:
        return ExpirationStatus.CRITICAL
    if days <= WARNING_DAYS:
        return ExpirationStatus.WARNING
    if days <= SOON_DAYS:
        return ExpirationStatus.SOON
    return ExpirationStatus.ACTIVE


def classify(expiration_date: DateLike, today: date) -> ExpirationStatus:
    """Urgency bucket for a certification expiring on ``expiration_date``."""
    return classify_days(days_until_expiration(expiration_date, today))


def status_label(days: int) -> str:
    """Short badge text: "Expired", "Active" or "N days left"."""
    status = classify_days(days)
    if status == ExpirationStatus.EXPIRED:
        return "Expired"
    if status == ExpirationStatus.ACTIVE:
        return "Active"
    return f"{days} days left"


def detailed_status_label(days: int) -> str:
    """Longer text used on the expiring board."""
    if days < 0:
        return f"Expired {abs(days)} days ago"
    return f"{days} days remaining"


def matches_status_filter(days: int, status_filter: StatusFilter) -> bool:
    status = classify_days(days)
    if status_filter == StatusFilter.ALL:
        return True
    if status_filter == StatusFilter.ACTIVE:
        return status == ExpirationStatus.ACTIVE
    if status_filter == StatusFilter.EXPIRED:
        return status == ExpirationStatus.EXPIRED
    return status in (ExpirationStatus.CRITICAL, ExpirationStatus.WARNING, ExpirationStatus.SOON)


def is_expiring(days: int) -> bool:
    """True for the 0-90 day range (critical, warning or soon)."""
    return matches_status_filter(days, StatusFilter.EXPIRING)


def renewal_progress(issue_date: DateLike, expiration_date: DateLike, today: date) -> float:
    """Percentage of the validity period already elapsed, clamped to [0, 100]."""
    issued = parse_date(issue_date)
    total_days = (parse_date(expiration_date) - issued).days
    elapsed_days = (today - issued).days
    if total_days <= 0:
        return 100.0 if elapsed_days >= total_days else 0.0
    return min(100.0, max(0.0, elapsed_days / total_days * 100))
