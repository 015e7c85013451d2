"""
Search, status filtering and ordering for certification lists.

All functions are pure and operate on already-loaded records; role scoping
happens before these are applied (see certification_repository).
"""

from datetime import date
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from certtrack.models import Certification, User, UserRole
from certtrack.services.status_classifier import (
    StatusFilter,
    days_until_expiration,
    matches_status_filter,
    parse_date,
)


class ExpiringWindow(str, Enum):
    """Time window on the admin expiring board"""
    WITHIN_30 = "30"
    WITHIN_60 = "60"
    WITHIN_90 = "90"
    EXPIRED = "expired"
    ALL = "all"


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()


def matches_search(certification: Certification, search: Optional[str]) -> bool:
    """Case-insensitive substring match on name, organization or credential ID."""
    needle = (search or "").strip().lower()
    if not needle:
        return True
    return (
        _contains(certification.name, needle)
        or _contains(certification.issuing_organization, needle)
        or _contains(certification.credential_id, needle)
    )


def filter_certifications(
    certifications: Iterable[Certification],
    today: date,
    search: Optional[str] = None,
    status_filter: Union[StatusFilter, str] = StatusFilter.ALL,
) -> List[Certification]:
    """Keep certifications that pass both the text match and the status filter."""
    status_filter = StatusFilter(status_filter)
    return [
        cert for cert in certifications
        if matches_search(cert, search)
        and matches_status_filter(days_until_expiration(cert.expiration_date, today), status_filter)
    ]


def in_expiring_window(days: int, window: Union[ExpiringWindow, str]) -> bool:
    window = ExpiringWindow(window)
    if window == ExpiringWindow.EXPIRED:
        return days < 0
    if window == ExpiringWindow.ALL:
        return days <= 90
    return 0 <= days <= int(window.value)


def _insertion_key(certification: Certification) -> int:
    return certification.position if certification.position is not None else 0


def sort_by_expiration(certifications: Iterable[Certification]) -> List[Certification]:
    """Soonest expiration first; ties keep insertion order."""
    ordered = sorted(certifications, key=_insertion_key)
    return sorted(ordered, key=lambda cert: parse_date(cert.expiration_date))


def sort_most_recent(certifications: Iterable[Certification]) -> List[Certification]:
    """Latest issue date first; ties keep insertion order."""
    ordered = sorted(certifications, key=_insertion_key)
    return sorted(ordered, key=lambda cert: parse_date(cert.issue_date), reverse=True)


def matches_user_search(user: User, search: Optional[str]) -> bool:
    """Case-insensitive substring match on full name, username or email."""
    needle = (search or "").strip().lower()
    if not needle:
        return True
    return (
        _contains(user.full_name, needle)
        or _contains(user.username, needle)
        or _contains(user.email, needle)
    )


def regular_users(users: Sequence[User]) -> List[User]:
    return [user for user in users if user.role == UserRole.USER]
