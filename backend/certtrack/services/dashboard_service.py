"""
Dashboard Service - role-scoped views over certifications and users

The ``build_*`` functions are pure: they take already-loaded records and a
single reference date. :class:`DashboardService` loads the records for a
caller (all of them for admins, the caller's own for users) and hands them
to the builders.
"""

import math
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Sequence, Union

from sqlalchemy.ext.asyncio import AsyncSession

from certtrack.core.logging_config import logger
from certtrack.models import Certification, User
from certtrack.schemas.certification import CertificationResponse
from certtrack.schemas.dashboard import (
    AdminDashboard,
    CertificationStats,
    ExpiringBoard,
    ExpiringCounts,
    ExpiringItem,
    RenewalBoard,
    RenewalItem,
    UserDashboard,
    UserSummary,
)
from certtrack.services.certification_filters import (
    ExpiringWindow,
    in_expiring_window,
    matches_user_search,
    regular_users,
    sort_by_expiration,
    sort_most_recent,
)
from certtrack.services.certification_repository import CertificationRepository
from certtrack.services.status_classifier import (
    ExpirationStatus,
    classify_days,
    days_until_expiration,
    detailed_status_label,
    is_expiring,
    renewal_progress,
)
from certtrack.services.user_repository import UserRepository

ADMIN_CRITICAL_LIMIT = 5
RECENT_LIMIT = 3
UPCOMING_LIMIT = 3
USER_SUMMARY_LIMIT = 6
TOP_CERTIFICATIONS_PER_USER = 2


def _days(certification: Certification, today: date) -> int:
    return days_until_expiration(certification.expiration_date, today)


def _responses(certifications: Sequence[Certification], today: date) -> List[CertificationResponse]:
    return [CertificationResponse.from_certification(cert, today) for cert in certifications]


def build_stats(certifications: Sequence[Certification], today: date) -> CertificationStats:
    """Counts of total, active (>90d), expiring soon (0-90d) and expired."""
    stats = CertificationStats(total=len(certifications))
    for cert in certifications:
        days = _days(cert, today)
        if days < 0:
            stats.expired += 1
        elif is_expiring(days):
            stats.expiring_soon += 1
        else:
            stats.active += 1
    return stats


def compliance_rate(stats: CertificationStats) -> int:
    """Share of certifications not yet expired, as a whole percentage"""
    if not stats.total:
        return 0
    # Half rounds up
    return int(math.floor((stats.active + stats.expiring_soon) / stats.total * 100 + 0.5))


def summarize_user(user: User, certifications: Sequence[Certification], today: date) -> UserSummary:
    summary = UserSummary(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        email=user.email,
        total=len(certifications),
    )
    for cert in certifications:
        days = _days(cert, today)
        if days < 0:
            summary.expired += 1
        elif is_expiring(days):
            summary.expiring += 1
        else:
            summary.active += 1
    summary.top_certifications = [
        cert.name for cert in sort_by_expiration(certifications)[:TOP_CERTIFICATIONS_PER_USER]
    ]
    return summary


def _group_by_owner(certifications: Sequence[Certification]) -> Dict[str, List[Certification]]:
    grouped: Dict[str, List[Certification]] = defaultdict(list)
    for cert in certifications:
        grouped[cert.user_id].append(cert)
    return grouped


def build_user_roster(
    users: Sequence[User],
    certifications: Sequence[Certification],
    today: date,
    search: Optional[str] = None,
) -> List[UserSummary]:
    """Role-user accounts matching ``search``, each with status counts."""
    by_owner = _group_by_owner(certifications)
    return [
        summarize_user(user, by_owner.get(user.id, []), today)
        for user in regular_users(users)
        if matches_user_search(user, search)
    ]


def build_admin_dashboard(
    users: Sequence[User],
    certifications: Sequence[Certification],
    today: date,
) -> AdminDashboard:
    critical = [
        cert for cert in sort_by_expiration(certifications)
        if classify_days(_days(cert, today)) == ExpirationStatus.CRITICAL
    ]
    return AdminDashboard(
        stats=build_stats(certifications, today),
        user_count=len(regular_users(users)),
        critical_certifications=_responses(critical[:ADMIN_CRITICAL_LIMIT], today),
        recent_certifications=_responses(sort_most_recent(certifications)[:RECENT_LIMIT], today),
        user_summaries=build_user_roster(users, certifications, today)[:USER_SUMMARY_LIMIT],
    )


def build_user_dashboard(certifications: Sequence[Certification], today: date) -> UserDashboard:
    stats = build_stats(certifications, today)
    upcoming = [cert for cert in sort_by_expiration(certifications) if is_expiring(_days(cert, today))]
    return UserDashboard(
        stats=stats,
        compliance_rate=compliance_rate(stats),
        upcoming_renewals=_responses(upcoming[:UPCOMING_LIMIT], today),
        recent_certifications=_responses(sort_most_recent(certifications)[:RECENT_LIMIT], today),
    )


def build_renewal_board(certifications: Sequence[Certification], today: date) -> RenewalBoard:
    """Certifications needing attention, grouped by urgency bucket."""
    groups: Dict[ExpirationStatus, List[RenewalItem]] = {
        ExpirationStatus.EXPIRED: [],
        ExpirationStatus.CRITICAL: [],
        ExpirationStatus.WARNING: [],
        ExpirationStatus.SOON: [],
    }
    for cert in sort_by_expiration(certifications):
        base = CertificationResponse.from_certification(cert, today)
        if base.status not in groups:
            continue
        groups[base.status].append(RenewalItem(
            **base.model_dump(),
            renewal_progress=renewal_progress(cert.issue_date, cert.expiration_date, today),
        ))

    return RenewalBoard(
        expired=groups[ExpirationStatus.EXPIRED],
        critical=groups[ExpirationStatus.CRITICAL],
        warning=groups[ExpirationStatus.WARNING],
        soon=groups[ExpirationStatus.SOON],
        total_needing_attention=sum(len(items) for items in groups.values()),
    )


def build_expiring_board(
    users: Sequence[User],
    certifications: Sequence[Certification],
    today: date,
    window: Union[ExpiringWindow, str] = ExpiringWindow.ALL,
) -> ExpiringBoard:
    """Admin view of certifications inside ``window``, annotated with owner details.

    The counts do not depend on the window: within30/60/90 are the
    critical/warning/soon buckets, so they never overlap.
    """
    window = ExpiringWindow(window)
    owners = {user.id: user for user in users}

    counts = ExpiringCounts()
    for cert in certifications:
        status = classify_days(_days(cert, today))
        if status == ExpirationStatus.CRITICAL:
            counts.within30 += 1
        elif status == ExpirationStatus.WARNING:
            counts.within60 += 1
        elif status == ExpirationStatus.SOON:
            counts.within90 += 1
        elif status == ExpirationStatus.EXPIRED:
            counts.expired += 1

    items = []
    for cert in sort_by_expiration(certifications):
        days = _days(cert, today)
        if not in_expiring_window(days, window):
            continue
        owner = owners.get(cert.user_id)
        items.append(ExpiringItem(
            **CertificationResponse.from_certification(cert, today).model_dump(),
            owner_name=owner.full_name if owner else "Unknown",
            owner_email=owner.email if owner else "",
            detailed_label=detailed_status_label(days),
        ))

    return ExpiringBoard(window=window.value, counts=counts, certifications=items)


class DashboardService:
    """Loads the caller's records and assembles the dashboard views"""

    def __init__(self, db: AsyncSession):
        self.certifications = CertificationRepository(db)
        self.users = UserRepository(db)

    async def admin_dashboard(self, today: date) -> AdminDashboard:
        users = await self.users.list_users()
        certifications = await self.certifications.list()
        logger.debug(f"Admin dashboard over {len(certifications)} certifications")
        return build_admin_dashboard(users, certifications, today)

    async def user_dashboard(self, user: User, today: date) -> UserDashboard:
        return build_user_dashboard(await self.certifications.list_by_user(user.id), today)

    async def renewal_board(self, user: User, today: date) -> RenewalBoard:
        return build_renewal_board(await self.certifications.list_by_user(user.id), today)

    async def expiring_board(self, today: date, window: Union[ExpiringWindow, str]) -> ExpiringBoard:
        users = await self.users.list_users()
        certifications = await self.certifications.list()
        return build_expiring_board(users, certifications, today, window)

    async def user_roster(self, today: date, search: Optional[str] = None) -> List[UserSummary]:
        users = await self.users.list_users()
        certifications = await self.certifications.list()
        return build_user_roster(users, certifications, today, search)
