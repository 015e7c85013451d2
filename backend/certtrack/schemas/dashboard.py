from typing import List

from certtrack.schemas.auth import CamelModel
from certtrack.schemas.certification import CertificationResponse


class CertificationStats(CamelModel):
    total: int = 0
    active: int = 0
    expiring_soon: int = 0
    expired: int = 0


class UserSummary(CamelModel):
    """A role-user account with counts over its certifications"""
    id: str
    username: str
    full_name: str
    email: str
    total: int = 0
    active: int = 0
    expiring: int = 0
    expired: int = 0
    # Up to two certification names, soonest expiration first
    top_certifications: List[str] = []


class AdminDashboard(CamelModel):
    stats: CertificationStats
    user_count: int
    critical_certifications: List[CertificationResponse]
    recent_certifications: List[CertificationResponse]
    user_summaries: List[UserSummary]


class UserDashboard(CamelModel):
    stats: CertificationStats
    compliance_rate: int
    upcoming_renewals: List[CertificationResponse]
    recent_certifications: List[CertificationResponse]


class RenewalItem(CertificationResponse):
    renewal_progress: float


class RenewalBoard(CamelModel):
    expired: List[RenewalItem]
    critical: List[RenewalItem]
    warning: List[RenewalItem]
    soon: List[RenewalItem]
    total_needing_attention: int


class ExpiringItem(CertificationResponse):
    owner_name: str = "Unknown"
    owner_email: str = ""
    detailed_label: str


class ExpiringCounts(CamelModel):
    within30: int = 0
    within60: int = 0
    within90: int = 0
    expired: int = 0


class ExpiringBoard(CamelModel):
    window: str
    counts: ExpiringCounts
    certifications: List[ExpiringItem]
