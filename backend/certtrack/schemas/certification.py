from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, Field, HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from certtrack.models import Certification
from certtrack.schemas.auth import CamelModel
from certtrack.services.status_classifier import (
    ExpirationStatus,
    classify_days,
    days_until_expiration,
    status_label,
)

_http_url = TypeAdapter(HttpUrl)


def _check_certificate_url(value: Optional[str]) -> Optional[str]:
    """Empty is allowed; anything else must be an http(s) URL"""
    if value is None or not value.strip():
        return value
    try:
        _http_url.validate_python(value.strip())
    except PydanticValidationError:
        raise ValueError("must be a valid http or https URL")
    return value.strip()


CertificateUrl = Annotated[Optional[str], AfterValidator(_check_certificate_url)]


class CertificationCreate(CamelModel):
    # Omitted on the user route; the caller's own id is used
    user_id: Optional[str] = None
    name: str = Field(..., max_length=255)
    issuing_organization: str = Field(..., max_length=255)
    issue_date: date
    expiration_date: date
    credential_id: Optional[str] = ""
    certificate_url: CertificateUrl = ""
    notes: Optional[str] = ""


class CertificationUpdate(CamelModel):
    """Partial update; only fields present in the request body are applied"""
    user_id: Optional[str] = None
    name: Optional[str] = Field(None, max_length=255)
    issuing_organization: Optional[str] = Field(None, max_length=255)
    issue_date: Optional[date] = None
    expiration_date: Optional[date] = None
    credential_id: Optional[str] = None
    certificate_url: CertificateUrl = None
    notes: Optional[str] = None


class CertificationResponse(CamelModel):
    id: str
    user_id: str
    name: str
    issuing_organization: str
    issue_date: date
    expiration_date: date
    credential_id: str = ""
    certificate_url: str = ""
    notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Derived from expiration_date and the request's reference date
    status: ExpirationStatus
    days_until_expiration: int
    status_label: str

    @classmethod
    def from_certification(cls, certification: Certification, today: date) -> "CertificationResponse":
        days = days_until_expiration(certification.expiration_date, today)
        return cls(
            id=certification.id,
            user_id=certification.user_id,
            name=certification.name,
            issuing_organization=certification.issuing_organization,
            issue_date=certification.issue_date,
            expiration_date=certification.expiration_date,
            credential_id=certification.credential_id or "",
            certificate_url=certification.certificate_url or "",
            notes=certification.notes or "",
            created_at=certification.created_at,
            updated_at=certification.updated_at,
            status=classify_days(days),
            days_until_expiration=days,
            status_label=status_label(days),
        )
