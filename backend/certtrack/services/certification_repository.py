"""
Certification Repository - canonical store for certification records

Every read and write that can be scoped to one owner takes an optional
``owner_id``. Admin routes pass ``None``; user routes pass the caller's id, so
both roles go through the same queries and a user can never see or touch
another user's records.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic.alias_generators import to_camel
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from certtrack.core.exceptions import (
    CertificationNotFoundError,
    InvalidDateRangeError,
    MissingFieldError,
    ValidationError,
)
from certtrack.core.locks import StoreLock
from certtrack.core.logging_config import logger
from certtrack.models import Certification, User
from certtrack.services.status_classifier import parse_date


REQUIRED_FIELDS = ("user_id", "name", "issuing_organization", "issue_date", "expiration_date")
OPTIONAL_FIELDS = ("credential_id", "certificate_url", "notes")
DATE_FIELDS = ("issue_date", "expiration_date")
UPDATABLE_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _coerce_date(field: str, value: Any) -> date:
    try:
        return parse_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date for {to_camel(field)}: {value!r}", field=to_camel(field))


def check_date_range(issue_date: date, expiration_date: date) -> None:
    """Reject certifications that expire before they were issued"""
    if expiration_date < issue_date:
        raise InvalidDateRangeError(issue_date, expiration_date)


class CertificationRepository:
    """CRUD and owner-filtered reads over the certifications table"""

    _lock = StoreLock("certifications")

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========== Reads ==========

    async def list(self) -> List[Certification]:
        """All certifications in insertion order"""
        result = await self.db.execute(
            select(Certification).order_by(Certification.position)
        )
        return list(result.scalars().all())

    async def list_by_user(self, user_id: Optional[str]) -> List[Certification]:
        """Certifications owned by ``user_id``; empty when no user is given"""
        if not user_id:
            return []
        result = await self.db.execute(
            select(Certification)
            .where(Certification.user_id == user_id)
            .order_by(Certification.position)
        )
        return list(result.scalars().all())

    async def find(self, certification_id: str, owner_id: Optional[str] = None) -> Optional[Certification]:
        query = select(Certification).where(Certification.id == certification_id)
        if owner_id is not None:
            query = query.where(Certification.user_id == owner_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get(self, certification_id: str, owner_id: Optional[str] = None) -> Certification:
        certification = await self.find(certification_id, owner_id)
        if certification is None:
            raise CertificationNotFoundError(certification_id)
        return certification

    # ========== Writes ==========

    async def create(self, data: Dict[str, Any]) -> Certification:
        """Create a certification with a server-assigned id.

        Required: user_id, name, issuing_organization, issue_date,
        expiration_date. Missing optional text fields default to "".
        """
        async with self._lock:
            fields: Dict[str, Any] = {}
            for field in REQUIRED_FIELDS:
                value = data.get(field)
                if _is_blank(value):
                    raise MissingFieldError(to_camel(field))
                fields[field] = value.strip() if isinstance(value, str) else value
            for field in OPTIONAL_FIELDS:
                value = data.get(field)
                fields[field] = (value or "").strip()
            for field in DATE_FIELDS:
                fields[field] = _coerce_date(field, fields[field])

            check_date_range(fields["issue_date"], fields["expiration_date"])
            await self._ensure_user_exists(fields["user_id"])

            certification = Certification(position=await self._next_position(), **fields)
            self.db.add(certification)
            await self.db.commit()
            await self.db.refresh(certification)

        logger.log_certification_event("created", certification.id, certification.user_id)
        return certification

    async def update(
        self,
        certification_id: str,
        changes: Dict[str, Any],
        owner_id: Optional[str] = None,
    ) -> Certification:
        """Shallow-merge ``changes`` onto an existing certification.

        Fields absent from ``changes`` are left untouched. A renewal is an
        update of issue_date/expiration_date; prior values are not kept.
        """
        async with self._lock:
            certification = await self.get(certification_id, owner_id)

            merged: Dict[str, Any] = {}
            for field, value in changes.items():
                if field not in UPDATABLE_FIELDS:
                    continue
                if field in REQUIRED_FIELDS:
                    if _is_blank(value):
                        raise MissingFieldError(to_camel(field))
                    if isinstance(value, str):
                        value = value.strip()
                else:
                    value = (value or "").strip()
                if field in DATE_FIELDS:
                    value = _coerce_date(field, value)
                merged[field] = value

            check_date_range(
                merged.get("issue_date", certification.issue_date),
                merged.get("expiration_date", certification.expiration_date),
            )
            if "user_id" in merged and merged["user_id"] != certification.user_id:
                await self._ensure_user_exists(merged["user_id"])

            for field, value in merged.items():
                setattr(certification, field, value)

            await self.db.commit()
            await self.db.refresh(certification)

        logger.log_certification_event(
            "updated", certification.id, certification.user_id, fields=sorted(merged)
        )
        return certification

    async def delete(self, certification_id: str, owner_id: Optional[str] = None) -> bool:
        """Permanently remove a certification.

        Deleting an id that does not exist (or is outside ``owner_id``'s
        records) is a no-op. Returns whether a record was removed.
        """
        async with self._lock:
            certification = await self.find(certification_id, owner_id)
            if certification is None:
                logger.debug(f"Delete of unknown certification {certification_id} ignored")
                return False
            await self.db.delete(certification)
            await self.db.commit()

        logger.log_certification_event("deleted", certification_id, owner_id)
        return True

    # ========== Helpers ==========

    async def _next_position(self) -> int:
        current = await self.db.scalar(select(func.max(Certification.position)))
        return (current or 0) + 1

    async def _ensure_user_exists(self, user_id: str) -> None:
        exists = await self.db.scalar(select(User.id).where(User.id == user_id))
        if exists is None:
            raise ValidationError(f"Unknown user '{user_id}'", field="userId")
