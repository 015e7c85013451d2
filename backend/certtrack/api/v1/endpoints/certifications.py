"""
Certification CRUD endpoints.

Admins see and manage every certification; users only their own. Ownership
is enforced by passing ``owner_id`` down to the repository.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from certtrack.core.database import get_db
from certtrack.core.exceptions import AuthorizationError
from certtrack.models import User
from certtrack.modules.auth.dependencies import get_current_user, get_today
from certtrack.schemas.certification import (
    CertificationCreate,
    CertificationResponse,
    CertificationUpdate,
)
from certtrack.services.certification_filters import filter_certifications
from certtrack.services.certification_repository import CertificationRepository
from certtrack.services.status_classifier import StatusFilter

router = APIRouter()


def _owner_scope(user: User) -> Optional[str]:
    """None for admins (no restriction), otherwise the caller's id"""
    return None if user.is_admin else user.id


def _check_target_owner(user: User, target_user_id: Optional[str]) -> None:
    if target_user_id and not user.is_admin and target_user_id != user.id:
        raise AuthorizationError("Cannot access another user's certifications")


@router.get("", response_model=List[CertificationResponse])
async def list_certifications(
    search: Optional[str] = Query(None, description="Match on name, organization or credential ID"),
    status_filter: StatusFilter = Query(StatusFilter.ALL, alias="status"),
    user_id: Optional[str] = Query(None, alias="userId"),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List certifications visible to the caller, filtered by text and status"""
    _check_target_owner(current_user, user_id)
    repo = CertificationRepository(db)

    if current_user.is_admin:
        certifications = await repo.list_by_user(user_id) if user_id else await repo.list()
    else:
        certifications = await repo.list_by_user(current_user.id)

    return [
        CertificationResponse.from_certification(cert, today)
        for cert in filter_certifications(certifications, today, search, status_filter)
    ]


@router.get("/{certification_id}", response_model=CertificationResponse)
async def get_certification(
    certification_id: str,
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    certification = await CertificationRepository(db).get(
        certification_id, owner_id=_owner_scope(current_user)
    )
    return CertificationResponse.from_certification(certification, today)


@router.post("", response_model=CertificationResponse, status_code=status.HTTP_201_CREATED)
async def create_certification(
    data: CertificationCreate,
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a certification. Users create for themselves; admins for any user."""
    _check_target_owner(current_user, data.user_id)

    fields = data.model_dump()
    if not fields.get("user_id"):
        fields["user_id"] = current_user.id

    certification = await CertificationRepository(db).create(fields)
    return CertificationResponse.from_certification(certification, today)


@router.patch("/{certification_id}", response_model=CertificationResponse)
async def update_certification(
    certification_id: str,
    data: CertificationUpdate,
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Apply the supplied fields; renewing is an update of the two dates"""
    changes = data.model_dump(exclude_unset=True)
    _check_target_owner(current_user, changes.get("user_id"))

    certification = await CertificationRepository(db).update(
        certification_id, changes, owner_id=_owner_scope(current_user)
    )
    return CertificationResponse.from_certification(certification, today)


@router.delete("/{certification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_certification(
    certification_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete permanently. Unknown ids are ignored."""
    await CertificationRepository(db).delete(
        certification_id, owner_id=_owner_scope(current_user)
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
