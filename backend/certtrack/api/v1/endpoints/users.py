"""
Admin user listing endpoints.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from certtrack.core.database import get_db
from certtrack.models import User
from certtrack.modules.auth.dependencies import get_current_admin, get_today
from certtrack.schemas.auth import UserResponse
from certtrack.schemas.dashboard import UserSummary
from certtrack.services.dashboard_service import DashboardService
from certtrack.services.user_repository import UserRepository

router = APIRouter()


@router.get("", response_model=List[UserResponse])
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """All accounts, without password hashes"""
    return await UserRepository(db).list_users()


@router.get("/summary", response_model=List[UserSummary])
async def user_roster(
    search: Optional[str] = Query(None, description="Match on full name, username or email"),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Role-user accounts with active/expiring/expired certification counts"""
    return await DashboardService(db).user_roster(today, search)
