from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from certtrack.core.database import get_db
from certtrack.models import User
from certtrack.modules.auth.dependencies import get_current_admin, get_current_user, get_today
from certtrack.schemas.dashboard import AdminDashboard, ExpiringBoard, RenewalBoard, UserDashboard
from certtrack.services.certification_filters import ExpiringWindow
from certtrack.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/admin", response_model=AdminDashboard)
async def admin_dashboard(
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Organization-wide stats, critical renewals and per-user summaries"""
    return await DashboardService(db).admin_dashboard(today)


@router.get("/user", response_model=UserDashboard)
async def user_dashboard(
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await DashboardService(db).user_dashboard(current_user, today)


@router.get("/renewals", response_model=RenewalBoard)
async def renewal_board(
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """The caller's certifications that expire within 90 days or already have"""
    return await DashboardService(db).renewal_board(current_user, today)


@router.get("/expiring", response_model=ExpiringBoard)
async def expiring_board(
    window: ExpiringWindow = Query(ExpiringWindow.ALL),
    today: date = Depends(get_today),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    return await DashboardService(db).expiring_board(today, window)
