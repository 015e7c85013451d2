from datetime import date

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from certtrack.core.database import get_db
from certtrack.core.exceptions import AuthorizationError, InvalidTokenError
from certtrack.core.logging_config import set_user_id
from certtrack.core.security import decode_token
from certtrack.models import User, UserRole
from certtrack.services.status_classifier import reference_today
from certtrack.services.user_repository import UserRepository

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Get current authenticated user"""
    if credentials is None:
        raise InvalidTokenError("Not authenticated")

    payload = decode_token(credentials.credentials)

    if payload.get("type") != "access":
        raise InvalidTokenError("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenError("Invalid token payload")

    user = await UserRepository(db).find(user_id)
    if not user:
        raise InvalidTokenError("User not found")

    # Set user context for downstream logging
    set_user_id(str(user.id))
    return user


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """Get current admin user"""
    if current_user.role != UserRole.ADMIN:
        raise AuthorizationError("Admin access required")
    return current_user


def get_today() -> date:
    """Reference date shared by every classification in one request"""
    return reference_today()
