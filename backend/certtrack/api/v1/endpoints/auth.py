from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from certtrack.core.database import get_db
from certtrack.core.logging_config import logger, set_user_id
from certtrack.core.security import create_access_token
from certtrack.models import User
from certtrack.modules.auth.dependencies import get_current_user
from certtrack.schemas.auth import LoginResponse, UserLogin, UserRegister, UserResponse
from certtrack.services.user_repository import UserRepository

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """Register a new account with the user role"""
    user = await UserRepository(db).register(
        username=user_data.username,
        password=user_data.password,
        full_name=user_data.full_name,
        email=user_data.email,
    )
    logger.info(
        f"[Auth] Registered {user.username}",
        extra={"client_ip": request.client.host if request.client else "unknown"}
    )
    return user


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Exchange username/password for a bearer token"""
    user = await UserRepository(db).login(credentials.username, credentials.password)

    set_user_id(str(user.id))

    access_token = create_access_token({
        "sub": str(user.id),
        "username": user.username,
        "role": user.role.value,
    })

    return LoginResponse(
        user=UserResponse.model_validate(user),
        access_token=access_token,
        token_type="bearer",
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """Get current user info"""
    return current_user
