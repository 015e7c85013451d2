"""
User Repository - accounts, credential checks and demo bootstrap
"""

from typing import Iterable, List, Mapping, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from certtrack.core.exceptions import (
    InvalidCredentialsError,
    MissingFieldError,
    UserNotFoundError,
    UsernameTakenError,
)
from certtrack.core.locks import StoreLock
from certtrack.core.logging_config import logger
from certtrack.core.security import get_password_hash, verify_password
from certtrack.models import User, UserRole


class UserRepository:
    """Account store. Roles are assigned at creation and never change."""

    _lock = StoreLock("users")

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def find(self, user_id: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get(self, user_id: str) -> User:
        user = await self.find(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def list_users(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.created_at, User.username))
        return list(result.scalars().all())

    async def count(self) -> int:
        return await self.db.scalar(select(func.count()).select_from(User)) or 0

    async def register(
        self,
        username: str,
        password: str,
        full_name: str,
        email: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        """Create an account. Public registration always uses the user role."""
        for field, value in (
            ("username", username),
            ("password", password),
            ("fullName", full_name),
            ("email", email),
        ):
            if not value or not str(value).strip():
                raise MissingFieldError(field)
        username = username.strip()

        async with self._lock:
            if await self.find_by_username(username) is not None:
                logger.log_auth_event("register", False, username=username, reason="Username taken")
                raise UsernameTakenError(username)

            user = User(
                username=username,
                full_name=full_name.strip(),
                email=email.strip(),
                hashed_password=get_password_hash(password),
                role=role,
            )
            self.db.add(user)
            try:
                await self.db.commit()
            except IntegrityError:
                # unique index on username lost a race with another process
                await self.db.rollback()
                raise UsernameTakenError(username)
            await self.db.refresh(user)

        logger.log_auth_event("register", True, username=username, user_role=role.value)
        return user

    async def login(self, username: str, password: str) -> User:
        """Return the account for valid credentials, else InvalidCredentialsError."""
        user = await self.find_by_username((username or "").strip())
        if user is None or not verify_password(password or "", user.hashed_password):
            logger.log_auth_event("login", False, username=username, reason="Invalid credentials")
            raise InvalidCredentialsError()

        logger.log_auth_event("login", True, username=user.username, user_role=user.role.value)
        return user

    async def ensure_default_users(self, defaults: Iterable[Mapping]) -> List[User]:
        """Seed ``defaults`` when no account exists yet. Returns the created users."""
        if await self.count() > 0:
            return []

        created = []
        for entry in defaults:
            created.append(await self.register(
                entry["username"],
                entry["password"],
                entry["full_name"],
                entry["email"],
                role=entry.get("role", UserRole.USER),
            ))
        logger.info(f"Seeded {len(created)} demo accounts")
        return created
