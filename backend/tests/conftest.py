"""
CertTrack - Test Configuration and Fixtures
"""
import os
from datetime import date, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['SEED_DEMO_USERS'] = 'false'
os.environ['REFERENCE_TIMEZONE'] = 'UTC'

from certtrack.main import app
from certtrack.core.database import Base, get_db
from certtrack.core.security import get_password_hash, create_access_token
from certtrack.models import Certification, User, UserRole
from certtrack.services.status_classifier import reference_today

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest_asyncio.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db: AsyncSession, password: str, role: UserRole) -> User:
    user = User(
        username=fake.unique.user_name(),
        full_name=fake.name(),
        email=fake.email(),
        hashed_password=get_password_hash(password),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user"""
    return await _create_user(db_session, 'testpassword123', UserRole.USER)


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second regular user, for ownership checks"""
    return await _create_user(db_session, 'otherpassword123', UserRole.USER)


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user"""
    return await _create_user(db_session, 'adminpassword123', UserRole.ADMIN)


def _token_headers(user: User) -> dict:
    token = create_access_token({
        'sub': str(user.id),
        'username': user.username,
        'role': user.role.value
    })
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return _token_headers(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return _token_headers(other_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return _token_headers(admin_user)


@pytest.fixture
def today() -> date:
    return date(2025, 6, 1)


@pytest.fixture
def make_certification(db_session: AsyncSession):
    """Factory inserting a certification that expires ``expires_in`` days from ``base``"""
    position = {'next': 1}

    async def _make(
        owner: User,
        expires_in: int,
        base: date = None,
        name: str = None,
        issued_ago: int = 365,
        **overrides,
    ) -> Certification:
        base = base or reference_today()
        certification = Certification(
            user_id=owner.id,
            position=position['next'],
            name=name or f"Certification {position['next']}",
            issuing_organization=overrides.pop('issuing_organization', 'Acme Certification Board'),
            issue_date=base - timedelta(days=issued_ago),
            expiration_date=base + timedelta(days=expires_in),
            credential_id=overrides.pop('credential_id', ''),
            certificate_url=overrides.pop('certificate_url', ''),
            notes=overrides.pop('notes', ''),
        )
        position['next'] += 1
        db_session.add(certification)
        await db_session.commit()
        await db_session.refresh(certification)
        return certification

    return _make
