"""
Pytest configuration and fixtures.

WHY: Fixtures provide reusable test setup/teardown logic, reducing
duplication and ensuring consistent test environments.
"""

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Callable
from unittest.mock import MagicMock
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from infraworks.main import app
from infraworks.models.base import Base
from infraworks.models.user import UserRole
from infraworks.db.session import get_db
from infraworks.core.access import Caller
from infraworks.core.auth import create_access_token
from infraworks.core.deps import get_storage
from infraworks.services.storage_service import StorageService

from tests.factories import TEST_MEDIA_BASE_URL, ProfileFactory


# Test database URL
# WHY: Using SQLite for tests eliminates external database dependencies
# and makes tests faster.
TEST_ASYNC_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """
    Create a test database engine.

    WHY: Function scope gives each test a fresh database. StaticPool keeps
    the single in-memory database alive across connections.
    """
    engine = create_async_engine(
        TEST_ASYNC_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a test database session.

    Yields:
        AsyncSession: Database session for the test
    """
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def s3_client() -> MagicMock:
    """Mock boto3 S3 client; put_object/delete_object succeed by default."""
    return MagicMock()


@pytest.fixture
def storage(s3_client: MagicMock) -> StorageService:
    """Blob store backed by the mock S3 client."""
    return StorageService(
        client=s3_client,
        bucket_name="test-bucket",
        public_base_url=TEST_MEDIA_BASE_URL,
    )


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, storage: StorageService
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test HTTP client.

    WHY: Requests share the test session, so data created through
    factories is visible to the API and vice versa.

    Yields:
        AsyncClient: HTTP client for making test requests
    """

    async def override_get_db():
        """Override database dependency with test session."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ============================================================================
# Profiles and callers
# ============================================================================


@pytest_asyncio.fixture
async def viewer(db_session: AsyncSession) -> Caller:
    profile = await ProfileFactory.create(
        db_session, uid="viewer-uid", email="viewer@example.com", role=UserRole.VIEWER
    )
    return Caller(uid=profile.uid, profile=profile)


@pytest_asyncio.fixture
async def manager(db_session: AsyncSession) -> Caller:
    profile = await ProfileFactory.create(
        db_session, uid="manager-uid", email="manager@example.com", role=UserRole.MANAGER
    )
    return Caller(uid=profile.uid, profile=profile)


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> Caller:
    profile = await ProfileFactory.create(
        db_session, uid="admin-uid", email="admin@example.com", role=UserRole.ADMIN
    )
    return Caller(uid=profile.uid, profile=profile)


@pytest.fixture
def auth_headers() -> Callable[[str], dict]:
    """
    Build an Authorization header for a principal id.

    Usage:
        await client.get("/api/auth/me", headers=auth_headers(manager.uid))
    """

    def _headers(uid: str, **claims) -> dict:
        return {"Authorization": f"Bearer {create_access_token(uid, **claims)}"}

    return _headers
