"""
Pytest configuration and fixtures for helloRun tests
"""

import os
import tempfile
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="hellorun-uploads-"))

from hellorun.auth import CurrentUser, get_current_user  # noqa: E402
from hellorun.constants.roles import RoleName  # noqa: E402
from hellorun.database import Base, get_db  # noqa: E402
from hellorun.main import app  # noqa: E402
from hellorun.models.user import User  # noqa: E402
from hellorun.services.upload_service import get_object_store  # noqa: E402
from utils.blog_utils import FakeObjectStore  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class AuthState:
    """Holds the user the overridden auth dependency returns."""

    def __init__(self):
        self.user: CurrentUser | None = None

    def login(self, user: CurrentUser | None) -> None:
        self.user = user


@pytest.fixture
async def engine():
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


async def _create_user(db: AsyncSession, email: str, role: RoleName, verified: bool = True, first_name: str = "Test"):
    user = User(
        email=email,
        first_name=first_name,
        last_name="Runner",
        role=role.value,
        email_verified=verified,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def author(db: AsyncSession) -> CurrentUser:
    """A verified runner who writes posts"""
    user = await _create_user(db, "author@example.com", RoleName.RUNNER, first_name="Ana")
    return CurrentUser.from_user(user)


@pytest.fixture
async def other_author(db: AsyncSession) -> CurrentUser:
    user = await _create_user(db, "other@example.com", RoleName.ORGANISER, first_name="Olu")
    return CurrentUser.from_user(user)


@pytest.fixture
async def unverified_user(db: AsyncSession) -> CurrentUser:
    user = await _create_user(db, "unverified@example.com", RoleName.RUNNER, verified=False)
    return CurrentUser.from_user(user)


@pytest.fixture
async def admin(db: AsyncSession) -> CurrentUser:
    user = await _create_user(db, "admin@example.com", RoleName.ADMIN, first_name="Ada")
    return CurrentUser.from_user(user)


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def auth_state() -> AuthState:
    return AuthState()


@pytest.fixture
async def client(session_factory, object_store, auth_state) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the database, object store and current user overridden"""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_store] = lambda: object_store
    app.dependency_overrides[get_current_user] = lambda: auth_state.user

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
