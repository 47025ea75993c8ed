"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

# Point share links at a fixed origin in tests
os.environ.setdefault("PUBLIC_BASE_URL", "https://qrpass.test")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.share_locator import ShareLocator
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


# Test database URL (SQLite in memory, one shared connection per engine)
TEST_DATABASE_URL = "sqlite+aiosqlite://"

TEST_USER_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"
TEST_BASE_URL = "https://qrpass.test"


class FakeQRRenderer:
    """Records payloads instead of drawing images."""

    def __init__(self) -> None:
        self.payloads: list[tuple[str, str]] = []

    def render_png(self, payload: str, error_correction: str = "M") -> bytes:
        self.payloads.append((payload, error_correction))
        return b"\x89PNG\r\n\x1a\n" + payload.encode()


class FakeAvatarStorage:
    """In-memory avatar storage."""

    def __init__(self) -> None:
        self.uploads: dict[str, tuple[bytes, str]] = {}

    async def upload(self, profile_id: str, payload: bytes, content_type: str) -> str:
        self.uploads[profile_id] = (payload, content_type)
        return f"https://cdn.qrpass.test/avatars/{profile_id}"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return str(auth_provider.create_token(test_user))


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def share_locator() -> ShareLocator:
    return ShareLocator(base_origin=TEST_BASE_URL, path_prefix="/u/")


@pytest.fixture
def qr_renderer() -> FakeQRRenderer:
    return FakeQRRenderer()


@pytest.fixture
def avatar_storage() -> FakeAvatarStorage:
    return FakeAvatarStorage()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
    share_locator: ShareLocator,
    qr_renderer: FakeQRRenderer,
    avatar_storage: FakeAvatarStorage,
) -> Any:
    """
    Create an app wired to the test database and fake collaborators.

    This app:
    - Uses an in-memory SQLite database
    - Validates tokens with the test auth provider
    - Uses in-memory avatar storage and a recording QR renderer
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import get_profile_service, get_share_service
    from domain.services.profile_service import ProfileService
    from domain.services.share_service import ShareService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    profile_service = ProfileService(
        test_uow_factory,
        avatar_storage=avatar_storage,
        max_avatar_bytes=5 * 1024 * 1024,
    )
    share_service = ShareService(share_locator, qr_renderer)

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_profile_service] = lambda: profile_service
    app.dependency_overrides[get_share_service] = lambda: share_service

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def anonymous_client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Client against the test app without credentials."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    app: Any, auth_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Client against the test app signed in as the test user."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c


@pytest.fixture
def service_headers(auth_provider: JWTAuthProvider) -> dict[str, str]:
    """Authorization headers for a backend caller with the service role."""
    token = auth_provider.create_token(
        TokenUser(id="billing-worker", email=None, role="service_role")
    )
    return {"Authorization": f"Bearer {token}"}
