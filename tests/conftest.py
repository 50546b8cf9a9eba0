"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base, ProfileModel
from infrastructure.realtime.change_feed import ChangeFeed

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed test user IDs for consistency
TEST_USER_ID = UUID("11111111-1111-4111-8111-111111111111")
OTHER_USER_ID = UUID("22222222-2222-4222-8222-222222222222")

SeedProfile = Callable[..., Awaitable[UUID]]


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database per test.

    StaticPool keeps one connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
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
def seed_profile(session_factory: async_sessionmaker[AsyncSession]) -> SeedProfile:
    """Insert a catalog profile and return its ID."""

    async def _seed(
        name: str,
        age: int = 25,
        gender: str = "female",
        interested_in: str = "everyone",
        user_id: UUID | None = None,
        **extra: Any,
    ) -> UUID:
        profile_id = user_id or uuid4()
        async with session_factory() as session:
            session.add(
                ProfileModel(
                    id=profile_id,
                    name=name,
                    age=age,
                    gender=gender,
                    interested_in=interested_in,
                    **extra,
                )
            )
            await session.commit()
        return profile_id

    return _seed


@pytest.fixture
def test_user() -> TokenUser:
    """Create a test user with fixed ID."""
    return TokenUser(
        id=TEST_USER_ID,
        email="test@example.com",
        display_name="Test User",
    )


@pytest.fixture
def other_user() -> TokenUser:
    """A second user for two-sided flows."""
    return TokenUser(
        id=OTHER_USER_ID,
        email="other@example.com",
        display_name="Other User",
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
def change_feed() -> ChangeFeed:
    """A private change feed per test."""
    return ChangeFeed(queue_size=16)


class ActingUser:
    """Mutable holder for the user the authenticated client acts as."""

    def __init__(self, user: TokenUser) -> None:
        self.user = user


@pytest.fixture
def acting(test_user: TokenUser) -> ActingUser:
    """Switch ``acting.user`` to make requests as someone else."""
    return ActingUser(test_user)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    session_factory: async_sessionmaker[AsyncSession],
    seed_profile: SeedProfile,
    test_user: TokenUser,
    other_user: TokenUser,
    acting: ActingUser,
    auth_provider: JWTAuthProvider,
    change_feed: ChangeFeed,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated test client with proper database and auth overrides.

    This client:
    - Uses an in-memory SQLite database
    - Seeds profiles for the test user (male, into women) and the other
      user (female, into men) so the two are compatible
    - Overrides auth dependency to return ``acting.user``
    - Overrides every service to use the test session factory
    """
    from api.dependencies.auth import get_auth_provider, get_current_user
    from api.v1.dependencies import (
        get_change_feed,
        get_chat_list_service,
        get_conversation_service,
        get_discovery_service,
        get_match_service,
    )
    from domain.services.chat_list_service import ChatListService
    from domain.services.conversation_service import ConversationService
    from domain.services.discovery_service import DiscoveryService
    from domain.services.match_service import MatchService
    from infrastructure.database.repositories.sqlalchemy_profile_catalog import (
        SQLAlchemyProfileCatalog,
    )
    from infrastructure.database.session import get_async_session
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app

    app = create_app()

    await seed_profile(
        "Test User", age=26, gender="male", interested_in="female", user_id=test_user.id
    )
    await seed_profile(
        "Other User", age=25, gender="female", interested_in="male", user_id=other_user.id
    )

    catalog = SQLAlchemyProfileCatalog(session_factory)

    # Override auth to return whoever the test is acting as
    async def override_get_user() -> TokenUser:
        return acting.user

    def override_get_auth_provider() -> JWTAuthProvider:
        return auth_provider

    # Create a UoW factory that uses test session
    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_current_user] = override_get_user
    app.dependency_overrides[get_auth_provider] = override_get_auth_provider
    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_change_feed] = lambda: change_feed
    app.dependency_overrides[get_discovery_service] = lambda: DiscoveryService(
        test_uow_factory, catalog
    )
    app.dependency_overrides[get_match_service] = lambda: MatchService(
        test_uow_factory, catalog, change_feed=change_feed
    )
    app.dependency_overrides[get_conversation_service] = lambda: ConversationService(
        test_uow_factory, change_feed=change_feed
    )
    app.dependency_overrides[get_chat_list_service] = lambda: ChatListService(
        test_uow_factory, catalog, change_feed=change_feed
    )

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
