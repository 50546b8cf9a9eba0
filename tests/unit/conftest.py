"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.profile import Profile
from infrastructure.realtime.change_feed import ChangeFeed


class FakeUnitOfWork:
    """Fake Unit of Work with the three store mocks for unit testing."""

    def __init__(self) -> None:
        self.likes = AsyncMock()
        self.matches = AsyncMock()
        self.messages = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class FakeProfileCatalog:
    """In-memory profile catalog; IDs listed in ``failing`` raise on lookup."""

    def __init__(self, profiles: list[Profile] | None = None) -> None:
        self.profiles: dict[UUID, Profile] = {p.id: p for p in profiles or []}
        self.failing: set[UUID] = set()

    def add(self, profile: Profile) -> Profile:
        self.profiles[profile.id] = profile
        return profile

    async def get(self, user_id: UUID) -> Profile | None:
        from core.exceptions import ProfileCatalogUnavailableError

        if user_id in self.failing:
            raise ProfileCatalogUnavailableError(str(user_id))
        return self.profiles.get(user_id)

    async def list_all(self) -> list[Profile]:
        return list(self.profiles.values())


def make_profile(
    name: str = "Sam",
    age: int = 25,
    gender: str = "female",
    interested_in: str = "everyone",
    **kwargs: Any,
) -> Profile:
    """Build a Profile with sensible defaults."""
    return Profile(name=name, age=age, gender=gender, interested_in=interested_in, **kwargs)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def catalog() -> FakeProfileCatalog:
    """Create an empty FakeProfileCatalog."""
    return FakeProfileCatalog()


@pytest.fixture
def feed() -> ChangeFeed:
    """A private change feed."""
    return ChangeFeed(queue_size=8)


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def other_id() -> UUID:
    """A random user ID (distinct from user_id)."""
    return uuid4()
