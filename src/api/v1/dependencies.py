"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.services.chat_list_service import ChatListService
from domain.services.conversation_service import ConversationService
from domain.services.discovery_service import DiscoveryService
from domain.services.match_service import MatchService
from infrastructure.database.repositories.sqlalchemy_profile_catalog import (
    SQLAlchemyProfileCatalog,
)
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.realtime.change_feed import ChangeFeed
from infrastructure.realtime.pg_change_feed import PostgresChangeFeed


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_change_feed() -> ChangeFeed | PostgresChangeFeed:
    """Get the change feed.

    Shared across workers through Postgres when the store is Postgres,
    in-process otherwise.
    """
    if settings.change_feed_dsn:
        return PostgresChangeFeed(
            settings.change_feed_dsn,
            channel=settings.change_feed_channel,
            queue_size=settings.subscription_queue_size,
        )
    return ChangeFeed(queue_size=settings.subscription_queue_size)


@lru_cache
def get_profile_catalog() -> SQLAlchemyProfileCatalog:
    """Get Profile catalog instance."""
    return SQLAlchemyProfileCatalog(async_session_factory)


@lru_cache
def get_discovery_service() -> DiscoveryService:
    """Get Discovery service instance."""
    return DiscoveryService(get_uow_factory(), get_profile_catalog())


@lru_cache
def get_match_service() -> MatchService:
    """Get Match service instance."""
    return MatchService(
        get_uow_factory(),
        get_profile_catalog(),
        change_feed=get_change_feed(),
    )


@lru_cache
def get_conversation_service() -> ConversationService:
    """Get Conversation service instance."""
    return ConversationService(get_uow_factory(), change_feed=get_change_feed())


@lru_cache
def get_chat_list_service() -> ChatListService:
    """Get Chat list service instance."""
    return ChatListService(
        get_uow_factory(),
        get_profile_catalog(),
        change_feed=get_change_feed(),
    )
