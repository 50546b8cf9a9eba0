"""SQLAlchemy Unit of Work: one session, one transaction per service call."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_like_repo import SQLAlchemyLikeRepository
from infrastructure.database.repositories.sqlalchemy_match_repo import SQLAlchemyMatchRepository
from infrastructure.database.repositories.sqlalchemy_message_repo import SQLAlchemyMessageRepository


class SQLAlchemyUnitOfWork:
    """Groups the like ledger, match index and conversation store on one session.

    Leaving the block without ``commit()`` discards the writes, and an
    exception inside the block rolls back before the session closes.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._likes: Optional[SQLAlchemyLikeRepository] = None
        self._matches: Optional[SQLAlchemyMatchRepository] = None
        self._messages: Optional[SQLAlchemyMessageRepository] = None

    def _require(self, repository: Optional[Any]) -> Any:
        if repository is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return repository

    @property
    def likes(self) -> SQLAlchemyLikeRepository:
        return self._require(self._likes)

    @property
    def matches(self) -> SQLAlchemyMatchRepository:
        return self._require(self._matches)

    @property
    def messages(self) -> SQLAlchemyMessageRepository:
        return self._require(self._messages)

    async def commit(self) -> None:
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Discard pending writes; the unit stays usable for a retry."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        session = self._session_factory()
        self._session = session
        self._likes = SQLAlchemyLikeRepository(session)
        self._matches = SQLAlchemyMatchRepository(session)
        self._messages = SQLAlchemyMessageRepository(session)
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        session = self._session
        self._session = None
        self._likes = self._matches = self._messages = None
        if session is None:
            return
        try:
            if exc_type:
                await session.rollback()
        finally:
            await session.close()
