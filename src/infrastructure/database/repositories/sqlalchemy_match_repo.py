"""SQLAlchemy implementation of Match repository."""

from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.match import MatchRecord
from infrastructure.database.models import MatchModel


class SQLAlchemyMatchRepository:
    """SQLAlchemy implementation of IMatchRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, match_id: str) -> MatchRecord | None:
        """Get a match by its pair key."""
        stmt = select(MatchModel).where(MatchModel.id == match_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all_for_user(self, user_id: UUID) -> list[MatchRecord]:
        """Get every match the user participates in, newest first."""
        stmt = (
            select(MatchModel)
            .where(or_(MatchModel.user_a == user_id, MatchModel.user_b == user_id))
            .order_by(MatchModel.created_at.desc(), MatchModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_partner_ids(self, user_id: UUID) -> set[UUID]:
        """Get the IDs of everyone the user is matched with."""
        stmt = select(MatchModel.user_a, MatchModel.user_b).where(
            or_(MatchModel.user_a == user_id, MatchModel.user_b == user_id)
        )
        result = await self._session.execute(stmt)
        return {user_b if user_a == user_id else user_a for user_a, user_b in result}

    async def create(self, match: MatchRecord) -> MatchRecord:
        """Insert a match; the primary key makes a second insert fail."""
        model = self._to_model(match)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, match_id: str) -> bool:
        """Delete a match."""
        stmt = delete(MatchModel).where(MatchModel.id == match_id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)

    def _to_entity(self, model: MatchModel) -> MatchRecord:
        """Convert ORM model to domain entity."""
        return MatchRecord(
            user_a=model.user_a,
            user_b=model.user_b,
            created_at=model.created_at,
        )

    def _to_model(self, entity: MatchRecord) -> MatchModel:
        """Convert domain entity to ORM model."""
        return MatchModel(
            id=entity.id,
            user_a=entity.user_a,
            user_b=entity.user_b,
            created_at=entity.created_at,
        )
