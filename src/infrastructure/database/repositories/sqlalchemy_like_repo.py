"""SQLAlchemy implementation of the Like Ledger."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.match import LikeRecord
from infrastructure.database.models import LikeModel


class SQLAlchemyLikeRepository:
    """SQLAlchemy implementation of ILikeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def upsert(self, like: LikeRecord) -> LikeRecord:
        """Record a like, overwriting the timestamp if it already exists."""
        stmt = select(LikeModel).where(
            LikeModel.from_id == like.from_id,
            LikeModel.to_id == like.to_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model:
            model.created_at = like.created_at
        else:
            model = self._to_model(like)
            self._session.add(model)

        await self._session.flush()
        return self._to_entity(model)

    async def exists(self, from_id: UUID, to_id: UUID) -> bool:
        """Point lookup for a directional like."""
        stmt = select(LikeModel.from_id).where(
            LikeModel.from_id == from_id,
            LikeModel.to_id == to_id,
        )
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def get_targets(self, from_id: UUID) -> set[UUID]:
        """Get the IDs of every user ``from_id`` has liked."""
        stmt = select(LikeModel.to_id).where(LikeModel.from_id == from_id)
        result = await self._session.execute(stmt)
        return set(result.scalars())

    def _to_entity(self, model: LikeModel) -> LikeRecord:
        """Convert ORM model to domain entity."""
        return LikeRecord(
            from_id=model.from_id,
            to_id=model.to_id,
            created_at=model.created_at,
        )

    def _to_model(self, entity: LikeRecord) -> LikeModel:
        """Convert domain entity to ORM model."""
        return LikeModel(
            from_id=entity.from_id,
            to_id=entity.to_id,
            created_at=entity.created_at,
        )
