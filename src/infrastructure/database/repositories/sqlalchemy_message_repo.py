"""SQLAlchemy implementation of the Conversation Store."""

from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.message import Message
from infrastructure.database.models import MessageModel


class SQLAlchemyMessageRepository:
    """SQLAlchemy implementation of IMessageRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, match_id: str, message_id: UUID) -> Message | None:
        """Get a message scoped to its conversation."""
        stmt = select(MessageModel).where(
            MessageModel.id == message_id,
            MessageModel.match_id == match_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_latest(self, match_id: str) -> Message | None:
        """Get the most recent message in a conversation."""
        stmt = (
            select(MessageModel)
            .where(MessageModel.match_id == match_id)
            .order_by(MessageModel.created_at.desc(), MessageModel.position.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_ordered(self, match_id: str) -> list[Message]:
        """Get the full thread, oldest first."""
        stmt = (
            select(MessageModel)
            .where(MessageModel.match_id == match_id)
            .order_by(MessageModel.created_at, MessageModel.position)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, message: Message) -> Message:
        """Insert a message."""
        model = self._to_model(message)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def mark_seen(self, match_id: str, message_id: UUID) -> bool:
        """Flip the seen flag false -> true."""
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.id == message_id,
                MessageModel.match_id == match_id,
                MessageModel.seen.is_(False),
            )
            .values(seen=True)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return bool(result.rowcount)

    async def mark_all_seen(self, match_id: str, recipient_id: UUID) -> int:
        """Mark every unseen incoming message for the recipient as seen."""
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.match_id == match_id,
                MessageModel.sender_id != recipient_id,
                MessageModel.seen.is_(False),
            )
            .values(seen=True)
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount or 0

    async def delete_conversation(self, match_id: str) -> int:
        """Delete every message of a conversation."""
        stmt = delete(MessageModel).where(MessageModel.match_id == match_id)
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount or 0

    def _to_entity(self, model: MessageModel) -> Message:
        """Convert ORM model to domain entity."""
        return Message(
            id=model.id,
            match_id=model.match_id,
            sender_id=model.sender_id,
            text=model.text,
            created_at=model.created_at,
            position=model.position,
            seen=model.seen,
        )

    def _to_model(self, entity: Message) -> MessageModel:
        """Convert domain entity to ORM model."""
        return MessageModel(
            id=entity.id,
            match_id=entity.match_id,
            sender_id=entity.sender_id,
            text=entity.text,
            created_at=entity.created_at,
            position=entity.position,
            seen=entity.seen,
        )
