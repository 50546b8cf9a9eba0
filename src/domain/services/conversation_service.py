"""Conversation service: per-match ordered message log."""

from collections.abc import AsyncIterator, Callable
from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.config import settings
from core.exceptions import (
    AppException,
    ErrorCode,
    MatchNotFoundError,
    MessageNotFoundError,
    ValidationError,
)
from domain.entities.match import ChatEvents, MatchRecord, thread_topic, user_topic
from domain.entities.message import Message
from domain.repositories.change_feed import IChangeFeed
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.conflicts import is_unique_violation

logger = structlog.get_logger()


class ConversationService:
    """Service layer for match conversations."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        change_feed: IChangeFeed | None = None,
        max_length: int = settings.message_max_length,
        append_retries: int = settings.message_append_retries,
    ) -> None:
        self._uow_factory = uow_factory
        self._feed = change_feed
        self._max_length = max_length
        self._append_retries = append_retries

    async def send_message(self, match_id: str, sender_id: UUID, text: str) -> Message:
        """Append a message to a match's conversation.

        The store assigns the timestamp and position: the timestamp never
        goes below the previous message's, the position is one past it.
        Two concurrent senders can compute the same position; the loser
        hits the unique constraint and retries against the new tail.

        Args:
            match_id: The conversation (pair key of the match).
            sender_id: The participant sending.
            text: Message body; must contain non-whitespace characters.

        Returns:
            The stored Message.
        """
        if not text or not text.strip():
            raise ValidationError("Message text must not be empty")
        if len(text) > self._max_length:
            raise ValidationError(
                f"Message text exceeds {self._max_length} characters",
                {"max_length": self._max_length},
            )

        for attempt in range(1, self._append_retries + 1):
            async with self._uow_factory() as uow:
                match = await self._require_participant(uow, match_id, sender_id)

                latest = await uow.messages.get_latest(match_id)
                now = datetime.utcnow()
                message = Message(
                    match_id=match_id,
                    sender_id=sender_id,
                    text=text,
                    created_at=max(now, latest.created_at) if latest else now,
                    position=latest.position + 1 if latest else 0,
                )

                try:
                    created = await uow.messages.create(message)
                    await uow.commit()
                except IntegrityError as exc:
                    await uow.rollback()
                    if not is_unique_violation(exc):
                        # Foreign key failure: unmatched between our read and insert
                        if await uow.matches.get(match_id) is None:
                            raise MatchNotFoundError(match_id) from exc
                        raise
                    logger.info("message_append_retry", match_id=match_id, attempt=attempt)
                    continue

            logger.info(
                "message_appended",
                match_id=match_id,
                message_id=str(created.id),
                position=created.position,
            )
            self._publish(match, ChatEvents.MESSAGE_CREATED, created)
            return created

        raise AppException(
            ErrorCode.DATABASE_ERROR,
            "Could not append message, please retry",
            503,
            {"match_id": match_id},
        )

    async def get_thread(self, match_id: str, viewer_id: UUID) -> list[Message]:
        """Get the full conversation, oldest first."""
        async with self._uow_factory() as uow:
            await self._require_participant(uow, match_id, viewer_id)
            return await uow.messages.list_ordered(match_id)  # type: ignore[no-any-return]

    async def get_latest(self, match_id: str, viewer_id: UUID) -> Message | None:
        """Get the most recent message of a conversation, if any."""
        async with self._uow_factory() as uow:
            await self._require_participant(uow, match_id, viewer_id)
            return await uow.messages.get_latest(match_id)  # type: ignore[no-any-return]

    async def mark_read(self, match_id: str, message_id: UUID, viewer_id: UUID) -> None:
        """Flag one message as seen by its recipient.

        One-way: already-seen messages stay seen and the call is a no-op.
        Marking one's own message does nothing either.
        """
        async with self._uow_factory() as uow:
            match = await self._require_participant(uow, match_id, viewer_id)

            message = await uow.messages.get(match_id, message_id)
            if not message:
                raise MessageNotFoundError(match_id, str(message_id))

            if message.sender_id == viewer_id or message.seen:
                return

            changed = await uow.messages.mark_seen(match_id, message_id)
            await uow.commit()

        if changed:
            message.seen = True
            self._publish(match, ChatEvents.MESSAGE_SEEN, message)

    async def mark_all_read(self, match_id: str, viewer_id: UUID) -> int:
        """Flag every incoming unseen message of the thread as seen."""
        async with self._uow_factory() as uow:
            match = await self._require_participant(uow, match_id, viewer_id)
            count = await uow.messages.mark_all_seen(match_id, viewer_id)
            await uow.commit()

        if count and self._feed:
            self._feed.publish(
                [thread_topic(match_id), user_topic(match.user_a), user_topic(match.user_b)],
                ChatEvents.MESSAGE_SEEN,
                {"match_id": match_id, "count": count},
            )
        return count  # type: ignore[no-any-return]

    async def watch_thread(self, match_id: str, viewer_id: UUID) -> AsyncIterator[list[Message]]:
        """Stream snapshots of a conversation.

        Yields the current thread, then a fresh snapshot after every
        change to it. Ends when the match is dissolved, whether the
        dissolve event arrives or a refresh finds the match gone. Closing the
        generator only unregisters the subscription.
        """
        if self._feed is None:
            raise RuntimeError("ConversationService has no change feed configured")

        async with self._feed.subscribe([thread_topic(match_id)]) as subscription:
            yield await self.get_thread(match_id, viewer_id)
            async for change in subscription:
                if change.event == ChatEvents.MATCH_DISSOLVED:
                    return
                try:
                    snapshot = await self.get_thread(match_id, viewer_id)
                except MatchNotFoundError:
                    # Dissolved before its event was read
                    logger.info("thread_watch_ended", match_id=match_id)
                    return
                yield snapshot

    async def _require_participant(
        self, uow: IUnitOfWork, match_id: str, user_id: UUID
    ) -> MatchRecord:
        """Load the match, hiding it from non-participants."""
        match = await uow.matches.get(match_id)
        if not match or not match.includes(user_id):
            raise MatchNotFoundError(match_id)
        return match

    def _publish(self, match: MatchRecord, event: str, message: Message) -> None:
        if not self._feed:
            return
        self._feed.publish(
            [thread_topic(match.id), user_topic(match.user_a), user_topic(match.user_b)],
            event,
            {
                "match_id": match.id,
                "message_id": str(message.id),
                "sender_id": str(message.sender_id),
            },
        )
