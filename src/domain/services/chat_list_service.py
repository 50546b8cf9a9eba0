"""Chat list service: derives the viewer's ordered, unread-aware chat list."""

from collections.abc import AsyncIterator, Callable
from datetime import datetime
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import ProfileCatalogUnavailableError
from domain.entities.match import MatchRecord, user_topic
from domain.entities.message import ChatPreview, Message
from domain.entities.profile import Profile
from domain.repositories.change_feed import IChangeFeed
from domain.repositories.profile_catalog import IProfileCatalog
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


def _sort_key(preview: ChatPreview) -> tuple[bool, datetime]:
    # Threads with messages first, then newest activity first
    return (preview.has_messages, preview.sort_at)


class ChatListService:
    """Service layer for the chat list (aggregated, never cached)."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        catalog: IProfileCatalog,
        change_feed: IChangeFeed | None = None,
        placeholder: str = settings.empty_chat_placeholder,
        own_prefix: str = settings.own_message_prefix,
    ) -> None:
        self._uow_factory = uow_factory
        self._catalog = catalog
        self._feed = change_feed
        self._placeholder = placeholder
        self._own_prefix = own_prefix

    async def get_chat_list(self, viewer_id: UUID) -> list[ChatPreview]:
        """Build one preview per match of the viewer, most recent first.

        Matches with messages sort by the latest message time; empty
        matches follow, ordered by when the match formed. A match whose
        other participant cannot be resolved is left out instead of
        failing the whole list.
        """
        async with self._uow_factory() as uow:
            matches = await uow.matches.get_all_for_user(viewer_id)
            latest: dict[str, Message | None] = {}
            for match in matches:
                latest[match.id] = await uow.messages.get_latest(match.id)

        previews: list[ChatPreview] = []
        for match in matches:
            profile = await self._resolve_profile(match, viewer_id)
            if profile is None:
                continue
            previews.append(self._build_preview(match, viewer_id, profile, latest[match.id]))

        previews.sort(key=_sort_key, reverse=True)
        return previews

    async def watch_chat_list(self, viewer_id: UUID) -> AsyncIterator[list[ChatPreview]]:
        """Stream chat list snapshots for the viewer.

        Yields the current list, then a recomputed list whenever a match
        or message involving the viewer changes. Closing the generator
        only unregisters the subscription.
        """
        if self._feed is None:
            raise RuntimeError("ChatListService has no change feed configured")

        async with self._feed.subscribe([user_topic(viewer_id)]) as subscription:
            yield await self.get_chat_list(viewer_id)
            async for _change in subscription:
                yield await self.get_chat_list(viewer_id)

    async def _resolve_profile(self, match: MatchRecord, viewer_id: UUID) -> Profile | None:
        other_id = match.other(viewer_id)
        try:
            profile = await self._catalog.get(other_id)
        except ProfileCatalogUnavailableError:
            logger.warning(
                "chat_preview_skipped",
                match_id=match.id,
                reason="catalog_unavailable",
            )
            return None
        if profile is None:
            logger.warning(
                "chat_preview_skipped",
                match_id=match.id,
                reason="profile_missing",
            )
        return profile

    def _build_preview(
        self,
        match: MatchRecord,
        viewer_id: UUID,
        profile: Profile,
        message: Message | None,
    ) -> ChatPreview:
        if message is None:
            return ChatPreview(
                match_id=match.id,
                profile=profile,
                preview_text=self._placeholder,
                sort_at=match.created_at,
                matched_at=match.created_at,
            )

        preview_text = message.text
        if message.sender_id == viewer_id:
            preview_text = f"{self._own_prefix}{message.text}"

        return ChatPreview(
            match_id=match.id,
            profile=profile,
            preview_text=preview_text,
            sort_at=message.created_at,
            matched_at=match.created_at,
            last_message=message.text,
            last_sender_id=message.sender_id,
            last_message_at=message.created_at,
            unread=message.is_unread_for(viewer_id),
        )
