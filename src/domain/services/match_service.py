"""Match service: like ledger writes, mutual-like detection and unmatch."""

from collections.abc import Callable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import ProfileCatalogUnavailableError, ProfileNotFoundError, ValidationError
from domain.entities.match import (
    ChatEvents,
    LikeOutcome,
    LikeRecord,
    MatchRecord,
    MatchSummary,
    pair_key,
    thread_topic,
    user_topic,
)
from domain.repositories.change_feed import IChangeFeed
from domain.repositories.profile_catalog import IProfileCatalog
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.conflicts import is_unique_violation

logger = structlog.get_logger()


class MatchService:
    """Service layer for likes, matches and unmatching."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        catalog: IProfileCatalog,
        change_feed: IChangeFeed | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._catalog = catalog
        self._feed = change_feed

    async def like(self, viewer_id: UUID, target_id: UUID) -> LikeOutcome:
        """Record a swipe-right and form a match if the like is mutual.

        The like is committed on its own before the reciprocal check, so
        when both users swipe at the same time at least one of them sees
        the other's like. Both may then race to create the match; the
        pair key makes exactly one insert win and only the winner emits
        ``match.formed``.

        Args:
            viewer_id: The user who swiped right.
            target_id: The user they liked.

        Returns:
            LikeOutcome describing whether the pair is matched now.
        """
        if viewer_id == target_id:
            raise ValidationError("You cannot like yourself", {"user_id": str(viewer_id)})

        target = await self._catalog.get(target_id)
        if not target:
            raise ProfileNotFoundError(str(target_id))

        await self._record_like(LikeRecord(from_id=viewer_id, to_id=target_id))

        async with self._uow_factory() as uow:
            reciprocal = await uow.likes.exists(target_id, viewer_id)

        if not reciprocal:
            return LikeOutcome(matched=False)

        match = MatchRecord(user_a=viewer_id, user_b=target_id)
        created = await self._create_match_if_absent(match)

        if created:
            logger.info("match_formed", match_id=match.id)
            if self._feed:
                self._feed.publish(
                    [user_topic(match.user_a), user_topic(match.user_b)],
                    ChatEvents.MATCH_FORMED,
                    {"match_id": match.id},
                )

        return LikeOutcome(
            matched=True,
            created=created,
            match_id=match.id,
            matched_profile=target,
        )

    async def has_liked(self, from_id: UUID, to_id: UUID) -> bool:
        """Check whether ``from_id`` has liked ``to_id``."""
        async with self._uow_factory() as uow:
            return await uow.likes.exists(from_id, to_id)  # type: ignore[no-any-return]

    async def list_matches(self, viewer_id: UUID) -> list[MatchSummary]:
        """Get the viewer's matches with the other participant's profile.

        Entries whose profile is missing or cannot be fetched are skipped.
        """
        async with self._uow_factory() as uow:
            matches = await uow.matches.get_all_for_user(viewer_id)

        summaries: list[MatchSummary] = []
        for match in matches:
            other_id = match.other(viewer_id)
            try:
                profile = await self._catalog.get(other_id)
            except ProfileCatalogUnavailableError:
                profile = None
            if profile is None:
                logger.warning("match_profile_unavailable", match_id=match.id)
                continue
            summaries.append(MatchSummary(match=match, profile=profile))
        return summaries

    async def unmatch(self, user_a: UUID, user_b: UUID) -> bool:
        """Dissolve a match and delete its conversation. Idempotent.

        The conversation goes first, so a concurrent reader never sees
        a thread without its match. Like history is kept.

        Returns:
            True if a match existed, False if there was nothing to remove.
        """
        match_id = pair_key(user_a, user_b)

        async with self._uow_factory() as uow:
            deleted_messages = await uow.messages.delete_conversation(match_id)
            existed = await uow.matches.delete(match_id)
            await uow.commit()

        logger.info(
            "unmatched",
            match_id=match_id,
            existed=existed,
            deleted_messages=deleted_messages,
        )
        if existed and self._feed:
            self._feed.publish(
                [thread_topic(match_id), user_topic(user_a), user_topic(user_b)],
                ChatEvents.MATCH_DISSOLVED,
                {"match_id": match_id},
            )
        return existed  # type: ignore[no-any-return]

    async def _record_like(self, like: LikeRecord) -> None:
        """Upsert a like in its own transaction."""
        async with self._uow_factory() as uow:
            try:
                await uow.likes.upsert(like)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                # A concurrent identical like won the insert; same content.
                if not is_unique_violation(exc):
                    raise
                logger.debug("like_conflict_ignored", like_key=like.key)
                return
        logger.info("like_recorded", like_key=like.key)

    async def _create_match_if_absent(self, match: MatchRecord) -> bool:
        """Create-if-absent on the pair key. Returns True only for the winner."""
        async with self._uow_factory() as uow:
            if await uow.matches.get(match.id):
                logger.debug("match_conflict_ignored", match_id=match.id)
                return False
            try:
                await uow.matches.create(match)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                if not is_unique_violation(exc):
                    raise
                logger.debug("match_conflict_ignored", match_id=match.id, race=True)
                return False
        return True
