"""Discovery service: builds the swipe deck."""

from collections.abc import Callable
from uuid import UUID

import structlog

from core.exceptions import ProfileNotFoundError
from domain.entities.profile import ScoredProfile
from domain.repositories.profile_catalog import IProfileCatalog
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.scoring import rank_candidates

logger = structlog.get_logger()


class DiscoveryService:
    """Service layer for the candidate deck."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        catalog: IProfileCatalog,
    ) -> None:
        self._uow_factory = uow_factory
        self._catalog = catalog

    async def get_swipe_deck(
        self, viewer_id: UUID, limit: int | None = None
    ) -> list[ScoredProfile]:
        """Rank every eligible candidate for the viewer.

        Recomputed on each call; excludes the viewer, everyone the
        viewer already liked and everyone already matched.

        Args:
            viewer_id: The user swiping.
            limit: Optional cap on the number of cards returned.

        Returns:
            Candidates ordered by descending score, catalog order on ties.
        """
        viewer = await self._catalog.get(viewer_id)
        if not viewer:
            raise ProfileNotFoundError(str(viewer_id))

        async with self._uow_factory() as uow:
            liked_ids = await uow.likes.get_targets(viewer_id)
            matched_ids = await uow.matches.get_partner_ids(viewer_id)

        profiles = await self._catalog.list_all()
        deck = rank_candidates(viewer, profiles, liked_ids, matched_ids)

        logger.debug(
            "swipe_deck_built",
            viewer_id=str(viewer_id),
            candidates=len(deck),
            excluded_liked=len(liked_ids),
            excluded_matched=len(matched_ids),
        )
        if limit is not None:
            return deck[:limit]
        return deck
