"""SQLAlchemy-backed profile catalog."""

from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import ProfileCatalogUnavailableError
from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel

logger = structlog.get_logger()


class SQLAlchemyProfileCatalog:
    """IProfileCatalog over the synced ``profiles`` table.

    Each lookup uses its own short-lived session so a failing lookup
    never poisons the caller's unit of work.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, user_id: UUID) -> Profile | None:
        """Get a single profile."""
        try:
            async with self._session_factory() as session:
                stmt = select(ProfileModel).where(ProfileModel.id == user_id)
                result = await session.execute(stmt)
                model = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.warning("profile_catalog_lookup_failed", user_id=str(user_id), error=str(exc))
            raise ProfileCatalogUnavailableError(str(user_id)) from exc
        return self._to_entity(model) if model else None

    async def list_all(self) -> list[Profile]:
        """Get every profile in catalog (creation) order."""
        try:
            async with self._session_factory() as session:
                stmt = select(ProfileModel).order_by(ProfileModel.created_at, ProfileModel.id)
                result = await session.execute(stmt)
                models = list(result.scalars())
        except SQLAlchemyError as exc:
            logger.warning("profile_catalog_list_failed", error=str(exc))
            raise ProfileCatalogUnavailableError() from exc
        return [self._to_entity(model) for model in models]

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            name=model.name,
            age=model.age,
            gender=model.gender,
            interested_in=model.interested_in,
            bio=model.bio,
            hobbies=model.hobbies,
            image_url=model.image_url,
            dating_preference=model.dating_preference,
            created_at=model.created_at,
        )
