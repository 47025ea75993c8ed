"""SQLAlchemy implementation of Profile repository."""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ProfileNotFoundError
from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: str) -> Profile | None:
        """Get a profile by ID."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def save(self, profile: Profile) -> Profile:
        """Write the whole profile document, creating it if absent."""
        model = await self._get_model(profile.id)
        if not model:
            return await self.create(profile)

        # Keys this service does not know about are carried over untouched
        model.document = {**(model.document or {}), **profile.to_document()}
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def merge(self, id: str, fields: dict[str, Any]) -> Profile:
        """Merge named document fields into an existing profile."""
        model = await self._get_model(id)
        if not model:
            raise ProfileNotFoundError(id)

        model.document = {**(model.document or {}), **fields}
        model.updated_at = datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model)

    async def _get_model(self, id: str) -> ProfileModel | None:
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        profile = Profile.from_document(model.id, model.document or {})
        profile.created_at = model.created_at
        profile.updated_at = model.updated_at
        return profile

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            document=entity.to_document(),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
