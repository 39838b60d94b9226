"""
User preference repository - database operations for UserPreference.
"""

from typing import Optional
from uuid import UUID
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from clarity.models.user_preference import UserPreference


class PreferenceRepository:
    """Repository for UserPreference database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_user(self, user_id: UUID) -> Optional[UserPreference]:
        result = await self.db.execute(
            select(UserPreference).where(UserPreference.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def upsert(self, user_id: UUID, theme: str) -> UserPreference:
        """Create the user's preference row or update the existing one."""
        preference = await self.get_by_user(user_id)
        if preference is None:
            preference = UserPreference(id=uuid.uuid4(), user_id=user_id, theme=theme)
            self.db.add(preference)
        else:
            preference.theme = theme
            preference.updated_at = func.now()

        await self.db.flush()
        await self.db.refresh(preference)
        return preference
