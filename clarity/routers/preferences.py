"""
Preferences router - read and upsert the caller's UI preferences.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clarity.core.dependencies import get_current_user, get_db
from clarity.repositories.preference_repository import PreferenceRepository
from clarity.schemas.preference import PreferenceRead, PreferenceUpdate
from clarity.schemas.user import CurrentUser

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


@router.get("", response_model=PreferenceRead)
async def get_preferences(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Stored preferences, or the defaults when none were saved yet."""
    repository = PreferenceRepository(db)
    preference = await repository.get_by_user(user.id)
    if preference is None:
        return PreferenceRead()
    return preference


@router.put("", response_model=PreferenceRead)
async def update_preferences(
    data: PreferenceUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create or update the caller's preferences."""
    repository = PreferenceRepository(db)
    preference = await repository.upsert(user.id, data.theme.value)
    await db.commit()
    return preference
