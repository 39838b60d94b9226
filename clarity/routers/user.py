"""User router - profile of the authenticated caller."""

from fastapi import APIRouter, Depends

from clarity.core.dependencies import get_current_user
from clarity.schemas.user import CurrentUser, UserProfile

router = APIRouter(prefix="/api", tags=["user"])


@router.get("/user", response_model=UserProfile)
async def get_user(user: CurrentUser = Depends(get_current_user)):
    """Echo the caller's profile fields from the verified token."""
    return UserProfile.from_user(user)
