"""
User Pydantic schemas.

Users live in the identity provider; the API only sees the claims of
a verified access token.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class CurrentUser(BaseModel):
    """The verified caller, built from token claims."""

    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def display_name(self) -> Optional[str]:
        return self.user_metadata.get("full_name") or self.user_metadata.get("name") or None

    @property
    def avatar_url(self) -> Optional[str]:
        return self.user_metadata.get("avatar_url") or self.user_metadata.get("picture") or None


class UserProfile(BaseModel):
    """Schema for GET /api/user."""

    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None

    @classmethod
    def from_user(cls, user: CurrentUser) -> "UserProfile":
        return cls(
            id=user.id,
            email=user.email,
            name=user.display_name,
            avatar=user.avatar_url,
        )
