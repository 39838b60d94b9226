"""
UserPreference model.

One row per user holding UI preferences. A missing row means defaults.
"""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from clarity.core.enums import DEFAULT_THEME
from clarity.models.base_model import OwnerScopedModel


class UserPreference(OwnerScopedModel):
    """User preferences (currently just the colour theme)."""

    __tablename__ = "user_preferences"

    theme: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=DEFAULT_THEME.value,
        server_default=DEFAULT_THEME.value,
    )

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_user_preferences_user_id"),
    )
