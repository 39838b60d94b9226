"""
User preference Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict

from clarity.core.enums import DEFAULT_THEME, Theme


class PreferenceRead(BaseModel):
    """Schema for reading preferences. Defaults apply when nothing is stored."""

    theme: Theme = DEFAULT_THEME

    model_config = ConfigDict(from_attributes=True)


class PreferenceUpdate(BaseModel):
    """Schema for upserting preferences."""

    theme: Theme
