"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from clarity.models.task import Task
from clarity.models.user_preference import UserPreference

# Export all models
__all__ = [
    "Task",
    "UserPreference",
]
