"""
Schemas package.

Import all schemas here for easy access.
"""

from clarity.schemas.task import TaskCreate, TaskUpdate, TaskRead
from clarity.schemas.user import CurrentUser, UserProfile
from clarity.schemas.preference import PreferenceRead, PreferenceUpdate
from clarity.schemas.view import AnnotatedTask, EmptyState, TaskStats, TaskView

__all__ = [
    "TaskCreate",
    "TaskUpdate",
    "TaskRead",
    "CurrentUser",
    "UserProfile",
    "PreferenceRead",
    "PreferenceUpdate",
    "AnnotatedTask",
    "EmptyState",
    "TaskStats",
    "TaskView",
]
