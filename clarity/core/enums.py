"""
Enumerations shared by models, schemas and services.

All of them are ``str`` enums so they serialize as their plain value
in JSON and compare equal to the strings stored in the database.
"""

from enum import Enum


class RecurrencePattern(str, Enum):
    """How far a recurring task's next occurrence lands from the last one."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


DEFAULT_THEME = Theme.DARK


class TaskFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class TaskSort(str, Enum):
    CREATED = "created"
    DUE = "due"


class DueStatus(str, Enum):
    NONE = "none"
    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    OK = "ok"


class DeleteScope(str, Enum):
    SINGLE = "single"
    SERIES = "series"
