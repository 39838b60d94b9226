"""
Base model with common fields.

All owner-scoped tables inherit from this to get:
- id (UUID primary key)
- user_id (the owning user from the identity provider)
- created_at (when the record was created)
- updated_at (when the record was last modified)
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from clarity.db.base import Base
from clarity.utils.time import utc_now


class OwnerScopedModel(Base):
    """
    Abstract base class for all owner-scoped models.

    This is not a real table - it's a template that other models inherit from.
    Every row belongs to exactly one user, and every query filters on it.
    """

    __abstract__ = True  # This means: don't create a table for this class

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Owner - the subject of the verified access token
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
    )

    # Python-side default keeps sub-second precision for newest-first ordering
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
