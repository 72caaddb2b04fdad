"""Shared column definitions for table models."""

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from blogcms.utils.helpers import utcnow


class TimestampModel(SQLModel):
    """Creation and update timestamps (timezone-aware)."""

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        nullable=False,
        index=True,
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        description="Last update timestamp",
    )


class SoftDeleteModel(TimestampModel):
    """Rows that are hidden by stamping ``deleted_at`` instead of being removed."""

    deleted_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        index=True,
        description="Soft-delete timestamp",
    )
