"""User database model using SQLModel."""

from datetime import datetime
from enum import StrEnum
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, String

from blogcms.models.base import SoftDeleteModel


class UserRole(StrEnum):
    USER = "user"
    EDITOR = "editor"
    ADMIN = "admin"


class UserDB(SoftDeleteModel, table=True):
    """
    User database model for PostgreSQL.

    Authors of posts and comments. Users are soft-deleted so authored
    content keeps a valid owner.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="User ID",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Email address (unique)",
    )
    name: str | None = Field(
        default=None,
        sa_column=Column(String(200)),
        description="Display name",
    )
    password: str | None = Field(
        default=None,
        sa_column=Column(String(255)),
        description="Hashed password (null for OAuth users)",
    )
    image: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Avatar URL",
    )
    role: str = Field(
        default=UserRole.USER,
        sa_column=Column(String(20), nullable=False, server_default="user", index=True),
        description="User role (user, editor, admin)",
    )
    is_active: bool = Field(default=True, nullable=False)
    email_verified: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    last_login_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    deactivated_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    reset_token: str | None = Field(
        default=None,
        sa_column=Column(String(255), index=True),
        description="Password reset token",
    )
    reset_token_expiry: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "email": "jane@example.com",
                "name": "Jane Doe",
                "role": "editor",
                "is_active": True,
            },
        },
    )
