"""User schemas for repository input and user search."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from blogcms.models.user import UserRole
from blogcms.schemas.pagination import PageParams


class UserCreate(BaseModel):
    """User creation data; ``password`` must already be hashed."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    name: str | None = Field(default=None, max_length=200)
    password: str | None = None
    image: str | None = None
    role: UserRole = UserRole.USER
    is_active: bool = True
    email_verified: datetime | None = None


class UserProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    image: str | None = None
    email: EmailStr | None = None

    def field_changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class UserQuery(PageParams):
    """Case-insensitive name/email search with optional role and status filters."""

    query: str | None = Field(default=None, min_length=1, max_length=200)
    role: UserRole | None = None
    is_active: bool | None = None
