"""Category and tag database models."""

from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import Integer
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, String

from blogcms.models.base import TimestampModel


class CategoryDB(TimestampModel, table=True):
    """
    Post category.

    ``post_count`` is a denormalized counter of linked, non-deleted posts.
    It is only moved by +1/-1 updates issued together with link changes.
    """

    __tablename__ = cast("declared_attr[str]", "categories")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    name: str = Field(sa_column=Column(String(100), unique=True, nullable=False))
    slug: str = Field(sa_column=Column(String(100), unique=True, nullable=False, index=True))
    description: str | None = Field(default=None, sa_column=Column(String(500)))
    post_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default="0"),
        description="Number of non-deleted posts in this category",
    )


class TagDB(TimestampModel, table=True):
    """Post tag with the same denormalized ``post_count`` as categories."""

    __tablename__ = cast("declared_attr[str]", "tags")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    name: str = Field(sa_column=Column(String(50), unique=True, nullable=False))
    slug: str = Field(sa_column=Column(String(50), unique=True, nullable=False, index=True))
    post_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default="0"),
        description="Number of non-deleted posts with this tag",
    )
