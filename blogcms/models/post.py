"""Post and comment database models using SQLModel."""

from datetime import datetime
from enum import StrEnum
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime, Index, Integer, Text
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, Relationship, String

from blogcms.models.base import SoftDeleteModel, TimestampModel
from blogcms.models.links import PostCategoryLink, PostTagLink
from blogcms.models.taxonomy import CategoryDB, TagDB
from blogcms.models.user import UserDB


class PostStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class PostDB(SoftDeleteModel, table=True):
    """
    Post database model for PostgreSQL.

    Posts link to categories and tags through pure association rows.
    ``published_at`` is stamped when the post transitions to published and
    is left alone on every other transition.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (
        Index("ix_posts_status_published", "status", "published_at"),
        Index("ix_posts_author_status", "author_id", "status"),
    )

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Post ID",
    )
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.id)",
    )
    title: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Post title",
    )
    slug: str = Field(
        sa_column=Column(String(200), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    excerpt: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Short summary shown in listings",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Post body (markdown)",
    )
    status: str = Field(
        default=PostStatus.DRAFT,
        sa_column=Column(String(20), nullable=False, index=True),
        description="Post status (draft, published, archived)",
    )
    featured: bool = Field(default=False, nullable=False)
    published_at: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        index=True,
        description="Set when the post is published",
    )
    view_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default="0"),
        description="View count",
    )

    author: UserDB = Relationship()
    categories: list[CategoryDB] = Relationship(
        link_model=PostCategoryLink,
        sa_relationship_kwargs={"order_by": "CategoryDB.name"},
    )
    tags: list[TagDB] = Relationship(
        link_model=PostTagLink,
        sa_relationship_kwargs={"order_by": "TagDB.name"},
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Getting Started with Async SQLAlchemy",
                "slug": "getting-started-with-async-sqlalchemy",
                "excerpt": "Sessions, transactions and eager loading",
                "status": "published",
                "view_count": 0,
            },
        },
    )


class CommentDB(TimestampModel, table=True):
    """Comment on a post; removed together with its post on hard delete."""

    __tablename__ = cast("declared_attr[str]", "comments")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    post_id: UUID = Field(
        sa_column=Column(
            "post_id",
            ForeignKey("posts.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    content: str = Field(sa_column=Column(Text, nullable=False))
