"""Association rows between posts and categories/tags."""

from typing import cast
from uuid import UUID

from sqlalchemy.orm import declared_attr
from sqlmodel import Field, SQLModel


class PostCategoryLink(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "post_categories")

    post_id: UUID = Field(foreign_key="posts.id", primary_key=True, ondelete="CASCADE")
    category_id: UUID = Field(
        foreign_key="categories.id",
        primary_key=True,
        ondelete="CASCADE",
        index=True,
    )


class PostTagLink(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "post_tags")

    post_id: UUID = Field(foreign_key="posts.id", primary_key=True, ondelete="CASCADE")
    tag_id: UUID = Field(foreign_key="tags.id", primary_key=True, ondelete="CASCADE", index=True)
