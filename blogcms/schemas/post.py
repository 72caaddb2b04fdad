"""
Post schemas.

Request bodies for creating and updating posts, the closed query object
used for filtered listings, and the response shapes returned by the API.
"""

from datetime import datetime
from re import match
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from blogcms.models.post import PostStatus
from blogcms.schemas.pagination import PageMetaResponse, PageParams, SortDirection
from blogcms.utils.helpers import SLUG_PATTERN, slugify

PostSortField = Literal["published_at", "created_at", "view_count", "title"]

NULLABLE_POST_FIELDS = frozenset({"excerpt"})


def _check_slug(slug: str | None) -> str | None:
    if slug is not None and not match(SLUG_PATTERN, slug):
        mssg = "Slug must be lowercase alphanumeric with hyphens only"
        raise ValueError(mssg)
    return slug


class PostCreate(BaseModel):
    """Post creation payload; the slug is derived from the title when omitted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    author_id: UUID
    title: str = Field(min_length=1, max_length=200)
    slug: str | None = Field(default=None, min_length=1, max_length=200)
    excerpt: str | None = Field(default=None, max_length=500)
    content: str = Field(min_length=1)
    status: PostStatus = PostStatus.DRAFT
    featured: bool = False
    category_ids: list[UUID] = Field(default_factory=list)
    tag_ids: list[UUID] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def generate_slug_from_title(cls, data: Any) -> Any:
        """Auto-generate slug from title if not provided."""
        if not isinstance(data, dict) or data.get("slug"):
            return data

        generated = slugify(data.get("title") or "")
        if not generated:
            mssg = "Could not generate valid slug from title"
            raise ValueError(mssg)
        return {**data, "slug": generated}

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, value: str | None) -> str | None:
        return _check_slug(value)


class PostUpdate(BaseModel):
    """
    Partial post update.

    ``category_ids`` / ``tag_ids`` left as ``None`` keep the current
    associations; an empty list removes all of them.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = Field(default=None, min_length=1, max_length=200)
    slug: str | None = Field(default=None, min_length=1, max_length=200)
    excerpt: str | None = Field(default=None, max_length=500)
    content: str | None = Field(default=None, min_length=1)
    status: PostStatus | None = None
    featured: bool | None = None
    category_ids: list[UUID] | None = None
    tag_ids: list[UUID] | None = None

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, value: str | None) -> str | None:
        return _check_slug(value)

    def field_changes(self) -> dict[str, Any]:
        """
        Column values to assign, without the relation id lists.

        An explicit ``None`` clears a nullable column such as ``excerpt``;
        for required columns it is ignored.
        """
        changes = self.model_dump(exclude_unset=True, exclude={"category_ids", "tag_ids"})
        return {
            key: value
            for key, value in changes.items()
            if value is not None or key in NULLABLE_POST_FIELDS
        }


class PostQuery(PageParams):
    """
    Filters, sort and pagination for post listings.

    Filters combine with AND; ``search`` matches title, excerpt or content.
    """

    search: str | None = Field(default=None, min_length=1, max_length=200)
    category_slug: str | None = None
    tag_slug: str | None = None
    author_id: UUID | None = None
    status: PostStatus | None = None
    featured: bool | None = None
    published_only: bool = False
    include_deleted: bool = False
    sort: PostSortField = "published_at"
    direction: SortDirection = "desc"


class AuthorResponse(BaseModel):
    """Author information for post responses (without sensitive data)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: UUID
    name: str | None = None
    image: str | None = None


class TaxonomyResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: UUID
    name: str
    slug: str
    post_count: int


class PostResponse(BaseModel):
    """Post with its author, categories and tags resolved."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: UUID
    title: str
    slug: str
    excerpt: str | None = None
    content: str
    status: PostStatus
    featured: bool
    published_at: datetime | None = None
    view_count: int
    author_id: UUID
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    author: AuthorResponse | None = None
    categories: list[TaxonomyResponse] = Field(default_factory=list)
    tags: list[TaxonomyResponse] = Field(default_factory=list)


class PostListResponse(BaseModel):
    """Paginated list of posts: ``{data, meta}``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    data: list[PostResponse]
    meta: PageMetaResponse


class PostStatusUpdate(BaseModel):
    status: PostStatus
