"""Pagination parameters and paginated result containers."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from blogcms.configs import settings
from blogcms.utils.helpers import total_pages

SortDirection = Literal["asc", "desc"]


class PageParams(BaseModel):
    """1-indexed page request."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    page_size: int = Field(
        default=settings.DEFAULT_PAGE_SIZE,
        ge=1,
        le=settings.MAX_PAGE_SIZE,
        description="Items per page",
    )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True, slots=True)
class PageMeta:
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def build(cls, total: int, params: PageParams) -> "PageMeta":
        return cls(
            total=total,
            page=params.page,
            page_size=params.page_size,
            total_pages=total_pages(total, params.page_size),
        )


@dataclass(slots=True)
class Page[T]:
    """One page of results plus the totals needed to navigate the rest."""

    data: list[T]
    meta: PageMeta


class PageMetaResponse(BaseModel):
    """Serialized as ``{total, page, pageSize, totalPages}``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    total: int
    page: int
    page_size: int
    total_pages: int
