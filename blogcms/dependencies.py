"""Request dependencies resolving repositories from application state."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Query, Request

from blogcms.configs import settings
from blogcms.models.post import PostStatus
from blogcms.repositories import PostRepository, Repositories
from blogcms.schemas.pagination import SortDirection
from blogcms.schemas.post import PostQuery, PostSortField


def get_repositories(request: Request) -> Repositories:
    """Dependency to get the repository container built at startup."""
    return request.app.state.repositories


RepositoriesDep = Annotated[Repositories, Depends(get_repositories)]


def get_post_repository(repositories: RepositoriesDep) -> PostRepository:
    return repositories.posts


PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]


def get_post_query(
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    page_size: Annotated[
        int,
        Query(alias="pageSize", ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page"),
    ] = settings.DEFAULT_PAGE_SIZE,
    search: Annotated[
        str | None,
        Query(min_length=1, max_length=200, description="Search title, excerpt and content"),
    ] = None,
    category: Annotated[str | None, Query(description="Category slug")] = None,
    tag: Annotated[str | None, Query(description="Tag slug")] = None,
    author_id: Annotated[UUID | None, Query(alias="authorId")] = None,
    status: Annotated[PostStatus | None, Query()] = None,
    featured: Annotated[bool | None, Query()] = None,
    sort: Annotated[PostSortField, Query()] = "published_at",
    direction: Annotated[SortDirection, Query()] = "desc",
) -> PostQuery:
    """
    Dependency to construct `PostQuery` from query parameters.

    Returns
    -------
    PostQuery
        Aggregated filters, sort and pagination.
    """
    return PostQuery(
        page=page,
        page_size=page_size,
        search=search,
        category_slug=category,
        tag_slug=tag,
        author_id=author_id,
        status=status,
        featured=featured,
        sort=sort,
        direction=direction,
    )


PostQueryDep = Annotated[PostQuery, Depends(get_post_query)]
