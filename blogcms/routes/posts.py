"""
Post Routes.

Thin HTTP surface over the post repository.

Summary
-------
Endpoints include:
  - List posts (with filters)
  - List published posts
  - Get published post by slug
  - Get post by id
  - Create post
  - Update post
  - Change post status
  - Delete post (soft)
  - Record a post view

Dependencies
------------
  - `PostRepoDep`: Post repository taken from the application's repository container.
  - `PostQueryDep`: Filters, sort and pagination parsed from query parameters.
"""

from logging import getLogger
from uuid import UUID

from fastapi import APIRouter, HTTPException
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND

from blogcms.configs import file_logger
from blogcms.dependencies import PostQueryDep, PostRepoDep
from blogcms.models.post import PostDB
from blogcms.schemas.pagination import Page, PageMetaResponse
from blogcms.schemas.post import (
    PostCreate,
    PostListResponse,
    PostResponse,
    PostStatusUpdate,
    PostUpdate,
)

router = APIRouter(prefix="/posts", tags=["📝 Posts"])

logger = file_logger(getLogger(__name__))

NOT_FOUND = {HTTP_404_NOT_FOUND: {"description": "Post not found"}}


def _post_or_404(post: PostDB | None) -> PostResponse:
    if post is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Post not found")
    return PostResponse.model_validate(post)


def _list_response(page: Page[PostDB]) -> PostListResponse:
    return PostListResponse(
        data=[PostResponse.model_validate(post) for post in page.data],
        meta=PageMetaResponse.model_validate(page.meta),
    )


@router.get(
    "",
    response_model=PostListResponse,
    summary="List posts",
    operation_id="list_posts",
)
async def list_posts(repo: PostRepoDep, query: PostQueryDep) -> PostListResponse:
    """
    List posts with filters and pagination.

    Returns
    -------
    PostListResponse
        ``{data, meta: {total, page, pageSize, totalPages}}``.
    """
    return _list_response(await repo.list_posts(query))


@router.get(
    "/published",
    response_model=PostListResponse,
    summary="List published posts",
    operation_id="list_published_posts",
)
async def list_published_posts(repo: PostRepoDep, query: PostQueryDep) -> PostListResponse:
    return _list_response(await repo.list_published(query))


@router.get(
    "/slug/{slug}",
    response_model=PostResponse,
    summary="Get published post by slug",
    responses=NOT_FOUND,
    operation_id="get_published_post",
)
async def get_published_post(slug: str, repo: PostRepoDep) -> PostResponse:
    return _post_or_404(await repo.find_published(slug))


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    summary="Get post by id",
    responses=NOT_FOUND,
    operation_id="get_post",
)
async def get_post(post_id: UUID, repo: PostRepoDep) -> PostResponse:
    return _post_or_404(await repo.get_post(post_id))


@router.post(
    "",
    response_model=PostResponse,
    status_code=HTTP_201_CREATED,
    summary="Create post",
    operation_id="create_post",
)
async def create_post(data: PostCreate, repo: PostRepoDep) -> PostResponse:
    """
    Create a post with its categories and tags.

    Unknown author, category or tag ids answer 404; a taken slug answers 409.
    """
    post = await repo.create_post(data)
    return PostResponse.model_validate(post)


@router.patch(
    "/{post_id}",
    response_model=PostResponse,
    summary="Update post",
    responses=NOT_FOUND,
    operation_id="update_post",
)
async def update_post(post_id: UUID, data: PostUpdate, repo: PostRepoDep) -> PostResponse:
    return _post_or_404(await repo.update_post(post_id, data))


@router.patch(
    "/{post_id}/status",
    response_model=PostResponse,
    summary="Change post status",
    responses=NOT_FOUND,
    operation_id="update_post_status",
)
async def update_post_status(
    post_id: UUID,
    data: PostStatusUpdate,
    repo: PostRepoDep,
) -> PostResponse:
    return _post_or_404(await repo.update_status(post_id, data.status))


@router.delete(
    "/{post_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete post",
    responses=NOT_FOUND,
    operation_id="delete_post",
)
async def delete_post(post_id: UUID, repo: PostRepoDep) -> Response:
    if not await repo.delete_post(post_id):
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Post not found")
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.post(
    "/{post_id}/views",
    status_code=HTTP_204_NO_CONTENT,
    summary="Record a post view",
    responses=NOT_FOUND,
    operation_id="increment_post_views",
)
async def increment_post_views(post_id: UUID, repo: PostRepoDep) -> Response:
    if not await repo.increment_view_count(post_id):
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Post not found")
    return Response(status_code=HTTP_204_NO_CONTENT)
