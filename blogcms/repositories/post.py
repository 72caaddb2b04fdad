"""Post repository for database operations."""

from collections.abc import Sequence
from logging import getLogger
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from blogcms.configs import file_logger
from blogcms.errors.database import RecordNotFoundError
from blogcms.models.links import PostCategoryLink, PostTagLink
from blogcms.models.post import CommentDB, PostDB, PostStatus
from blogcms.models.taxonomy import CategoryDB, TagDB
from blogcms.models.user import UserDB
from blogcms.repositories.base import BaseRepository, Condition, Ordering
from blogcms.repositories.relations import Relation, shift_all_counters, sync_relations
from blogcms.schemas.pagination import Page
from blogcms.schemas.post import PostCreate, PostQuery, PostUpdate
from blogcms.utils.helpers import utcnow

logger = file_logger(getLogger(__name__))

WITH_RELATIONS = (
    # pyrefly: ignore [bad-argument-type]
    selectinload(PostDB.author),
    # pyrefly: ignore [bad-argument-type]
    selectinload(PostDB.categories),
    # pyrefly: ignore [bad-argument-type]
    selectinload(PostDB.tags),
)

SORT_COLUMNS = {
    "published_at": PostDB.published_at,
    "created_at": PostDB.created_at,
    "view_count": PostDB.view_count,
    "title": PostDB.title,
}


def _published_now() -> list[Condition]:
    return [
        # pyrefly: ignore [bad-argument-type]
        PostDB.status == PostStatus.PUBLISHED,
        # pyrefly: ignore [missing-attribute]
        PostDB.published_at.is_not(None),
        # pyrefly: ignore [bad-argument-type]
        PostDB.published_at <= utcnow(),
    ]


def post_filters(query: PostQuery) -> list[Condition]:
    """
    Translate a post query into WHERE conditions.

    Search matches title, excerpt or content case-insensitively; every
    other filter is ANDed with it.
    """
    conditions: list[Condition] = []

    if query.search:
        conditions.append(
            or_(
                # pyrefly: ignore [missing-attribute]
                PostDB.title.icontains(query.search, autoescape=True),
                # pyrefly: ignore [missing-attribute]
                PostDB.excerpt.icontains(query.search, autoescape=True),
                # pyrefly: ignore [missing-attribute]
                PostDB.content.icontains(query.search, autoescape=True),
            ),
        )
    if query.category_slug:
        conditions.append(
            # pyrefly: ignore [missing-attribute]
            PostDB.id.in_(
                select(PostCategoryLink.post_id)
                # pyrefly: ignore [bad-argument-type]
                .join(CategoryDB, CategoryDB.id == PostCategoryLink.category_id)
                # pyrefly: ignore [bad-argument-type]
                .where(CategoryDB.slug == query.category_slug),
            ),
        )
    if query.tag_slug:
        conditions.append(
            # pyrefly: ignore [missing-attribute]
            PostDB.id.in_(
                select(PostTagLink.post_id)
                # pyrefly: ignore [bad-argument-type]
                .join(TagDB, TagDB.id == PostTagLink.tag_id)
                # pyrefly: ignore [bad-argument-type]
                .where(TagDB.slug == query.tag_slug),
            ),
        )
    if query.author_id:
        # pyrefly: ignore [bad-argument-type]
        conditions.append(PostDB.author_id == query.author_id)
    if query.status:
        # pyrefly: ignore [bad-argument-type]
        conditions.append(PostDB.status == query.status)
    if query.featured is not None:
        # pyrefly: ignore [bad-argument-type]
        conditions.append(PostDB.featured == query.featured)
    if query.published_only:
        conditions.extend(_published_now())

    return conditions


def post_ordering(query: PostQuery) -> list[Ordering]:
    """Requested sort column (nulls last), then newest first, then id."""
    column = SORT_COLUMNS[query.sort]
    primary = column.desc() if query.direction == "desc" else column.asc()
    ordering: list[Ordering] = [primary.nulls_last()]
    if query.sort != "created_at":
        # pyrefly: ignore [missing-attribute]
        ordering.append(PostDB.created_at.desc())
    # pyrefly: ignore [missing-attribute]
    ordering.append(PostDB.id.desc())
    return ordering


class PostRepository(BaseRepository[PostDB]):
    """
    Repository for Post database operations.

    Every write that touches categories or tags runs in one transaction with
    the post's own changes, so link rows and ``post_count`` counters are
    committed together or not at all.
    """

    model = PostDB

    async def _load(self, session: AsyncSession, post_id: UUID) -> PostDB:
        """Re-read a post inside the open session with author, categories and tags."""
        result = await session.execute(
            select(PostDB)
            # pyrefly: ignore [bad-argument-type]
            .where(PostDB.id == post_id)
            .options(*WITH_RELATIONS)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one()

    async def create_post(self, data: PostCreate) -> PostDB:
        """
        Create a post with its initial categories and tags.

        Args:
            data: Post creation payload

        Returns:
            PostDB: Created post with author, categories and tags loaded

        Raises:
            RecordNotFoundError: If the author or any category/tag id does not exist
            DuplicateEntryError: If the slug is already taken
        """
        values = data.model_dump(exclude={"category_ids", "tag_ids"})
        if data.status == PostStatus.PUBLISHED:
            values["published_at"] = utcnow()

        async with self._write() as session:
            if await session.get(UserDB, data.author_id) is None:
                mssg = f"Author {data.author_id} not found"
                raise RecordNotFoundError(detail=mssg)

            post = PostDB.model_validate(values)
            session.add(post)
            await session.flush()
            await sync_relations(
                session,
                post.id,
                {Relation.CATEGORIES: data.category_ids, Relation.TAGS: data.tag_ids},
            )
            created = await self._load(session, post.id)

        logger.info(f"Post created: {created.id} ({created.slug})")
        return created

    async def update_post(self, post_id: UUID, data: PostUpdate) -> PostDB | None:
        """
        Update post fields and apply category/tag diffs in one transaction.

        Args:
            post_id: Post UUID
            data: Partial update; ``None`` id lists leave relations untouched

        Returns:
            PostDB | None: Updated post, or None if missing or soft-deleted
        """
        changes = data.field_changes()

        async with self._write() as session:
            post = await self._get_for_update(session, post_id)
            if post is None:
                return None

            if changes.get("status") == PostStatus.PUBLISHED and post.status != PostStatus.PUBLISHED:
                changes["published_at"] = utcnow()
            for key, value in changes.items():
                setattr(post, key, value)
            post.updated_at = utcnow()
            await session.flush()

            await sync_relations(
                session,
                post_id,
                {Relation.CATEGORIES: data.category_ids, Relation.TAGS: data.tag_ids},
            )
            return await self._load(session, post_id)

    async def update_status(self, post_id: UUID, status: PostStatus) -> PostDB | None:
        """
        Change post status.

        Publishing stamps ``published_at`` with the current time; any other
        status keeps the existing publish date.

        Returns:
            PostDB | None: Updated post, or None if missing or soft-deleted
        """
        async with self._write() as session:
            post = await self._get_for_update(session, post_id)
            if post is None:
                return None

            post.status = status
            if status == PostStatus.PUBLISHED:
                post.published_at = utcnow()
            post.updated_at = utcnow()
            await session.flush()
            return await self._load(session, post_id)

    async def delete_post(self, post_id: UUID) -> bool:
        """
        Soft delete a post.

        Stamps ``deleted_at`` and decrements the counters of every linked
        category and tag. Link rows are kept so the post can be restored.

        Returns:
            bool: True if deleted, False if missing or already deleted
        """
        async with self._write() as session:
            post = await self._get_for_update(session, post_id)
            if post is None:
                return False

            post.deleted_at = utcnow()
            await shift_all_counters(session, post_id, -1)
            await session.flush()

        logger.info(f"Post soft-deleted: {post_id}")
        return True

    async def restore_post(self, post_id: UUID) -> PostDB | None:
        """
        Undo a soft delete and count the post again in its categories and tags.

        Returns:
            PostDB | None: Restored post, or None if it does not exist
        """
        async with self._write() as session:
            post = await self._get_for_update(session, post_id, include_deleted=True)
            if post is None:
                return None

            if post.deleted_at is not None:
                post.deleted_at = None
                post.updated_at = utcnow()
                await shift_all_counters(session, post_id, 1)
                await session.flush()
                logger.info(f"Post restored: {post_id}")
            return await self._load(session, post_id)

    async def hard_delete_post(self, post_id: UUID) -> bool:
        """
        Permanently delete a post with its comments and link rows.

        Counters are only decremented when the post was still live; a
        soft-deleted post was already discounted.

        Returns:
            bool: True if deleted, False if not found
        """
        async with self._write() as session:
            post = await self._get_for_update(session, post_id, include_deleted=True)
            if post is None:
                return False

            if post.deleted_at is None:
                await shift_all_counters(session, post_id, -1)
            # pyrefly: ignore [bad-argument-type]
            await session.execute(delete(CommentDB).where(CommentDB.post_id == post_id))
            # pyrefly: ignore [bad-argument-type]
            await session.execute(delete(PostCategoryLink).where(PostCategoryLink.post_id == post_id))
            # pyrefly: ignore [bad-argument-type]
            await session.execute(delete(PostTagLink).where(PostTagLink.post_id == post_id))
            # pyrefly: ignore [bad-argument-type]
            await session.execute(delete(PostDB).where(PostDB.id == post_id))

        logger.info(f"Post hard-deleted: {post_id}")
        return True

    async def increment_view_count(self, post_id: UUID, by: int = 1) -> bool:
        """
        Atomically add to the view counter.

        Args:
            post_id: Post UUID
            by: Views to add, at least 1

        Returns:
            bool: True if the post exists and was updated
        """
        if by < 1:
            mssg = "View count can only be incremented by a positive amount"
            raise ValueError(mssg)

        async with self._write() as session:
            result = await session.execute(
                update(PostDB)
                # pyrefly: ignore [bad-argument-type]
                .where(PostDB.id == post_id, PostDB.deleted_at.is_(None))
                .values(view_count=PostDB.view_count + by)
                .execution_options(synchronize_session=False),
            )
            # pyrefly: ignore [missing-attribute]
            return result.rowcount == 1

    async def get_post(self, post_id: UUID, *, include_deleted: bool = False) -> PostDB | None:
        """Get a post with author, categories and tags."""
        return await self.get_by_id(post_id, include_deleted=include_deleted, options=WITH_RELATIONS)

    async def find_published(self, slug: str) -> PostDB | None:
        """
        Get a publicly visible post by slug.

        Returns:
            PostDB | None: Post if published with a publish date in the past
        """
        posts = await self.find_many(
            # pyrefly: ignore [bad-argument-type]
            [PostDB.slug == slug, *_published_now()],
            limit=1,
            options=WITH_RELATIONS,
        )
        return posts[0] if posts else None

    async def list_posts(self, query: PostQuery) -> Page[PostDB]:
        """
        Get one page of posts matching the query.

        Args:
            query: Filters, sort and pagination

        Returns:
            Page[PostDB]: Posts with relations plus pagination metadata
        """
        return await self.paginate(
            query,
            post_filters(query),
            order_by=post_ordering(query),
            options=WITH_RELATIONS,
            include_deleted=query.include_deleted,
        )

    async def list_published(self, query: PostQuery) -> Page[PostDB]:
        """Public listing: same as ``list_posts`` restricted to live published posts."""
        public = query.model_copy(update={"published_only": True, "include_deleted": False})
        return await self.list_posts(public)

    async def get_related_posts(
        self,
        post_id: UUID,
        category_ids: Sequence[UUID],
        limit: int = 3,
    ) -> list[PostDB]:
        """
        Get published posts sharing at least one category, newest first.

        Args:
            post_id: Post to exclude from the results
            category_ids: Categories of the current post
            limit: Maximum number of posts

        Returns:
            list[PostDB]: Related posts
        """
        if not category_ids:
            return []

        return await self.find_many(
            [
                # pyrefly: ignore [bad-argument-type]
                PostDB.id != post_id,
                # pyrefly: ignore [missing-attribute]
                PostDB.id.in_(
                    select(PostCategoryLink.post_id).where(
                        # pyrefly: ignore [missing-attribute]
                        PostCategoryLink.category_id.in_(category_ids),
                    ),
                ),
                *_published_now(),
            ],
            limit=limit,
            # pyrefly: ignore [missing-attribute]
            order_by=[PostDB.published_at.desc(), PostDB.created_at.desc()],
            options=WITH_RELATIONS,
        )
