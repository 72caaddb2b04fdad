# tests/repositories/test_post_repository.py
"""Tests for PostRepository: lifecycle, relation sync and listings."""

from uuid import UUID, uuid4

import pytest
from sqlalchemy import select

from blogcms.db import Database
from blogcms.errors import DuplicateEntryError, RecordNotFoundError
from blogcms.models import CategoryDB, CommentDB, PostCategoryLink, PostStatus, TagDB, UserDB
from blogcms.repositories import CategoryRepository, PostRepository, TagRepository
from blogcms.schemas import PostCreate, PostQuery, PostUpdate


async def stored_count(repo: CategoryRepository | TagRepository, target_id: UUID) -> int:
    target = await repo.get_by_id(target_id)
    assert target is not None
    return target.post_count


async def assert_counters_match(
    repo: CategoryRepository | TagRepository,
    ids: list[UUID],
) -> None:
    for target_id in ids:
        assert await stored_count(repo, target_id) == await repo.recount(target_id)


def new_post(author: UserDB, title: str = "Hello World", **kwargs: object) -> PostCreate:
    return PostCreate(author_id=author.id, title=title, content="Body text", **kwargs)


class TestCreatePost:
    async def test_create_with_relations(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        tags: TagRepository,
        author: UserDB,
        tech: CategoryDB,
        ai: CategoryDB,
        three_tags: list[TagDB],
    ) -> None:
        tag_ids = [tag.id for tag in three_tags]
        post = await posts.create_post(
            new_post(author, category_ids=[tech.id, ai.id], tag_ids=tag_ids),
        )

        assert post.slug == "hello-world"
        assert post.author.id == author.id
        assert {c.id for c in post.categories} == {tech.id, ai.id}
        assert {t.id for t in post.tags} == set(tag_ids)
        assert await stored_count(categories, tech.id) == 1
        assert await stored_count(categories, ai.id) == 1
        for tag_id in tag_ids:
            assert await stored_count(tags, tag_id) == 1
        await assert_counters_match(categories, [tech.id, ai.id])
        await assert_counters_match(tags, tag_ids)

    async def test_duplicate_ids_collapse(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id, tech.id]))

        assert len(post.categories) == 1
        assert await stored_count(categories, tech.id) == 1

    async def test_draft_has_no_publish_date(self, posts: PostRepository, author: UserDB) -> None:
        post = await posts.create_post(new_post(author))
        assert post.status == PostStatus.DRAFT
        assert post.published_at is None

    async def test_published_is_stamped(self, posts: PostRepository, author: UserDB) -> None:
        post = await posts.create_post(new_post(author, status=PostStatus.PUBLISHED))
        assert post.published_at is not None

    async def test_unknown_category_rolls_back(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
    ) -> None:
        with pytest.raises(RecordNotFoundError):
            await posts.create_post(new_post(author, category_ids=[tech.id, uuid4()]))

        assert await posts.count(include_deleted=True) == 0
        assert await stored_count(categories, tech.id) == 0

    async def test_unknown_author(self, posts: PostRepository) -> None:
        with pytest.raises(RecordNotFoundError):
            await posts.create_post(
                PostCreate(author_id=uuid4(), title="Orphan", content="Body text"),
            )

    async def test_duplicate_slug(self, posts: PostRepository, author: UserDB) -> None:
        await posts.create_post(new_post(author, slug="same-slug"))

        with pytest.raises(DuplicateEntryError) as exc_info:
            await posts.create_post(new_post(author, title="Other", slug="same-slug"))

        assert exc_info.value.status_code == 409
        assert exc_info.value.code == "23505"


class TestUpdatePost:
    async def test_tech_ai_to_ai_biz(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
        ai: CategoryDB,
        biz: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id, ai.id]))

        updated = await posts.update_post(post.id, PostUpdate(category_ids=[ai.id, biz.id]))

        assert updated is not None
        assert {c.id for c in updated.categories} == {ai.id, biz.id}
        assert await stored_count(categories, tech.id) == 0
        assert await stored_count(categories, ai.id) == 1
        assert await stored_count(categories, biz.id) == 1
        await assert_counters_match(categories, [tech.id, ai.id, biz.id])

    async def test_only_affected_counters_move(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        tags: TagRepository,
        author: UserDB,
        tech: CategoryDB,
        ai: CategoryDB,
        biz: CategoryDB,
        three_tags: list[TagDB],
    ) -> None:
        tag_ids = [tag.id for tag in three_tags]
        other = await posts.create_post(new_post(author, title="Other", category_ids=[tech.id]))
        post = await posts.create_post(
            new_post(author, category_ids=[tech.id, ai.id], tag_ids=tag_ids),
        )
        assert await stored_count(categories, tech.id) == 2

        await posts.update_post(
            post.id,
            PostUpdate(category_ids=[tech.id, biz.id], tag_ids=tag_ids[:2]),
        )

        assert await stored_count(categories, tech.id) == 2
        assert await stored_count(categories, ai.id) == 0
        assert await stored_count(categories, biz.id) == 1
        assert [await stored_count(tags, tag_id) for tag_id in tag_ids] == [1, 1, 0]
        await assert_counters_match(categories, [tech.id, ai.id, biz.id])
        await assert_counters_match(tags, tag_ids)
        assert other.id != post.id

    async def test_same_ids_is_noop(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
        ai: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id, ai.id]))

        for _ in range(2):
            await posts.update_post(post.id, PostUpdate(category_ids=[ai.id, tech.id]))

        assert await stored_count(categories, tech.id) == 1
        assert await stored_count(categories, ai.id) == 1

    async def test_omitted_ids_leave_relations(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id]))

        updated = await posts.update_post(post.id, PostUpdate(title="Renamed"))

        assert updated is not None
        assert updated.title == "Renamed"
        assert [c.id for c in updated.categories] == [tech.id]
        assert await stored_count(categories, tech.id) == 1

    async def test_empty_list_clears(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id]))

        updated = await posts.update_post(post.id, PostUpdate(category_ids=[]))

        assert updated is not None
        assert updated.categories == []
        assert await stored_count(categories, tech.id) == 0

    async def test_unknown_id_rolls_back_everything(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
        ai: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id]))

        with pytest.raises(RecordNotFoundError):
            await posts.update_post(
                post.id,
                PostUpdate(title="Changed", category_ids=[ai.id, uuid4()]),
            )

        reloaded = await posts.get_post(post.id)
        assert reloaded is not None
        assert reloaded.title == "Hello World"
        assert [c.id for c in reloaded.categories] == [tech.id]
        assert await stored_count(categories, tech.id) == 1
        assert await stored_count(categories, ai.id) == 0

    async def test_written_category_links_roll_back_when_tags_fail(
        self,
        database: Database,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
        biz: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id]))

        # Categories sync first: biz is linked and tech unlinked before the tag lookup fails
        with pytest.raises(RecordNotFoundError, match="tags"):
            await posts.update_post(
                post.id,
                PostUpdate(category_ids=[biz.id], tag_ids=[uuid4()]),
            )

        async with database.session() as session:
            result = await session.execute(
                select(PostCategoryLink.category_id).where(PostCategoryLink.post_id == post.id),
            )
            assert result.scalars().all() == [tech.id]
        assert await stored_count(categories, tech.id) == 1
        assert await stored_count(categories, biz.id) == 0

    async def test_clear_excerpt(self, posts: PostRepository, author: UserDB) -> None:
        post = await posts.create_post(new_post(author, excerpt="Short summary"))

        updated = await posts.update_post(post.id, PostUpdate(excerpt=None))

        assert updated is not None
        assert updated.excerpt is None
        assert updated.title == "Hello World"

    async def test_missing_post(self, posts: PostRepository) -> None:
        assert await posts.update_post(uuid4(), PostUpdate(title="Nope")) is None

    async def test_publishing_via_update_stamps_date(
        self,
        posts: PostRepository,
        author: UserDB,
    ) -> None:
        post = await posts.create_post(new_post(author))

        updated = await posts.update_post(post.id, PostUpdate(status=PostStatus.PUBLISHED))

        assert updated is not None
        assert updated.published_at is not None


class TestStatus:
    async def test_publish_then_archive_keeps_date(
        self,
        posts: PostRepository,
        author: UserDB,
    ) -> None:
        post = await posts.create_post(new_post(author))

        published = await posts.update_status(post.id, PostStatus.PUBLISHED)
        assert published is not None
        assert published.published_at is not None
        published_at = published.published_at

        archived = await posts.update_status(post.id, PostStatus.ARCHIVED)
        assert archived is not None
        assert archived.status == PostStatus.ARCHIVED
        assert archived.published_at == published_at

    async def test_missing_post(self, posts: PostRepository) -> None:
        assert await posts.update_status(uuid4(), PostStatus.PUBLISHED) is None


class TestDelete:
    async def test_soft_delete_decrements_and_hides(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        tags: TagRepository,
        author: UserDB,
        tech: CategoryDB,
        three_tags: list[TagDB],
    ) -> None:
        tag_ids = [tag.id for tag in three_tags]
        post = await posts.create_post(new_post(author, category_ids=[tech.id], tag_ids=tag_ids))

        assert await posts.delete_post(post.id) is True

        assert await stored_count(categories, tech.id) == 0
        assert [await stored_count(tags, tag_id) for tag_id in tag_ids] == [0, 0, 0]
        assert await posts.get_post(post.id) is None
        assert await posts.get_post(post.id, include_deleted=True) is not None
        assert (await posts.list_posts(PostQuery())).meta.total == 0
        await assert_counters_match(categories, [tech.id])

    async def test_soft_delete_twice(self, posts: PostRepository, author: UserDB) -> None:
        post = await posts.create_post(new_post(author))

        assert await posts.delete_post(post.id) is True
        assert await posts.delete_post(post.id) is False
        assert await posts.delete_post(uuid4()) is False

    async def test_deleted_post_cannot_be_updated(
        self,
        posts: PostRepository,
        author: UserDB,
    ) -> None:
        post = await posts.create_post(new_post(author))
        await posts.delete_post(post.id)

        assert await posts.update_post(post.id, PostUpdate(title="Ghost")) is None

    async def test_restore_counts_again(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id]))
        await posts.delete_post(post.id)

        restored = await posts.restore_post(post.id)

        assert restored is not None
        assert restored.deleted_at is None
        assert [c.id for c in restored.categories] == [tech.id]
        assert await stored_count(categories, tech.id) == 1

    async def test_restore_live_post_is_unchanged(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id]))

        assert await posts.restore_post(post.id) is not None
        assert await stored_count(categories, tech.id) == 1
        assert await posts.restore_post(uuid4()) is None

    async def test_hard_delete_live_post(
        self,
        database: Database,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id]))
        async with database.transaction() as session:
            session.add(CommentDB(post_id=post.id, author_id=author.id, content="Nice"))

        assert await posts.hard_delete_post(post.id) is True

        assert await posts.get_post(post.id, include_deleted=True) is None
        assert await stored_count(categories, tech.id) == 0
        assert await categories.recount(tech.id) == 0
        async with database.session() as session:
            result = await session.execute(select(CommentDB).where(CommentDB.post_id == post.id))
            assert result.scalars().all() == []

    async def test_hard_delete_after_soft_delete_does_not_double_count(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        author: UserDB,
        tech: CategoryDB,
    ) -> None:
        post = await posts.create_post(new_post(author, category_ids=[tech.id]))
        await posts.delete_post(post.id)

        assert await posts.hard_delete_post(post.id) is True
        assert await stored_count(categories, tech.id) == 0
        assert await posts.hard_delete_post(post.id) is False


class TestViewCount:
    async def test_increment(self, posts: PostRepository, author: UserDB) -> None:
        post = await posts.create_post(new_post(author))

        assert await posts.increment_view_count(post.id) is True
        assert await posts.increment_view_count(post.id, by=3) is True

        reloaded = await posts.get_post(post.id)
        assert reloaded is not None
        assert reloaded.view_count == 4

    async def test_missing_post(self, posts: PostRepository) -> None:
        assert await posts.increment_view_count(uuid4()) is False

    async def test_non_positive_amount(self, posts: PostRepository) -> None:
        with pytest.raises(ValueError, match="positive"):
            await posts.increment_view_count(uuid4(), by=0)


class TestListing:
    async def test_pagination_25_posts(self, posts: PostRepository, author: UserDB) -> None:
        for i in range(25):
            await posts.create_post(new_post(author, title=f"Post {i}"))

        pages = [await posts.list_posts(PostQuery(page=n, page_size=10)) for n in (1, 2, 3)]

        assert [len(page.data) for page in pages] == [10, 10, 5]
        assert all(page.meta.total == 25 for page in pages)
        assert all(page.meta.total_pages == 3 for page in pages)
        seen = {post.id for page in pages for post in page.data}
        assert len(seen) == 25

    async def test_page_past_the_end(self, posts: PostRepository, author: UserDB) -> None:
        await posts.create_post(new_post(author))

        page = await posts.list_posts(PostQuery(page=5, page_size=10))

        assert page.data == []
        assert page.meta.total == 1
        assert page.meta.total_pages == 1

    async def test_search_is_case_insensitive(
        self,
        posts: PostRepository,
        author: UserDB,
    ) -> None:
        await posts.create_post(new_post(author, title="Async SQLAlchemy Tips"))
        await posts.create_post(
            PostCreate(author_id=author.id, title="Other", content="All about ASYNCIO"),
        )
        await posts.create_post(new_post(author, title="Gardening"))

        page = await posts.list_posts(PostQuery(search="async"))

        assert page.meta.total == 2

    async def test_search_treats_wildcards_literally(
        self,
        posts: PostRepository,
        author: UserDB,
    ) -> None:
        await posts.create_post(new_post(author, title="Discount 100% off"))
        await posts.create_post(new_post(author, title="Plain"))

        assert (await posts.list_posts(PostQuery(search="%"))).meta.total == 1

    async def test_filters_combine(
        self,
        posts: PostRepository,
        author: UserDB,
        tech: CategoryDB,
        ai: CategoryDB,
        three_tags: list[TagDB],
    ) -> None:
        python = three_tags[0]
        await posts.create_post(
            new_post(
                author,
                title="Tech Python",
                status=PostStatus.PUBLISHED,
                category_ids=[tech.id],
                tag_ids=[python.id],
            ),
        )
        await posts.create_post(new_post(author, title="Tech Draft", category_ids=[tech.id]))
        await posts.create_post(
            new_post(author, title="AI Python", category_ids=[ai.id], tag_ids=[python.id]),
        )

        by_category = await posts.list_posts(PostQuery(category_slug="tech"))
        by_tag = await posts.list_posts(PostQuery(tag_slug="python"))
        both = await posts.list_posts(PostQuery(category_slug="tech", tag_slug="python"))
        published = await posts.list_published(PostQuery(category_slug="tech"))

        assert by_category.meta.total == 2
        assert by_tag.meta.total == 2
        assert [p.title for p in both.data] == ["Tech Python"]
        assert [p.title for p in published.data] == ["Tech Python"]

    async def test_author_and_featured_filters(
        self,
        posts: PostRepository,
        users_author_pair: tuple[UserDB, UserDB],
    ) -> None:
        first, second = users_author_pair
        await posts.create_post(new_post(first, title="First", featured=True))
        await posts.create_post(new_post(second, title="Second"))

        assert (await posts.list_posts(PostQuery(author_id=second.id))).meta.total == 1
        featured = await posts.list_posts(PostQuery(featured=True))
        assert [p.title for p in featured.data] == ["First"]

    async def test_default_order_published_first(
        self,
        posts: PostRepository,
        author: UserDB,
    ) -> None:
        draft = await posts.create_post(new_post(author, title="Draft"))
        older = await posts.create_post(new_post(author, title="Older", status=PostStatus.PUBLISHED))
        newer = await posts.create_post(new_post(author, title="Newer", status=PostStatus.PUBLISHED))

        page = await posts.list_posts(PostQuery())

        assert [p.id for p in page.data] == [newer.id, older.id, draft.id]

    async def test_sort_by_title(self, posts: PostRepository, author: UserDB) -> None:
        for title in ("Banana", "apple pie", "Cherry"):
            await posts.create_post(new_post(author, title=title))

        page = await posts.list_posts(PostQuery(sort="title", direction="asc"))

        assert [p.title for p in page.data] == ["Banana", "Cherry", "apple pie"]

    async def test_include_deleted(self, posts: PostRepository, author: UserDB) -> None:
        post = await posts.create_post(new_post(author))
        await posts.delete_post(post.id)

        assert (await posts.list_posts(PostQuery(include_deleted=True))).meta.total == 1
        assert (await posts.list_published(PostQuery(include_deleted=True))).meta.total == 0


class TestPublicLookups:
    async def test_find_published(self, posts: PostRepository, author: UserDB) -> None:
        await posts.create_post(new_post(author, title="Draft Post"))
        await posts.create_post(new_post(author, title="Live Post", status=PostStatus.PUBLISHED))

        assert await posts.find_published("draft-post") is None
        live = await posts.find_published("live-post")
        assert live is not None
        assert live.author.id == author.id

    async def test_related_posts(
        self,
        posts: PostRepository,
        author: UserDB,
        tech: CategoryDB,
        ai: CategoryDB,
    ) -> None:
        current = await posts.create_post(
            new_post(author, title="Current", status=PostStatus.PUBLISHED, category_ids=[tech.id]),
        )
        for i in range(4):
            await posts.create_post(
                new_post(
                    author,
                    title=f"Related {i}",
                    status=PostStatus.PUBLISHED,
                    category_ids=[tech.id],
                ),
            )
        await posts.create_post(new_post(author, title="Draft", category_ids=[tech.id]))
        await posts.create_post(
            new_post(author, title="Elsewhere", status=PostStatus.PUBLISHED, category_ids=[ai.id]),
        )

        related = await posts.get_related_posts(current.id, [tech.id])

        assert len(related) == 3
        assert current.id not in {p.id for p in related}
        assert all(p.title.startswith("Related") for p in related)
        assert await posts.get_related_posts(current.id, []) == []
