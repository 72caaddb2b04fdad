"""Category and tag repositories."""

from uuid import UUID

from sqlalchemy import func, select

from blogcms.models.post import PostDB
from blogcms.models.taxonomy import CategoryDB, TagDB
from blogcms.repositories.base import BaseRepository
from blogcms.repositories.relations import RELATION_TABLES, Relation
from blogcms.utils.helpers import slugify


class TaxonomyRepository[ModelT: (CategoryDB, TagDB)](BaseRepository[ModelT]):
    """
    Shared lookups for the two post classifications.

    ``post_count`` is never written here; it only moves through post writes.
    """

    relation: Relation

    async def get_by_slug(self, slug: str) -> ModelT | None:
        # pyrefly: ignore [bad-argument-type]
        return await self.get_by_field(self.model.slug, slug)

    async def list_all(self) -> list[ModelT]:
        """Get every row ordered by name."""
        # pyrefly: ignore [missing-attribute]
        return await self.find_many(order_by=[self.model.name.asc()])

    async def recount(self, target_id: UUID) -> int:
        """
        Count linked, non-deleted posts directly from the link table.

        Used to verify ``post_count``; the stored counter is not overwritten.
        """
        table = RELATION_TABLES[self.relation]
        statement = (
            select(func.count())
            .select_from(table.link)
            # pyrefly: ignore [bad-argument-type]
            .join(PostDB, PostDB.id == table.post_column)
            # pyrefly: ignore [missing-attribute]
            .where(table.target_column == target_id, PostDB.deleted_at.is_(None))
        )
        async with self._read() as session:
            result = await session.execute(statement)
            return result.scalar() or 0


class CategoryRepository(TaxonomyRepository[CategoryDB]):
    model = CategoryDB
    relation = Relation.CATEGORIES

    async def create_category(
        self,
        name: str,
        slug: str | None = None,
        description: str | None = None,
    ) -> CategoryDB:
        """
        Create a category with a zero post count.

        Raises:
            DuplicateEntryError: If the name or slug already exists
        """
        return await self.create(
            {"name": name, "slug": slug or slugify(name), "description": description},
        )


class TagRepository(TaxonomyRepository[TagDB]):
    model = TagDB
    relation = Relation.TAGS

    async def create_tag(self, name: str, slug: str | None = None) -> TagDB:
        """
        Create a tag with a zero post count.

        Raises:
            DuplicateEntryError: If the name or slug already exists
        """
        return await self.create({"name": name, "slug": slug or slugify(name)})
