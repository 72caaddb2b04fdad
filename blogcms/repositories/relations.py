"""
Post relation sync for categories and tags.

A post's categories and tags are pure link rows. Every change to them is
applied as a diff against the stored set, and each affected category or tag
has its ``post_count`` moved by exactly one in the same transaction.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from types import MappingProxyType
from typing import Any
from uuid import UUID

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlmodel import SQLModel

from blogcms.configs import file_logger
from blogcms.errors.database import RecordNotFoundError
from blogcms.models.links import PostCategoryLink, PostTagLink
from blogcms.models.taxonomy import CategoryDB, TagDB

logger = file_logger(getLogger(__name__))


class Relation(StrEnum):
    CATEGORIES = "categories"
    TAGS = "tags"


@dataclass(frozen=True, slots=True)
class RelationTable:
    """Link table of one post relation and the counted table it points to."""

    link: type[SQLModel]
    post_column: InstrumentedAttribute[Any]
    target_column: InstrumentedAttribute[Any]
    target: type[CategoryDB] | type[TagDB]


RELATION_TABLES: Mapping[Relation, RelationTable] = MappingProxyType(
    {
        Relation.CATEGORIES: RelationTable(
            link=PostCategoryLink,
            # pyrefly: ignore [bad-argument-type]
            post_column=PostCategoryLink.post_id,
            # pyrefly: ignore [bad-argument-type]
            target_column=PostCategoryLink.category_id,
            target=CategoryDB,
        ),
        Relation.TAGS: RelationTable(
            link=PostTagLink,
            # pyrefly: ignore [bad-argument-type]
            post_column=PostTagLink.post_id,
            # pyrefly: ignore [bad-argument-type]
            target_column=PostTagLink.tag_id,
            target=TagDB,
        ),
    },
)


@dataclass(frozen=True, slots=True)
class RelationDiff:
    to_add: frozenset[UUID] = field(default_factory=frozenset)
    to_remove: frozenset[UUID] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def diff_relations(current: Iterable[UUID], desired: Iterable[UUID] | None) -> RelationDiff:
    """
    Compute the add/remove delta between stored and desired ids.

    Args:
        current: Ids currently linked to the post
        desired: Ids the post should be linked to; ``None`` leaves the
            relation unchanged, an empty iterable clears it

    Returns:
        RelationDiff: Ids to link and ids to unlink
    """
    if desired is None:
        return RelationDiff()

    current_ids = frozenset(current)
    desired_ids = frozenset(desired)
    return RelationDiff(to_add=desired_ids - current_ids, to_remove=current_ids - desired_ids)


async def current_relation_ids(
    session: AsyncSession,
    relation: Relation,
    post_id: UUID,
) -> set[UUID]:
    """Load the ids currently linked to a post for one relation."""
    table = RELATION_TABLES[relation]
    result = await session.execute(
        select(table.target_column).where(table.post_column == post_id),
    )
    return set(result.scalars().all())


async def adjust_counters(
    session: AsyncSession,
    relation: Relation,
    ids: Iterable[UUID],
    delta: int,
) -> None:
    """
    Move ``post_count`` of every referenced row by ``delta`` in one statement.

    Raises:
        RecordNotFoundError: If any id does not resolve to an existing row
    """
    target_ids = set(ids)
    if not target_ids:
        return

    target = RELATION_TABLES[relation].target
    result = await session.execute(
        update(target)
        # pyrefly: ignore [missing-attribute]
        .where(target.id.in_(list(target_ids)))
        .values(post_count=target.post_count + delta)
        .execution_options(synchronize_session=False),
    )
    # pyrefly: ignore [missing-attribute]
    if result.rowcount != len(target_ids):
        mssg = f"One or more {relation.value} do not exist"
        raise RecordNotFoundError(detail=mssg)


async def apply_relation_diff(
    session: AsyncSession,
    relation: Relation,
    post_id: UUID,
    diff: RelationDiff,
) -> None:
    """
    Write one relation diff: link rows and counters together.

    Counters of added ids are bumped before the link rows are inserted so an
    unknown id fails as ``RecordNotFoundError`` rather than a foreign key
    violation. Removed ids are decremented only when their link row was
    actually deleted. Must run inside the caller's transaction.
    """
    if diff.is_empty:
        return

    table = RELATION_TABLES[relation]
    post_key = table.post_column.key
    target_key = table.target_column.key

    if diff.to_add:
        await adjust_counters(session, relation, diff.to_add, 1)
        await session.execute(
            insert(table.link),
            [{post_key: post_id, target_key: target_id} for target_id in diff.to_add],
        )

    if diff.to_remove:
        result = await session.execute(
            delete(table.link)
            .where(
                table.post_column == post_id,
                table.target_column.in_(list(diff.to_remove)),
            )
            .returning(table.target_column),
        )
        # Only links this statement removed are discounted
        await adjust_counters(session, relation, result.scalars().all(), -1)


async def sync_relations(
    session: AsyncSession,
    post_id: UUID,
    desired: Mapping[Relation, Iterable[UUID] | None],
) -> dict[Relation, RelationDiff]:
    """
    Bring every relation of a post to its desired id set.

    Relations whose desired set is ``None`` are not read or written.

    Returns:
        dict[Relation, RelationDiff]: The diff applied per relation
    """
    applied: dict[Relation, RelationDiff] = {}
    for relation, ids in desired.items():
        if ids is None:
            applied[relation] = RelationDiff()
            continue
        current = await current_relation_ids(session, relation, post_id)
        diff = diff_relations(current, ids)
        await apply_relation_diff(session, relation, post_id, diff)
        applied[relation] = diff

    if any(not diff.is_empty for diff in applied.values()):
        logger.info(
            f"Relations synced for post {post_id}: "
            + ", ".join(
                f"{relation.value} +{len(diff.to_add)}/-{len(diff.to_remove)}"
                for relation, diff in applied.items()
            ),
        )
    return applied


async def shift_all_counters(session: AsyncSession, post_id: UUID, delta: int) -> None:
    """Move the counters of every category and tag linked to a post, keeping the links."""
    for relation in Relation:
        ids = await current_relation_ids(session, relation, post_id)
        await adjust_counters(session, relation, ids, delta)
