from blogcms.repositories.activity import ActivityRepository
from blogcms.repositories.base import BaseRepository
from blogcms.repositories.post import PostRepository
from blogcms.repositories.registry import Repositories, build_repositories
from blogcms.repositories.relations import (
    RELATION_TABLES,
    Relation,
    RelationDiff,
    RelationTable,
    apply_relation_diff,
    diff_relations,
    sync_relations,
)
from blogcms.repositories.taxonomy import CategoryRepository, TagRepository
from blogcms.repositories.user import UserRepository

__all__ = [
    "RELATION_TABLES",
    "ActivityRepository",
    "BaseRepository",
    "CategoryRepository",
    "PostRepository",
    "Relation",
    "RelationDiff",
    "RelationTable",
    "Repositories",
    "TagRepository",
    "UserRepository",
    "apply_relation_diff",
    "build_repositories",
    "diff_relations",
    "sync_relations",
]
