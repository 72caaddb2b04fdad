"""Repository container built once per process."""

from dataclasses import dataclass

from blogcms.clients import MongoClient
from blogcms.db import Database
from blogcms.repositories.activity import ActivityRepository
from blogcms.repositories.post import PostRepository
from blogcms.repositories.taxonomy import CategoryRepository, TagRepository
from blogcms.repositories.user import UserRepository


@dataclass(frozen=True, slots=True)
class Repositories:
    """
    Every repository of the application, sharing the two storage clients.

    Built during application startup and stored on ``app.state``; request
    handlers receive it through FastAPI dependencies.
    """

    users: UserRepository
    posts: PostRepository
    categories: CategoryRepository
    tags: TagRepository
    activity: ActivityRepository


def build_repositories(database: Database, mongo: MongoClient) -> Repositories:
    return Repositories(
        users=UserRepository(database),
        posts=PostRepository(database),
        categories=CategoryRepository(database),
        tags=TagRepository(database),
        activity=ActivityRepository(mongo),
    )
