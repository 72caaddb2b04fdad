# tests/repositories/conftest.py
"""Fixtures for repository tests against a file-backed SQLite database."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from blogcms.db import Database
from blogcms.models import CategoryDB, TagDB, UserDB
from blogcms.repositories import CategoryRepository, PostRepository, TagRepository, UserRepository
from blogcms.schemas import UserCreate


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database]:
    """Fresh schema per test; a file database lets concurrent sessions share data."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'blogcms.db'}")
    await db.init_db()
    yield db
    await db.dispose()


@pytest.fixture
def users(database: Database) -> UserRepository:
    return UserRepository(database)


@pytest.fixture
def posts(database: Database) -> PostRepository:
    return PostRepository(database)


@pytest.fixture
def categories(database: Database) -> CategoryRepository:
    return CategoryRepository(database)


@pytest.fixture
def tags(database: Database) -> TagRepository:
    return TagRepository(database)


@pytest.fixture
async def author(users: UserRepository) -> UserDB:
    return await users.create_user(UserCreate(email="author@example.com", name="Ada Author"))


@pytest.fixture
async def tech(categories: CategoryRepository) -> CategoryDB:
    return await categories.create_category("Tech")


@pytest.fixture
async def ai(categories: CategoryRepository) -> CategoryDB:
    return await categories.create_category("AI", description="Artificial intelligence")


@pytest.fixture
async def biz(categories: CategoryRepository) -> CategoryDB:
    return await categories.create_category("Biz")


@pytest.fixture
async def three_tags(tags: TagRepository) -> list[TagDB]:
    return [await tags.create_tag(name) for name in ("python", "sqlalchemy", "asyncio")]


@pytest.fixture
async def users_author_pair(users: UserRepository, author: UserDB) -> tuple[UserDB, UserDB]:
    second = await users.create_user(UserCreate(email="second@example.com", name="Bea Second"))
    return author, second
