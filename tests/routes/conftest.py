# tests/routes/conftest.py
"""Pytest fixtures for route tests."""

from collections.abc import AsyncGenerator, Generator
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from blogcms.dependencies import get_post_repository
from blogcms.main import app
from blogcms.models import CategoryDB, PostDB, PostStatus, UserDB
from blogcms.repositories import PostRepository


@pytest.fixture
def sample_author() -> UserDB:
    return UserDB(id=uuid4(), email="author@example.com", name="Ada Author")


@pytest.fixture
def sample_post(sample_author: UserDB) -> PostDB:
    """Transient post with its relations resolved, as the repository returns it."""
    post = PostDB(
        id=uuid4(),
        author_id=sample_author.id,
        title="Hello World",
        slug="hello-world",
        content="Body text",
        status=PostStatus.PUBLISHED,
        featured=False,
        view_count=3,
    )
    post.author = sample_author
    post.categories = [CategoryDB(id=uuid4(), name="Tech", slug="tech", post_count=1)]
    post.tags = []
    return post


@pytest.fixture
def post_repo() -> Generator[AsyncMock]:
    repo = AsyncMock(spec=PostRepository)
    app.dependency_overrides[get_post_repository] = lambda: repo
    yield repo
    app.dependency_overrides = {}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing; the lifespan is not run."""
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac


@pytest.fixture
def storage_state() -> Generator[MagicMock]:
    database = MagicMock()
    database.ping = AsyncMock(return_value=True)
    mongo = MagicMock()
    mongo.ping = AsyncMock(return_value=True)
    app.state.database = database
    app.state.mongo = mongo
    yield mongo
    del app.state.database
    del app.state.mongo
