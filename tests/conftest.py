"""Shared fixtures.

Services run on the in-memory repositories from ``tests.fakes``; the API
tests publish them on ``app.state`` the way the lifespan does, so no
Cassandra or Redis is needed.
"""

import os
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from uuid import UUID, uuid4

import pytest


os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_FORMAT", "json")
os.environ.setdefault(
    "LOG_DIR", str(Path(tempfile.gettempdir()) / "socialfeed-test-logs")
)

from fastapi.testclient import TestClient  # noqa: E402

from socialfeed.auth.security import create_access_token  # noqa: E402
from socialfeed.comments.service import CommentService  # noqa: E402
from socialfeed.feed.service import FeedDecorator  # noqa: E402
from socialfeed.posts.service import PostService  # noqa: E402
from socialfeed.reactions.service import ReactionService  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeCommentRepository,
    FakePostRepository,
    FakeReactionRepository,
    InMemoryStore,
)


APP_STATE_SERVICES = (
    "post_service",
    "comment_service",
    "reaction_service",
    "feed_decorator",
)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def post_repository(store: InMemoryStore) -> FakePostRepository:
    return FakePostRepository(store)


@pytest.fixture
def comment_repository(store: InMemoryStore) -> FakeCommentRepository:
    return FakeCommentRepository(store)


@pytest.fixture
def reaction_repository(store: InMemoryStore) -> FakeReactionRepository:
    return FakeReactionRepository(store)


@pytest.fixture
def post_service(post_repository: FakePostRepository) -> PostService:
    return PostService(post_repository)


@pytest.fixture
def comment_service(
    comment_repository: FakeCommentRepository,
    post_repository: FakePostRepository,
) -> CommentService:
    return CommentService(repository=comment_repository, post_repository=post_repository)


@pytest.fixture
def reaction_service(
    reaction_repository: FakeReactionRepository,
    post_repository: FakePostRepository,
    comment_repository: FakeCommentRepository,
) -> ReactionService:
    return ReactionService(
        repository=reaction_repository,
        post_repository=post_repository,
        comment_repository=comment_repository,
    )


@pytest.fixture
def feed_decorator(reaction_service: ReactionService) -> FeedDecorator:
    return FeedDecorator(reaction_service)


@pytest.fixture
def client(
    post_service: PostService,
    comment_service: CommentService,
    reaction_service: ReactionService,
    feed_decorator: FeedDecorator,
) -> Iterator[TestClient]:
    """Test client with services wired on app.state (lifespan not run)."""
    from socialfeed.main import app  # noqa: PLC0415

    app.state.post_service = post_service
    app.state.comment_service = comment_service
    app.state.reaction_service = reaction_service
    app.state.feed_decorator = feed_decorator

    yield TestClient(app)

    for name in APP_STATE_SERVICES:
        if hasattr(app.state, name):
            delattr(app.state, name)


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Mint access tokens for arbitrary users."""

    def _make(user_id: UUID, name: str | None = None, avatar: str | None = None) -> str:
        claims: dict[str, str] = {"sub": str(user_id)}
        if name:
            claims["name"] = name
        if avatar:
            claims["avatar"] = avatar
        return create_access_token(claims)

    return _make


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def auth_headers(make_token: Callable[..., str], user_id: UUID) -> dict[str, str]:
    token = make_token(user_id, name="Alice", avatar="https://cdn.example/alice.png")
    return {"Authorization": f"Bearer {token}"}
