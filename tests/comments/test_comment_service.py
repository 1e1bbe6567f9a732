"""Tests for the comment thread service.

Covers:
- two-level flattening and the addressed user
- post comments_count and root reply_count
- missing post / parent handling
- page ordering for roots and replies
- Redis rate limiting
"""

from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import pytest
import pytest_asyncio

from socialfeed.comments.service import (
    CommentNotFoundError,
    CommentService,
    EmptyCommentError,
    ParentCommentNotFoundError,
)
from socialfeed.core.exceptions import RateLimitExceededError
from socialfeed.posts.models import Post, PostPrivacy
from socialfeed.posts.service import PostNotFoundError, PostService
from tests.fakes import FakeCommentRepository, FakePostRepository


@pytest_asyncio.fixture
async def post(post_service: PostService) -> Post:
    return await post_service.create_post(
        author_id=uuid4(), author_name="Poster", content="Discuss"
    )


@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    redis_mock = AsyncMock()
    mock_pipe = Mock()
    mock_pipe.incr = Mock()
    mock_pipe.expire = Mock()
    mock_pipe.execute = AsyncMock(return_value=[1, True, 1, True])
    redis_mock.pipeline = Mock(return_value=mock_pipe)
    redis_mock.get = AsyncMock(return_value=None)
    return redis_mock


async def comment_as(
    service: CommentService,
    post_id: UUID,
    author_id: UUID,
    name: str,
    parent_id: UUID | None = None,
):
    return await service.add_comment(
        post_id=post_id,
        author_id=author_id,
        author_name=name,
        content=f"{name} says hi",
        parent_id=parent_id,
        author_avatar=f"{name}.png",
    )


class TestAddComment:
    @pytest.mark.asyncio
    async def test_root_comment(self, comment_service: CommentService, post: Post):
        author = uuid4()

        comment = await comment_as(comment_service, post.post_id, author, "U1")

        assert comment.parent_id is None
        assert comment.reply_to_user_id is None
        assert comment.author_id == author
        assert comment.author_avatar == "U1.png"

    @pytest.mark.asyncio
    async def test_reply_chain_stays_two_levels(
        self, comment_service: CommentService, post: Post
    ):
        """Root by U1, reply by U2, reply-to-reply by U3."""
        u1, u2, u3 = uuid4(), uuid4(), uuid4()

        root = await comment_as(comment_service, post.post_id, u1, "U1")
        a = await comment_as(comment_service, post.post_id, u2, "U2", root.comment_id)
        b = await comment_as(comment_service, post.post_id, u3, "U3", a.comment_id)

        assert a.parent_id == root.comment_id
        assert a.reply_to_user_id == u1
        assert b.parent_id == root.comment_id
        assert b.reply_to_user_id == u2
        assert b.reply_to_user_name == "U2"

        replies = await comment_service.list_replies(root.comment_id)
        assert [r.comment_id for r in replies] == [a.comment_id, b.comment_id]
        assert await comment_service.list_replies(a.comment_id) == []

    @pytest.mark.asyncio
    async def test_counters_follow_writes(
        self,
        comment_service: CommentService,
        post_repository: FakePostRepository,
        post: Post,
    ):
        root = await comment_as(comment_service, post.post_id, uuid4(), "U1")
        reply = await comment_as(
            comment_service, post.post_id, uuid4(), "U2", root.comment_id
        )
        await comment_as(comment_service, post.post_id, uuid4(), "U3", reply.comment_id)
        await comment_as(comment_service, post.post_id, uuid4(), "U4")

        refreshed_post = await post_repository.get(post.post_id)
        assert refreshed_post is not None
        assert refreshed_post.comments_count == 4

        refreshed_root = await comment_service.get_comment(root.comment_id)
        assert refreshed_root.reply_count == 2
        refreshed_reply = await comment_service.get_comment(reply.comment_id)
        assert refreshed_reply.reply_count == 0

    @pytest.mark.asyncio
    async def test_content_is_escaped(self, comment_service: CommentService, post: Post):
        comment = await comment_service.add_comment(
            post_id=post.post_id,
            author_id=uuid4(),
            author_name="U1",
            content="  <script>x</script> <b>bold</b>  ",
        )

        assert comment.content == "&lt;script&gt;x&lt;/script&gt; <b>bold</b>"

    @pytest.mark.asyncio
    async def test_blank_content_rejected(
        self, comment_service: CommentService, post: Post
    ):
        with pytest.raises(EmptyCommentError):
            await comment_service.add_comment(
                post_id=post.post_id, author_id=uuid4(), author_name="U1", content="   "
            )

    @pytest.mark.asyncio
    async def test_missing_post(self, comment_service: CommentService):
        with pytest.raises(PostNotFoundError):
            await comment_as(comment_service, uuid4(), uuid4(), "U1")

    @pytest.mark.asyncio
    async def test_private_post_of_other_author(
        self,
        comment_service: CommentService,
        post_service: PostService,
        post_repository: FakePostRepository,
    ):
        owner = uuid4()
        private = await post_service.create_post(
            author_id=owner,
            author_name="Owner",
            content="only me",
            privacy=PostPrivacy.PRIVATE,
        )

        with pytest.raises(PostNotFoundError):
            await comment_as(comment_service, private.post_id, uuid4(), "U1")

        own = await comment_as(comment_service, private.post_id, owner, "Owner")
        assert own.post_id == private.post_id
        refreshed = await post_repository.get(private.post_id)
        assert refreshed is not None
        assert refreshed.comments_count == 1

    @pytest.mark.asyncio
    async def test_missing_parent(
        self,
        comment_service: CommentService,
        post_repository: FakePostRepository,
        post: Post,
    ):
        with pytest.raises(ParentCommentNotFoundError) as exc_info:
            await comment_as(comment_service, post.post_id, uuid4(), "U1", uuid4())

        assert exc_info.value.status_code == 404
        refreshed = await post_repository.get(post.post_id)
        assert refreshed is not None
        assert refreshed.comments_count == 0

    @pytest.mark.asyncio
    async def test_parent_on_other_post(
        self, comment_service: CommentService, post_service: PostService, post: Post
    ):
        other = await post_service.create_post(
            author_id=uuid4(), author_name="Other", content="elsewhere"
        )
        foreign_root = await comment_as(comment_service, other.post_id, uuid4(), "U1")

        with pytest.raises(ParentCommentNotFoundError):
            await comment_as(
                comment_service, post.post_id, uuid4(), "U2", foreign_root.comment_id
            )


class TestReads:
    @pytest.mark.asyncio
    async def test_root_comments_newest_first_and_paged(
        self, comment_service: CommentService, post: Post
    ):
        roots = [
            await comment_as(comment_service, post.post_id, uuid4(), f"U{i}")
            for i in range(12)
        ]
        await comment_as(
            comment_service, post.post_id, uuid4(), "R", roots[0].comment_id
        )

        first_page = await comment_service.list_root_comments(post.post_id)
        second_page = await comment_service.list_root_comments(post.post_id, offset=10)

        newest_first = [c.comment_id for c in reversed(roots)]
        assert [c.comment_id for c in first_page] == newest_first[:10]
        assert [c.comment_id for c in second_page] == newest_first[10:]

    @pytest.mark.asyncio
    async def test_get_comment_not_found(self, comment_service: CommentService):
        with pytest.raises(CommentNotFoundError):
            await comment_service.get_comment(uuid4())


class TestRateLimiting:
    @pytest.mark.asyncio
    async def test_within_limit_increments_counters(
        self,
        comment_repository: FakeCommentRepository,
        post_repository: FakePostRepository,
        mock_redis,
        post: Post,
    ):
        service = CommentService(
            repository=comment_repository,
            post_repository=post_repository,
            redis=mock_redis,
        )

        await comment_as(service, post.post_id, uuid4(), "U1")

        pipe = mock_redis.pipeline.return_value
        assert pipe.incr.call_count == 2
        pipe.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_minute_limit_exceeded(
        self,
        comment_repository: FakeCommentRepository,
        post_repository: FakePostRepository,
        mock_redis,
        post: Post,
    ):
        mock_redis.get = AsyncMock(return_value="3")
        service = CommentService(
            repository=comment_repository,
            post_repository=post_repository,
            redis=mock_redis,
            comments_per_minute=3,
        )

        with pytest.raises(RateLimitExceededError) as exc_info:
            await comment_as(service, post.post_id, uuid4(), "U1")

        assert exc_info.value.status_code == 429
        assert await comment_repository.list_roots(post.post_id, 0, 10) == []

    @pytest.mark.asyncio
    async def test_without_redis_no_limit(self, comment_service: CommentService):
        assert await comment_service.check_rate_limit(uuid4()) is True
