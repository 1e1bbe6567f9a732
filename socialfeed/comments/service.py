"""Comment thread service layer.

Business logic for:
- Comment creation with two-level thread flattening
- Post and root-comment counter maintenance
- Root comment pages and reply lists
- Rate limiting (Redis-based, optional)
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from socialfeed.core.exceptions import (
    AppValidationError,
    NotFoundError,
    RateLimitExceededError,
)
from socialfeed.posts.service import PostNotFoundError
from socialfeed.utils.text import sanitize_content

from .models import Comment, create_comment, resolve_thread_placement


if TYPE_CHECKING:
    from redis.asyncio import Redis

    from socialfeed.posts.repository import PostRepository

    from .repository import CommentRepository


logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class CommentNotFoundError(NotFoundError):
    """Comment not found."""

    def __init__(self, message: str = "Comment not found"):
        super().__init__(message, "comment_not_found")


class ParentCommentNotFoundError(NotFoundError):
    """Replied-to comment does not exist on this post."""

    def __init__(self, message: str = "Parent comment not found"):
        super().__init__(message, "parent_comment_not_found")


class EmptyCommentError(AppValidationError):
    """Comment has no text left after stripping."""

    def __init__(self, message: str = "Content cannot be empty"):
        super().__init__(message, "empty_comment")


# ==============================================================================
# Comment Service
# ==============================================================================


class CommentService:
    """Service for the comment thread."""

    ROOT_PAGE_SIZE = 10

    # Rate limits
    COMMENTS_PER_MINUTE = 10
    COMMENTS_PER_HOUR = 100

    def __init__(
        self,
        repository: "CommentRepository",
        post_repository: "PostRepository",
        redis: "Redis | None" = None,
        comments_per_minute: int | None = None,
        comments_per_hour: int | None = None,
    ):
        self.repository = repository
        self.post_repository = post_repository
        self.redis = redis
        self.comments_per_minute = comments_per_minute or self.COMMENTS_PER_MINUTE
        self.comments_per_hour = comments_per_hour or self.COMMENTS_PER_HOUR

    # ==========================================================================
    # Rate Limiting (Redis-based)
    # ==========================================================================

    async def check_rate_limit(self, user_id: UUID) -> bool:
        """Check if user has exceeded rate limit.

        Returns True if within limit, raises RateLimitExceededError otherwise.
        """
        if not self.redis:
            return True

        key_minute = f"comments:rate:{user_id}:minute"
        key_hour = f"comments:rate:{user_id}:hour"

        minute_count = await self.redis.get(key_minute)
        if minute_count and int(minute_count) >= self.comments_per_minute:
            raise RateLimitExceededError("Too many comments per minute. Slow down.")

        hour_count = await self.redis.get(key_hour)
        if hour_count and int(hour_count) >= self.comments_per_hour:
            raise RateLimitExceededError("Hourly comment limit exceeded.")

        return True

    async def increment_rate_limit(self, user_id: UUID) -> None:
        """Increment rate limit counters."""
        if not self.redis:
            return

        key_minute = f"comments:rate:{user_id}:minute"
        key_hour = f"comments:rate:{user_id}:hour"

        pipe = self.redis.pipeline()
        pipe.incr(key_minute)
        pipe.expire(key_minute, 60)
        pipe.incr(key_hour)
        pipe.expire(key_hour, 3600)
        await pipe.execute()

    # ==========================================================================
    # Writes
    # ==========================================================================

    async def add_comment(
        self,
        post_id: UUID,
        author_id: UUID,
        author_name: str,
        content: str,
        parent_id: UUID | None = None,
        author_avatar: str | None = None,
    ) -> Comment:
        """Add a comment or reply to a post.

        A reply to a reply is stored under the original root comment and
        addressed to the author of the comment actually replied to.

        Raises:
            RateLimitExceededError: Author is over the comment rate limit
            PostNotFoundError: Post does not exist or is not visible to the author
            ParentCommentNotFoundError: Parent missing or on another post
            EmptyCommentError: Content is blank
        """
        await self.check_rate_limit(author_id)

        text = content.strip()
        if not text:
            raise EmptyCommentError

        # Others' private posts do not exist for this author
        post = await self.post_repository.get(post_id)
        if post is None or not post.is_visible_to(author_id):
            raise PostNotFoundError

        parent = None
        if parent_id is not None:
            parent = await self.repository.get(parent_id)
            if parent is None or parent.post_id != post_id:
                raise ParentCommentNotFoundError

        comment = create_comment(
            post_id=post_id,
            author_id=author_id,
            author_name=author_name,
            content=sanitize_content(text),
            placement=resolve_thread_placement(parent),
            author_avatar=author_avatar,
        )
        await self.repository.insert(comment)

        # Counter updates follow the insert; they cannot join its batch.
        await self.post_repository.increment_comments_count(post_id)
        if comment.parent_id is not None:
            await self.repository.increment_reply_count(comment.parent_id)

        await self.increment_rate_limit(author_id)

        logger.info(
            "comment_created",
            comment_id=str(comment.comment_id),
            post_id=str(post_id),
            author_id=str(author_id),
            parent_id=str(comment.parent_id) if comment.parent_id else None,
            flattened=parent is not None and not parent.is_root,
        )
        return comment

    # ==========================================================================
    # Reads
    # ==========================================================================

    async def get_comment(self, comment_id: UUID) -> Comment:
        comment = await self.repository.get(comment_id)
        if comment is None:
            raise CommentNotFoundError
        return comment

    async def list_root_comments(
        self,
        post_id: UUID,
        offset: int = 0,
        page_size: int | None = None,
    ) -> list[Comment]:
        """A page of root comments, newest first.

        Offset pagination: pages can shift while new comments arrive.
        """
        return await self.repository.list_roots(
            post_id, max(0, offset), page_size or self.ROOT_PAGE_SIZE
        )

    async def list_replies(self, root_comment_id: UUID) -> list[Comment]:
        """All replies under a root comment, oldest first."""
        return await self.repository.list_replies(root_comment_id)
