"""Post service layer.

Business logic for:
- Post creation (text and/or image)
- Single post lookup with visibility rules
- The visibility-filtered, newest-first feed
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from socialfeed.core.exceptions import AppValidationError, NotFoundError
from socialfeed.utils.text import sanitize_content

from .models import Post, PostPrivacy, create_post


if TYPE_CHECKING:
    from .repository import PostRepository


logger = structlog.get_logger(__name__)


class PostNotFoundError(NotFoundError):
    """Post not found (or not visible to the viewer)."""

    def __init__(self, message: str = "Post not found"):
        super().__init__(message, "post_not_found")


class EmptyPostError(AppValidationError):
    """Post has neither text nor image."""

    def __init__(self, message: str = "A post needs text or an image"):
        super().__init__(message, "empty_post")


class PostService:
    """Service for posts and the feed."""

    def __init__(self, repository: "PostRepository"):
        self.repository = repository

    async def create_post(
        self,
        author_id: UUID,
        author_name: str,
        content: str | None = None,
        image_url: str | None = None,
        privacy: PostPrivacy = PostPrivacy.PUBLIC,
        author_avatar: str | None = None,
    ) -> Post:
        """Create a post. ``image_url`` is the blob-store URL of an uploaded image.

        Raises:
            EmptyPostError: Neither content nor image given
        """
        text = content.strip() if content else ""
        if not text and not image_url:
            raise EmptyPostError

        post = create_post(
            author_id=author_id,
            author_name=author_name,
            content=sanitize_content(text) if text else None,
            image_url=image_url,
            privacy=privacy,
            author_avatar=author_avatar,
        )
        await self.repository.insert(post)

        logger.info(
            "post_created",
            post_id=str(post.post_id),
            author_id=str(author_id),
            privacy=privacy.value,
            has_image=image_url is not None,
        )
        return post

    async def get_post(self, post_id: UUID) -> Post:
        post = await self.repository.get(post_id)
        if post is None:
            raise PostNotFoundError
        return post

    async def get_visible_post(self, post_id: UUID, viewer_id: UUID) -> Post:
        """Get a post as seen by ``viewer_id``; others' private posts do not exist."""
        post = await self.get_post(post_id)
        if not post.is_visible_to(viewer_id):
            raise PostNotFoundError
        return post

    async def list_feed(self, viewer_id: UUID) -> list[Post]:
        """Posts visible to the viewer, newest first."""
        posts = await self.repository.list_timeline()
        visible = [p for p in posts if p.is_visible_to(viewer_id)]
        visible.sort(key=lambda p: p.created_at, reverse=True)
        return visible
