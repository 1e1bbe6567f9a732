"""Pydantic schemas for posts."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from socialfeed.auth.schemas import UserSummary

from .models import Post, PostPrivacy


class PostResponse(BaseModel):
    """Post as returned to a viewer, with viewer state and social proof."""

    id: UUID
    author: UserSummary
    content: str | None = None
    image_url: str | None = None
    privacy: PostPrivacy | None = None
    likes_count: int = 0
    comments_count: int = 0
    created_at: datetime
    updated_at: datetime

    # Viewer-specific decoration
    is_liked: bool = False
    user_reaction: str | None = None
    recent_reactors: list[UserSummary] = Field(default_factory=list)

    @classmethod
    def from_post(
        cls,
        post: Post,
        user_reaction: str | None = None,
        recent_reactors: list[UserSummary] | None = None,
    ) -> "PostResponse":
        return cls(
            id=post.post_id,
            author=UserSummary(
                id=post.author_id,
                name=post.author_name,
                avatar=post.author_avatar,
            ),
            content=post.content,
            image_url=post.image_url,
            privacy=post.privacy,
            likes_count=post.likes_count,
            comments_count=post.comments_count,
            created_at=post.created_at,
            updated_at=post.updated_at,
            is_liked=user_reaction is not None,
            user_reaction=user_reaction,
            recent_reactors=recent_reactors or [],
        )
