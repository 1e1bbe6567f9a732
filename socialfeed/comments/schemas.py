"""Pydantic schemas for the comment thread."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from socialfeed.auth.schemas import UserSummary

from .models import Comment


# ==============================================================================
# Request Schemas
# ==============================================================================


class CreateCommentRequest(BaseModel):
    """Request to comment on a post or reply to a comment."""

    content: str = Field(..., min_length=1, max_length=10000)
    parent_id: UUID | None = None

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        """Strip whitespace and validate content."""
        v = v.strip()
        if not v:
            msg = "Content cannot be empty"
            raise ValueError(msg)
        return v


# ==============================================================================
# Response Schemas
# ==============================================================================


class CommentResponse(BaseModel):
    """Comment as returned to a viewer, with viewer state and reaction badges."""

    id: UUID
    post_id: UUID
    parent_id: UUID | None = None
    author: UserSummary
    reply_to_user: UserSummary | None = None
    content: str
    likes_count: int = 0
    reply_count: int = 0
    created_at: datetime
    updated_at: datetime

    # Viewer-specific decoration
    is_liked: bool = False
    user_reaction: str | None = None
    top_reactions: list[str] = Field(default_factory=list)

    @classmethod
    def from_comment(
        cls,
        comment: Comment,
        user_reaction: str | None = None,
        top_reactions: list[str] | None = None,
    ) -> "CommentResponse":
        reply_to_user = None
        if comment.reply_to_user_id is not None:
            reply_to_user = UserSummary(
                id=comment.reply_to_user_id,
                name=comment.reply_to_user_name or "User",
                avatar=comment.reply_to_user_avatar,
            )

        return cls(
            id=comment.comment_id,
            post_id=comment.post_id,
            parent_id=comment.parent_id,
            author=UserSummary(
                id=comment.author_id,
                name=comment.author_name,
                avatar=comment.author_avatar,
            ),
            reply_to_user=reply_to_user,
            content=comment.content,
            likes_count=comment.likes_count,
            reply_count=comment.reply_count,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            is_liked=user_reaction is not None,
            user_reaction=user_reaction,
            top_reactions=top_reactions or [],
        )
