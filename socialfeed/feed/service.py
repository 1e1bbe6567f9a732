"""Feed decoration.

Attaches what the viewer needs on top of stored posts and comments: the
viewer's own reaction, an avatar stack of recent reactors (posts) and the
recent reaction-type badges (comments). Items are decorated concurrently.
"""

import asyncio
from typing import TYPE_CHECKING
from uuid import UUID

from socialfeed.auth.schemas import UserSummary
from socialfeed.comments.models import Comment
from socialfeed.comments.schemas import CommentResponse
from socialfeed.posts.models import Post
from socialfeed.posts.schemas import PostResponse
from socialfeed.reactions.models import ReactionTargetType


if TYPE_CHECKING:
    from socialfeed.reactions.service import ReactionService


class FeedDecorator:
    """Builds viewer-specific responses from the reaction ledger."""

    RECENT_REACTORS_LIMIT = 3
    TOP_REACTIONS_SAMPLE = 5
    TOP_REACTIONS_MAX = 2

    def __init__(self, reaction_service: "ReactionService"):
        self.reactions = reaction_service

    async def decorate_post(self, post: Post, viewer_id: UUID) -> PostResponse:
        user_reaction, reactors = await asyncio.gather(
            self.reactions.get_user_reaction(
                viewer_id, post.post_id, ReactionTargetType.POST
            ),
            self.reactions.list_reactors(
                post.post_id,
                ReactionTargetType.POST,
                limit=self.RECENT_REACTORS_LIMIT,
            ),
        )
        recent_reactors = [
            UserSummary(id=r.user_id, name=r.user_name, avatar=r.user_avatar)
            for r in reactors
        ]
        return PostResponse.from_post(post, user_reaction, recent_reactors)

    async def decorate_posts(
        self, posts: list[Post], viewer_id: UUID
    ) -> list[PostResponse]:
        return list(
            await asyncio.gather(*(self.decorate_post(p, viewer_id) for p in posts))
        )

    async def decorate_comment(
        self, comment: Comment, viewer_id: UUID
    ) -> CommentResponse:
        user_reaction, top_reactions = await asyncio.gather(
            self.reactions.get_user_reaction(
                viewer_id, comment.comment_id, ReactionTargetType.COMMENT
            ),
            self.reactions.top_reaction_types(
                comment.comment_id,
                ReactionTargetType.COMMENT,
                sample_size=self.TOP_REACTIONS_SAMPLE,
                max_distinct=self.TOP_REACTIONS_MAX,
            ),
        )
        return CommentResponse.from_comment(comment, user_reaction, top_reactions)

    async def decorate_comments(
        self, comments: list[Comment], viewer_id: UUID
    ) -> list[CommentResponse]:
        return list(
            await asyncio.gather(
                *(self.decorate_comment(c, viewer_id) for c in comments)
            )
        )
