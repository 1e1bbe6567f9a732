"""Comment thread API endpoints.

Provides routes for:
- Root comments of a post (paged, newest first)
- Commenting and replying
- Replies under a root comment (oldest first)
"""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Query, status

from socialfeed.auth.dependencies import CurrentUser
from socialfeed.core.exceptions import AppError, to_http_exception
from socialfeed.feed.dependencies import FeedDecoratorDep
from socialfeed.posts.dependencies import PostServiceDep

from .dependencies import CommentServiceDep
from .schemas import CommentResponse, CreateCommentRequest


logger = structlog.get_logger(__name__)


router = APIRouter(prefix="/v1", tags=["comments"])


@router.get(
    "/posts/{post_id}/comments",
    response_model=list[CommentResponse],
    summary="List root comments",
)
async def list_comments(
    post_id: UUID,
    comment_service: CommentServiceDep,
    post_service: PostServiceDep,
    decorator: FeedDecoratorDep,
    user: CurrentUser,
    skip: Annotated[int, Query(ge=0)] = 0,
) -> list[CommentResponse]:
    """Root comments of a post, newest first, ten per page."""
    try:
        await post_service.get_visible_post(post_id, user.id)
    except AppError as e:
        raise to_http_exception(e) from e

    comments = await comment_service.list_root_comments(post_id, offset=skip)
    return await decorator.decorate_comments(comments, user.id)


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create comment",
)
async def create_comment(
    post_id: UUID,
    data: CreateCommentRequest,
    comment_service: CommentServiceDep,
    user: CurrentUser,
) -> CommentResponse:
    """Comment on a post, or reply when ``parent_id`` is given.

    Replies to replies are attached to the original root comment.
    Rate limited per user.
    """
    try:
        comment = await comment_service.add_comment(
            post_id=post_id,
            author_id=user.id,
            author_name=user.display_name,
            content=data.content,
            parent_id=data.parent_id,
            author_avatar=user.avatar,
        )
        return CommentResponse.from_comment(comment)
    except AppError as e:
        raise to_http_exception(e) from e


@router.get(
    "/comments/{comment_id}/replies",
    response_model=list[CommentResponse],
    summary="List replies",
)
async def list_replies(
    comment_id: UUID,
    comment_service: CommentServiceDep,
    decorator: FeedDecoratorDep,
    user: CurrentUser,
) -> list[CommentResponse]:
    """Replies under a root comment, oldest first."""
    replies = await comment_service.list_replies(comment_id)
    return await decorator.decorate_comments(replies, user.id)
