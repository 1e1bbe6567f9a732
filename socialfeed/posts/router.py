"""Post API endpoints.

Provides routes for:
- The viewer's feed
- Post creation with optional image upload
- Single post lookup
- Legacy like endpoint (deprecated alias of the reaction endpoint)
"""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, File, Form, UploadFile, status

from socialfeed.auth.dependencies import CurrentUser
from socialfeed.core.exceptions import AppError, to_http_exception
from socialfeed.feed.dependencies import FeedDecoratorDep
from socialfeed.reactions.dependencies import ReactionServiceDep
from socialfeed.reactions.models import DEFAULT_REACTION_TYPE, ReactionTargetType
from socialfeed.reactions.schemas import ReactResponse
from socialfeed.storage.dependencies import StorageServiceDep

from .dependencies import PostServiceDep
from .models import PostPrivacy
from .schemas import PostResponse


logger = structlog.get_logger(__name__)


router = APIRouter(prefix="/v1/posts", tags=["posts"])


@router.get(
    "",
    response_model=list[PostResponse],
    summary="Feed",
)
async def list_feed(
    post_service: PostServiceDep,
    decorator: FeedDecoratorDep,
    user: CurrentUser,
) -> list[PostResponse]:
    """Posts visible to the caller, newest first."""
    posts = await post_service.list_feed(user.id)
    return await decorator.decorate_posts(posts, user.id)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
)
async def create_post(
    post_service: PostServiceDep,
    storage: StorageServiceDep,
    user: CurrentUser,
    content: Annotated[str | None, Form(max_length=10000)] = None,
    privacy: Annotated[PostPrivacy, Form()] = PostPrivacy.PUBLIC,
    image: Annotated[UploadFile | None, File()] = None,
) -> PostResponse:
    """Create a post from text, an image, or both.

    The image is uploaded to the blob store first; only its URL is stored.
    """
    try:
        image_url = None
        if image is not None and image.filename:
            data = await image.read()
            image_url = await storage.upload_post_image(
                content=data,
                content_type=image.content_type or "application/octet-stream",
                author_id=user.id,
                filename=image.filename,
            )

        post = await post_service.create_post(
            author_id=user.id,
            author_name=user.display_name,
            content=content,
            image_url=image_url,
            privacy=privacy,
            author_avatar=user.avatar,
        )
        return PostResponse.from_post(post)

    except AppError as e:
        raise to_http_exception(e) from e


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    summary="Get post",
)
async def get_post(
    post_id: UUID,
    post_service: PostServiceDep,
    decorator: FeedDecoratorDep,
    user: CurrentUser,
) -> PostResponse:
    try:
        post = await post_service.get_visible_post(post_id, user.id)
    except AppError as e:
        raise to_http_exception(e) from e
    return await decorator.decorate_post(post, user.id)


@router.put(
    "/{post_id}/like",
    response_model=ReactResponse,
    summary="Like post (deprecated)",
    deprecated=True,
)
async def like_post(
    post_id: UUID,
    reaction_service: ReactionServiceDep,
    user: CurrentUser,
) -> ReactResponse:
    """Toggle a "Like" on a post. Use PUT /v1/react/Post/{post_id} instead."""
    logger.info("deprecated_like_endpoint_used", post_id=str(post_id))
    try:
        result = await reaction_service.react(
            user_id=user.id,
            target_id=post_id,
            target_type=ReactionTargetType.POST,
            reaction_type=DEFAULT_REACTION_TYPE,
            user_name=user.display_name,
            user_avatar=user.avatar,
        )
        return ReactResponse.from_result(result)
    except AppError as e:
        raise to_http_exception(e) from e
