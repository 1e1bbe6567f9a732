"""Reaction API endpoints.

One surface for posts and comments: the target type is a path parameter.
"""

from uuid import UUID

import structlog
from fastapi import APIRouter

from socialfeed.auth.dependencies import CurrentUser
from socialfeed.core.exceptions import AppError, to_http_exception

from .dependencies import ReactionServiceDep
from .models import ReactionTargetType
from .schemas import ReactorResponse, ReactRequest, ReactResponse


logger = structlog.get_logger(__name__)


router = APIRouter(prefix="/v1/react", tags=["reactions"])


@router.put(
    "/{target_type}/{target_id}",
    response_model=ReactResponse,
    summary="React to a post or comment",
)
async def react(
    target_type: ReactionTargetType,
    target_id: UUID,
    data: ReactRequest,
    reaction_service: ReactionServiceDep,
    user: CurrentUser,
) -> ReactResponse:
    """Add, change or toggle off the caller's reaction.

    Clicking the reaction already in place removes it; clicking another
    type replaces it.
    """
    try:
        result = await reaction_service.react(
            user_id=user.id,
            target_id=target_id,
            target_type=target_type,
            reaction_type=data.reaction_type,
            user_name=user.display_name,
            user_avatar=user.avatar,
        )
        return ReactResponse.from_result(result)
    except AppError as e:
        raise to_http_exception(e) from e


@router.get(
    "/{target_type}/{target_id}",
    response_model=list[ReactorResponse],
    summary="List reactors",
)
async def list_reactions(
    target_type: ReactionTargetType,
    target_id: UUID,
    reaction_service: ReactionServiceDep,
    _user: CurrentUser,
) -> list[ReactorResponse]:
    """Everyone who reacted to the target, newest first."""
    reactions = await reaction_service.list_reactors(target_id, target_type)
    return [ReactorResponse.from_reaction(r) for r in reactions]
