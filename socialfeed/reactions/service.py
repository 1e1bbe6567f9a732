"""Reaction ledger service layer.

Business logic for:
- Add / change / toggle-off of a user's single reaction on a post or comment
- Likes counter maintenance on the reacted target
- Reactor listings and recent reaction-type summaries
"""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from socialfeed.core.exceptions import (
    AppValidationError,
    ConflictError,
    NotFoundError,
)

from .models import (
    DEFAULT_REACTION_TYPE,
    Reaction,
    ReactionResult,
    ReactionStatus,
    ReactionTargetType,
    create_reaction,
)


if TYPE_CHECKING:
    from socialfeed.comments.repository import CommentRepository
    from socialfeed.posts.repository import PostRepository

    from .repository import ReactionRepository


logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class ReactionTargetNotFoundError(NotFoundError):
    """Reacted post or comment does not exist."""

    def __init__(self, target_type: ReactionTargetType):
        super().__init__(f"{target_type.value} not found", "reaction_target_not_found")


class ReactionTargetMismatchError(AppValidationError):
    """Existing entry for the same target id was recorded under another type."""

    def __init__(self, message: str = "Reaction target type does not match"):
        super().__init__(message, "reaction_target_mismatch")


class ReactionConflictError(ConflictError):
    """Concurrent reactions kept changing the entry on every attempt."""

    def __init__(self, message: str = "Reaction changed concurrently, try again"):
        super().__init__(message, "reaction_conflict")


def distinct_in_order(values: list[str], limit: int) -> list[str]:
    """First ``limit`` distinct values, in order of first occurrence."""
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
            if len(seen) == limit:
                break
    return seen


# ==============================================================================
# Reaction Service
# ==============================================================================


class ReactionService:
    """Service for the reaction ledger."""

    # Attempts at the read-decide-write cycle before giving up on a race
    REACT_MAX_ATTEMPTS = 3

    def __init__(
        self,
        repository: "ReactionRepository",
        post_repository: "PostRepository",
        comment_repository: "CommentRepository",
    ):
        self.repository = repository
        self.post_repository = post_repository
        self.comment_repository = comment_repository

    async def _ensure_target_visible(
        self, user_id: UUID, target_id: UUID, target_type: ReactionTargetType
    ) -> None:
        """Target must exist on a post the user can see."""
        post_id = target_id
        if target_type == ReactionTargetType.COMMENT:
            comment = await self.comment_repository.get(target_id)
            if comment is None:
                raise ReactionTargetNotFoundError(target_type)
            post_id = comment.post_id

        post = await self.post_repository.get(post_id)
        if post is None or not post.is_visible_to(user_id):
            raise ReactionTargetNotFoundError(target_type)

    async def react(
        self,
        user_id: UUID,
        target_id: UUID,
        target_type: ReactionTargetType,
        reaction_type: str = DEFAULT_REACTION_TYPE,
        user_name: str = "User",
        user_avatar: str | None = None,
    ) -> ReactionResult:
        """Apply a reaction click.

        - No entry: create it and increment the target's likes_count.
        - Entry with the same type: delete it and decrement likes_count.
        - Entry with another type: change the type in place, counters untouched.

        Each write is conditional on the entry still being what was read. A
        lost race re-reads and decides again.

        Raises:
            ReactionTargetNotFoundError: Target missing or on a post the user cannot see
            ReactionTargetMismatchError: Entry exists under the other target type
            ReactionConflictError: Every attempt lost a race
        """
        await self._ensure_target_visible(user_id, target_id, target_type)

        for attempt in range(1, self.REACT_MAX_ATTEMPTS + 1):
            existing = await self.repository.get(user_id, target_id)

            if existing is not None and existing.target_type != target_type:
                raise ReactionTargetMismatchError(
                    f"Existing reaction targets a {existing.target_type.value}"
                )

            if existing is None:
                reaction = create_reaction(
                    user_id=user_id,
                    target_id=target_id,
                    target_type=target_type,
                    reaction_type=reaction_type,
                    user_name=user_name,
                    user_avatar=user_avatar,
                )
                if await self.repository.insert_if_absent(reaction):
                    # Not atomic with the insert: counter and regular tables
                    # cannot share a batch.
                    await self.repository.increment_likes(target_id, target_type, 1)
                    logger.info(
                        "reaction_added",
                        user_id=str(user_id),
                        target_id=str(target_id),
                        target_type=target_type.value,
                        reaction_type=reaction_type,
                    )
                    return ReactionResult(ReactionStatus.ADDED, reaction_type)

            elif existing.reaction_type == reaction_type:
                if await self.repository.delete_if_unchanged(existing):
                    await self.repository.increment_likes(target_id, target_type, -1)
                    logger.info(
                        "reaction_removed",
                        user_id=str(user_id),
                        target_id=str(target_id),
                        target_type=target_type.value,
                        reaction_type=reaction_type,
                    )
                    return ReactionResult(ReactionStatus.REMOVED, None)

            elif await self.repository.update_type_if_unchanged(existing, reaction_type):
                logger.info(
                    "reaction_updated",
                    user_id=str(user_id),
                    target_id=str(target_id),
                    target_type=target_type.value,
                    previous_type=existing.reaction_type,
                    reaction_type=reaction_type,
                )
                return ReactionResult(ReactionStatus.UPDATED, reaction_type)

            logger.warning(
                "reaction_write_conflict",
                user_id=str(user_id),
                target_id=str(target_id),
                attempt=attempt,
            )

        raise ReactionConflictError

    async def list_reactors(
        self,
        target_id: UUID,
        target_type: ReactionTargetType,
        limit: int | None = None,
    ) -> list[Reaction]:
        """Who reacted to a target, newest first. Unbounded unless ``limit``."""
        return await self.repository.list_by_target(target_id, target_type, limit)

    async def get_user_reaction(
        self,
        user_id: UUID,
        target_id: UUID,
        target_type: ReactionTargetType,
    ) -> str | None:
        """The user's reaction type on a target, or None."""
        reaction = await self.repository.get(user_id, target_id)
        if reaction is None or reaction.target_type != target_type:
            return None
        return reaction.reaction_type

    async def top_reaction_types(
        self,
        target_id: UUID,
        target_type: ReactionTargetType,
        sample_size: int = 5,
        max_distinct: int = 2,
    ) -> list[str]:
        """Distinct types among the ``sample_size`` newest reactions.

        A recency heuristic, not a popularity ranking: only the sampled
        reactions are looked at.
        """
        recent = await self.repository.list_recent_types(
            target_id, target_type, sample_size
        )
        return distinct_in_order(recent, max_distinct)

    async def count_reactions(
        self, target_id: UUID, target_type: ReactionTargetType
    ) -> int:
        """Reactions on a target, counted in the by-target index.

        The index is written after the ledger row, so a crash in between can
        leave it one entry behind the ledger.
        """
        return await self.repository.count_by_target(target_id, target_type)

    async def reconcile_likes_count(
        self, target_id: UUID, target_type: ReactionTargetType
    ) -> int:
        """Bring the target's likes_count back in line with the by-target index.

        Returns:
            The index count, which the counter now matches
        """
        actual = await self.repository.count_by_target(target_id, target_type)
        cached = await self.repository.get_likes_count(target_id, target_type)
        delta = actual - cached
        if delta:
            await self.repository.increment_likes(target_id, target_type, delta)
            logger.warning(
                "likes_count_reconciled",
                target_id=str(target_id),
                target_type=target_type.value,
                cached=cached,
                actual=actual,
            )
        return actual
