"""Database models for the reaction ledger.

Cassandra table definitions for:
- Reactions: one row per (user, target), the uniqueness ledger
- Reactions by target: newest-first index for reactor listings and summaries

All writes to ``reactions`` are lightweight transactions, which is what keeps
a user at one reaction per target under concurrent requests. The index table
follows the ledger and is never consulted for uniqueness.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from socialfeed.comments.models import COMMENT_COUNTERS_TABLE
from socialfeed.posts.models import POST_COUNTERS_TABLE


class ReactionTargetType(str, Enum):
    """Kind of entity a reaction points at."""

    POST = "Post"
    COMMENT = "Comment"


class ReactionStatus(str, Enum):
    """Outcome of a react call."""

    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"


DEFAULT_REACTION_TYPE = "Like"

# Counter table and key column holding likes_count for each target type
LIKE_COUNTER_TABLES: dict[ReactionTargetType, tuple[str, str]] = {
    ReactionTargetType.POST: (POST_COUNTERS_TABLE, "post_id"),
    ReactionTargetType.COMMENT: (COMMENT_COUNTERS_TABLE, "comment_id"),
}


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

REACTIONS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.reactions (
    user_id UUID,
    target_id UUID,
    target_type TEXT,
    reaction_type TEXT,
    user_name TEXT,
    user_avatar TEXT,
    created_at TIMESTAMP,
    PRIMARY KEY ((user_id, target_id))
)
"""

REACTIONS_BY_TARGET_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.reactions_by_target (
    target_type TEXT,
    target_id UUID,
    created_at TIMESTAMP,
    user_id UUID,
    user_name TEXT,
    user_avatar TEXT,
    reaction_type TEXT,
    PRIMARY KEY ((target_type, target_id), created_at, user_id)
) WITH CLUSTERING ORDER BY (created_at DESC, user_id ASC)
"""

REACTIONS_TABLES_CQL = [
    REACTIONS_TABLE_CQL,
    REACTIONS_BY_TARGET_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Reaction:
    """A single user's reaction to a post or comment."""

    user_id: UUID
    target_id: UUID
    target_type: ReactionTargetType
    reaction_type: str
    created_at: datetime
    user_name: str = "User"
    user_avatar: str | None = None

    @classmethod
    def from_row(cls, row: Any) -> "Reaction":
        """Create Reaction from a reactions or reactions_by_target row."""
        return cls(
            user_id=row.user_id,
            target_id=row.target_id,
            target_type=ReactionTargetType(row.target_type),
            reaction_type=row.reaction_type,
            created_at=row.created_at,
            user_name=row.user_name or "User",
            user_avatar=row.user_avatar,
        )


@dataclass(frozen=True)
class ReactionResult:
    """Result of a react call: what happened and the type now in effect."""

    status: ReactionStatus
    reaction_type: str | None


# ==============================================================================
# Factory Functions
# ==============================================================================


def create_reaction(
    user_id: UUID,
    target_id: UUID,
    target_type: ReactionTargetType,
    reaction_type: str = DEFAULT_REACTION_TYPE,
    user_name: str = "User",
    user_avatar: str | None = None,
) -> Reaction:
    """Create a new reaction stamped with the current time.

    Cassandra timestamps have millisecond precision, so the stored value is
    truncated here to keep the index row addressable by the ledger's copy.
    """
    now = datetime.now(UTC)
    return Reaction(
        user_id=user_id,
        target_id=target_id,
        target_type=target_type,
        reaction_type=reaction_type,
        created_at=now.replace(microsecond=now.microsecond // 1000 * 1000),
        user_name=user_name,
        user_avatar=user_avatar,
    )
