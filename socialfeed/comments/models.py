"""Database models for the two-level comment thread.

Cassandra table definitions for:
- Comments: lookup by ID
- Root comments by post: newest first, for the post's comment list
- Comment replies: oldest first, one partition per root comment
- Comment counters: denormalized likes/reply counts (COUNTER columns)

Threading model: a comment's parent_id is either NULL (root comment) or the
ID of a root comment. Replies to replies are re-attached to the original root
at write time, so the hierarchy is never deeper than two levels.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4


COMMENT_COUNTERS_TABLE = "comment_counters"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COMMENTS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comments (
    comment_id UUID PRIMARY KEY,
    post_id UUID,
    parent_id UUID,
    author_id UUID,
    author_name TEXT,
    author_avatar TEXT,
    reply_to_user_id UUID,
    reply_to_user_name TEXT,
    reply_to_user_avatar TEXT,
    content TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

# Root comments only - replies never land in this table
ROOT_COMMENTS_BY_POST_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.root_comments_by_post (
    post_id UUID,
    created_at TIMESTAMP,
    comment_id UUID,
    author_id UUID,
    author_name TEXT,
    author_avatar TEXT,
    content TEXT,
    PRIMARY KEY ((post_id), created_at, comment_id)
) WITH CLUSTERING ORDER BY (created_at DESC, comment_id ASC)
"""

# Replies in reading order under their root
COMMENT_REPLIES_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.comment_replies (
    parent_id UUID,
    created_at TIMESTAMP,
    comment_id UUID,
    post_id UUID,
    author_id UUID,
    author_name TEXT,
    author_avatar TEXT,
    reply_to_user_id UUID,
    reply_to_user_name TEXT,
    reply_to_user_avatar TEXT,
    content TEXT,
    PRIMARY KEY ((parent_id), created_at, comment_id)
) WITH CLUSTERING ORDER BY (created_at ASC, comment_id ASC)
"""

COMMENT_COUNTERS_TABLE_CQL = f"""
CREATE TABLE IF NOT EXISTS {{keyspace}}.{COMMENT_COUNTERS_TABLE} (
    comment_id UUID PRIMARY KEY,
    likes_count COUNTER,
    reply_count COUNTER
)
"""

COMMENTS_TABLES_CQL = [
    COMMENTS_TABLE_CQL,
    ROOT_COMMENTS_BY_POST_TABLE_CQL,
    COMMENT_REPLIES_TABLE_CQL,
    COMMENT_COUNTERS_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Comment:
    """Comment entity with its denormalized counters."""

    comment_id: UUID
    post_id: UUID
    parent_id: UUID | None
    author_id: UUID
    author_name: str
    author_avatar: str | None
    content: str
    reply_to_user_id: UUID | None
    reply_to_user_name: str | None
    reply_to_user_avatar: str | None
    likes_count: int
    reply_count: int
    created_at: datetime
    updated_at: datetime

    @property
    def is_root(self) -> bool:
        """Root comments have no parent."""
        return self.parent_id is None

    @classmethod
    def from_row(
        cls,
        row: Any,
        likes_count: int = 0,
        reply_count: int = 0,
    ) -> "Comment":
        """Create Comment from any of the comment tables.

        Rows from root_comments_by_post carry neither parent nor reply target.
        """
        return cls(
            comment_id=row.comment_id,
            post_id=row.post_id,
            parent_id=getattr(row, "parent_id", None),
            author_id=row.author_id,
            author_name=row.author_name or "User",
            author_avatar=row.author_avatar,
            content=row.content,
            reply_to_user_id=getattr(row, "reply_to_user_id", None),
            reply_to_user_name=getattr(row, "reply_to_user_name", None),
            reply_to_user_avatar=getattr(row, "reply_to_user_avatar", None),
            likes_count=max(0, likes_count),
            reply_count=max(0, reply_count),
            created_at=row.created_at,
            updated_at=getattr(row, "updated_at", None) or row.created_at,
        )


@dataclass(frozen=True)
class ThreadPlacement:
    """Where a new comment attaches in the thread."""

    parent_id: UUID | None = None
    reply_to_user_id: UUID | None = None
    reply_to_user_name: str | None = None
    reply_to_user_avatar: str | None = None


def resolve_thread_placement(parent: Comment | None) -> ThreadPlacement:
    """Resolve the root and the addressed user for a comment replying to ``parent``.

    - No parent: the new comment is a root comment.
    - Parent is a root: attach directly under it.
    - Parent is a reply: attach under the parent's root instead, so the thread
      stays two levels deep.

    In both reply cases the addressed user is the parent's author, the person
    actually being answered, not the root author.
    """
    if parent is None:
        return ThreadPlacement()

    root_id = parent.comment_id if parent.is_root else parent.parent_id
    return ThreadPlacement(
        parent_id=root_id,
        reply_to_user_id=parent.author_id,
        reply_to_user_name=parent.author_name,
        reply_to_user_avatar=parent.author_avatar,
    )


# ==============================================================================
# Factory Functions
# ==============================================================================


def create_comment(
    post_id: UUID,
    author_id: UUID,
    author_name: str,
    content: str,
    placement: ThreadPlacement | None = None,
    author_avatar: str | None = None,
) -> Comment:
    """Create a new comment at the resolved place in the thread."""
    placement = placement or ThreadPlacement()
    now = datetime.now(UTC)
    return Comment(
        comment_id=uuid4(),
        post_id=post_id,
        parent_id=placement.parent_id,
        author_id=author_id,
        author_name=author_name,
        author_avatar=author_avatar,
        content=content,
        reply_to_user_id=placement.reply_to_user_id,
        reply_to_user_name=placement.reply_to_user_name,
        reply_to_user_avatar=placement.reply_to_user_avatar,
        likes_count=0,
        reply_count=0,
        created_at=now,
        updated_at=now,
    )
