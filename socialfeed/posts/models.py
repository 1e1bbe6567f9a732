"""Database models for posts.

Cassandra table definitions for:
- Posts: lookup by ID
- Posts timeline: single feed partition, newest first
- Post counters: denormalized likes/comments counts (COUNTER columns)

Counters live in their own table because Cassandra counter columns cannot
share a table with regular columns. They are caches: the reaction ledger and
the comment tables are the source of truth.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4


class PostPrivacy(str, Enum):
    """Who can see a post in the feed."""

    PUBLIC = "public"
    PRIVATE = "private"


# Every post lands in one timeline partition so the feed is a single
# clustered read ordered by created_at.
FEED_BUCKET = "global"

POST_COUNTERS_TABLE = "post_counters"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

POSTS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.posts (
    post_id UUID PRIMARY KEY,
    author_id UUID,
    author_name TEXT,
    author_avatar TEXT,
    content TEXT,
    image_url TEXT,
    privacy TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

POSTS_TIMELINE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.posts_timeline (
    bucket TEXT,
    created_at TIMESTAMP,
    post_id UUID,
    author_id UUID,
    author_name TEXT,
    author_avatar TEXT,
    content TEXT,
    image_url TEXT,
    privacy TEXT,
    PRIMARY KEY ((bucket), created_at, post_id)
) WITH CLUSTERING ORDER BY (created_at DESC, post_id ASC)
"""

POST_COUNTERS_TABLE_CQL = f"""
CREATE TABLE IF NOT EXISTS {{keyspace}}.{POST_COUNTERS_TABLE} (
    post_id UUID PRIMARY KEY,
    likes_count COUNTER,
    comments_count COUNTER
)
"""

POSTS_TABLES_CQL = [
    POSTS_TABLE_CQL,
    POSTS_TIMELINE_TABLE_CQL,
    POST_COUNTERS_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


@dataclass
class Post:
    """Post entity with its denormalized counters."""

    post_id: UUID
    author_id: UUID
    author_name: str
    author_avatar: str | None
    content: str | None
    image_url: str | None
    privacy: PostPrivacy | None
    likes_count: int
    comments_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(
        cls,
        row: Any,
        likes_count: int = 0,
        comments_count: int = 0,
    ) -> "Post":
        """Create Post from a posts or posts_timeline row.

        Legacy rows may have no privacy value; it stays None.
        """
        return cls(
            post_id=row.post_id,
            author_id=row.author_id,
            author_name=row.author_name or "User",
            author_avatar=row.author_avatar,
            content=row.content,
            image_url=row.image_url,
            privacy=PostPrivacy(row.privacy) if row.privacy else None,
            likes_count=max(0, likes_count),
            comments_count=max(0, comments_count),
            created_at=row.created_at,
            updated_at=getattr(row, "updated_at", None) or row.created_at,
        )

    def is_visible_to(self, viewer_id: UUID) -> bool:
        """Public and legacy (privacy unset) posts are visible to everyone,
        private posts only to their author."""
        return (
            self.privacy is None
            or self.privacy == PostPrivacy.PUBLIC
            or self.author_id == viewer_id
        )


# ==============================================================================
# Factory Functions
# ==============================================================================


def create_post(
    author_id: UUID,
    author_name: str,
    content: str | None = None,
    image_url: str | None = None,
    privacy: PostPrivacy = PostPrivacy.PUBLIC,
    author_avatar: str | None = None,
) -> Post:
    """Create a new post with zeroed counters."""
    now = datetime.now(UTC)
    return Post(
        post_id=uuid4(),
        author_id=author_id,
        author_name=author_name,
        author_avatar=author_avatar,
        content=content,
        image_url=image_url,
        privacy=privacy,
        likes_count=0,
        comments_count=0,
        created_at=now,
        updated_at=now,
    )
