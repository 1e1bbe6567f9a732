"""Cassandra access for posts, the feed timeline and post counters."""

import asyncio
from typing import TYPE_CHECKING, Any
from uuid import UUID

from .models import FEED_BUCKET, POST_COUNTERS_TABLE, Post


if TYPE_CHECKING:
    from cassandra.cluster import Session


class PostRepository:
    """Post rows plus their counters, joined on read."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        self._insert_post = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.posts
            (post_id, author_id, author_name, author_avatar, content, image_url,
             privacy, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_timeline = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.posts_timeline
            (bucket, created_at, post_id, author_id, author_name, author_avatar,
             content, image_url, privacy)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._get_post = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.posts
            WHERE post_id = ?
        """)

        self._list_timeline = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.posts_timeline
            WHERE bucket = ?
        """)

        # Counters
        self._get_counters = self.session.prepare(f"""
            SELECT likes_count, comments_count FROM {self.keyspace}.{POST_COUNTERS_TABLE}
            WHERE post_id = ?
        """)

        self._incr_comments_count = self.session.prepare(f"""
            UPDATE {self.keyspace}.{POST_COUNTERS_TABLE}
            SET comments_count = comments_count + ?
            WHERE post_id = ?
        """)

    async def _with_counters(self, row: Any) -> Post:
        rows = await self.session.aexecute(self._get_counters, [row.post_id])
        counters = rows.one()
        if counters is None:
            return Post.from_row(row)
        return Post.from_row(
            row,
            likes_count=counters.likes_count or 0,
            comments_count=counters.comments_count or 0,
        )

    async def insert(self, post: Post) -> None:
        """Write the post and its timeline entry."""
        privacy = post.privacy.value if post.privacy else None
        await self.session.aexecute(
            self._insert_post,
            [
                post.post_id,
                post.author_id,
                post.author_name,
                post.author_avatar,
                post.content,
                post.image_url,
                privacy,
                post.created_at,
                post.updated_at,
            ],
        )
        await self.session.aexecute(
            self._insert_timeline,
            [
                FEED_BUCKET,
                post.created_at,
                post.post_id,
                post.author_id,
                post.author_name,
                post.author_avatar,
                post.content,
                post.image_url,
                privacy,
            ],
        )

    async def get(self, post_id: UUID) -> Post | None:
        """Get a post by ID with its counters."""
        rows = await self.session.aexecute(self._get_post, [post_id])
        row = rows.one()
        if row is None:
            return None
        return await self._with_counters(row)

    async def list_timeline(self) -> list[Post]:
        """All posts, newest first, with counters."""
        rows = await self.session.aexecute(self._list_timeline, [FEED_BUCKET])
        return list(await asyncio.gather(*(self._with_counters(row) for row in rows)))

    async def increment_comments_count(self, post_id: UUID, delta: int = 1) -> None:
        await self.session.aexecute(self._incr_comments_count, [delta, post_id])
