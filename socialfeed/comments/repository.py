"""Cassandra access for comments, their thread indexes and counters."""

import asyncio
from typing import TYPE_CHECKING, Any
from uuid import UUID

from .models import COMMENT_COUNTERS_TABLE, Comment


if TYPE_CHECKING:
    from cassandra.cluster import Session


# LIMIT is bound as a CQL int
CQL_INT_MAX = 2**31 - 1


class CommentRepository:
    """Comment rows plus their counters, joined on read."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        self._insert_comment = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comments
            (comment_id, post_id, parent_id, author_id, author_name, author_avatar,
             reply_to_user_id, reply_to_user_name, reply_to_user_avatar,
             content, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_root = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.root_comments_by_post
            (post_id, created_at, comment_id, author_id, author_name, author_avatar, content)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)

        self._insert_reply = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.comment_replies
            (parent_id, created_at, comment_id, post_id, author_id, author_name,
             author_avatar, reply_to_user_id, reply_to_user_name, reply_to_user_avatar,
             content)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)

        self._get_comment = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comments
            WHERE comment_id = ?
        """)

        self._list_roots = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.root_comments_by_post
            WHERE post_id = ?
            LIMIT ?
        """)

        self._list_replies = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.comment_replies
            WHERE parent_id = ?
        """)

        # Counters
        self._get_counters = self.session.prepare(f"""
            SELECT likes_count, reply_count FROM {self.keyspace}.{COMMENT_COUNTERS_TABLE}
            WHERE comment_id = ?
        """)

        self._incr_reply_count = self.session.prepare(f"""
            UPDATE {self.keyspace}.{COMMENT_COUNTERS_TABLE}
            SET reply_count = reply_count + ?
            WHERE comment_id = ?
        """)

    async def _with_counters(self, row: Any) -> Comment:
        rows = await self.session.aexecute(self._get_counters, [row.comment_id])
        counters = rows.one()
        if counters is None:
            return Comment.from_row(row)
        return Comment.from_row(
            row,
            likes_count=counters.likes_count or 0,
            reply_count=counters.reply_count or 0,
        )

    async def insert(self, comment: Comment) -> None:
        """Write the comment and its entry in the root or reply index."""
        await self.session.aexecute(
            self._insert_comment,
            [
                comment.comment_id,
                comment.post_id,
                comment.parent_id,
                comment.author_id,
                comment.author_name,
                comment.author_avatar,
                comment.reply_to_user_id,
                comment.reply_to_user_name,
                comment.reply_to_user_avatar,
                comment.content,
                comment.created_at,
                comment.updated_at,
            ],
        )

        if comment.is_root:
            await self.session.aexecute(
                self._insert_root,
                [
                    comment.post_id,
                    comment.created_at,
                    comment.comment_id,
                    comment.author_id,
                    comment.author_name,
                    comment.author_avatar,
                    comment.content,
                ],
            )
        else:
            await self.session.aexecute(
                self._insert_reply,
                [
                    comment.parent_id,
                    comment.created_at,
                    comment.comment_id,
                    comment.post_id,
                    comment.author_id,
                    comment.author_name,
                    comment.author_avatar,
                    comment.reply_to_user_id,
                    comment.reply_to_user_name,
                    comment.reply_to_user_avatar,
                    comment.content,
                ],
            )

    async def get(self, comment_id: UUID) -> Comment | None:
        """Get a comment by ID with its counters."""
        rows = await self.session.aexecute(self._get_comment, [comment_id])
        row = rows.one()
        if row is None:
            return None
        return await self._with_counters(row)

    async def list_roots(self, post_id: UUID, offset: int, limit: int) -> list[Comment]:
        """Root comments of a post, newest first, skipping ``offset``.

        CQL has no OFFSET, so the skipped rows are read and dropped. An
        offset too large to bind as a LIMIT is past any real page.
        """
        if offset + limit > CQL_INT_MAX:
            return []
        rows = await self.session.aexecute(self._list_roots, [post_id, offset + limit])
        page = list(rows)[offset:]
        return list(await asyncio.gather(*(self._with_counters(row) for row in page)))

    async def list_replies(self, root_id: UUID) -> list[Comment]:
        """Replies under a root comment, oldest first."""
        rows = await self.session.aexecute(self._list_replies, [root_id])
        return list(await asyncio.gather(*(self._with_counters(row) for row in rows)))

    async def increment_reply_count(self, comment_id: UUID, delta: int = 1) -> None:
        await self.session.aexecute(self._incr_reply_count, [delta, comment_id])
