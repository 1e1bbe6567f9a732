"""Cassandra access for the reaction ledger and the likes counters."""

from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from .models import (
    LIKE_COUNTER_TABLES,
    Reaction,
    ReactionTargetType,
)


if TYPE_CHECKING:
    from cassandra.cluster import Session


logger = structlog.get_logger(__name__)


class ReactionRepository:
    """Ledger reads and conditional writes.

    The ``*_if_*`` methods return whether the lightweight transaction was
    applied. A False means another request changed the ledger row first.
    """

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        # Ledger (LWT)
        self._get_reaction = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.reactions
            WHERE user_id = ? AND target_id = ?
        """)

        self._insert_reaction = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.reactions
            (user_id, target_id, target_type, reaction_type, user_name, user_avatar, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            IF NOT EXISTS
        """)

        self._update_reaction_type = self.session.prepare(f"""
            UPDATE {self.keyspace}.reactions
            SET reaction_type = ?
            WHERE user_id = ? AND target_id = ?
            IF reaction_type = ?
        """)

        self._delete_reaction = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.reactions
            WHERE user_id = ? AND target_id = ?
            IF reaction_type = ?
        """)

        # Index by target
        self._insert_by_target = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.reactions_by_target
            (target_type, target_id, created_at, user_id, user_name, user_avatar, reaction_type)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)

        self._update_by_target_type = self.session.prepare(f"""
            UPDATE {self.keyspace}.reactions_by_target
            SET reaction_type = ?
            WHERE target_type = ? AND target_id = ? AND created_at = ? AND user_id = ?
        """)

        self._delete_by_target = self.session.prepare(f"""
            DELETE FROM {self.keyspace}.reactions_by_target
            WHERE target_type = ? AND target_id = ? AND created_at = ? AND user_id = ?
        """)

        self._list_by_target = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.reactions_by_target
            WHERE target_type = ? AND target_id = ?
        """)

        self._list_by_target_limited = self.session.prepare(f"""
            SELECT * FROM {self.keyspace}.reactions_by_target
            WHERE target_type = ? AND target_id = ?
            LIMIT ?
        """)

        self._list_recent_types = self.session.prepare(f"""
            SELECT reaction_type FROM {self.keyspace}.reactions_by_target
            WHERE target_type = ? AND target_id = ?
            LIMIT ?
        """)

        self._count_by_target = self.session.prepare(f"""
            SELECT COUNT(*) FROM {self.keyspace}.reactions_by_target
            WHERE target_type = ? AND target_id = ?
        """)

        # Likes counters, one statement pair per target type
        self._incr_likes = {}
        self._get_likes = {}
        for target_type, (table, key_column) in LIKE_COUNTER_TABLES.items():
            self._incr_likes[target_type] = self.session.prepare(f"""
                UPDATE {self.keyspace}.{table}
                SET likes_count = likes_count + ?
                WHERE {key_column} = ?
            """)
            self._get_likes[target_type] = self.session.prepare(f"""
                SELECT likes_count FROM {self.keyspace}.{table}
                WHERE {key_column} = ?
            """)

    # ==========================================================================
    # Ledger
    # ==========================================================================

    async def get(self, user_id: UUID, target_id: UUID) -> Reaction | None:
        """Get the user's ledger entry for a target, whatever its type."""
        rows = await self.session.aexecute(self._get_reaction, [user_id, target_id])
        row = rows.one()
        return Reaction.from_row(row) if row else None

    async def insert_if_absent(self, reaction: Reaction) -> bool:
        """Insert a new ledger entry unless one already exists."""
        result = await self.session.aexecute(
            self._insert_reaction,
            [
                reaction.user_id,
                reaction.target_id,
                reaction.target_type.value,
                reaction.reaction_type,
                reaction.user_name,
                reaction.user_avatar,
                reaction.created_at,
            ],
        )
        if not result.was_applied:
            return False

        await self.session.aexecute(
            self._insert_by_target,
            [
                reaction.target_type.value,
                reaction.target_id,
                reaction.created_at,
                reaction.user_id,
                reaction.user_name,
                reaction.user_avatar,
                reaction.reaction_type,
            ],
        )
        return True

    async def update_type_if_unchanged(self, reaction: Reaction, new_type: str) -> bool:
        """Change the entry's type in place if it still has ``reaction.reaction_type``."""
        result = await self.session.aexecute(
            self._update_reaction_type,
            [new_type, reaction.user_id, reaction.target_id, reaction.reaction_type],
        )
        if not result.was_applied:
            return False

        await self.session.aexecute(
            self._update_by_target_type,
            [
                new_type,
                reaction.target_type.value,
                reaction.target_id,
                reaction.created_at,
                reaction.user_id,
            ],
        )
        return True

    async def delete_if_unchanged(self, reaction: Reaction) -> bool:
        """Delete the entry if it still has ``reaction.reaction_type``."""
        result = await self.session.aexecute(
            self._delete_reaction,
            [reaction.user_id, reaction.target_id, reaction.reaction_type],
        )
        if not result.was_applied:
            return False

        await self.session.aexecute(
            self._delete_by_target,
            [
                reaction.target_type.value,
                reaction.target_id,
                reaction.created_at,
                reaction.user_id,
            ],
        )
        return True

    async def list_by_target(
        self,
        target_id: UUID,
        target_type: ReactionTargetType,
        limit: int | None = None,
    ) -> list[Reaction]:
        """List reactions on a target, newest first."""
        if limit is None:
            rows = await self.session.aexecute(
                self._list_by_target, [target_type.value, target_id]
            )
        else:
            rows = await self.session.aexecute(
                self._list_by_target_limited, [target_type.value, target_id, limit]
            )
        return [Reaction.from_row(row) for row in rows]

    async def list_recent_types(
        self,
        target_id: UUID,
        target_type: ReactionTargetType,
        limit: int,
    ) -> list[str]:
        """Reaction types of the ``limit`` newest reactions on a target."""
        rows = await self.session.aexecute(
            self._list_recent_types, [target_type.value, target_id, limit]
        )
        return [row.reaction_type for row in rows]

    async def count_by_target(
        self, target_id: UUID, target_type: ReactionTargetType
    ) -> int:
        """Number of rows for a target in the by-target index."""
        result = await self.session.aexecute(
            self._count_by_target, [target_type.value, target_id]
        )
        row = result.one()
        return row.count if row else 0

    # ==========================================================================
    # Likes counters
    # ==========================================================================

    async def increment_likes(
        self,
        target_id: UUID,
        target_type: ReactionTargetType,
        delta: int,
    ) -> None:
        """Add ``delta`` (may be negative) to the target's likes_count."""
        await self.session.aexecute(self._incr_likes[target_type], [delta, target_id])
        logger.debug(
            "likes_count_incremented",
            target_id=str(target_id),
            target_type=target_type.value,
            delta=delta,
        )

    async def get_likes_count(
        self, target_id: UUID, target_type: ReactionTargetType
    ) -> int:
        """Raw counter value; may be negative after drift."""
        rows = await self.session.aexecute(self._get_likes[target_type], [target_id])
        row = rows.one()
        return (row.likes_count or 0) if row else 0
