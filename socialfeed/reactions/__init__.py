"""Reaction ledger module.

One reaction per user and target (post or comment), with add, change and
toggle-off semantics and the likes counters that follow from them.

Note: Router is not exported here to avoid circular imports.
Import directly from socialfeed.reactions.router when needed.
"""

from .models import (
    DEFAULT_REACTION_TYPE,
    REACTIONS_TABLES_CQL,
    Reaction,
    ReactionResult,
    ReactionStatus,
    ReactionTargetType,
)
from .repository import ReactionRepository
from .service import ReactionService


__all__ = [
    "DEFAULT_REACTION_TYPE",
    "REACTIONS_TABLES_CQL",
    "Reaction",
    "ReactionRepository",
    "ReactionResult",
    "ReactionService",
    "ReactionStatus",
    "ReactionTargetType",
]
