"""Comment thread module.

Two-level comment threads on posts: root comments and replies to a root.
Replies to replies are re-attached to the original root at write time.

Note: Router is not exported here to avoid circular imports.
Import directly from socialfeed.comments.router when needed.
"""

from .models import (
    COMMENTS_TABLES_CQL,
    Comment,
    ThreadPlacement,
    resolve_thread_placement,
)
from .repository import CommentRepository
from .service import CommentService


__all__ = [
    "COMMENTS_TABLES_CQL",
    "Comment",
    "CommentRepository",
    "CommentService",
    "ThreadPlacement",
    "resolve_thread_placement",
]
