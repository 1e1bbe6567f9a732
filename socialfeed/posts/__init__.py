"""Posts module.

Post creation, single post lookup and the visibility-filtered feed.

Note: Router is not exported here to avoid circular imports.
Import directly from socialfeed.posts.router when needed.
"""

from .models import POSTS_TABLES_CQL, Post, PostPrivacy
from .repository import PostRepository
from .service import PostService


__all__ = [
    "POSTS_TABLES_CQL",
    "Post",
    "PostPrivacy",
    "PostRepository",
    "PostService",
]
