"""Tests for resolving where a new comment attaches in the thread."""

from uuid import uuid4

from socialfeed.comments.models import (
    ThreadPlacement,
    create_comment,
    resolve_thread_placement,
)


def make_root(author_name: str = "Root Author"):
    return create_comment(
        post_id=uuid4(),
        author_id=uuid4(),
        author_name=author_name,
        content="root",
        author_avatar="root.png",
    )


class TestResolveThreadPlacement:
    def test_no_parent_is_root(self):
        assert resolve_thread_placement(None) == ThreadPlacement()

    def test_reply_to_root_attaches_under_it(self):
        root = make_root()

        placement = resolve_thread_placement(root)

        assert placement.parent_id == root.comment_id
        assert placement.reply_to_user_id == root.author_id
        assert placement.reply_to_user_name == "Root Author"
        assert placement.reply_to_user_avatar == "root.png"

    def test_reply_to_reply_flattens_to_root(self):
        root = make_root()
        reply = create_comment(
            post_id=root.post_id,
            author_id=uuid4(),
            author_name="Replier",
            content="reply",
            placement=resolve_thread_placement(root),
        )

        placement = resolve_thread_placement(reply)

        assert placement.parent_id == root.comment_id
        assert placement.reply_to_user_id == reply.author_id
        assert placement.reply_to_user_name == "Replier"

    def test_new_comment_defaults(self):
        comment = make_root()

        assert comment.is_root
        assert comment.likes_count == 0
        assert comment.reply_count == 0
        assert comment.reply_to_user_id is None
