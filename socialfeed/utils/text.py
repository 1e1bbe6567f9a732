"""User-generated text helpers."""

import html


# Basic formatting tags allowed through escaping
ALLOWED_TAGS = {"b", "i", "em", "strong", "code"}


def sanitize_content(content: str) -> str:
    """Escape HTML in post/comment text, keeping basic formatting tags."""
    escaped = html.escape(content.strip())

    for tag in ALLOWED_TAGS:
        escaped = escaped.replace(f"&lt;{tag}&gt;", f"<{tag}>")
        escaped = escaped.replace(f"&lt;/{tag}&gt;", f"</{tag}>")

    return escaped
