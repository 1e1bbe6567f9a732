"""Feed decoration module."""

from .service import FeedDecorator


__all__ = ["FeedDecorator"]
