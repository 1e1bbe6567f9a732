"""Utility modules for the socialfeed API."""

from socialfeed.utils.magic_bytes import detect_image_type, validate_image_content
from socialfeed.utils.text import sanitize_content


__all__ = ["detect_image_type", "sanitize_content", "validate_image_content"]
