"""Tests for content sanitizing and image signature detection."""

import pytest

from socialfeed.utils.magic_bytes import detect_image_type, validate_image_content
from socialfeed.utils.text import sanitize_content


class TestSanitizeContent:
    def test_escapes_markup(self) -> None:
        assert sanitize_content('<a href="x">hi</a>') == (
            "&lt;a href=&quot;x&quot;&gt;hi&lt;/a&gt;"
        )

    def test_keeps_basic_formatting(self) -> None:
        text = "<b>bold</b> <em>em</em> <code>x</code>"
        assert sanitize_content(text) == text

    def test_strips(self) -> None:
        assert sanitize_content("  hi \n") == "hi"


class TestDetectImageType:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"\xff\xd8\xff\xe0rest", "image/jpeg"),
            (b"\x89PNG\r\n\x1a\nrest", "image/png"),
            (b"GIF89a....", "image/gif"),
            (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
            (b"RIFF\x00\x00\x00\x00WAVE", None),
            (b"%PDF-1.7", None),
            (b"\xff", None),
        ],
    )
    def test_signatures(self, data: bytes, expected: str | None) -> None:
        assert detect_image_type(data) == expected

    def test_detected_type_outside_allowed(self) -> None:
        is_valid, detected, error = validate_image_content(
            b"GIF89a....", frozenset({"image/png"})
        )

        assert is_valid is False
        assert detected == "image/gif"
        assert error is not None
        assert "not allowed" in error
