"""Magic bytes detection for post image uploads.

The declared Content-Type of an upload is not trusted: the first bytes of the
file must match one of the raster formats the feed accepts.
"""

from typing import NamedTuple


MIN_BYTES_FOR_DETECTION = 4
WEBP_HEADER_LENGTH = 12


class MagicSignature(NamedTuple):
    """Magic bytes signature for an image format."""

    bytes_pattern: bytes
    mime_type: str


# Reference: https://en.wikipedia.org/wiki/List_of_file_signatures
IMAGE_SIGNATURES: list[MagicSignature] = [
    MagicSignature(b"\xff\xd8\xff", "image/jpeg"),
    MagicSignature(b"\x89PNG\r\n\x1a\n", "image/png"),
    MagicSignature(b"GIF87a", "image/gif"),
    MagicSignature(b"GIF89a", "image/gif"),
]


def detect_image_type(data: bytes) -> str | None:
    """Detect the image MIME type from the leading bytes of a file.

    Returns:
        Detected MIME type or None if the bytes are not a known image.
    """
    if len(data) < MIN_BYTES_FOR_DETECTION:
        return None

    # WebP is RIFF....WEBP
    if data[:4] == b"RIFF":
        if len(data) >= WEBP_HEADER_LENGTH and data[8:12] == b"WEBP":
            return "image/webp"
        return None

    for sig in IMAGE_SIGNATURES:
        if data.startswith(sig.bytes_pattern):
            return sig.mime_type

    return None


def validate_image_content(
    data: bytes,
    allowed_types: frozenset[str],
) -> tuple[bool, str | None, str | None]:
    """Check that ``data`` is an image of one of ``allowed_types``.

    Returns:
        Tuple of (is_valid, detected_type, error_message).
    """
    detected_type = detect_image_type(data)

    if detected_type is None:
        return (False, None, "Unable to detect image type from content")

    if detected_type not in allowed_types:
        return (
            False,
            detected_type,
            f"Image type '{detected_type}' is not allowed. "
            f"Allowed: {', '.join(sorted(allowed_types))}",
        )

    return (True, detected_type, None)
