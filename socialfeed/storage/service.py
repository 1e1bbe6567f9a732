"""Firebase Storage service for post images.

Handles image uploads to Firebase Storage with:
- Size and declared content type limits
- Magic bytes validation of the actual content
- Per-author path generation and public URL creation
"""

from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote
from uuid import UUID

import structlog
from fastapi import status


if TYPE_CHECKING:
    from google.cloud.storage import Blob, Bucket

from socialfeed.config.settings import Settings
from socialfeed.core.exceptions import (
    AppError,
    AppValidationError,
    ServiceUnavailableError,
    UpstreamFailureError,
)
from socialfeed.utils.magic_bytes import validate_image_content


logger = structlog.get_logger(__name__)


class StorageNotConfiguredError(ServiceUnavailableError):
    """Error when Firebase Storage is not configured."""

    def __init__(self, message: str = "Firebase Storage is not configured") -> None:
        super().__init__(message, "storage_not_configured")


class StorageUploadError(UpstreamFailureError):
    """Error during file upload."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "upload_error")


class StorageValidationError(AppValidationError):
    """File content does not match an allowed image type."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "invalid_image")


class FileTooLargeError(AppError):
    """Error when file exceeds size limit."""

    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def __init__(self, size: int, max_size: int) -> None:
        message = (
            f"File size ({size / 1024 / 1024:.2f} MB) exceeds "
            f"maximum allowed ({max_size / 1024 / 1024:.2f} MB)"
        )
        super().__init__(message, "file_too_large")


class InvalidContentTypeError(AppError):
    """Error when content type is not allowed."""

    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE

    def __init__(self, content_type: str, allowed: list[str]) -> None:
        message = f"Content type '{content_type}' is not allowed. Allowed: {', '.join(allowed)}"
        super().__init__(message, "invalid_content_type")


# Firebase app singleton
_firebase_app = None
_storage_bucket: "Bucket | None" = None


def _init_firebase(settings: Settings) -> "Bucket":
    """Initialize Firebase Admin SDK and get storage bucket.

    Raises:
        StorageNotConfiguredError: If Firebase is not configured.
    """
    global _firebase_app, _storage_bucket  # noqa: PLW0603

    if _storage_bucket is not None:
        return _storage_bucket

    if not settings.firebase_configured:
        raise StorageNotConfiguredError

    # Lazy import to avoid loading Firebase SDK unless needed
    import firebase_admin  # noqa: PLC0415
    from firebase_admin import credentials, storage  # noqa: PLC0415

    creds_path = settings.firebase_credentials_path
    if not creds_path or not Path(creds_path).exists():
        raise StorageNotConfiguredError(
            f"Firebase credentials file not found: {creds_path}"
        )

    try:
        if _firebase_app is None:
            cred = credentials.Certificate(creds_path)
            _firebase_app = firebase_admin.initialize_app(
                cred,
                {
                    "storageBucket": settings.firebase_storage_bucket,
                    "projectId": settings.firebase_project_id,
                },
            )
            logger.info(
                "firebase_initialized",
                project_id=settings.firebase_project_id,
                bucket=settings.firebase_storage_bucket,
            )

        _storage_bucket = storage.bucket()
        return _storage_bucket

    except Exception as e:
        logger.exception("firebase_init_failed", error=str(e))
        raise StorageNotConfiguredError(f"Failed to initialize Firebase: {e}") from e


class FirebaseStorageService:
    """Service for uploading post images to Firebase Storage."""

    EXTENSION_MAP: dict[str, str] = {
        "image/jpeg": ".jpg",
        "image/png": ".png",
        "image/webp": ".webp",
        "image/gif": ".gif",
    }

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._bucket: Bucket | None = None

    @property
    def is_configured(self) -> bool:
        """Check if Firebase Storage is configured."""
        return self.settings.firebase_configured

    @property
    def max_file_size(self) -> int:
        """Maximum file size in bytes."""
        return self.settings.upload_max_file_size_mb * 1024 * 1024

    @property
    def allowed_types(self) -> list[str]:
        """Allowed MIME types for post images."""
        return self.settings.upload_allowed_image_types

    def _ensure_configured(self) -> None:
        if not self.is_configured:
            raise StorageNotConfiguredError

    def _get_bucket(self) -> "Bucket":
        """Get Firebase Storage bucket (lazy initialization)."""
        if self._bucket is None:
            self._bucket = _init_firebase(self.settings)
        return self._bucket

    def _build_storage_path(
        self,
        author_id: UUID,
        content_type: str,
        original_filename: str | None = None,
    ) -> str:
        """Build storage path for a post image.

        Format: socialfeed/posts/{author_id}/{timestamp}{ext}
        """
        timestamp = datetime.now(UTC).strftime("%Y%m%d%H%M%S%f")

        ext = self.EXTENSION_MAP.get(content_type, "")
        if not ext and original_filename:
            ext = Path(original_filename).suffix.lower()

        return f"socialfeed/posts/{author_id}/{timestamp}{ext}"

    def _generate_public_url(self, storage_path: str) -> str:
        bucket_name = self.settings.firebase_storage_bucket
        encoded_path = "/".join(
            quote(part, safe="") for part in storage_path.split("/")
        )
        return f"https://storage.googleapis.com/{bucket_name}/{encoded_path}"

    def validate_image(self, content: bytes, content_type: str) -> str:
        """Validate an upload and return its detected MIME type.

        Raises:
            FileTooLargeError: If file exceeds size limit.
            InvalidContentTypeError: If declared content type is not allowed.
            StorageValidationError: If magic bytes do not match an allowed image.
        """
        file_size = len(content)
        if file_size > self.max_file_size:
            raise FileTooLargeError(file_size, self.max_file_size)

        if content_type not in self.allowed_types:
            raise InvalidContentTypeError(content_type, self.allowed_types)

        is_valid, detected_type, error_msg = validate_image_content(
            content[:64],
            frozenset(self.allowed_types),
        )
        if not is_valid:
            logger.warning(
                "magic_bytes_validation_failed",
                declared_type=content_type,
                detected_type=detected_type,
                error=error_msg,
            )
            raise StorageValidationError(error_msg or "Invalid image content")

        return detected_type or content_type

    async def upload_post_image(
        self,
        content: bytes,
        content_type: str,
        author_id: UUID,
        filename: str | None = None,
    ) -> str:
        """Upload a post image and return its public URL.

        Raises:
            StorageNotConfiguredError: If Firebase is not configured.
            FileTooLargeError, InvalidContentTypeError, StorageValidationError:
                If the image is rejected.
            StorageUploadError: If upload fails.
        """
        self._ensure_configured()
        actual_type = self.validate_image(content, content_type)

        storage_path = self._build_storage_path(
            author_id=author_id,
            content_type=actual_type,
            original_filename=filename,
        )

        try:
            bucket = self._get_bucket()
            blob: Blob = bucket.blob(storage_path)

            # Paths are unique per upload, so content is immutable
            blob.cache_control = "public, max-age=31536000, immutable"
            blob.upload_from_string(content, content_type=actual_type)
            blob.make_public()

        except StorageNotConfiguredError:
            raise
        except Exception as e:
            logger.exception(
                "post_image_upload_failed",
                storage_path=storage_path,
                error=str(e),
            )
            raise StorageUploadError(f"Failed to upload image: {e}") from e

        logger.info(
            "post_image_uploaded",
            storage_path=storage_path,
            content_type=actual_type,
            file_size=len(content),
            author_id=str(author_id),
        )
        return self._generate_public_url(storage_path)
