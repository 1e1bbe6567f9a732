"""Storage module for post image uploads to Firebase Storage."""

from socialfeed.storage.dependencies import StorageServiceDep, get_storage_service
from socialfeed.storage.service import (
    FileTooLargeError,
    FirebaseStorageService,
    InvalidContentTypeError,
    StorageNotConfiguredError,
    StorageUploadError,
    StorageValidationError,
)


__all__ = [
    "FileTooLargeError",
    "FirebaseStorageService",
    "InvalidContentTypeError",
    "StorageNotConfiguredError",
    "StorageServiceDep",
    "StorageUploadError",
    "StorageValidationError",
    "get_storage_service",
]
