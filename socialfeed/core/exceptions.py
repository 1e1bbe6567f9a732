"""Domain error taxonomy shared by posts, comments, reactions and storage.

Every error carries a human readable ``message``, a machine ``code`` and the
HTTP status the API layer answers with. Modules subclass these categories
with their own default messages and codes.
"""

from fastapi import HTTPException, status


class AppError(Exception):
    """Base application error."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: str = "app_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(AppError):
    """Referenced post, comment or reaction target does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Resource not found", code: str = "not_found"):
        super().__init__(message, code)


class ConflictError(AppError):
    """Concurrent writers kept winning a uniqueness race."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "Conflicting update", code: str = "conflict"):
        super().__init__(message, code)


class AppValidationError(AppError):
    """Request is well-formed but semantically invalid."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class RateLimitExceededError(AppError):
    """Rate limit exceeded."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str = "Too many requests"):
        super().__init__(message, "rate_limit_exceeded")


class UpstreamFailureError(AppError):
    """An external collaborator (blob store, identity provider) failed."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, code: str = "upstream_failure"):
        super().__init__(message, code)


class ServiceUnavailableError(AppError):
    """A required collaborator is not configured."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str, code: str = "service_unavailable"):
        super().__init__(message, code)


def to_http_exception(error: AppError) -> HTTPException:
    """Convert an application error to an HTTPException."""
    return HTTPException(status_code=error.status_code, detail=error.message)
