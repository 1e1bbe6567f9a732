"""Authentication module.

Validates access tokens issued by the identity collaborator and exposes the
caller as ``CurrentUser``.
"""

from .dependencies import CurrentUser, get_current_user
from .schemas import AuthenticatedUser, UserSummary


__all__ = ["AuthenticatedUser", "CurrentUser", "UserSummary", "get_current_user"]
