"""Identity schemas shared by every module that renders a user."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


DEFAULT_DISPLAY_NAME = "User"


class UserSummary(BaseModel):
    """Public identity of a user (author, reactor, addressed user)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    avatar: str | None = None


class AuthenticatedUser(BaseModel):
    """Caller identity decoded from the access token."""

    id: UUID
    name: str | None = None
    avatar: str | None = None

    @property
    def display_name(self) -> str:
        """Name shown on content written by this user."""
        return self.name or DEFAULT_DISPLAY_NAME

    def summary(self) -> UserSummary:
        return UserSummary(id=self.id, name=self.display_name, avatar=self.avatar)
