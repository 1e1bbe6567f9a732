"""Pydantic schemas for reactions."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from socialfeed.auth.schemas import UserSummary

from .models import DEFAULT_REACTION_TYPE, Reaction, ReactionResult, ReactionStatus


class ReactRequest(BaseModel):
    """Reaction click: the kind of reaction chosen."""

    reaction_type: str = Field(DEFAULT_REACTION_TYPE, min_length=1, max_length=32)

    @field_validator("reaction_type")
    @classmethod
    def validate_reaction_type(cls, v: str) -> str:
        """Strip whitespace and reject blank types."""
        v = v.strip()
        if not v:
            msg = "Reaction type cannot be empty"
            raise ValueError(msg)
        return v


class ReactResponse(BaseModel):
    """Outcome of a reaction click."""

    status: ReactionStatus
    type: str | None = None

    @classmethod
    def from_result(cls, result: ReactionResult) -> "ReactResponse":
        return cls(status=result.status, type=result.reaction_type)


class ReactorResponse(BaseModel):
    """One entry of the "who reacted" list."""

    user: UserSummary
    type: str
    reacted_at: datetime

    @classmethod
    def from_reaction(cls, reaction: Reaction) -> "ReactorResponse":
        return cls(
            user=UserSummary(
                id=reaction.user_id,
                name=reaction.user_name,
                avatar=reaction.user_avatar,
            ),
            type=reaction.reaction_type,
            reacted_at=reaction.created_at,
        )
