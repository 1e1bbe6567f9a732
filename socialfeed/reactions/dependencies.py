"""FastAPI dependencies for the reaction ledger."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import ReactionService


async def get_reaction_service(request: Request) -> ReactionService:
    """Get reaction service from app state."""
    app_state = request.app.state
    if not hasattr(app_state, "reaction_service") or not app_state.reaction_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reaction service not available",
        )
    return app_state.reaction_service


ReactionServiceDep = Annotated[ReactionService, Depends(get_reaction_service)]
