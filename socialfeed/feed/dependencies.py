"""FastAPI dependencies for feed decoration."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .service import FeedDecorator


async def get_feed_decorator(request: Request) -> FeedDecorator:
    """Get feed decorator from app state."""
    app_state = request.app.state
    if not hasattr(app_state, "feed_decorator") or not app_state.feed_decorator:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Feed service not available",
        )
    return app_state.feed_decorator


FeedDecoratorDep = Annotated[FeedDecorator, Depends(get_feed_decorator)]
