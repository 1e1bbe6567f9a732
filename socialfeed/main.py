"""Social Feed API - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from socialfeed.comments.repository import CommentRepository
from socialfeed.comments.router import router as comments_router
from socialfeed.comments.service import CommentService
from socialfeed.config import get_settings
from socialfeed.core.context import get_request_id
from socialfeed.core.database import init_async_cassandra, shutdown_async_cassandra
from socialfeed.core.exceptions import AppError
from socialfeed.core.logging import configure_structlog, get_logger
from socialfeed.core.middleware import RequestContextMiddleware
from socialfeed.core.redis import init_redis, shutdown_redis
from socialfeed.feed.service import FeedDecorator
from socialfeed.health import router as health_router
from socialfeed.posts.repository import PostRepository
from socialfeed.posts.router import router as posts_router
from socialfeed.posts.service import PostService
from socialfeed.reactions.repository import ReactionRepository
from socialfeed.reactions.router import router as reactions_router
from socialfeed.reactions.service import ReactionService


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the Cassandra session and Redis client once, builds repositories
    and services on top of them and publishes the services on ``app.state``.
    """
    settings = get_settings()
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    # Initialize Redis (non-critical - app works without it)
    redis_client = None
    try:
        redis_client = await init_redis()
        logger.info("redis_initialized")
    except Exception as e:
        logger.warning(
            "redis_init_skipped",
            error=str(e),
            message="Running without Redis - comment rate limiting disabled",
        )
    app.state.redis = redis_client

    # Initialize Cassandra (async)
    try:
        session = await init_async_cassandra()
        app.state.cassandra_session = session
        logger.info("cassandra_initialized")

        keyspace = settings.cassandra_keyspace
        post_repository = PostRepository(session=session, keyspace=keyspace)
        comment_repository = CommentRepository(session=session, keyspace=keyspace)
        reaction_repository = ReactionRepository(session=session, keyspace=keyspace)

        app.state.post_service = PostService(post_repository)
        app.state.comment_service = CommentService(
            repository=comment_repository,
            post_repository=post_repository,
            redis=redis_client,
            comments_per_minute=settings.comments_per_minute,
            comments_per_hour=settings.comments_per_hour,
        )
        app.state.reaction_service = ReactionService(
            repository=reaction_repository,
            post_repository=post_repository,
            comment_repository=comment_repository,
        )
        app.state.feed_decorator = FeedDecorator(app.state.reaction_service)
        logger.info(
            "feed_services_initialized", redis_enabled=redis_client is not None
        )
    except Exception as e:
        logger.warning(
            "database_init_skipped",
            error=str(e),
            message="Running without database connection",
        )

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await shutdown_redis()
    await shutdown_async_cassandra()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # Never expose stack traces in responses; handlers below log details.
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Social Feed API - posts, reactions and comment threads",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    # Request context middleware (must be added first - outermost)
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    def _get_request_id_safe(request: Request) -> str | None:
        """Get request_id from request state or context."""
        if hasattr(request.state, "request_id"):
            return request.state.request_id
        return get_request_id()

    def _error_response(
        request: Request,
        status_code: int,
        message: str,
        headers: dict[str, str] | None = None,
    ) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=status_code,
            headers=headers,
            content={
                "error": True,
                "message": message
                if status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
                else "Internal server error",
                "status_code": status_code,
                "request_id": _get_request_id_safe(request),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle HTTP exceptions with safe error messages."""
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )
        return _error_response(
            request, exc.status_code, str(exc.detail), getattr(exc, "headers", None)
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> ORJSONResponse:
        """Handle domain errors that were not converted by a router."""
        logger.warning(
            "app_error",
            status_code=exc.status_code,
            code=exc.code,
            detail=exc.message,
            path=request.url.path,
            method=request.method,
        )
        return _error_response(request, exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Handle validation errors with per-field details."""
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": True,
                "message": "Validation error",
                "status_code": 422,
                "request_id": _get_request_id_safe(request),
                "details": [
                    {
                        "field": ".".join(str(loc) for loc in err.get("loc", [])),
                        "message": err.get("msg", "Invalid value"),
                    }
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all handler for unhandled exceptions.

        Details are logged; the response stays generic.
        """
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": True,
                "message": "An unexpected error occurred. Please try again later.",
                "status_code": 500,
                "request_id": _get_request_id_safe(request),
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(posts_router)
    app.include_router(comments_router)
    app.include_router(reactions_router)

    @app.get("/", include_in_schema=False)
    async def root(request: Request) -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "Social Feed API",
            "version": settings.app_version,
            "docs": f"{request.url}docs",
        }

    return app


app = create_app()
