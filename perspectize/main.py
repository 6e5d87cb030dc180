from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import logging
import sys

import structlog

from perspectize import __version__
from perspectize.config import Settings, get_settings
from perspectize.api import content, youtube, users, perspectives
from perspectize.core.database import create_engine, create_session_factory, init_models
from perspectize.core.errors import PerspectizeError
from perspectize.core.user_service import UserService
from perspectize.utils.messages import user_message_for

logger = structlog.get_logger()


def configure_logging(settings: Settings) -> None:
    """Configure structlog on top of the stdlib logging module."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO)
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifecycle management"""
    settings = app.state.settings
    logger.info("Starting Perspectize API", env=settings.app_env)

    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    if settings.auto_create_schema:
        await init_models(engine)
        async with app.state.session_factory() as session:
            await UserService(session).ensure_sentinel_users()
        logger.info("Database initialized")

    yield

    await engine.dispose()
    logger.info("Shutting down API")


async def perspectize_error_handler(request: Request, exc: PerspectizeError):
    logger.warning(
        "Request failed",
        path=request.url.path,
        code=exc.code,
        detail=exc.detail
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "code": exc.code,
            "message": user_message_for(exc.detail)
        }
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception", exc_info=exc, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal error occurred. Please try again later."}
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Perspectize API",
        description="Content catalogue with user perspectives",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else settings.cors_origins,
        allow_credentials=not settings.is_development,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PerspectizeError, perspectize_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "environment": settings.app_env,
            "version": __version__
        }

    @app.get("/")
    async def root():
        return {
            "message": "Perspectize API",
            "docs": "/docs",
            "health": "/health"
        }

    app.include_router(content.router, prefix="/content", tags=["Content"])
    app.include_router(youtube.router, prefix="/youtube", tags=["YouTube"])
    app.include_router(users.router, prefix="/users", tags=["Users"])
    app.include_router(perspectives.router, prefix="/perspectives", tags=["Perspectives"])

    return app


app = create_app(get_settings())


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "perspectize.main:app",
        host=get_settings().api_host,
        port=get_settings().api_port
    )
