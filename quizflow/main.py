"""FastAPI application factory and main entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from quizflow import __version__
from quizflow.api.v1.router import api_router
from quizflow.common.request_id import RequestIDMiddleware
from quizflow.core.config import settings
from quizflow.core.errors import (
    database_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from quizflow.core.logging import setup_logging
from quizflow.core.redis_client import close_redis, init_redis
from quizflow.db.session import create_tables


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging()
    init_redis()
    # Production schemas are managed by the Alembic migrations
    if settings.ENV in ("dev", "test"):
        create_tables()
    yield
    close_redis()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=__version__,
        description="QuizFlow API - quiz authoring, distribution and scoring",
        openapi_url="/openapi.json" if settings.ENV != "prod" else None,
        docs_url="/docs" if settings.ENV != "prod" else None,
        redoc_url="/redoc" if settings.ENV != "prod" else None,
        lifespan=lifespan,
    )

    # Add middleware (order matters - last added is outermost)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint - API information."""
        return {
            "message": settings.PROJECT_NAME,
            "version": __version__,
            "docs_url": "/docs" if settings.ENV != "prod" else None,
        }

    return app


# Create app instance
app = create_app()
