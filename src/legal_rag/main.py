"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from legal_rag.api.v1.router import api_router
from legal_rag.config import get_settings
from legal_rag.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
)
from legal_rag.core.logging import get_logger, setup_logging
from legal_rag.core.security import security_headers_middleware
from legal_rag.dependencies import close_dependencies, get_store_admin

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Creates the vector collections on startup when they are missing and closes the
    shared clients on shutdown. An unreachable Qdrant is logged, not fatal, so the
    process can still report its own health.
    """
    settings = get_settings()
    logger.info("Starting up %s (%s)", settings.app_name, settings.environment)
    try:
        await get_store_admin(settings).ensure_schemas()
    except Exception as exc:
        logger.error("Failed to ensure vector collections on startup: %s", exc, exc_info=True)
    yield
    logger.info("Shutting down %s", settings.app_name)
    await close_dependencies()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Legal document retrieval and vector indexing API",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_credentials,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )

    app.middleware("http")(security_headers_middleware)

    # Register exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


app = create_app()
