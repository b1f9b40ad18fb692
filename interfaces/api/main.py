"""Main FastAPI application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from infrastructure.config import Settings, get_settings
from infrastructure.logging import setup_logging
from interfaces.api.middleware import plain_text_http_exception_handler
from interfaces.api.routes.blob_routes import router as blob_router

logger = structlog.get_logger()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # noqa: ARG001
        """Handle application startup and shutdown."""
        setup_logging(settings)
        logger.info(
            "app_starting",
            env=settings.app_env,
            mirror=settings.mirror_source.archive_url,
        )
        if settings.auth_key_secret is None:
            logger.warning("auth_key_secret_missing", detail="PUT and DELETE will be refused")

        logger.info("app_ready")

        yield

        logger.info("app_shutting_down")
        logger.info("app_stopped")

    app = FastAPI(
        title=settings.app_name,
        description="Blob storage proxy with a scheduled repository mirror",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(StarletteHTTPException, plain_text_http_exception_handler)

    # Catch-all blob routes: every path is a storage key.
    app.include_router(blob_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(app, host=_settings.api_host, port=_settings.api_port)
