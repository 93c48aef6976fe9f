"""
Companion FastAPI Application Entry Point

Main application initialization with:
- Lifespan management (startup/shutdown)
- CORS configuration
- Error handling middleware
- Router registration
- Metrics endpoint

This is the production entry point for the session engine.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from companion import __version__
from companion.config import Settings, get_settings
from companion.config.logging_config import configure_logging, get_logger
from companion.infrastructure.metrics import metrics_router, update_system_info
from companion.services.orchestration.companion_service import CompanionService
from companion.api.v1.router import api_router
from companion.api.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers,
)

logger = get_logger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    service: Optional[CompanionService] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings (defaults to environment)
        service: Prebuilt session service (built from settings at startup if omitted)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan manager.

        Loads reference data once; it is read-only afterwards.
        """
        logger.info(
            "Starting companion application",
            env=settings.env,
            version=__version__,
        )

        if getattr(app.state, "companion_service", None) is None:
            app.state.companion_service = CompanionService.from_settings(settings)
        update_system_info(settings.env)
        logger.info(
            "Companion service initialized",
            intervention_count=len(app.state.companion_service.catalog),
        )

        try:
            yield
        finally:
            logger.info("Companion application shutdown complete")

    app = FastAPI(
        title="Companion API",
        description="Guided self-help session engine",
        version=__version__,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        lifespan=lifespan,
    )
    app.state.companion_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(ErrorHandlerMiddleware)
    register_exception_handlers(app)

    app.include_router(
        api_router,
        prefix=f"/api/{settings.api_version}",
    )
    app.include_router(metrics_router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Root endpoint - basic info."""
        return {
            "name": "Companion API",
            "version": __version__,
            "status": "operational",
        }

    return app


# Create application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "companion.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.env == "development",
        log_level=settings.log_level.lower(),
    )
