"""
FastAPI application setup with dependency injection.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from typing import Optional

from holiday_tracker.config.settings import Settings, get_settings
from holiday_tracker.core.dependencies import ServiceContainer
from holiday_tracker.core.error_handlers import setup_error_handlers
from holiday_tracker.core.logging import configure_logging
from holiday_tracker.middleware import RequestContextMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management with service container.
    Handles startup and shutdown events with proper service lifecycle.
    """
    settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    service_container = app.state.service_container
    try:
        await service_container.initialize_services()
        logger.info("Application startup complete")

        yield

    except Exception as e:
        logger.error(f"Application startup failed: {e}", exc_info=True)
        raise

    finally:
        logger.info("Shutting down application")
        await service_container.cleanup_services()
        logger.info("Application shutdown complete")


def create_app(
    settings: Optional[Settings] = None,
    service_container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings, defaults to the environment-derived ones
        service_container: Pre-built container (tests inject fakes here)

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    configure_logging(
        level=settings.log_level.value,
        fmt=settings.log_format,
        use_json=settings.log_json,
        log_file=settings.log_file,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.service_container = service_container or ServiceContainer(settings)

    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    from holiday_tracker.api import trips_router, map_router, health_router
    app.include_router(trips_router)
    app.include_router(map_router)
    app.include_router(health_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"{settings.app_name} is running",
            "version": settings.app_version,
            "status": "running"
        }

    return app


# Create application instance
app = create_app()
