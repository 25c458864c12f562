"""
Health check API endpoint.

- GET /health: service status with database connectivity and error counts
"""

from datetime import datetime, timezone
import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from holiday_tracker.core.dependencies import ServiceContainer, get_service_container
from holiday_tracker.core.error_handlers import error_handler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Application start time for uptime calculation
_app_start_time = time.time()


@router.get("/health", summary="Basic health check")
def health_check(container: ServiceContainer = Depends(get_service_container)):
    """
    Report whether the API can reach its database.
    The geocoding service is not probed, to stay within its rate limit.
    """
    database = {"status": "unknown"}
    if container.initialized:
        try:
            container.get_database().ping()
            database = {"status": "healthy"}
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            database = {"status": "unhealthy", "error": str(e)}

    healthy = database["status"] == "healthy"
    return {
        "status": "healthy" if healthy else "unhealthy",
        "version": container.settings.app_version,
        "uptime_seconds": round(time.time() - _app_start_time, 1),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": database,
        "errors": error_handler.get_error_statistics(),
    }
