"""
Dependency injection setup for FastAPI.
Provides dependency providers for core services with lifecycle management.
"""

from fastapi import Request, HTTPException
from typing import Optional
import logging
import asyncio

from holiday_tracker.config.settings import Settings
from holiday_tracker.core.db import Database
from holiday_tracker.services.geocode_enricher import (
    EnrichmentCoordinator,
    GeocodeEnricher,
    SleepFunc,
)
from holiday_tracker.services.geocoding_client import GeocodingClient
from holiday_tracker.services.trip_service import TripService
from holiday_tracker.services.trip_store import TripStore


logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for managing application services with lifecycle management.
    Configuration is passed in explicitly; nothing reads module-level state.
    """

    def __init__(
        self,
        settings: Settings,
        geocoding_client: Optional[GeocodingClient] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.settings = settings
        self._sleep = sleep
        self._database: Optional[Database] = None
        self._trip_store: Optional[TripStore] = None
        self._geocoding_client: Optional[GeocodingClient] = geocoding_client
        self._owns_geocoding_client = geocoding_client is None
        self._enrichment_coordinator: Optional[EnrichmentCoordinator] = None
        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize_services(self) -> None:
        """
        Initialize all services with proper dependency order.
        """
        async with self._initialization_lock:
            if self._initialized:
                return

            logger.info("Initializing service container")

            try:
                self._database = Database(self.settings.database_url, echo=self.settings.debug)
                self._database.create_all()
                self._trip_store = TripStore(self._database)

                if self._geocoding_client is None:
                    self._geocoding_client = GeocodingClient(self.settings.geocoding)
                enricher = GeocodeEnricher(
                    self._geocoding_client,
                    min_interval_seconds=self.settings.geocoding.min_interval_seconds,
                    sleep=self._sleep,
                )
                self._enrichment_coordinator = EnrichmentCoordinator(enricher)

                self._initialized = True
                logger.info("Service container initialization completed")

            except Exception as e:
                logger.error(f"Service container initialization failed: {e}", exc_info=True)
                raise

    async def cleanup_services(self) -> None:
        """
        Cleanup all services in reverse dependency order.
        """
        logger.info("Cleaning up service container")

        try:
            if self._geocoding_client is not None and self._owns_geocoding_client:
                await self._geocoding_client.aclose()
                self._geocoding_client = None

            if self._database is not None:
                self._database.dispose()

            self._enrichment_coordinator = None
            self._trip_store = None
            self._database = None

            logger.info("Service container cleanup completed")

        except Exception as e:
            logger.error(f"Service container cleanup failed: {e}", exc_info=True)
        finally:
            self._initialized = False

    def _require(self, service, name: str):
        if not self._initialized or service is None:
            raise HTTPException(status_code=503, detail=f"{name} not initialized")
        return service

    def get_database(self) -> Database:
        return self._require(self._database, "Database")

    def get_trip_store(self) -> TripStore:
        return self._require(self._trip_store, "Trip store")

    def get_enrichment_coordinator(self) -> EnrichmentCoordinator:
        return self._require(self._enrichment_coordinator, "Enrichment coordinator")


def get_service_container(request: Request) -> ServiceContainer:
    """
    Get service container from application state.

    Raises:
        HTTPException: If service container is not available
    """
    container = getattr(request.app.state, 'service_container', None)
    if container is None:
        logger.error("Service container not found in application state")
        raise HTTPException(status_code=503, detail="Service container not available")
    return container


def get_trip_service(request: Request) -> TripService:
    """Trip service bound to the application's store"""
    return TripService(get_service_container(request).get_trip_store())


def get_enrichment_coordinator(request: Request) -> EnrichmentCoordinator:
    return get_service_container(request).get_enrichment_coordinator()

