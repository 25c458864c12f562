"""
Map API endpoint - trips located on a map
"""
import logging

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from holiday_tracker.core.dependencies import get_enrichment_coordinator, get_trip_service
from holiday_tracker.schemas.map import MapViewRead
from holiday_tracker.services.geocode_enricher import EnrichmentCoordinator
from holiday_tracker.services.map_aggregator import build_map_view
from holiday_tracker.services.trip_service import TripService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/map", tags=["map"])


@router.get("", response_model=MapViewRead)
async def get_map(
    service: TripService = Depends(get_trip_service),
    coordinator: EnrichmentCoordinator = Depends(get_enrichment_coordinator),
):
    """
    Locate every trip's destination and return a render-ready map view

    Destinations are geocoded one per second, so this takes roughly one
    second per trip. Trips that cannot be located are left out; **enriched**
    and **total** report the coverage. A newer map request cancels an older
    one still in progress, which then returns **cancelled** with no markers.
    """
    trips = await run_in_threadpool(service.list_trips)

    def log_progress(processed: int, total: int, enriched: int) -> None:
        logger.debug(f"Map enrichment {processed}/{total}, {enriched} located")

    result = await coordinator.run(trips, on_progress=log_progress)
    return MapViewRead.from_view(build_map_view(result))
