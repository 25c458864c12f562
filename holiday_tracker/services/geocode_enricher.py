"""
Geocode enrichment - locates trip destinations on the map.

Lookups run strictly one after another with a fixed pause between requests.
This is a hard requirement of the geocoding service's usage policy (at most
one request per second), so the loop must never be parallelised. The pause
is kept per enricher, not per run: a run that supersedes another waits for
the other's request to finish and then for the interval before its own.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Iterable, List, Optional

from holiday_tracker.core.exceptions import UpstreamLookupError
from holiday_tracker.models.internal_models import (
    Coordinates,
    EnrichedTrip,
    EnrichmentResult,
    Trip,
)
from holiday_tracker.services.geocoding_client import GeocodingClient

logger = logging.getLogger(__name__)

MIN_REQUEST_INTERVAL_SECONDS = 1.0

SleepFunc = Callable[[float], Awaitable[None]]
ProgressCallback = Callable[[int, int, int], None]


class CancellationToken:
    """Cooperative cancellation flag checked by the enrichment loop"""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class GeocodeEnricher:
    """
    Attaches coordinates to trips, one rate-limited lookup at a time.

    A trip whose lookup fails or finds nothing is left out of the result; the
    run carries on with the next trip.
    """

    def __init__(
        self,
        client: GeocodingClient,
        min_interval_seconds: float = MIN_REQUEST_INTERVAL_SECONDS,
        sleep: SleepFunc = asyncio.sleep,
    ):
        if min_interval_seconds < MIN_REQUEST_INTERVAL_SECONDS:
            raise ValueError(
                f"min_interval_seconds must be at least {MIN_REQUEST_INTERVAL_SECONDS}"
            )
        self.client = client
        self.min_interval_seconds = min_interval_seconds
        self._sleep = sleep
        # Shared by every run on this enricher, so overlapping runs still go
        # out one request at a time
        self._request_lock = asyncio.Lock()
        self._last_request_at: Optional[float] = None

    async def enrich(
        self,
        trips: Iterable[Trip],
        cancel_token: Optional[CancellationToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> EnrichmentResult:
        """
        Geocode each trip's destination in order.

        Args:
            trips: Trips to locate, output keeps their relative order
            cancel_token: Checked before every lookup; once set the run stops
                and partial results are discarded
            on_progress: Called as ``(processed, total, enriched)`` after each trip

        Returns:
            EnrichmentResult with the located subset and the input count
        """
        trips = list(trips)
        total = len(trips)
        token = cancel_token or CancellationToken()
        enriched: List[EnrichedTrip] = []

        for index, trip in enumerate(trips):
            if token.cancelled:
                return self._abandon(index, total)

            async with self._request_lock:
                await self._wait_for_slot()
                if token.cancelled:
                    return self._abandon(index, total)
                try:
                    coordinates = await self._locate(trip)
                finally:
                    self._last_request_at = time.monotonic()

            if coordinates is not None:
                enriched.append(EnrichedTrip(trip=trip, coordinates=coordinates))

            if on_progress is not None:
                on_progress(index + 1, total, len(enriched))

        if len(enriched) < total:
            logger.warning(
                "Located %d of %d trip destinations", len(enriched), total
            )
        else:
            logger.info("Located all %d trip destinations", total)

        return EnrichmentResult(trips=tuple(enriched), total=total)

    async def _wait_for_slot(self) -> None:
        """Pause a full interval if the previous request, from any run, was recent"""
        if self._last_request_at is None:
            return
        if time.monotonic() - self._last_request_at < self.min_interval_seconds:
            await self._sleep(self.min_interval_seconds)

    async def _locate(self, trip: Trip) -> Optional[Coordinates]:
        try:
            candidates = await self.client.search(trip.destination)
        except UpstreamLookupError as e:
            logger.warning(f"Failed to geocode trip {trip.id} ({trip.destination!r}): {e.reason}")
            return None

        if not candidates:
            logger.info(f"No location found for trip {trip.id} ({trip.destination!r})")
            return None

        first = candidates[0]
        return Coordinates(latitude=first.latitude, longitude=first.longitude)

    @staticmethod
    def _abandon(processed: int, total: int) -> EnrichmentResult:
        logger.info(
            "Enrichment cancelled after %d of %d trips, discarding partial results",
            processed, total
        )
        return EnrichmentResult(trips=(), total=total, cancelled=True)


class EnrichmentCoordinator:
    """
    Keeps at most one enrichment run in flight.

    Starting a run cancels the previous one, whose caller then receives a
    cancelled, empty result. The old run sends no further requests; the new
    run queues behind any request still in flight.
    """

    def __init__(self, enricher: GeocodeEnricher):
        self.enricher = enricher
        self._current: Optional[CancellationToken] = None

    async def run(
        self,
        trips: Iterable[Trip],
        on_progress: Optional[ProgressCallback] = None,
    ) -> EnrichmentResult:
        if self._current is not None:
            logger.info("Superseding in-flight enrichment run")
            self._current.cancel()

        token = CancellationToken()
        self._current = token
        try:
            return await self.enricher.enrich(trips, token, on_progress)
        finally:
            if self._current is token:
                self._current = None
