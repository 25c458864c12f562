"""
Trip Service - Manages trip lifecycle and price ledger updates
"""
import dataclasses
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from holiday_tracker.core.exceptions import TripNotFoundError
from holiday_tracker.models.internal_models import Trip
from holiday_tracker.schemas.trip import TripCreate
from holiday_tracker.services import price_ledger
from holiday_tracker.services.price_ledger import PriceSummary
from holiday_tracker.services.trip_store import TripStore
from holiday_tracker.services.update_merger import apply_update

logger = logging.getLogger(__name__)


class TripService:
    """
    Manages trip CRUD operations against the store.

    Every mutation is a read-modify-write: load, compute the new trip, put.
    Concurrent writers to the same trip are last-write-wins.
    """

    def __init__(self, store: TripStore):
        self.store = store

    def create_trip(self, trip_data: TripCreate) -> Trip:
        """
        Create a new trip seeded with its initial price observation

        Args:
            trip_data: Trip creation data

        Returns:
            Created trip
        """
        now = datetime.now(timezone.utc)
        trip = Trip(
            id=uuid.uuid4().hex,
            destination=trip_data.destination,
            hotel=trip_data.hotel,
            provider=trip_data.provider,
            departure_date=trip_data.departure_date,
            return_date=trip_data.return_date,
            adults=trip_data.adults,
            children=trip_data.children,
            url=trip_data.url,
            notes=trip_data.notes,
            price_history=price_ledger.initialize(trip_data.current_price, recorded_at=now),
            created_at=now,
        )
        saved = self.store.put(trip)
        logger.info(
            "Created trip %s to %s at %s", saved.id, saved.destination, saved.current_price
        )
        return saved

    def get_trip(self, trip_id: str) -> Trip:
        """
        Get a trip by ID

        Raises:
            TripNotFoundError: unknown trip id
        """
        trip = self.store.get(trip_id)
        if trip is None:
            raise TripNotFoundError(trip_id)
        return trip

    def list_trips(self) -> List[Trip]:
        """All trips, newest-created first"""
        return self.store.list_all()

    def update_trip(
        self,
        trip_id: str,
        patch: Mapping[str, Any],
        annotation: Optional[str] = None,
    ) -> Trip:
        """
        Apply a partial update, appending to the ledger if the price changed

        Args:
            trip_id: Trip ID
            patch: Attribute name to new value, only present keys are applied
            annotation: Note for the ledger entry of a price change

        Returns:
            Updated trip
        """
        trip = self.get_trip(trip_id)
        updated = apply_update(trip, patch, annotation)
        if updated is trip:
            return trip
        return self.store.put(updated)

    def record_price(self, trip_id: str, price: Any, notes: Optional[str] = None) -> Trip:
        """
        Append a new quote and make it the current price

        Unlike an update, this always adds a ledger entry, even when the
        price is unchanged.
        """
        trip = self.get_trip(trip_id)
        history = price_ledger.append(trip.price_history, price, note=notes)
        saved = self.store.put(dataclasses.replace(trip, price_history=history))
        logger.info("Recorded price %s for trip %s", saved.current_price, trip_id)
        return saved

    def delete_trip(self, trip_id: str) -> None:
        """
        Delete a trip and its price history

        Raises:
            TripNotFoundError: unknown trip id
        """
        if not self.store.delete(trip_id):
            raise TripNotFoundError(trip_id)

    def get_price_summary(self, trip_id: str) -> PriceSummary:
        """Price movement since booking for one trip"""
        return price_ledger.summarize(self.get_trip(trip_id).price_history)
