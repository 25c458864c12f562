"""
Trip Store - durable keyed storage for trips and their price ledgers
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from holiday_tracker.core.db import Database
from holiday_tracker.core.exceptions import (
    InvalidTripError,
    StoreUnavailableError,
    TripConflictError,
)
from holiday_tracker.models.internal_models import PriceObservation, Provider, Trip
from holiday_tracker.models.trip import PriceObservationRecord, TripRecord

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_domain(record: TripRecord) -> Trip:
    return Trip(
        id=record.id,
        destination=record.destination,
        provider=Provider(record.provider),
        departure_date=record.departure_date,
        return_date=record.return_date,
        price_history=tuple(
            PriceObservation(
                price=row.price,
                recorded_at=_as_utc(row.recorded_at),
                notes=row.notes,
            )
            for row in record.price_history
        ),
        hotel=record.hotel,
        adults=record.adults,
        children=record.children,
        url=record.url,
        notes=record.notes,
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
    )


class TripStore:
    """
    Get / list / put / delete for trips.

    A trip and its ledger are stored as one unit. ``put`` only ever inserts
    ledger rows beyond the ones already stored, so persisted observations are
    never rewritten.
    """

    def __init__(self, database: Database):
        self.database = database

    def get(self, trip_id: str) -> Optional[Trip]:
        """
        Get a trip by ID

        Returns:
            Trip or None
        """
        try:
            with self.database.session() as session:
                record = session.get(
                    TripRecord, trip_id, options=[selectinload(TripRecord.price_history)]
                )
                return _to_domain(record) if record is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to load trip {trip_id}: {e}", exc_info=True)
            raise StoreUnavailableError("get") from e

    def list_all(self) -> List[Trip]:
        """List every trip, newest-created first"""
        try:
            with self.database.session() as session:
                stmt = (
                    select(TripRecord)
                    .options(selectinload(TripRecord.price_history))
                    .order_by(TripRecord.created_at.desc())
                )
                return [_to_domain(record) for record in session.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list trips: {e}", exc_info=True)
            raise StoreUnavailableError("list") from e

    def put(self, trip: Trip) -> Trip:
        """
        Insert or replace a trip, appending any new ledger entries.

        Raises:
            InvalidTripError: the trip's ledger is shorter than the stored one
            TripConflictError: a concurrent put already stored the same ledger positions
            StoreUnavailableError: the database rejected the write
        """
        now = datetime.now(timezone.utc)
        try:
            with self.database.session() as session:
                record = session.get(
                    TripRecord, trip.id, options=[selectinload(TripRecord.price_history)]
                )
                if record is None:
                    record = TripRecord(id=trip.id, created_at=trip.created_at or now)
                    session.add(record)

                stored = len(record.price_history)
                if len(trip.price_history) < stored:
                    raise InvalidTripError(
                        "Price history is append-only",
                        details={"stored": stored, "submitted": len(trip.price_history)}
                    )

                record.destination = trip.destination
                record.hotel = trip.hotel
                record.provider = trip.provider
                record.departure_date = trip.departure_date
                record.return_date = trip.return_date
                record.adults = trip.adults
                record.children = trip.children
                record.current_price = trip.current_price
                record.url = trip.url
                record.notes = trip.notes
                record.updated_at = now

                for position, observation in enumerate(trip.price_history[stored:], start=stored):
                    record.price_history.append(
                        PriceObservationRecord(
                            position=position,
                            price=observation.price,
                            recorded_at=observation.recorded_at,
                            notes=observation.notes,
                        )
                    )

                session.flush()
                saved = _to_domain(record)
            logger.debug("Stored trip %s with %d price observations", trip.id, len(saved.price_history))
            return saved
        except IntegrityError as e:
            logger.warning(f"Concurrent ledger append on trip {trip.id}: {e.orig}")
            raise TripConflictError(trip.id) from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to store trip {trip.id}: {e}", exc_info=True)
            raise StoreUnavailableError("put") from e

    def delete(self, trip_id: str) -> bool:
        """
        Delete a trip together with its whole price history

        Returns:
            False if the trip did not exist
        """
        try:
            with self.database.session() as session:
                record = session.get(TripRecord, trip_id)
                if record is None:
                    return False
                session.delete(record)
            logger.info("Deleted trip %s", trip_id)
            return True
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete trip {trip_id}: {e}", exc_info=True)
            raise StoreUnavailableError("delete") from e
