"""
Unit tests for trip service lifecycle operations and the trip store
"""
import dataclasses
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy import event, insert
from sqlalchemy.exc import OperationalError

from holiday_tracker.core.exceptions import (
    InvalidPriceError,
    InvalidTripError,
    StoreUnavailableError,
    TripConflictError,
    TripNotFoundError,
)
from holiday_tracker.models.internal_models import Provider
from holiday_tracker.models.trip import PriceObservationRecord
from holiday_tracker.schemas.trip import TripCreate
from holiday_tracker.services import price_ledger
from holiday_tracker.services.trip_store import TripStore


def _create_data(**overrides) -> TripCreate:
    values = dict(
        destination="Mallorca, Spain",
        provider="sunweb",
        departure_date=date(2026, 6, 1),
        return_date=date(2026, 6, 8),
        current_price=Decimal("1299.00"),
    )
    values.update(overrides)
    return TripCreate(**values)


def test_create_trip_seeds_history(trip_service):
    """Test creating a new trip"""
    trip = trip_service.create_trip(_create_data())

    assert trip.id
    assert trip.provider is Provider.SUNWEB
    assert trip.adults == 2
    assert trip.children == 0
    assert len(trip.price_history) == 1
    assert trip.price_history[0].price == trip.current_price == Decimal("1299.00")
    assert trip.price_history[0].notes == "Initial price"
    assert trip.created_at is not None


def test_get_trip_round_trips_through_store(trip_service):
    created = trip_service.create_trip(_create_data(hotel="Hotel Sol", children=2))

    loaded = trip_service.get_trip(created.id)

    assert loaded.hotel == "Hotel Sol"
    assert loaded.children == 2
    assert loaded.departure_date == date(2026, 6, 1)
    assert loaded.current_price == Decimal("1299.00")
    assert loaded.price_history[0].recorded_at.tzinfo is not None


def test_get_unknown_trip_raises(trip_service):
    with pytest.raises(TripNotFoundError):
        trip_service.get_trip("does-not-exist")


def test_list_trips_newest_first(trip_service):
    first = trip_service.create_trip(_create_data(destination="Trip 1"))
    second = trip_service.create_trip(_create_data(destination="Trip 2"))

    trips = trip_service.list_trips()

    assert [t.id for t in trips] == [second.id, first.id]


def test_update_trip_scenario(trip_service):
    """Record a drop, then a metadata edit that must not touch the history"""
    trip = trip_service.create_trip(_create_data())

    trip = trip_service.record_price(trip.id, Decimal("1199.00"), "Price drop!")
    assert trip.current_price == Decimal("1199.00")
    assert [(o.price, o.notes) for o in trip.price_history] == [
        (Decimal("1299.00"), "Initial price"),
        (Decimal("1199.00"), "Price drop!"),
    ]

    trip = trip_service.update_trip(trip.id, {"hotel": "Hotel Sol"})
    assert trip.hotel == "Hotel Sol"
    assert len(trip.price_history) == 2

    trip = trip_service.update_trip(trip.id, {"current_price": Decimal("1199.00")})
    assert len(trip_service.get_trip(trip.id).price_history) == 2


def test_update_price_change_persists_entry(trip_service):
    trip = trip_service.create_trip(_create_data())

    trip_service.update_trip(trip.id, {"current_price": 1099}, annotation="Flash sale")

    stored = trip_service.get_trip(trip.id)
    assert stored.current_price == Decimal("1099.00")
    assert stored.price_history[-1].notes == "Flash sale"
    assert stored.notes is None


def test_record_same_price_still_appends(trip_service):
    trip = trip_service.create_trip(_create_data())

    trip = trip_service.record_price(trip.id, "1299.00")

    assert len(trip.price_history) == 2
    assert trip.price_history[-1].notes is None


def test_record_invalid_price_rejected(trip_service):
    trip = trip_service.create_trip(_create_data())
    with pytest.raises(InvalidPriceError):
        trip_service.record_price(trip.id, 0)
    assert len(trip_service.get_trip(trip.id).price_history) == 1


def test_update_unknown_trip_raises(trip_service):
    with pytest.raises(TripNotFoundError):
        trip_service.update_trip("missing", {"hotel": "x"})


def test_delete_trip_removes_history(trip_service, database):
    trip = trip_service.create_trip(_create_data())
    trip_service.record_price(trip.id, 1000)

    trip_service.delete_trip(trip.id)

    with pytest.raises(TripNotFoundError):
        trip_service.get_trip(trip.id)
    with database.session() as session:
        assert session.query(PriceObservationRecord).count() == 0


def test_delete_unknown_trip_raises(trip_service):
    with pytest.raises(TripNotFoundError):
        trip_service.delete_trip("missing")


def test_price_summary(trip_service):
    trip = trip_service.create_trip(_create_data())
    trip_service.record_price(trip.id, "1199.00")

    summary = trip_service.get_price_summary(trip.id)

    assert summary.dropped is True
    assert summary.change == Decimal("-100.00")


def test_store_refuses_shrinking_ledger(store, trip_factory):
    trip = trip_factory()
    trip = dataclasses.replace(trip, price_history=price_ledger.append(trip.price_history, 1000))
    store.put(trip)

    truncated = dataclasses.replace(trip, price_history=trip.price_history[:1])
    with pytest.raises(InvalidTripError):
        store.put(truncated)
    assert len(store.get(trip.id).price_history) == 2


def test_store_keeps_existing_rows(store, trip_factory):
    """Stored observations are not rewritten by a later put"""
    trip = store.put(trip_factory(price="800"))
    original = trip.price_history[0]

    tampered = dataclasses.replace(
        original, price=Decimal("1.00"), notes="rewritten"
    )
    store.put(dataclasses.replace(
        trip,
        price_history=(tampered,) + price_ledger.append((), 700),
    ))

    stored = store.get(trip.id)
    assert stored.price_history[0].price == Decimal("800.00")
    assert stored.price_history[0].notes == "Initial price"
    assert stored.current_price == Decimal("700.00")


def test_store_failure_surfaces_as_unavailable():
    broken = MagicMock()
    broken.session.side_effect = OperationalError("SELECT 1", {}, Exception("db down"))
    store = TripStore(broken)

    with pytest.raises(StoreUnavailableError):
        store.list_all()
    with pytest.raises(StoreUnavailableError):
        store.get("abc")


def test_concurrent_ledger_append_is_a_conflict(store, trip_factory, database):
    """A writer that loses the race for a ledger position gets a conflict, not a 500"""
    trip = store.put(trip_factory(price="1000"))
    competing = price_ledger.append(trip.price_history, 950)[-1]

    def other_writer_appends_first(session, flush_context, instances):
        session.connection().execute(
            insert(PriceObservationRecord.__table__).values(
                trip_id=trip.id,
                position=1,
                price=competing.price,
                recorded_at=competing.recorded_at,
                notes="other writer",
            )
        )

    event.listen(database.SessionLocal, "before_flush", other_writer_appends_first, once=True)

    with pytest.raises(TripConflictError):
        store.put(dataclasses.replace(
            trip, price_history=price_ledger.append(trip.price_history, 900)
        ))

    stored = store.get(trip.id)
    assert len(stored.price_history) == 1
    assert stored.current_price == Decimal("1000.00")
