"""
Unit tests for merging partial updates into trips
"""
from datetime import date
from decimal import Decimal

import pytest

from holiday_tracker.core.exceptions import InvalidPriceError, InvalidTripError
from holiday_tracker.models.internal_models import Provider
from holiday_tracker.services.update_merger import MUTABLE_FIELDS, apply_update


def test_metadata_edit_leaves_ledger_untouched(trip_factory):
    trip = trip_factory()

    updated = apply_update(trip, {"hotel": "Hotel Sol"})

    assert updated.hotel == "Hotel Sol"
    assert updated.price_history == trip.price_history
    assert trip.hotel is None


def test_changed_price_appends_one_entry(trip_factory):
    trip = trip_factory(price="1299.00")

    updated = apply_update(trip, {"current_price": 1199})

    assert len(updated.price_history) == 2
    assert updated.price_history[-1].price == Decimal("1199.00")
    assert updated.price_history[-1].notes == "Price updated"
    assert updated.current_price == Decimal("1199.00")


def test_annotation_goes_to_ledger_only(trip_factory):
    trip = trip_factory(price="1299.00")

    updated = apply_update(trip, {"current_price": "1250"}, annotation="Early bird")

    assert updated.price_history[-1].notes == "Early bird"
    assert updated.notes is None
    assert not hasattr(updated, "price_change_notes")


def test_equal_price_does_not_append(trip_factory):
    trip = trip_factory(price="1199.00")

    updated = apply_update(trip, {"current_price": 1199.0, "notes": "checked again"})

    assert len(updated.price_history) == 1
    assert updated.notes == "checked again"


def test_omitted_price_does_not_append(trip_factory):
    trip = trip_factory()

    updated = apply_update(trip, {"adults": 3, "children": 2})

    assert updated.price_history == trip.price_history
    assert (updated.adults, updated.children) == (3, 2)


def test_empty_patch_returns_same_trip(trip_factory):
    trip = trip_factory()
    assert apply_update(trip, {}) is trip


def test_sequence_of_price_changes_is_chronological(trip_factory):
    trip = trip_factory(price="1000")
    for price in ["950", "980", "900"]:
        trip = apply_update(trip, {"current_price": price})

    assert [o.price for o in trip.price_history] == [
        Decimal("1000.00"), Decimal("950.00"), Decimal("980.00"), Decimal("900.00")
    ]


def test_price_change_combined_with_fields(trip_factory):
    trip = trip_factory(price="1299.00")

    updated = apply_update(
        trip,
        {"current_price": 1399, "provider": "tui", "return_date": date(2026, 6, 15)},
    )

    assert updated.provider is Provider.TUI
    assert updated.return_date == date(2026, 6, 15)
    assert len(updated.price_history) == 2


@pytest.mark.parametrize("key", ["id", "price_history", "created_at", "price_change_notes", "bogus"])
def test_keys_outside_allow_list_rejected(trip_factory, key):
    with pytest.raises(InvalidTripError):
        apply_update(trip_factory(), {key: "x"})


def test_allow_list_excludes_structural_fields():
    assert "id" not in MUTABLE_FIELDS
    assert "price_history" not in MUTABLE_FIELDS
    assert "current_price" in MUTABLE_FIELDS


@pytest.mark.parametrize("price", [0, -50, None])
def test_non_positive_price_rejected(trip_factory, price):
    with pytest.raises(InvalidPriceError):
        apply_update(trip_factory(), {"current_price": price})


def test_required_field_cannot_be_cleared(trip_factory):
    with pytest.raises(InvalidTripError):
        apply_update(trip_factory(), {"destination": None})


def test_optional_field_can_be_cleared(trip_factory):
    trip = trip_factory(hotel="Hotel Sol")
    assert apply_update(trip, {"hotel": None}).hotel is None


def test_unknown_provider_rejected(trip_factory):
    with pytest.raises(InvalidTripError):
        apply_update(trip_factory(), {"provider": "ryanair"})


def test_return_before_departure_rejected(trip_factory):
    trip = trip_factory(departure_date=date(2026, 6, 1), return_date=date(2026, 6, 8))
    with pytest.raises(InvalidTripError):
        apply_update(trip, {"return_date": date(2026, 5, 20)})


def test_invalid_patch_leaves_original_untouched(trip_factory):
    trip = trip_factory(price="1299.00")
    with pytest.raises(InvalidTripError):
        apply_update(trip, {"current_price": 1100, "destination": None})

    assert len(trip.price_history) == 1
    assert trip.current_price == Decimal("1299.00")
