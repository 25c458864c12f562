"""
Update merger - applies a partial field update to a trip.

``apply_update`` is pure: it takes a trip and a patch and returns a new trip.
Persisting the result is the caller's job.
"""
import dataclasses
import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from holiday_tracker.core.exceptions import InvalidTripError
from holiday_tracker.models.internal_models import Provider, Trip
from holiday_tracker.services import price_ledger

logger = logging.getLogger(__name__)

# Attributes a client may overwrite. Identity, timestamps and the ledger
# itself are structural and never patchable.
MUTABLE_FIELDS = frozenset({
    "destination",
    "hotel",
    "provider",
    "departure_date",
    "return_date",
    "adults",
    "children",
    "current_price",
    "url",
    "notes",
})

REQUIRED_FIELDS = frozenset({
    "destination",
    "provider",
    "departure_date",
    "return_date",
    "adults",
    "children",
})


def _coerce_provider(value: Any) -> Provider:
    try:
        return Provider(value)
    except ValueError:
        raise InvalidTripError(
            f"Unknown provider {value!r}",
            details={"field": "provider", "allowed": [p.value for p in Provider]}
        ) from None


def apply_update(
    trip: Trip,
    patch: Mapping[str, Any],
    annotation: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Trip:
    """
    Merge ``patch`` into ``trip``.

    If ``current_price`` is present and differs from the trip's current price,
    one ledger entry is appended (annotated with ``annotation`` or
    "Price updated") before the remaining fields are overwritten. Keys absent
    from the patch are left untouched. The annotation is only written to the
    ledger entry.

    Raises:
        InvalidTripError: unknown key, or a required field set to None
        InvalidPriceError: current_price is not a positive amount
    """
    unknown = set(patch) - MUTABLE_FIELDS
    if unknown:
        raise InvalidTripError(
            "Unknown or read-only trip fields",
            details={"fields": sorted(unknown)}
        )

    changes: dict[str, Any] = {}

    if "current_price" in patch:
        new_price = price_ledger.to_price(patch["current_price"])
        if new_price != trip.current_price:
            changes["price_history"] = price_ledger.append(
                trip.price_history,
                new_price,
                note=annotation or price_ledger.PRICE_UPDATED_NOTE,
                recorded_at=now,
            )
            logger.info(
                "Trip %s price changed %s -> %s", trip.id, trip.current_price, new_price
            )

    for key, value in patch.items():
        if key == "current_price":
            continue
        if value is None and key in REQUIRED_FIELDS:
            raise InvalidTripError(f"Field '{key}' is required", details={"field": key})
        if key == "provider":
            value = _coerce_provider(value)
        changes[key] = value

    if not changes:
        return trip

    return dataclasses.replace(trip, **changes)
