"""
Price ledger - append-only price history for a single trip.

A ledger is a tuple of ``PriceObservation`` values. Operations return a new
tuple and never touch existing entries. Order is append order; ``recorded_at``
is metadata only, so a ledger stays deterministic even if callers supply
timestamps out of order.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional, Sequence, Tuple

from holiday_tracker.core.exceptions import InvalidPriceError
from holiday_tracker.models.internal_models import PriceObservation

INITIAL_PRICE_NOTE = "Initial price"
PRICE_UPDATED_NOTE = "Price updated"

_CENT = Decimal("0.01")

Ledger = Tuple[PriceObservation, ...]


@dataclass(frozen=True)
class PriceSummary:
    """How a trip's price has moved since it was booked"""
    initial: Decimal
    current: Decimal
    lowest: Decimal
    highest: Decimal
    change: Decimal
    change_percent: Decimal
    observations: int

    @property
    def dropped(self) -> bool:
        return self.current < self.initial


def to_price(value: Any) -> Decimal:
    """
    Normalise a currency amount to a two-decimal ``Decimal``.

    Raises:
        InvalidPriceError: value is missing, not numeric, not finite or not positive
    """
    if value is None or isinstance(value, bool):
        raise InvalidPriceError(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidPriceError(value) from None
    if not amount.is_finite():
        raise InvalidPriceError(value)
    amount = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise InvalidPriceError(value)
    return amount


def _now() -> datetime:
    return datetime.now(timezone.utc)


def initialize(
    price: Any,
    note: Optional[str] = INITIAL_PRICE_NOTE,
    recorded_at: Optional[datetime] = None,
) -> Ledger:
    """Start a ledger with its seed observation."""
    return (
        PriceObservation(
            price=to_price(price),
            recorded_at=recorded_at or _now(),
            notes=note,
        ),
    )


def append(
    history: Sequence[PriceObservation],
    price: Any,
    note: Optional[str] = None,
    recorded_at: Optional[datetime] = None,
) -> Ledger:
    """Return a new ledger with one observation added at the end."""
    observation = PriceObservation(
        price=to_price(price),
        recorded_at=recorded_at or _now(),
        notes=note,
    )
    return tuple(history) + (observation,)


def summarize(history: Sequence[PriceObservation]) -> PriceSummary:
    """Compute initial / current / extremes and the change since booking."""
    if not history:
        raise ValueError("Cannot summarize an empty price history")

    prices = [observation.price for observation in history]
    initial = prices[0]
    current = prices[-1]
    change = current - initial
    change_percent = (change / initial * 100).quantize(_CENT, rounding=ROUND_HALF_UP)

    return PriceSummary(
        initial=initial,
        current=current,
        lowest=min(prices),
        highest=max(prices),
        change=change,
        change_percent=change_percent,
        observations=len(prices),
    )
