"""
Internal data models and enums for the holiday tracker backend.

These are the immutable domain values the ledger, the update merger and the
enrichment pipeline operate on. The SQLAlchemy rows in ``models.trip`` are
translated to and from these by the trip store.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from holiday_tracker.core.exceptions import InvalidTripError


class Provider(str, Enum):
    """Tour operators a trip can be booked with"""
    SUNWEB = "sunweb"
    TUI = "tui"
    CORENDON = "corendon"
    OTHER = "other"


@dataclass(frozen=True)
class PriceObservation:
    """One immutable price quote in a trip's ledger"""
    price: Decimal
    recorded_at: datetime
    notes: Optional[str] = None


@dataclass(frozen=True)
class Trip:
    """
    A tracked vacation booking.

    ``current_price`` is not stored separately: it is always the price of the
    most recent ledger entry, so the two can never disagree.
    """
    id: str
    destination: str
    provider: Provider
    departure_date: date
    return_date: date
    price_history: Tuple[PriceObservation, ...]
    hotel: Optional[str] = None
    adults: int = 2
    children: int = 0
    url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.price_history:
            raise InvalidTripError("Trip must carry at least one price observation")
        if not self.destination or not self.destination.strip():
            raise InvalidTripError(
                "Destination must not be empty",
                details={"field": "destination"}
            )
        if self.return_date < self.departure_date:
            raise InvalidTripError(
                "Return date must not be before departure date",
                details={
                    "departure_date": self.departure_date.isoformat(),
                    "return_date": self.return_date.isoformat(),
                }
            )
        if self.adults < 1:
            raise InvalidTripError("At least one adult is required", details={"field": "adults"})
        if self.children < 0:
            raise InvalidTripError("Children must not be negative", details={"field": "children"})

    @property
    def current_price(self) -> Decimal:
        return self.price_history[-1].price


@dataclass(frozen=True)
class Coordinates:
    """WGS84 position"""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeocodeCandidate:
    """A single match returned by the geocoding service"""
    latitude: float
    longitude: float
    display_name: Optional[str] = None


@dataclass(frozen=True)
class EnrichedTrip:
    """A trip whose destination has been located on the map"""
    trip: Trip
    coordinates: Coordinates


@dataclass(frozen=True)
class EnrichmentResult:
    """Outcome of one enrichment run"""
    trips: Tuple[EnrichedTrip, ...] = field(default_factory=tuple)
    total: int = 0
    cancelled: bool = False

    @property
    def enriched(self) -> int:
        return len(self.trips)

    @property
    def missing(self) -> int:
        return self.total - self.enriched
