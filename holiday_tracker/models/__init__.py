"""
Models package for the holiday tracker backend.

``internal_models`` holds the immutable domain values; ``trip`` holds the
SQLAlchemy rows they are persisted as.
"""

from .internal_models import (
    Provider,
    PriceObservation,
    Trip,
    Coordinates,
    GeocodeCandidate,
    EnrichedTrip,
    EnrichmentResult,
)

__all__ = [
    "Provider",
    "PriceObservation",
    "Trip",
    "Coordinates",
    "GeocodeCandidate",
    "EnrichedTrip",
    "EnrichmentResult",
]
