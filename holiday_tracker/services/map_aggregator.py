"""
Map aggregation - turns enriched trips into a render-ready map view.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from holiday_tracker.models.internal_models import (
    Coordinates,
    EnrichedTrip,
    EnrichmentResult,
    Provider,
)

DEFAULT_ZOOM = 4


@dataclass(frozen=True)
class MarkerCategory:
    """Visual style of a map marker"""
    key: str
    label: str
    color: str
    icon: str = "🏖️"


CATEGORIES: Dict[Provider, MarkerCategory] = {
    Provider.SUNWEB: MarkerCategory(key="sunweb", label="Sunweb", color="#d63031"),
    Provider.TUI: MarkerCategory(key="tui", label="TUI", color="#0984e3"),
    Provider.CORENDON: MarkerCategory(key="corendon", label="Corendon", color="#6c5ce7"),
    Provider.OTHER: MarkerCategory(key="other", label="Other", color="#2d3436"),
}


@dataclass(frozen=True)
class MapMarker:
    trip: EnrichedTrip
    category: MarkerCategory


@dataclass(frozen=True)
class MapView:
    center: Optional[Coordinates]
    zoom: int
    markers: Tuple[MapMarker, ...]
    legend: Tuple[MarkerCategory, ...]
    enriched: int
    total: int
    cancelled: bool = False


def category_for(provider: Any) -> MarkerCategory:
    """Marker category for a provider; anything unrecognised is 'other'."""
    try:
        return CATEGORIES[Provider(provider)]
    except ValueError:
        return CATEGORIES[Provider.OTHER]


def centroid(enriched: Sequence[EnrichedTrip]) -> Optional[Coordinates]:
    """Mean latitude and longitude, or None when nothing was located."""
    if not enriched:
        return None
    count = len(enriched)
    return Coordinates(
        latitude=sum(item.coordinates.latitude for item in enriched) / count,
        longitude=sum(item.coordinates.longitude for item in enriched) / count,
    )


def build_map_view(result: EnrichmentResult, zoom: int = DEFAULT_ZOOM) -> MapView:
    """Assemble the centre, markers, legend and coverage for one enrichment run."""
    markers = tuple(
        MapMarker(trip=item, category=category_for(item.trip.provider))
        for item in result.trips
    )
    return MapView(
        center=centroid(result.trips),
        zoom=zoom,
        markers=markers,
        legend=tuple(CATEGORIES.values()),
        enriched=result.enriched,
        total=result.total,
        cancelled=result.cancelled,
    )
