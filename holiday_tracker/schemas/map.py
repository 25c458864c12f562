"""
Map view schemas for API responses
"""
from datetime import date
from typing import Optional

from holiday_tracker.models.internal_models import Provider
from holiday_tracker.schemas.base import CamelModel, Money
from holiday_tracker.services.map_aggregator import MapView


class CoordinatesRead(CamelModel):
    latitude: float
    longitude: float


class MarkerCategoryRead(CamelModel):
    key: str
    label: str
    color: str
    icon: str


class MapMarkerRead(CamelModel):
    """One located trip, with what the marker popup shows"""
    trip_id: str
    destination: str
    hotel: Optional[str] = None
    provider: Provider
    departure_date: date
    return_date: date
    adults: int
    children: int
    current_price: Money
    position: CoordinatesRead
    category: MarkerCategoryRead


class MapViewRead(CamelModel):
    """
    Render-ready map model

    ``center`` is null when no destination could be located. ``enriched`` of
    ``total`` trips are shown.
    """
    center: Optional[CoordinatesRead] = None
    zoom: int
    markers: list[MapMarkerRead]
    legend: list[MarkerCategoryRead]
    enriched: int
    total: int
    cancelled: bool = False

    @classmethod
    def from_view(cls, view: MapView) -> "MapViewRead":
        markers = []
        for marker in view.markers:
            trip = marker.trip.trip
            markers.append(MapMarkerRead(
                trip_id=trip.id,
                destination=trip.destination,
                hotel=trip.hotel,
                provider=trip.provider,
                departure_date=trip.departure_date,
                return_date=trip.return_date,
                adults=trip.adults,
                children=trip.children,
                current_price=trip.current_price,
                position=CoordinatesRead.model_validate(marker.trip.coordinates),
                category=MarkerCategoryRead.model_validate(marker.category),
            ))
        return cls(
            center=CoordinatesRead.model_validate(view.center) if view.center else None,
            zoom=view.zoom,
            markers=markers,
            legend=[MarkerCategoryRead.model_validate(c) for c in view.legend],
            enriched=view.enriched,
            total=view.total,
            cancelled=view.cancelled,
        )
