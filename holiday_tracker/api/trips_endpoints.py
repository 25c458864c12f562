"""
Trip API endpoints - Trip lifecycle and price history
"""
from fastapi import APIRouter, Depends, status

from holiday_tracker.core.dependencies import get_trip_service
from holiday_tracker.schemas.base import Message
from holiday_tracker.schemas.trip import (
    PriceRecord,
    PriceSummaryRead,
    TripCreate,
    TripRead,
    TripUpdate,
)
from holiday_tracker.services.trip_service import TripService

router = APIRouter(prefix="/trips", tags=["trips"])


@router.get("", response_model=list[TripRead])
def list_trips(service: TripService = Depends(get_trip_service)):
    """
    List all trips, newest first
    """
    return [TripRead.model_validate(t) for t in service.list_trips()]


@router.get("/{trip_id}", response_model=TripRead)
def get_trip(trip_id: str, service: TripService = Depends(get_trip_service)):
    """
    Get a specific trip by ID
    """
    return TripRead.model_validate(service.get_trip(trip_id))


@router.post("", response_model=TripRead, status_code=status.HTTP_201_CREATED)
def create_trip(trip_data: TripCreate, service: TripService = Depends(get_trip_service)):
    """
    Create a new trip

    - **destination**: Trip destination (e.g., "Mallorca, Spain")
    - **provider**: sunweb, tui, corendon or other
    - **currentPrice**: Booked price, recorded as the first price history entry
    """
    trip = service.create_trip(trip_data)
    return TripRead.model_validate(trip)


@router.put("/{trip_id}", response_model=TripRead)
def update_trip(
    trip_id: str,
    trip_data: TripUpdate,
    service: TripService = Depends(get_trip_service),
):
    """
    Update a trip

    All fields optional - only provided fields will be updated. A changed
    **currentPrice** adds a price history entry annotated with
    **priceChangeNotes** (default "Price updated").
    """
    trip = service.update_trip(
        trip_id, trip_data.to_patch(), annotation=trip_data.price_change_notes
    )
    return TripRead.model_validate(trip)


@router.delete("/{trip_id}", response_model=Message)
def delete_trip(trip_id: str, service: TripService = Depends(get_trip_service)):
    """
    Delete a trip together with its price history
    """
    service.delete_trip(trip_id)
    return Message(message="Trip deleted")


@router.post("/{trip_id}/price-history", response_model=TripRead)
def add_price(
    trip_id: str,
    record: PriceRecord,
    service: TripService = Depends(get_trip_service),
):
    """
    Record a new quote; it always becomes the current price
    """
    trip = service.record_price(trip_id, record.price, record.notes)
    return TripRead.model_validate(trip)


@router.get("/{trip_id}/price-summary", response_model=PriceSummaryRead)
def get_price_summary(trip_id: str, service: TripService = Depends(get_trip_service)):
    """
    Price movement since booking: initial, current, lowest, highest and change
    """
    return PriceSummaryRead.model_validate(service.get_price_summary(trip_id))
