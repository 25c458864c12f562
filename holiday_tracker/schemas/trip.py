"""
Trip schemas for API requests/responses
"""
from pydantic import ConfigDict, Field, model_validator
from datetime import date, datetime
from typing import Optional

from holiday_tracker.models.internal_models import Provider
from holiday_tracker.schemas.base import CamelModel, Money, Price


class TripCreate(CamelModel):
    """Schema for creating a new trip"""
    destination: str = Field(..., min_length=1, max_length=255)
    hotel: Optional[str] = Field(None, max_length=255)
    provider: Provider
    departure_date: date
    return_date: date
    adults: int = Field(2, ge=1)
    children: int = Field(0, ge=0)
    current_price: Price
    url: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.return_date < self.departure_date:
            raise ValueError("returnDate must not be before departureDate")
        return self


class TripUpdate(CamelModel):
    """
    Schema for updating a trip

    All fields optional - only provided fields will be updated. Unknown keys
    are rejected. ``priceChangeNotes`` annotates the ledger entry created by a
    price change and is never stored on the trip.
    """
    model_config = ConfigDict(extra="forbid")

    destination: Optional[str] = Field(None, min_length=1, max_length=255)
    hotel: Optional[str] = Field(None, max_length=255)
    provider: Optional[Provider] = None
    departure_date: Optional[date] = None
    return_date: Optional[date] = None
    adults: Optional[int] = Field(None, ge=1)
    children: Optional[int] = Field(None, ge=0)
    current_price: Optional[Price] = None
    url: Optional[str] = None
    notes: Optional[str] = None
    price_change_notes: Optional[str] = None

    def to_patch(self) -> dict:
        """Fields the client actually sent, keyed by attribute name"""
        return self.model_dump(exclude_unset=True, exclude={"price_change_notes"})


class PriceRecord(CamelModel):
    """Schema for appending a quote to a trip's price history"""
    price: Price
    notes: Optional[str] = None


class PriceObservationRead(CamelModel):
    price: Money
    recorded_at: datetime
    notes: Optional[str] = None


class TripRead(CamelModel):
    """Schema for trip read response"""
    id: str
    destination: str
    hotel: Optional[str] = None
    provider: Provider
    departure_date: date
    return_date: date
    adults: int
    children: int
    current_price: Money
    url: Optional[str] = None
    notes: Optional[str] = None
    price_history: list[PriceObservationRead]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PriceSummaryRead(CamelModel):
    """How the price moved since booking"""
    initial: Money
    current: Money
    lowest: Money
    highest: Money
    change: Money
    change_percent: Money
    observations: int
    dropped: bool
