"""
Trip model for persistent price tracking
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Enum as SQLEnum, Numeric, Text, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from holiday_tracker.core.db import Base
from holiday_tracker.models.internal_models import Provider


class TripRecord(Base):
    """
    Stored vacation booking.
    ``current_price`` mirrors the last price observation and is written by the store.
    """
    __tablename__ = "trips"

    id = Column(String(32), primary_key=True)
    destination = Column(String(255), nullable=False)
    hotel = Column(String(255), nullable=True)
    provider = Column(
        SQLEnum(Provider, values_callable=lambda enum: [p.value for p in enum], native_enum=False),
        nullable=False,
        index=True,
    )
    departure_date = Column(Date, nullable=False)
    return_date = Column(Date, nullable=False)
    adults = Column(Integer, nullable=False, default=2)
    children = Column(Integer, nullable=False, default=0)
    current_price = Column(Numeric(10, 2), nullable=False)
    url = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    price_history = relationship(
        "PriceObservationRecord",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="PriceObservationRecord.position",
    )


class PriceObservationRecord(Base):
    """One ledger row. ``position`` is the append order within its trip."""
    __tablename__ = "price_observations"
    __table_args__ = (
        UniqueConstraint("trip_id", "position", name="uq_price_observations_trip_position"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    trip_id = Column(String(32), ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    recorded_at = Column(DateTime(timezone=True), nullable=False)
    notes = Column(Text, nullable=True)

    trip = relationship("TripRecord", back_populates="price_history")
