"""
Custom exceptions for the holiday tracker backend.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Trip errors
    TRIP_NOT_FOUND = "TRIP_NOT_FOUND"
    INVALID_TRIP = "INVALID_TRIP"
    INVALID_PRICE = "INVALID_PRICE"
    TRIP_CONFLICT = "TRIP_CONFLICT"

    # Dependency errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    UPSTREAM_LOOKUP_FAILED = "UPSTREAM_LOOKUP_FAILED"

    # Generic errors
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class HolidayTrackerException(Exception):
    """Base exception for the holiday tracker backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class TripNotFoundError(HolidayTrackerException):
    """Raised when a trip id is unknown to the store."""

    def __init__(self, trip_id: str):
        super().__init__(
            message="Trip not found",
            error_code=ErrorCode.TRIP_NOT_FOUND,
            details={"trip_id": trip_id},
            status_code=404
        )


class InvalidTripError(HolidayTrackerException):
    """Raised when trip fields are missing, unknown or inconsistent."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: ErrorCode = ErrorCode.INVALID_TRIP
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=400
        )


class InvalidPriceError(InvalidTripError):
    """Raised when a price is missing, non-finite or not positive."""

    def __init__(self, price: Any):
        super().__init__(
            message=f"Price must be a positive amount, got {price!r}",
            details={"price": str(price)},
            error_code=ErrorCode.INVALID_PRICE
        )
        self.price = price


class TripConflictError(HolidayTrackerException):
    """Raised when another writer appended to the same trip's price history first."""

    def __init__(self, trip_id: str):
        super().__init__(
            message="Trip was changed by another request, reload and retry",
            error_code=ErrorCode.TRIP_CONFLICT,
            details={"trip_id": trip_id},
            status_code=409
        )


class StoreUnavailableError(HolidayTrackerException):
    """Raised when the persistence layer fails."""

    def __init__(self, operation: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Trip store unavailable during '{operation}'",
            error_code=ErrorCode.STORE_UNAVAILABLE,
            details=details or {"operation": operation},
            status_code=500
        )


class UpstreamLookupError(HolidayTrackerException):
    """
    Raised by the geocoding client when a lookup cannot be completed.
    The enrichment pipeline degrades such failures to a missing marker.
    """

    def __init__(self, query: str, reason: str):
        super().__init__(
            message=f"Geocoding lookup for '{query}' failed: {reason}",
            error_code=ErrorCode.UPSTREAM_LOOKUP_FAILED,
            details={"query": query, "reason": reason},
            status_code=502
        )
        self.query = query
        self.reason = reason
