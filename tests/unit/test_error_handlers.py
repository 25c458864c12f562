"""
Unit tests for the error taxonomy and its HTTP mapping
"""
from decimal import Decimal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from holiday_tracker.core.error_handlers import setup_error_handlers
from holiday_tracker.core.exceptions import (
    ErrorCode,
    InvalidPriceError,
    InvalidTripError,
    StoreUnavailableError,
    TripConflictError,
    TripNotFoundError,
    UpstreamLookupError,
)


@pytest.fixture
def error_app():
    app = FastAPI()
    setup_error_handlers(app)

    errors = {
        "not-found": TripNotFoundError("abc"),
        "invalid": InvalidTripError("bad trip", details={"field": "destination"}),
        "price": InvalidPriceError(Decimal("-1")),
        "store": StoreUnavailableError("put"),
        "conflict": TripConflictError("abc"),
        "upstream": UpstreamLookupError("Paris", "timeout"),
    }

    @app.get("/raise/{kind}")
    def raise_error(kind: str):
        raise errors[kind]

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.parametrize("kind,status,code", [
    ("not-found", 404, ErrorCode.TRIP_NOT_FOUND),
    ("invalid", 400, ErrorCode.INVALID_TRIP),
    ("price", 400, ErrorCode.INVALID_PRICE),
    ("store", 500, ErrorCode.STORE_UNAVAILABLE),
    ("conflict", 409, ErrorCode.TRIP_CONFLICT),
    ("upstream", 502, ErrorCode.UPSTREAM_LOOKUP_FAILED),
])
def test_application_errors_map_to_status(error_app, kind, status, code):
    response = error_app.get(f"/raise/{kind}")

    assert response.status_code == status
    body = response.json()
    assert body["error_code"] == code.value
    assert body["message"]
    assert body["timestamp"]


def test_invalid_price_is_an_invalid_trip():
    error = InvalidPriceError(0)
    assert isinstance(error, InvalidTripError)
    assert error.price == 0


def test_unexpected_error_becomes_500(error_app):
    response = error_app.get("/raise/unknown-kind")

    assert response.status_code == 500
    assert response.json()["error_code"] == "INTERNAL_SERVER_ERROR"
