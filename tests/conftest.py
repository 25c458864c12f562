"""Shared fixtures: in-memory store, fake geocoder and an API client."""
import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient

from holiday_tracker.config.settings import Settings
from holiday_tracker.core.db import Database
from holiday_tracker.core.dependencies import ServiceContainer
from holiday_tracker.main import create_app
from holiday_tracker.models.internal_models import Provider, Trip
from holiday_tracker.services import price_ledger
from holiday_tracker.services.trip_service import TripService
from holiday_tracker.services.trip_store import TripStore
from tests.fakes import DEFAULT_PLACES, FakeGeocodingClient, RecordingSleep


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def store(database):
    return TripStore(database)


@pytest.fixture
def trip_service(store):
    return TripService(store)


@pytest.fixture
def trip_factory():
    """Build domain trips with sensible defaults"""

    def build(**overrides) -> Trip:
        price = overrides.pop("price", "1299.00")
        values = dict(
            id=uuid.uuid4().hex,
            destination="Mallorca, Spain",
            provider=Provider.SUNWEB,
            departure_date=date(2026, 6, 1),
            return_date=date(2026, 6, 8),
            price_history=price_ledger.initialize(price),
        )
        values.update(overrides)
        return Trip(**values)

    return build


@pytest.fixture
def geocoder():
    return FakeGeocodingClient(dict(DEFAULT_PLACES))


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def client(geocoder, recording_sleep):
    settings = Settings(database_url="sqlite://")
    container = ServiceContainer(settings, geocoding_client=geocoder, sleep=recording_sleep)
    app = create_app(settings, container)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def trip_payload():
    return {
        "destination": "Mallorca, Spain",
        "hotel": None,
        "provider": "sunweb",
        "departureDate": "2026-06-01",
        "returnDate": "2026-06-08",
        "adults": 2,
        "children": 1,
        "currentPrice": 1299.00,
        "url": "https://example.com/booking/123",
        "notes": "Sea view",
    }
