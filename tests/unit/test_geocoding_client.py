"""
Unit tests for the geocoding HTTP client
"""
import httpx
import pytest

from holiday_tracker.config.settings import GeocodingSettings
from holiday_tracker.core.exceptions import UpstreamLookupError
from holiday_tracker.services.geocoding_client import GeocodingClient


def _client(handler, **settings_overrides):
    settings = GeocodingSettings(
        base_url="https://geo.example.test/", user_agent="holiday-tracker-tests/1.0",
        **settings_overrides
    )
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeocodingClient(settings, http_client=http_client)


@pytest.mark.asyncio
async def test_search_parses_candidates():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[
            {"lat": "39.6953", "lon": "3.0176", "display_name": "Mallorca, Illes Balears, España"},
        ])

    client = _client(handler)
    candidates = await client.search("Mallorca, Spain")

    assert len(candidates) == 1
    assert candidates[0].latitude == pytest.approx(39.6953)
    assert candidates[0].longitude == pytest.approx(3.0176)
    assert candidates[0].display_name.startswith("Mallorca")

    request = seen[0]
    assert request.url.path == "/search"
    assert request.url.params["q"] == "Mallorca, Spain"
    assert request.url.params["format"] == "json"
    assert request.url.params["limit"] == "1"
    assert request.headers["User-Agent"] == "holiday-tracker-tests/1.0"


@pytest.mark.asyncio
async def test_search_without_match_returns_empty_list():
    client = _client(lambda request: httpx.Response(200, json=[]))
    assert await client.search("Nowhereland-xyz") == []


@pytest.mark.asyncio
async def test_error_status_raises_upstream_error():
    client = _client(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(UpstreamLookupError) as exc_info:
        await client.search("Paris, France")

    assert exc_info.value.query == "Paris, France"
    assert "500" in exc_info.value.reason


@pytest.mark.asyncio
async def test_timeout_raises_upstream_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = _client(handler)

    with pytest.raises(UpstreamLookupError) as exc_info:
        await client.search("Paris, France")

    assert exc_info.value.reason == "timeout"


@pytest.mark.asyncio
async def test_connection_error_raises_upstream_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamLookupError):
        await _client(handler).search("Paris, France")


@pytest.mark.asyncio
async def test_non_json_body_raises_upstream_error():
    client = _client(lambda request: httpx.Response(200, text="<html>busy</html>"))

    with pytest.raises(UpstreamLookupError):
        await client.search("Paris, France")


@pytest.mark.parametrize("payload", [
    {"lat": "1", "lon": "2"},
    [{"lat": "not-a-number", "lon": "2"}],
    [{"display_name": "missing coordinates"}],
])
@pytest.mark.asyncio
async def test_unexpected_payload_raises_upstream_error(payload):
    client = _client(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(UpstreamLookupError):
        await client.search("Paris, France")


@pytest.mark.asyncio
async def test_injected_http_client_is_not_closed():
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[])))
    client = GeocodingClient(GeocodingSettings(), http_client=http_client)

    await client.aclose()

    assert not http_client.is_closed
    await http_client.aclose()
