# tests/test_location.py
from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from salattimes.location import (
    GeocodingError,
    geocode_address,
    timezone_for,
    valid_coordinates,
    validate_address,
)
from salattimes.models import Coordinates

NYC_RESULT = [{"lat": "40.7127281", "lon": "-74.0060152", "display_name": "New York, United States"}]


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture(autouse=True)
def _no_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GEOCODE_API_KEY", raising=False)


# ---------- Input validation ----------


@pytest.mark.parametrize(
    "address, message",
    [
        ("", "Address is required"),
        ("   ", "Address is required"),
        ("x" * 201, "Address too long"),
        ("<script>alert(1)</script>", "Invalid address format"),
        ("javascript:void(0)", "Invalid address format"),
        ("Main St onload=steal()", "Invalid address format"),
    ],
)
def test_validate_address_rejects(address: str, message: str) -> None:
    with pytest.raises(GeocodingError, match=message):
        validate_address(address)


def test_validate_address_trims() -> None:
    assert validate_address("  Makkah  ") == "Makkah"


@pytest.mark.parametrize(
    "lat, lon, ok",
    [(0, 0, True), (90, 180, True), (91, 0, False), (0, -181, False), (float("nan"), 0, False)],
)
def test_valid_coordinates(lat: float, lon: float, ok: bool) -> None:
    assert valid_coordinates(lat, lon) is ok


# ---------- Geocoding ----------


def test_geocode_with_api_key_uses_maps_co() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=NYC_RESULT)

    context = geocode_address("New York", api_key="k123", client=_client(handler))

    assert seen[0].url.host == "geocode.maps.co"
    assert seen[0].url.params["api_key"] == "k123"
    assert seen[0].url.params["q"] == "New York"
    assert context.coordinates == Coordinates(40.7127281, -74.0060152)
    assert context.timezone == "America/New_York"
    assert context.address_display == "New York, United States"


def test_geocode_reads_api_key_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEOCODE_API_KEY", "from-env")
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=NYC_RESULT)

    geocode_address("New York", client=_client(handler))
    assert seen[0].url.params["api_key"] == "from-env"


def test_geocode_without_key_uses_nominatim() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"lat": "21.4225", "lon": "39.8262"}])

    context = geocode_address("Makkah", client=_client(handler))

    assert seen[0].url.host == "nominatim.openstreetmap.org"
    assert seen[0].headers["User-Agent"] == "salat-times/1.0"
    assert context.timezone == "Asia/Riyadh"
    # Falls back to the query when the service gives no label
    assert context.address_display == "Makkah"


def test_geocode_no_results() -> None:
    client = _client(lambda request: httpx.Response(200, json=[]))
    with pytest.raises(GeocodingError, match="Address not found: Nowhere"):
        geocode_address("Nowhere", client=client)


def test_geocode_out_of_range_coordinates() -> None:
    client = _client(lambda request: httpx.Response(200, json=[{"lat": "95", "lon": "10"}]))
    with pytest.raises(GeocodingError, match="Invalid coordinates"):
        geocode_address("Somewhere", client=client)


@pytest.mark.parametrize(
    "body",
    [
        {"text": "<html>busy</html>"},
        {"json": [{"display_name": "No coordinates"}]},
        {"json": [{"lat": "north", "lon": "10"}]},
        {"json": ["just a string"]},
    ],
    ids=["not-json", "missing-lat", "bad-number", "not-an-object"],
)
def test_geocode_malformed_response(body: dict) -> None:
    client = _client(lambda request: httpx.Response(200, **body))
    with pytest.raises(GeocodingError, match="Invalid response"):
        geocode_address("Somewhere", client=client)


def test_geocode_http_error_status() -> None:
    client = _client(lambda request: httpx.Response(503))
    with pytest.raises(GeocodingError, match="Geocoding service error"):
        geocode_address("Somewhere", client=client)


def test_geocode_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(GeocodingError, match="Request timeout"):
        geocode_address("Somewhere", client=_client(handler))


def test_geocode_connection_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(GeocodingError, match="Service error"):
        geocode_address("Somewhere", client=_client(handler))


def test_geocode_validates_before_calling_out() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(GeocodingError, match="Address is required"):
        geocode_address("", client=_client(handler))


def test_timezone_for_known_city() -> None:
    assert timezone_for(Coordinates(51.5074, -0.1278)) == "Europe/London"
