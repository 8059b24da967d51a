"""Location resolution — address geocoding and time zone lookup."""

import logging
import math
import os
import re

import httpx
from timezonefinder import TimezoneFinder

from salattimes.models import Coordinates, ObserverContext

logger = logging.getLogger(__name__)

_tf = TimezoneFinder()

_MAX_ADDRESS_LENGTH = 200
_SUSPICIOUS_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+=", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
]
_TIMEOUT = 5.0
_USER_AGENT = "salat-times/1.0"


class GeocodingError(Exception):
    """Geocoder call failure."""


def validate_address(address: str | None) -> str:
    """Return the trimmed address or raise GeocodingError describing the problem."""
    if not address or not address.strip():
        raise GeocodingError("Address is required")
    if len(address) > _MAX_ADDRESS_LENGTH:
        raise GeocodingError(
            f"Address too long (max {_MAX_ADDRESS_LENGTH} characters)"
        )
    for pattern in _SUSPICIOUS_PATTERNS:
        if pattern.search(address):
            raise GeocodingError("Invalid address format")
    return address.strip()


def valid_coordinates(lat: float, lon: float) -> bool:
    return (
        math.isfinite(lat)
        and math.isfinite(lon)
        and -90 <= lat <= 90
        and -180 <= lon <= 180
    )


def _first_match(resp: httpx.Response) -> tuple[float, float, str | None] | None:
    resp.raise_for_status()
    try:
        results = resp.json()
    except ValueError as e:
        raise GeocodingError("Invalid response from geocoding service") from e
    if not isinstance(results, list) or not results:
        return None
    r = results[0]
    try:
        return float(r["lat"]), float(r["lon"]), r.get("display_name")
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise GeocodingError("Invalid response from geocoding service") from e


def _geocode_maps_co(
    client: httpx.Client, address: str, api_key: str
) -> tuple[float, float, str | None] | None:
    """geocode.maps.co search. Returns (lat, lon, display_name) or None."""
    params = {"q": address, "limit": 1, "api_key": api_key}
    resp = client.get(
        "https://geocode.maps.co/search",
        params=params,
        headers={"Accept": "application/json"},
    )
    return _first_match(resp)


def _geocode_nominatim(
    client: httpx.Client, address: str
) -> tuple[float, float, str | None] | None:
    """Nominatim (OpenStreetMap) geocoder. Returns (lat, lon, display_name) or None."""
    params = {"q": address, "format": "json", "limit": 1}
    resp = client.get(
        "https://nominatim.openstreetmap.org/search",
        params=params,
        headers={"User-Agent": _USER_AGENT},
    )
    return _first_match(resp)


def timezone_for(coordinates: Coordinates) -> str:
    """IANA zone name at ``coordinates``.

    Raises:
        GeocodingError: When no zone covers the position.
    """
    tz_str = _tf.timezone_at(lat=coordinates.latitude, lng=coordinates.longitude)
    if tz_str is None:
        raise GeocodingError(
            f"Timezone not found: lat={coordinates.latitude}, lng={coordinates.longitude}"
        )
    return tz_str


def geocode_address(
    address: str,
    api_key: str | None = None,
    client: httpx.Client | None = None,
) -> ObserverContext:
    """Resolve an address string to an ObserverContext.

    Uses geocode.maps.co when an API key is available (argument or
    ``GEOCODE_API_KEY``), otherwise Nominatim.

    Args:
        address: Free-form address in any language.
        api_key: geocode.maps.co key. Read from the environment when omitted.
        client: HTTP client to use; a short-lived one is created when omitted.

    Returns:
        ObserverContext with coordinates, IANA zone and the geocoder's label.

    Raises:
        GeocodingError: On invalid input, HTTP failure, timeout, an unknown
            address, out-of-range coordinates, or a missing time zone.
    """
    address = validate_address(address)
    api_key = api_key or os.environ.get("GEOCODE_API_KEY")

    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=_TIMEOUT)
    try:
        if api_key:
            result = _geocode_maps_co(client, address, api_key)
        else:
            result = _geocode_nominatim(client, address)
    except httpx.TimeoutException as e:
        raise GeocodingError("Request timeout") from e
    except httpx.HTTPStatusError as e:
        logger.error("Geocoding API error: %s", e.response.status_code)
        raise GeocodingError("Geocoding service error") from e
    except httpx.HTTPError as e:
        logger.error("Geocoding failed: %s", e)
        raise GeocodingError("Service error") from e
    finally:
        if owns_client:
            client.close()

    if result is None:
        raise GeocodingError(f"Address not found: {address}")
    lat, lon, label = result
    if not valid_coordinates(lat, lon):
        raise GeocodingError("Invalid coordinates from service")

    coordinates = Coordinates(latitude=lat, longitude=lon)
    return ObserverContext(
        coordinates=coordinates,
        timezone=timezone_for(coordinates),
        address_display=label or address,
    )
