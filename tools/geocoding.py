"""Reverse geocoding used to pre-fill the location of the daily context."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from stylist_app.config import DEFAULT_GEOCODE_URL
from tools.observability import instrument_tool

logger = logging.getLogger(__name__)


class GeocodingError(RuntimeError):
    """Raised when the coordinates cannot be turned into a place name."""


@instrument_tool("reverse_geocode")
def reverse_geocode(
    latitude: float,
    longitude: float,
    url: str = DEFAULT_GEOCODE_URL,
    timeout: Optional[float] = 5.0,
) -> str:
    """Return the city (or nearest locality/region) for a coordinate pair.

    Raises:
        ValueError: If the coordinates are out of range.
        GeocodingError: For network issues, non-2xx responses or unnamed places.
    """

    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        raise ValueError(f"Coordinates out of range: {latitude}, {longitude}")

    params = {"latitude": latitude, "longitude": longitude, "localityLanguage": "en"}
    try:
        response = requests.get(url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        logger.error("Network error during reverse geocoding", extra={"error": str(exc)})
        raise GeocodingError(f"Reverse geocoding failed: {exc}") from exc

    if not 200 <= response.status_code < 300:
        logger.warning("Non-success status from geocoder", extra={"status_code": response.status_code})
        raise GeocodingError(f"Reverse geocoding failed: HTTP {response.status_code}")

    try:
        data = response.json()
    except ValueError as exc:
        logger.warning("Geocoder returned a non-JSON body")
        raise GeocodingError("Reverse geocoding failed: unreadable response") from exc
    if not isinstance(data, dict):
        raise GeocodingError("Reverse geocoding failed: unexpected response shape")
    city = data.get("city") or data.get("locality") or data.get("principalSubdivision")
    if not city:
        raise GeocodingError("No place name found for these coordinates")
    return str(city)


__all__ = ["reverse_geocode", "GeocodingError"]
