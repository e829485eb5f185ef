"""Place-name lookup via Nominatim (OpenStreetMap)."""

import logging
from dataclasses import dataclass

import httpx

from prayerclock.models import GeoCoordinate

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


class GeocodingError(Exception):
    """Geocoder call failure."""


@dataclass(frozen=True)
class Place:
    """Geocoding result."""

    coordinate: GeoCoordinate
    display_name: str  # Normalized address returned by the geocoder


def geocode_place(
    query: str,
    base_url: str = NOMINATIM_URL,
    user_agent: str = "PrayerClock/1.0",
    client: httpx.Client | None = None,
) -> Place:
    """Resolve a free-form place name to a coordinate.

    Args:
        query: Address or city in any language.
        base_url: Nominatim search endpoint.
        user_agent: Sent as User-Agent, which Nominatim's usage policy requires.
        client: Optional preconfigured client (tests inject a mock transport here).

    Returns:
        Place with a validated GeoCoordinate and the geocoder's display name.

    Raises:
        GeocodingError: On transport/API error or when the place cannot be found.
    """
    params = {"q": query, "format": "json", "limit": 1}
    headers = {"User-Agent": user_agent}
    try:
        if client is None:
            resp = httpx.get(base_url, params=params, headers=headers, timeout=10)
        else:
            resp = client.get(base_url, params=params, headers=headers)
        resp.raise_for_status()
        results = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Geocoding %r failed: %s", query, exc)
        raise GeocodingError(f"Geocoder error: {exc}") from exc

    if not results:
        raise GeocodingError(f"Address not found: {query}")
    r = results[0]
    coordinate = GeoCoordinate(latitude=float(r["lat"]), longitude=float(r["lon"]))
    return Place(coordinate=coordinate, display_name=r["display_name"])
