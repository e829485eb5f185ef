"""Twilight boundary sources: the sunrise-sunset.org HTTP API and a local closed-form fallback."""

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Protocol

import httpx

from prayerclock.localtime import to_local, utc_offset_hours, wall_clock
from prayerclock.models import GeoCoordinate, TwilightBoundaries
from prayerclock.solar import (
    ASTRONOMICAL_ZENITH,
    CIVIL_ZENITH,
    NAUTICAL_ZENITH,
    SUNRISE_ZENITH,
    day_of_year,
    hour_angle,
    solar_declination,
    solar_noon_hours,
)

logger = logging.getLogger(__name__)

SUNRISE_SUNSET_URL = "https://api.sunrise-sunset.org/json"

# TwilightBoundaries field → sunrise-sunset.org result key
_RESULT_KEYS: dict[str, str] = {
    "astronomical_dawn": "astronomical_twilight_begin",
    "nautical_dawn": "nautical_twilight_begin",
    "civil_dawn": "civil_twilight_begin",
    "sunrise": "sunrise",
    "solar_noon": "solar_noon",
    "sunset": "sunset",
    "civil_dusk": "civil_twilight_end",
    "nautical_dusk": "nautical_twilight_end",
    "astronomical_dusk": "astronomical_twilight_end",
}

# The API reports events that never happen as 1970-01-01T00:00:01+00:00
_UNDEFINED_YEAR = 1970


class TwilightUnavailable(Exception):
    """Boundary source failed or returned something unusable."""


class TwilightProvider(Protocol):
    def get_twilight_boundaries(
        self, coord: GeoCoordinate, day: date
    ) -> TwilightBoundaries: ...


def parse_twilight_payload(
    payload: Any, tz: tzinfo | None = None
) -> TwilightBoundaries:
    """Convert a sunrise-sunset.org JSON body into local-time TwilightBoundaries.

    Args:
        payload: Decoded JSON body (`{"results": {...}, "status": "OK"}`).
        tz: Target zone. None = execution environment's local zone.

    Raises:
        TwilightUnavailable: Non-OK status, missing or unparsable timestamps, or an
            event the service marks as never happening.
    """
    if not isinstance(payload, dict):
        raise TwilightUnavailable("Unexpected response body")
    status = payload.get("status")
    if status != "OK":
        raise TwilightUnavailable(f"Twilight service status: {status}")
    results = payload.get("results")
    if not isinstance(results, dict):
        raise TwilightUnavailable("Response has no results")

    values: dict[str, datetime] = {}
    for field, key in _RESULT_KEYS.items():
        raw = results.get(key)
        if not isinstance(raw, str):
            raise TwilightUnavailable(f"Missing {key} in response")
        try:
            moment = datetime.fromisoformat(raw)
        except ValueError as exc:
            raise TwilightUnavailable(f"Bad timestamp for {key}: {raw!r}") from exc
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        if moment.year == _UNDEFINED_YEAR:
            raise TwilightUnavailable(f"{key} does not occur on this date")
        values[field] = to_local(moment, tz)
    return TwilightBoundaries(**values)


class SunriseSunsetClient:
    """Twilight boundaries from the sunrise-sunset.org JSON API.

    No retries: the call sits on an interactive path, and retry policy belongs to the
    caller. The timeout is the transport's.
    """

    def __init__(
        self,
        base_url: str = SUNRISE_SUNSET_URL,
        timeout: float = 10.0,
        tz: tzinfo | None = None,
        client: httpx.Client | None = None,
        async_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.tz = tz
        self._client = client
        self._async_client = async_client

    def _params(self, coord: GeoCoordinate, day: date) -> dict[str, str]:
        return {
            "lat": str(coord.latitude),
            "lng": str(coord.longitude),
            "date": day.isoformat(),
            "formatted": "0",
        }

    def get_twilight_boundaries(
        self, coord: GeoCoordinate, day: date
    ) -> TwilightBoundaries:
        """Blocking fetch of the nine boundaries for `day` at `coord`.

        Raises:
            TwilightUnavailable: On any transport, HTTP or parse failure.
        """
        params = self._params(coord, day)
        logger.debug("GET %s %s", self.base_url, params)
        try:
            if self._client is None:
                resp = httpx.get(self.base_url, params=params, timeout=self.timeout)
            else:
                resp = self._client.get(self.base_url, params=params)
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Twilight request failed: %s", exc)
            raise TwilightUnavailable(f"Twilight request failed: {exc}") from exc
        return parse_twilight_payload(payload, self.tz)

    async def fetch(self, coord: GeoCoordinate, day: date) -> TwilightBoundaries:
        """Awaitable variant of get_twilight_boundaries."""
        params = self._params(coord, day)
        logger.debug("GET %s %s", self.base_url, params)
        try:
            if self._async_client is None:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    resp = await client.get(self.base_url, params=params)
            else:
                resp = await self._async_client.get(self.base_url, params=params)
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Twilight request failed: %s", exc)
            raise TwilightUnavailable(f"Twilight request failed: {exc}") from exc
        return parse_twilight_payload(payload, self.tz)


class FormulaTwilight:
    """Twilight boundaries from the closed-form solar formulas. Offline, no rounding."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self.tz = tz

    def get_twilight_boundaries(
        self, coord: GeoCoordinate, day: date
    ) -> TwilightBoundaries:
        """Raises PolarUndefinedError where a boundary does not occur."""
        doy = day_of_year(day)
        declination = solar_declination(doy)
        noon = solar_noon_hours(coord.longitude, doy, utc_offset_hours(day, self.tz))

        def half_arc(zenith: float) -> float:
            return hour_angle(coord.latitude, declination, zenith) / 15

        def at(hours: float) -> datetime:
            return wall_clock(day, hours, self.tz)

        astronomical = half_arc(ASTRONOMICAL_ZENITH)
        nautical = half_arc(NAUTICAL_ZENITH)
        civil = half_arc(CIVIL_ZENITH)
        day_arc = half_arc(SUNRISE_ZENITH)
        return TwilightBoundaries(
            astronomical_dawn=at(noon - astronomical),
            nautical_dawn=at(noon - nautical),
            civil_dawn=at(noon - civil),
            sunrise=at(noon - day_arc),
            solar_noon=at(noon),
            sunset=at(noon + day_arc),
            civil_dusk=at(noon + civil),
            nautical_dusk=at(noon + nautical),
            astronomical_dusk=at(noon + astronomical),
        )
