"""Twilight boundaries from the JPL DE421 ephemeris via skyfield's almanac."""

from datetime import date, datetime, timedelta, tzinfo
from functools import lru_cache
from pathlib import Path
from typing import Any

from skyfield import almanac
from skyfield.api import Loader, wgs84

from prayerclock.localtime import local_midnight, to_local
from prayerclock.models import GeoCoordinate, TwilightBoundaries
from prayerclock.solar import PolarUndefinedError

EPHEMERIS_FILE = "de421.bsp"

# (level before, level after) of almanac.dark_twilight_day → TwilightBoundaries field
# Levels: 0 dark, 1 astronomical, 2 nautical, 3 civil twilight, 4 day
_LEVEL_CHANGES: dict[tuple[int, int], str] = {
    (0, 1): "astronomical_dawn",
    (1, 2): "nautical_dawn",
    (2, 3): "civil_dawn",
    (3, 4): "sunrise",
    (4, 3): "sunset",
    (3, 2): "civil_dusk",
    (2, 1): "nautical_dusk",
    (1, 0): "astronomical_dusk",
}


@lru_cache(maxsize=4)
def _load(directory: str) -> tuple[Any, Any]:
    """Timescale and ephemeris, loaded once per directory. Downloads if absent."""
    loader = Loader(directory)
    return loader.timescale(), loader(EPHEMERIS_FILE)


class SkyfieldTwilight:
    """Local, ephemeris-grade twilight source. No network once the ephemeris is cached."""

    def __init__(self, directory: Path, tz: tzinfo | None = None) -> None:
        self.directory = directory
        self.tz = tz

    def get_twilight_boundaries(
        self, coord: GeoCoordinate, day: date
    ) -> TwilightBoundaries:
        """Search the local calendar day for the eight level changes and the solar transit.

        Raises:
            PolarUndefinedError: A boundary does not occur on this day.
        """
        ts, eph = _load(str(self.directory))
        topos = wgs84.latlon(
            latitude_degrees=coord.latitude, longitude_degrees=coord.longitude
        )
        start = local_midnight(day, self.tz)
        t0 = ts.from_datetime(start)
        t1 = ts.from_datetime(start + timedelta(days=1))

        values: dict[str, datetime] = {}
        f_twilight = almanac.dark_twilight_day(eph, topos)
        previous = int(f_twilight(t0))
        times, levels = almanac.find_discrete(t0, t1, f_twilight)
        for t, level in zip(times, levels):
            field = _LEVEL_CHANGES.get((previous, int(level)))
            if field is not None and field not in values:
                values[field] = to_local(t.utc_datetime(), self.tz)
            previous = int(level)

        # Event 1 = upper transit
        f_meridian = almanac.meridian_transits(eph, eph["sun"], topos)
        times, events = almanac.find_discrete(t0, t1, f_meridian)
        for t, event in zip(times, events):
            if int(event) == 1:
                values["solar_noon"] = to_local(t.utc_datetime(), self.tz)

        missing = sorted((set(_LEVEL_CHANGES.values()) | {"solar_noon"}) - set(values))
        if missing:
            raise PolarUndefinedError(
                f"No {', '.join(missing)} on {day} at lat={coord.latitude}"
            )
        return TwilightBoundaries(**values)
