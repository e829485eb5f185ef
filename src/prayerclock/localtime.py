"""Local wall-clock helpers.

Local time is an explicit tzinfo passed by the caller or, when None, the zone of the
execution environment. No timezone database lookups happen here.
"""

import math
from datetime import date, datetime, time, timedelta, tzinfo


def _attach(naive: datetime, tz: tzinfo | None) -> datetime:
    if tz is None:
        return naive.astimezone()  # naive is read as system local time
    return naive.replace(tzinfo=tz)


def local_midnight(day: date, tz: tzinfo | None = None) -> datetime:
    return _attach(datetime.combine(day, time(0, 0)), tz)


def end_of_day(day: date, tz: tzinfo | None = None) -> datetime:
    """23:59:59.999 local time on the given day."""
    return _attach(datetime.combine(day, time(23, 59, 59, 999000)), tz)


def utc_offset_hours(day: date, tz: tzinfo | None = None) -> float:
    """UTC offset in effect at local noon of the given day, in hours."""
    noon = _attach(datetime.combine(day, time(12, 0)), tz)
    offset = noon.utcoffset()
    if offset is None:
        raise ValueError(f"{tz!r} gives no UTC offset for {day}")
    return offset.total_seconds() / 3600


def wall_clock(day: date, hours: float, tz: tzinfo | None = None) -> datetime:
    """Local wall-clock time `hours` after midnight of `day`, unrounded.

    The wall time is built first and only then placed in the zone, so instants after
    a DST switch carry the offset in effect at that time, not the one at midnight.
    """
    return _attach(datetime.combine(day, time(0, 0)) + timedelta(hours=hours), tz)


def at_local_hours(day: date, hours: float, tz: tzinfo | None = None) -> datetime:
    """Clock time for decimal hours after local midnight.

    Integer hour plus rounded minute; sub-minute precision is dropped. Values outside
    [0, 24) roll into the neighbouring day.
    """
    whole = math.floor(hours)
    minutes = math.floor((hours - whole) * 60 + 0.5)
    wall = datetime.combine(day, time(0, 0)) + timedelta(hours=whole, minutes=minutes)
    return _attach(wall, tz)


def to_local(moment: datetime, tz: tzinfo | None = None) -> datetime:
    return moment.astimezone(tz)


def now(tz: tzinfo | None = None) -> datetime:
    """Fresh wall-clock reading. Read on every resolver tick, never cached."""
    if tz is None:
        return datetime.now().astimezone()
    return datetime.now(tz)
