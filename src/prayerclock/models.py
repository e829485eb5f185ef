"""Data model definitions. Frozen value types passed between the location, twilight, schedule and period layers."""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import IntEnum
from typing import Iterator, Literal

PrayerName = Literal["fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha"]
PeriodName = Literal["night", "fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha"]
ScheduleSource = Literal["twilight", "formula"]

PRAYER_KEYS: tuple[PrayerName, ...] = (
    "fajr",
    "sunrise",
    "dhuhr",
    "asr",
    "maghrib",
    "isha",
)
PERIOD_NAMES: tuple[PeriodName, ...] = ("night", *PRAYER_KEYS)


class InvalidLocation(ValueError):
    """Coordinate out of range, or the (0, 0) "no location set" sentinel."""


class AsrMethod(IntEnum):
    """Shadow-length factor that fixes the Asr instant."""

    STANDARD = 1  # Shafi, Maliki, Hanbali
    HANAFI = 2


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer position. Validated on construction."""

    latitude: float  # Decimal degrees, north positive
    longitude: float  # Decimal degrees, east positive

    def __post_init__(self) -> None:
        lat, lng = self.latitude, self.longitude
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise InvalidLocation(f"Non-finite coordinate: lat={lat}, lng={lng}")
        if not -90.0 <= lat <= 90.0:
            raise InvalidLocation(f"Latitude out of range: {lat}")
        if not -180.0 <= lng <= 180.0:
            raise InvalidLocation(f"Longitude out of range: {lng}")
        if lat == 0.0 and lng == 0.0:
            raise InvalidLocation("No location set (lat=0, lng=0)")


@dataclass(frozen=True)
class TwilightBoundaries:
    """Nine solar boundaries for one calendar day, in local wall-clock time."""

    astronomical_dawn: datetime  # Sun 18° below horizon, morning
    nautical_dawn: datetime  # 12° below, morning
    civil_dawn: datetime  # 6° below, morning
    sunrise: datetime
    solar_noon: datetime  # Solar transit
    sunset: datetime
    civil_dusk: datetime
    nautical_dusk: datetime
    astronomical_dusk: datetime

    def ordered(self) -> tuple[datetime, ...]:
        return (
            self.astronomical_dawn,
            self.nautical_dawn,
            self.civil_dawn,
            self.sunrise,
            self.solar_noon,
            self.sunset,
            self.civil_dusk,
            self.nautical_dusk,
            self.astronomical_dusk,
        )

    def is_monotonic(self) -> bool:
        """False only in extreme polar cases, which callers must tolerate."""
        times = self.ordered()
        return all(a <= b for a, b in zip(times, times[1:]))


@dataclass(frozen=True)
class PrayerSchedule:
    """The six prayer instants of one day. Never mutated; recompute per day or location."""

    coordinate: GeoCoordinate
    day: date
    fajr: datetime
    sunrise: datetime
    dhuhr: datetime
    asr: datetime
    maghrib: datetime
    isha: datetime
    asr_factor: int = AsrMethod.STANDARD
    source: ScheduleSource = "formula"  # "formula" = reduced accuracy

    def items(self) -> Iterator[tuple[PrayerName, datetime]]:
        for key in PRAYER_KEYS:
            yield key, getattr(self, key)

    def is_ordered(self) -> bool:
        times = [t for _, t in self.items()]
        return all(a < b for a, b in zip(times, times[1:]))


@dataclass(frozen=True)
class DayPeriod:
    """A named half-open interval [start, end) of the day partition."""

    name: str  # "night", "fajr", "sunrise", "morning", "dhuhr", "asr", "maghrib"
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_degenerate(self) -> bool:
        """Zero or negative width. Renderers skip these instead of failing."""
        return self.end <= self.start

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


@dataclass(frozen=True)
class Transition:
    """The upcoming prayer instant."""

    name: PrayerName
    time: datetime
