import time
from datetime import date, datetime, timedelta, timezone

import pytest

from prayerclock.models import GeoCoordinate, PrayerSchedule

# Mecca, Arabia Standard Time
TZ3 = timezone(timedelta(hours=3))
MECCA = GeoCoordinate(latitude=21.4225, longitude=39.8262)
SOLSTICE = date(2024, 6, 21)

# sunrise-sunset.org response for Mecca on 2024-06-21 (formatted=0, UTC)
MECCA_PAYLOAD = {
    "results": {
        "sunrise": "2024-06-21T02:39:14+00:00",
        "sunset": "2024-06-21T16:05:38+00:00",
        "solar_noon": "2024-06-21T09:22:26+00:00",
        "day_length": 48384,
        "civil_twilight_begin": "2024-06-21T02:15:02+00:00",
        "civil_twilight_end": "2024-06-21T16:29:51+00:00",
        "nautical_twilight_begin": "2024-06-21T01:46:48+00:00",
        "nautical_twilight_end": "2024-06-21T16:58:05+00:00",
        "astronomical_twilight_begin": "2024-06-21T01:15:34+00:00",
        "astronomical_twilight_end": "2024-06-21T17:29:19+00:00",
    },
    "status": "OK",
    "tzid": "UTC",
}


def local(hour: int, minute: int, day: date = SOLSTICE) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=TZ3)


@pytest.fixture
def mecca_payload() -> dict:
    return {**MECCA_PAYLOAD, "results": dict(MECCA_PAYLOAD["results"])}


@pytest.fixture
def schedule() -> PrayerSchedule:
    """Hand-built Mecca schedule for the June solstice."""
    return PrayerSchedule(
        coordinate=MECCA,
        day=SOLSTICE,
        fajr=local(4, 14),
        sunrise=local(5, 39),
        dhuhr=local(12, 22),
        asr=local(15, 42),
        maghrib=local(19, 6),
        isha=local(20, 26),
    )


@pytest.fixture
def new_york_system_zone(monkeypatch):
    """Point the process-local zone at America/New_York for one test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is POSIX only")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
