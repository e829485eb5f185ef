"""Period resolution against wall-clock time, and the day partition used by the dial."""

from datetime import datetime, timedelta

from prayerclock.calculator import calculate_prayer_schedule
from prayerclock.localtime import end_of_day
from prayerclock.models import (
    DayPeriod,
    PeriodName,
    PrayerName,
    PrayerSchedule,
    Transition,
    TwilightBoundaries,
)

PERIOD_BUFFER = timedelta(minutes=10)  # A period is entered this long before its start
SUNRISE_PERIOD = timedelta(hours=1)

# Buffered periods in descending time order: (period, instant that ends it)
_BUFFERED: tuple[tuple[PeriodName, PrayerName], ...] = (
    ("maghrib", "isha"),
    ("asr", "maghrib"),
    ("dhuhr", "asr"),
    ("sunrise", "dhuhr"),
    ("fajr", "sunrise"),
)

_NEXT: dict[PeriodName, PrayerName] = {
    "night": "fajr",
    "fajr": "sunrise",
    "sunrise": "dhuhr",
    "dhuhr": "asr",
    "asr": "maghrib",
    "maghrib": "isha",
}


def resolve_current_period(
    schedule: PrayerSchedule, now: datetime, buffer: timedelta = PERIOD_BUFFER
) -> PeriodName:
    """Name of the period `now` falls in.

    Isha starts exactly at its instant; every other prayer period starts `buffer`
    early and runs until the next instant. Checks go latest-first, so an overlap
    caused by the buffer is won by the later period. Anything before the Fajr
    buffer is night. Total for any `now`.
    """
    if now >= schedule.isha:
        return "isha"
    for period, until in _BUFFERED:
        start = getattr(schedule, period) - buffer
        if start <= now < getattr(schedule, until):
            return period
    return "night"


def time_remaining(
    schedule: PrayerSchedule, now: datetime, buffer: timedelta = PERIOD_BUFFER
) -> timedelta:
    """Time left in the current period.

    Isha runs to 23:59:59.999 of the schedule's day. Past that the value is zero
    until the caller computes the next day's schedule.
    """
    period = resolve_current_period(schedule, now, buffer)
    if period == "isha":
        midnight = end_of_day(schedule.day, schedule.isha.tzinfo)
        return max(midnight - now, timedelta(0))
    return getattr(schedule, _NEXT[period]) - now


def next_transition(
    schedule: PrayerSchedule,
    now: datetime,
    tomorrow: PrayerSchedule | None = None,
    buffer: timedelta = PERIOD_BUFFER,
) -> Transition:
    """The upcoming prayer instant.

    During Isha this is tomorrow's Fajr: taken from `tomorrow` when given, otherwise
    computed with the formula path for the schedule's location and Asr factor.

    Raises:
        PolarUndefinedError: Tomorrow's Fajr is undefined at this latitude.
    """
    period = resolve_current_period(schedule, now, buffer)
    if period != "isha":
        name = _NEXT[period]
        return Transition(name=name, time=getattr(schedule, name))
    if tomorrow is None:
        tomorrow = calculate_prayer_schedule(
            schedule.coordinate,
            schedule.day + timedelta(days=1),
            asr_factor=schedule.asr_factor,
            tz=schedule.fajr.tzinfo,
        )
    return Transition(name="fajr", time=tomorrow.fajr)


def compute_day_periods(
    schedule: PrayerSchedule, twilight: TwilightBoundaries | None = None
) -> tuple[DayPeriod, ...]:
    """Partition one 24-hour cycle into seven contiguous periods for visualization.

    Night runs from the previous evening's Isha (today's Isha minus a day) to Fajr,
    so the sequence is increasing and ends at today's Isha. Sunrise, solar noon and
    sunset come from twilight data when available, else from the schedule.
    Inconsistent inputs produce degenerate periods rather than errors.
    """
    sunrise = twilight.sunrise if twilight else schedule.sunrise
    noon = twilight.solar_noon if twilight else schedule.dhuhr
    sunset = twilight.sunset if twilight else schedule.maghrib
    morning = sunrise + SUNRISE_PERIOD
    return (
        DayPeriod("night", schedule.isha - timedelta(days=1), schedule.fajr),
        DayPeriod("fajr", schedule.fajr, sunrise),
        DayPeriod("sunrise", sunrise, morning),
        DayPeriod("morning", morning, noon),
        DayPeriod("dhuhr", noon, schedule.asr),
        DayPeriod("asr", schedule.asr, sunset),
        DayPeriod("maghrib", sunset, schedule.isha),
    )
