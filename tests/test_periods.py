from dataclasses import replace
from datetime import date, datetime, timedelta
from itertools import groupby

import pytest

from conftest import MECCA, SOLSTICE, TZ3, local
from prayerclock.calculator import schedule_from_twilight
from prayerclock.models import PERIOD_NAMES
from prayerclock.periods import (
    compute_day_periods,
    next_transition,
    resolve_current_period,
    time_remaining,
)
from prayerclock.twilight import parse_twilight_payload

NEXT_DAY = date(2024, 6, 22)


@pytest.mark.parametrize(
    "hour, minute, expected",
    [
        (0, 30, "night"),
        (4, 3, "night"),
        (4, 4, "fajr"),
        (4, 14, "fajr"),
        (5, 29, "sunrise"),
        (9, 0, "sunrise"),
        (12, 12, "dhuhr"),
        (15, 32, "asr"),
        (19, 1, "maghrib"),
        (20, 21, "maghrib"),
        (20, 26, "isha"),
        (23, 59, "isha"),
    ],
)
def test_resolve_current_period(schedule, hour, minute, expected):
    assert resolve_current_period(schedule, local(hour, minute)) == expected


def test_zero_buffer(schedule):
    assert resolve_current_period(schedule, local(4, 13), buffer=timedelta(0)) == "night"
    assert resolve_current_period(schedule, local(4, 14), buffer=timedelta(0)) == "fajr"


def test_every_minute_walks_periods_in_order(schedule):
    midnight = datetime(2024, 6, 21, tzinfo=TZ3)
    names = [
        resolve_current_period(schedule, midnight + timedelta(minutes=m))
        for m in range(24 * 60)
    ]
    assert tuple(name for name, _ in groupby(names)) == PERIOD_NAMES


def test_time_remaining(schedule):
    assert time_remaining(schedule, local(4, 14)) == timedelta(minutes=85)
    assert time_remaining(schedule, local(3, 0)) == timedelta(minutes=74)
    # Inside the Fajr buffer the countdown runs to Sunrise
    assert time_remaining(schedule, local(4, 4)) == timedelta(minutes=95)


def test_time_remaining_in_isha(schedule):
    assert time_remaining(schedule, local(21, 0)) == timedelta(
        hours=2, minutes=59, seconds=59, milliseconds=999
    )


def test_time_remaining_after_midnight_is_zero(schedule):
    assert time_remaining(schedule, local(0, 30, day=NEXT_DAY)) == timedelta(0)


def test_next_transition(schedule):
    upcoming = next_transition(schedule, local(3, 0))
    assert (upcoming.name, upcoming.time) == ("fajr", local(4, 14))
    upcoming = next_transition(schedule, local(16, 0))
    assert (upcoming.name, upcoming.time) == ("maghrib", local(19, 6))


def test_next_transition_in_isha_uses_tomorrow(schedule):
    tomorrow = replace(
        schedule, day=NEXT_DAY, fajr=local(4, 15, day=NEXT_DAY)
    )
    upcoming = next_transition(schedule, local(22, 0), tomorrow=tomorrow)
    assert (upcoming.name, upcoming.time) == ("fajr", local(4, 15, day=NEXT_DAY))


def test_next_transition_in_isha_computes_tomorrow(schedule):
    upcoming = next_transition(schedule, local(22, 0))
    assert upcoming.name == "fajr"
    assert upcoming.time.date() == NEXT_DAY
    assert abs(upcoming.time - local(4, 14, day=NEXT_DAY)) <= timedelta(minutes=2)


def test_day_periods_are_contiguous(schedule):
    periods = compute_day_periods(schedule)
    assert tuple(p.name for p in periods) == (
        "night", "fajr", "sunrise", "morning", "dhuhr", "asr", "maghrib",
    )
    for before, after in zip(periods, periods[1:]):
        assert before.end == after.start
    assert periods[0].start == schedule.isha - timedelta(days=1)
    assert periods[-1].end == schedule.isha
    assert sum((p.duration for p in periods), timedelta(0)) == timedelta(days=1)
    assert not any(p.is_degenerate for p in periods)


def test_morning_follows_sunrise_hour(schedule):
    periods = {p.name: p for p in compute_day_periods(schedule)}
    assert periods["sunrise"].duration == timedelta(hours=1)
    assert periods["morning"].start == local(6, 39)
    assert periods["morning"].end == schedule.dhuhr


def test_day_periods_prefer_twilight(schedule, mecca_payload):
    twilight = parse_twilight_payload(mecca_payload, TZ3)
    periods = {p.name: p for p in compute_day_periods(schedule, twilight)}
    assert periods["sunrise"].start == twilight.sunrise
    assert periods["dhuhr"].start == twilight.solar_noon
    assert periods["maghrib"].start == twilight.sunset
    assert periods["night"].end == schedule.fajr


def test_day_periods_from_twilight_schedule(mecca_payload):
    twilight = parse_twilight_payload(mecca_payload, TZ3)
    schedule = schedule_from_twilight(MECCA, SOLSTICE, twilight)
    periods = compute_day_periods(schedule, twilight)
    assert sum((p.duration for p in periods), timedelta(0)) == timedelta(days=1)


def test_inconsistent_inputs_give_degenerate_periods(schedule):
    late_asr = replace(schedule, asr=local(19, 30))
    periods = {p.name: p for p in compute_day_periods(late_asr)}
    assert periods["asr"].is_degenerate
    assert not periods["dhuhr"].is_degenerate
