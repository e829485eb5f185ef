from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from conftest import MECCA, SOLSTICE, TZ3
from prayerclock.calculator import (
    calculate_prayer_schedule,
    fajr_adjustment,
    isha_adjustment,
    schedule_from_formula,
    schedule_from_twilight,
)
from prayerclock.models import AsrMethod, GeoCoordinate
from prayerclock.solar import PolarUndefinedError
from prayerclock.twilight import parse_twilight_payload


@pytest.fixture
def twilight(mecca_payload):
    return parse_twilight_payload(mecca_payload, TZ3)


def test_twilight_path_anchors(twilight):
    schedule = schedule_from_twilight(MECCA, SOLSTICE, twilight)
    assert schedule.source == "twilight"
    assert schedule.dhuhr == twilight.solar_noon
    assert schedule.sunrise == twilight.sunrise
    assert schedule.maghrib == twilight.sunset
    assert schedule.fajr == twilight.astronomical_dawn - timedelta(minutes=10)
    assert schedule.isha == twilight.astronomical_dusk + timedelta(minutes=10)
    assert schedule.is_ordered()


@pytest.mark.parametrize(
    "latitude, minutes",
    [(70.0, -20), (-70.0, -20), (20.0, -10), (-29.9, -10), (15.0, -5), (30.0, -5), (45.0, -5), (65.0, -5), (0.0, -5)],
)
def test_latitude_bands(latitude, minutes):
    assert fajr_adjustment(latitude) == timedelta(minutes=minutes)
    assert isha_adjustment(latitude) == timedelta(minutes=-minutes)


def test_formula_path_mecca_solstice():
    schedule = schedule_from_formula(MECCA, SOLSTICE, tz=TZ3)
    assert schedule.source == "formula"
    assert schedule.sunrise == datetime(2024, 6, 21, 5, 39, tzinfo=TZ3)
    assert schedule.dhuhr == datetime(2024, 6, 21, 12, 22, tzinfo=TZ3)
    assert schedule.maghrib == datetime(2024, 6, 21, 19, 6, tzinfo=TZ3)
    assert abs(schedule.fajr - datetime(2024, 6, 21, 4, 14, tzinfo=TZ3)) <= timedelta(minutes=1)
    assert abs(schedule.isha - datetime(2024, 6, 21, 20, 26, tzinfo=TZ3)) <= timedelta(minutes=1)
    assert abs(schedule.asr - datetime(2024, 6, 21, 15, 42, tzinfo=TZ3)) <= timedelta(minutes=2)


def test_formula_path_is_whole_minutes():
    schedule = schedule_from_formula(MECCA, SOLSTICE, tz=TZ3)
    for _, moment in schedule.items():
        assert moment.second == 0
        assert moment.microsecond == 0


def test_paths_agree_on_solar_events(twilight):
    anchored = schedule_from_twilight(MECCA, SOLSTICE, twilight)
    formula = schedule_from_formula(MECCA, SOLSTICE, tz=TZ3)
    for name in ("sunrise", "dhuhr", "asr", "maghrib"):
        assert abs(getattr(anchored, name) - getattr(formula, name)) <= timedelta(minutes=5)


@pytest.mark.parametrize("latitude", [-45.0, -30.0, -10.0, 0.5, 21.4225, 40.0, 45.0])
@pytest.mark.parametrize("day", [date(2024, 3, 20), date(2024, 6, 21), date(2024, 9, 22), date(2024, 12, 21)])
def test_formula_schedule_is_ordered(latitude, day):
    coord = GeoCoordinate(latitude=latitude, longitude=45.0)
    assert schedule_from_formula(coord, day, tz=TZ3).is_ordered()


def test_deterministic():
    first = schedule_from_formula(MECCA, SOLSTICE, tz=TZ3)
    assert schedule_from_formula(MECCA, SOLSTICE, tz=TZ3) == first


def test_hanafi_asr_is_later(twilight):
    for build in (
        lambda f: schedule_from_formula(MECCA, SOLSTICE, asr_factor=f, tz=TZ3),
        lambda f: schedule_from_twilight(MECCA, SOLSTICE, twilight, asr_factor=f),
    ):
        standard = build(AsrMethod.STANDARD)
        hanafi = build(AsrMethod.HANAFI)
        assert hanafi.asr > standard.asr
        assert hanafi.asr_factor == 2
        assert hanafi.fajr == standard.fajr
        assert hanafi.isha == standard.isha


def test_bad_asr_factor():
    with pytest.raises(ValueError, match="asr_factor"):
        schedule_from_formula(MECCA, SOLSTICE, asr_factor=3, tz=TZ3)


def test_formula_polar_summer():
    with pytest.raises(PolarUndefinedError):
        schedule_from_formula(GeoCoordinate(latitude=70.0, longitude=25.0), SOLSTICE, tz=TZ3)


def test_formula_undefined_fajr_at_high_latitude():
    # The sun never gets 18° below the horizon in a London June night
    with pytest.raises(PolarUndefinedError):
        schedule_from_formula(GeoCoordinate(latitude=55.0, longitude=0.1), SOLSTICE, tz=TZ3)


def test_twilight_path_at_high_latitude(twilight):
    # With boundaries supplied, only Asr needs a formula and it is defined at 70°N
    north = GeoCoordinate(latitude=70.0, longitude=25.0)
    schedule = schedule_from_twilight(north, SOLSTICE, twilight)
    assert schedule.fajr == twilight.astronomical_dawn - timedelta(minutes=20)
    assert schedule.asr > schedule.dhuhr


def test_dispatch(twilight):
    assert calculate_prayer_schedule(MECCA, SOLSTICE, twilight).source == "twilight"
    assert calculate_prayer_schedule(MECCA, SOLSTICE, tz=TZ3).source == "formula"


NEW_YORK = ZoneInfo("America/New_York")
NYC = GeoCoordinate(latitude=40.7128, longitude=-74.0060)
SPRING_FORWARD = date(2024, 3, 10)


def test_formula_path_on_dst_day_in_named_zone():
    schedule = schedule_from_formula(NYC, SPRING_FORWARD, tz=NEW_YORK)
    assert schedule.dhuhr == datetime(2024, 3, 10, 13, 7, tzinfo=NEW_YORK)
    for _, moment in schedule.items():
        assert moment.utcoffset() == timedelta(hours=-4)


def test_formula_path_on_dst_day_in_system_zone(new_york_system_zone):
    system = schedule_from_formula(NYC, SPRING_FORWARD)
    named = schedule_from_formula(NYC, SPRING_FORWARD, tz=NEW_YORK)
    assert (system.dhuhr.hour, system.dhuhr.minute) == (13, 7)
    for (key, moment), (_, expected) in zip(system.items(), named.items()):
        assert moment.utcoffset() == timedelta(hours=-4), key
        assert moment == expected, key


@pytest.mark.parametrize("latitude", [45.0, 46.0, 47.0, 48.0, -48.0])
def test_ordered_up_to_fajr_cutoff_at_solstice(latitude):
    # June solstice in the north, December solstice in the south
    day = SOLSTICE if latitude > 0 else date(2024, 12, 21)
    coord = GeoCoordinate(latitude=latitude, longitude=10.0)
    assert schedule_from_formula(coord, day, tz=TZ3).is_ordered()


@pytest.mark.parametrize("latitude", [49.0, 59.9])
def test_no_fajr_beyond_cutoff_at_solstice(latitude):
    # The sun stays above 18° of depression all night past about 48.6°
    coord = GeoCoordinate(latitude=latitude, longitude=10.0)
    with pytest.raises(PolarUndefinedError):
        schedule_from_formula(coord, SOLSTICE, tz=TZ3)
