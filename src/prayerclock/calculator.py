"""Prayer-time calculation, either anchored on twilight data or from closed-form formulas."""

from datetime import date, timedelta, tzinfo

from prayerclock.localtime import at_local_hours, utc_offset_hours
from prayerclock.models import AsrMethod, GeoCoordinate, PrayerSchedule, TwilightBoundaries
from prayerclock.solar import (
    FAJR_ZENITH,
    ISHA_ZENITH,
    SUNRISE_ZENITH,
    asr_offset_hours,
    day_of_year,
    hour_angle,
    solar_declination,
    solar_noon_hours,
)


def _check_asr_factor(asr_factor: int) -> AsrMethod:
    try:
        return AsrMethod(asr_factor)
    except ValueError:
        raise ValueError(f"asr_factor must be 1 or 2, got {asr_factor!r}") from None


def fajr_adjustment(latitude: float) -> timedelta:
    """Shift applied to astronomical dawn, by latitude band."""
    abs_lat = abs(latitude)
    if abs_lat > 65:
        return timedelta(minutes=-20)
    if 15 < abs_lat < 30:
        return timedelta(minutes=-10)
    return timedelta(minutes=-5)


def isha_adjustment(latitude: float) -> timedelta:
    """Shift applied to astronomical dusk; mirror of the Fajr shift."""
    return -fajr_adjustment(latitude)


def schedule_from_twilight(
    coord: GeoCoordinate,
    day: date,
    twilight: TwilightBoundaries,
    asr_factor: int = AsrMethod.STANDARD,
) -> PrayerSchedule:
    """Anchor the schedule on externally supplied twilight boundaries.

    Dhuhr, Sunrise and Maghrib are the solar noon, sunrise and sunset unchanged;
    Fajr and Isha are astronomical dawn/dusk shifted per latitude band; Asr is
    offset from Dhuhr by the shadow-length model.

    The Asr offset is the hour angle at which the sun sinks to the shadow angle
    atan(1 / (factor + tan|lat - decl|)), the same as the formula path. Reading that
    angle directly as degrees / 15 would give 3 h for the standard factor and about
    1.8 h for Hanafi at an overhead noon sun, putting Hanafi Asr first.

    Raises:
        PolarUndefinedError: The sun never reaches the Asr altitude after noon.
        ValueError: asr_factor is not 1 or 2.
    """
    factor = _check_asr_factor(asr_factor)
    declination = solar_declination(day_of_year(day))
    dhuhr = twilight.solar_noon
    asr = dhuhr + timedelta(
        hours=asr_offset_hours(coord.latitude, declination, factor)
    )
    return PrayerSchedule(
        coordinate=coord,
        day=day,
        fajr=twilight.astronomical_dawn + fajr_adjustment(coord.latitude),
        sunrise=twilight.sunrise,
        dhuhr=dhuhr,
        asr=asr,
        maghrib=twilight.sunset,
        isha=twilight.astronomical_dusk + isha_adjustment(coord.latitude),
        asr_factor=factor,
        source="twilight",
    )


def schedule_from_formula(
    coord: GeoCoordinate,
    day: date,
    asr_factor: int = AsrMethod.STANDARD,
    tz: tzinfo | None = None,
) -> PrayerSchedule:
    """Derive the whole schedule from first-principles solar formulas.

    Every instant is solar noon plus or minus an hour angle for its zenith distance,
    rounded to the minute.

    Args:
        coord: Observer position.
        day: Local calendar date.
        asr_factor: 1 for standard, 2 for Hanafi.
        tz: Local zone. None = execution environment's local zone.

    Raises:
        PolarUndefinedError: Continuous day or night makes an instant undefined.
        ValueError: asr_factor is not 1 or 2.
    """
    factor = _check_asr_factor(asr_factor)
    doy = day_of_year(day)
    declination = solar_declination(doy)
    lat = coord.latitude

    noon = solar_noon_hours(coord.longitude, doy, utc_offset_hours(day, tz))
    day_arc = hour_angle(lat, declination, SUNRISE_ZENITH) / 15
    fajr_arc = hour_angle(lat, declination, FAJR_ZENITH) / 15
    isha_arc = hour_angle(lat, declination, ISHA_ZENITH) / 15
    asr_arc = asr_offset_hours(lat, declination, factor)

    return PrayerSchedule(
        coordinate=coord,
        day=day,
        fajr=at_local_hours(day, noon - fajr_arc, tz),
        sunrise=at_local_hours(day, noon - day_arc, tz),
        dhuhr=at_local_hours(day, noon, tz),
        asr=at_local_hours(day, noon + asr_arc, tz),
        maghrib=at_local_hours(day, noon + day_arc, tz),
        isha=at_local_hours(day, noon + isha_arc, tz),
        asr_factor=factor,
        source="formula",
    )


def calculate_prayer_schedule(
    coord: GeoCoordinate,
    day: date,
    twilight: TwilightBoundaries | None = None,
    asr_factor: int = AsrMethod.STANDARD,
    tz: tzinfo | None = None,
) -> PrayerSchedule:
    """Top-level entry point: pick the strategy by whether twilight data is available.

    The result's `source` tells the caller which one ran; "formula" means reduced
    accuracy. tz only matters for the formula path, since twilight data is already
    in local time.
    """
    if twilight is None:
        return schedule_from_formula(coord, day, asr_factor=asr_factor, tz=tz)
    return schedule_from_twilight(coord, day, twilight, asr_factor=asr_factor)
