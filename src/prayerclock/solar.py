"""Closed-form solar position formulas used when no twilight source is available.

Accuracy is at the level of a minute or two for latitudes away from the poles,
which is all the prayer schedule needs.
"""

import math
from datetime import date

SUNRISE_ZENITH = 90.833  # Refraction + solar radius
CIVIL_ZENITH = 96.0
NAUTICAL_ZENITH = 102.0
ASTRONOMICAL_ZENITH = 108.0
FAJR_ZENITH = 108.0  # 18° below horizon
ISHA_ZENITH = 107.0  # 17° below horizon


class PolarUndefinedError(ArithmeticError):
    """The sun never reaches the requested depression on this day (polar day or night)."""


def day_of_year(day: date) -> int:
    """Ordinal day number, 1 on January 1st."""
    return day.timetuple().tm_yday


def solar_declination(doy: int) -> float:
    """Sun declination in degrees."""
    return -23.45 * math.cos(2 * math.pi / 365 * (doy + 10))


def equation_of_time_minutes(doy: int) -> float:
    """Apparent minus mean solar time, in minutes."""
    b = 2 * math.pi * (doy - 81) / 364
    return 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


def solar_noon_hours(longitude: float, doy: int, tz_offset_hours: float) -> float:
    """Local clock time of solar transit, in decimal hours."""
    return 12 + tz_offset_hours - longitude / 15 - equation_of_time_minutes(doy) / 60


def hour_angle(latitude: float, declination: float, zenith: float) -> float:
    """Hour angle in degrees at which the sun sits at the given zenith distance.

    Args:
        latitude: Observer latitude (degrees).
        declination: Sun declination (degrees).
        zenith: Zenith distance of the sun (degrees); 90.833 for sunrise/sunset.

    Returns:
        Hour angle in degrees, in [0, 180].

    Raises:
        PolarUndefinedError: The sun does not cross that zenith distance on this day.
    """
    lat = math.radians(latitude)
    dec = math.radians(declination)
    denominator = math.cos(lat) * math.cos(dec)
    if denominator == 0:
        raise PolarUndefinedError(f"Hour angle undefined at latitude {latitude}")
    cos_h = (math.cos(math.radians(zenith)) - math.sin(lat) * math.sin(dec)) / denominator
    if not -1.0 <= cos_h <= 1.0:
        raise PolarUndefinedError(
            f"Sun never reaches zenith {zenith}° at latitude {latitude} "
            f"(declination {declination:.2f}°)"
        )
    return math.degrees(math.acos(cos_h))


def asr_shadow_angle(latitude: float, declination: float, factor: int) -> float:
    """Solar altitude in degrees at which a shadow is `factor` lengths plus the noon shadow."""
    noon_zenith = math.radians(abs(latitude - declination))
    return math.degrees(math.atan(1 / (factor + math.tan(noon_zenith))))


def asr_offset_hours(latitude: float, declination: float, factor: int) -> float:
    """Hours after solar noon at which the Asr shadow length is reached."""
    altitude = asr_shadow_angle(latitude, declination, factor)
    return hour_angle(latitude, declination, 90.0 - altitude) / 15
