"""Clock orchestration: explicit state, the twilight fallback policy and date rollover.

State is immutable and passed around by the caller; nothing here is global.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import AsyncIterator

from prayerclock.calculator import calculate_prayer_schedule
from prayerclock.localtime import now as local_now
from prayerclock.models import (
    AsrMethod,
    GeoCoordinate,
    PeriodName,
    PrayerSchedule,
    Transition,
    TwilightBoundaries,
)
from prayerclock.periods import (
    PERIOD_BUFFER,
    next_transition,
    resolve_current_period,
    time_remaining,
)
from prayerclock.twilight import SunriseSunsetClient, TwilightProvider, TwilightUnavailable

logger = logging.getLogger(__name__)

FALLBACK_WARNING = "Twilight data unavailable. Using approximate prayer times."


@dataclass(frozen=True)
class ClockState:
    """Everything the presentation layer needs for one location and day."""

    coordinate: GeoCoordinate
    day: date
    schedule: PrayerSchedule
    twilight: TwilightBoundaries | None
    warning: str | None = None  # Set when running on the reduced-accuracy formula path
    tz: tzinfo | None = None


@dataclass(frozen=True)
class ClockReading:
    """Resolver output for one tick."""

    now: datetime
    period: PeriodName
    remaining: timedelta
    next: Transition


def _build_state(
    coord: GeoCoordinate,
    day: date,
    twilight: TwilightBoundaries | None,
    warning: str | None,
    asr_factor: int,
    tz: tzinfo | None,
) -> ClockState:
    schedule = calculate_prayer_schedule(
        coord, day, twilight, asr_factor=asr_factor, tz=tz
    )
    return ClockState(
        coordinate=coord,
        day=day,
        schedule=schedule,
        twilight=twilight,
        warning=warning,
        tz=tz,
    )


def load_state(
    coord: GeoCoordinate,
    day: date,
    provider: TwilightProvider | None = None,
    asr_factor: int = AsrMethod.STANDARD,
    tz: tzinfo | None = None,
) -> ClockState:
    """Compute the schedule for a location and day, falling back to formulas if needed.

    Args:
        coord: Observer position.
        day: Local calendar date.
        provider: Twilight source. None = formula path only, without a warning.
        asr_factor: 1 for standard, 2 for Hanafi.
        tz: Local zone. None = execution environment's local zone.

    Returns:
        ClockState; `warning` is set when the provider failed.

    Raises:
        PolarUndefinedError: The formula path has no solution at this latitude and date.
    """
    twilight: TwilightBoundaries | None = None
    warning: str | None = None
    if provider is not None:
        try:
            twilight = provider.get_twilight_boundaries(coord, day)
        except TwilightUnavailable as exc:
            logger.warning("Using formula prayer times for %s on %s: %s", coord, day, exc)
            warning = FALLBACK_WARNING
    return _build_state(coord, day, twilight, warning, asr_factor, tz)


async def load_state_async(
    coord: GeoCoordinate,
    day: date,
    client: SunriseSunsetClient,
    asr_factor: int = AsrMethod.STANDARD,
    tz: tzinfo | None = None,
) -> ClockState:
    """load_state with the twilight request awaited instead of blocking."""
    twilight: TwilightBoundaries | None = None
    warning: str | None = None
    try:
        twilight = await client.fetch(coord, day)
    except TwilightUnavailable as exc:
        logger.warning("Using formula prayer times for %s on %s: %s", coord, day, exc)
        warning = FALLBACK_WARNING
    return _build_state(coord, day, twilight, warning, asr_factor, tz)


def roll_over(
    state: ClockState, now: datetime, provider: TwilightProvider | None = None
) -> ClockState:
    """Return a fresh state if `now` is on another calendar date, else `state` itself."""
    today = now.astimezone(state.tz).date()
    if today == state.day:
        return state
    logger.info("Date changed from %s to %s, recomputing schedule", state.day, today)
    return load_state(
        state.coordinate,
        today,
        provider=provider,
        asr_factor=state.schedule.asr_factor,
        tz=state.tz,
    )


def read_clock(
    state: ClockState, now: datetime, buffer: timedelta = PERIOD_BUFFER
) -> ClockReading:
    schedule = state.schedule
    return ClockReading(
        now=now,
        period=resolve_current_period(schedule, now, buffer),
        remaining=time_remaining(schedule, now, buffer),
        next=next_transition(schedule, now, buffer=buffer),
    )


async def ticks(interval: float = 1.0, tz: tzinfo | None = None) -> AsyncIterator[datetime]:
    """Yield a fresh wall-clock reading every `interval` seconds, forever.

    Stop it by breaking out of the loop, closing the generator, or cancelling the
    task that consumes it.
    """
    while True:
        yield local_now(tz)
        await asyncio.sleep(interval)
