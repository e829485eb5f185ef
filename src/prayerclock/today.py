"""CLI entry point: print a day's prayer schedule and where "now" falls in it.

    uv run prayerclock --place "Istanbul"
    uv run prayerclock --lat 21.4225 --lng 39.8262 --hanafi --save dial.png
"""

import argparse
import logging
import sys
from datetime import date, timedelta
from pathlib import Path

from dotenv import load_dotenv

from prayerclock.clock import load_state, read_clock
from prayerclock.config import Settings, load_settings
from prayerclock.ephemeris import SkyfieldTwilight
from prayerclock.geocode import GeocodingError, geocode_place
from prayerclock.i18n import prayer_label
from prayerclock.localtime import now as local_now
from prayerclock.models import AsrMethod, GeoCoordinate, InvalidLocation
from prayerclock.periods import compute_day_periods
from prayerclock.solar import PolarUndefinedError
from prayerclock.twilight import FormulaTwilight, SunriseSunsetClient, TwilightProvider

logger = logging.getLogger(__name__)


def _parse_ymd(s: str) -> date:
    y, m, d = map(int, s.split("-"))
    return date(y, m, d)


def _make_provider(name: str, settings: Settings) -> TwilightProvider | None:
    if name == "api":
        return SunriseSunsetClient(
            base_url=settings.twilight_api_url, timeout=settings.twilight_timeout
        )
    if name == "skyfield":
        return SkyfieldTwilight(settings.ephemeris_dir)
    if name == "twilight-formula":
        return FormulaTwilight()
    return None


def _format_delta(seconds: float) -> str:
    seconds = max(int(seconds), 0)
    return f"{seconds // 3600:02d}:{seconds % 3600 // 60:02d}:{seconds % 60:02d}"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="prayerclock", description="Daily prayer times and twilight periods"
    )
    where = p.add_mutually_exclusive_group()
    where.add_argument("--place", help="City or address to geocode")
    where.add_argument("--lat", type=float, help="Latitude (decimal degrees)")
    p.add_argument("--lng", type=float, help="Longitude (decimal degrees)")
    p.add_argument("--date", type=_parse_ymd, help="YYYY-MM-DD (default: today)")
    p.add_argument("--hanafi", action="store_true", help="Hanafi Asr (shadow factor 2)")
    p.add_argument(
        "--provider",
        choices=["api", "skyfield", "twilight-formula", "formula"],
        default="api",
        help="Twilight source; 'formula' skips twilight data entirely",
    )
    p.add_argument("--save", type=Path, help="Write the 24-hour dial as PNG")
    p.add_argument("--verbose", action="store_true")
    return p


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.lat is not None and args.lng is None:
        parser.error("--lat requires --lng")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()

    try:
        if args.place:
            place = geocode_place(
                args.place,
                base_url=settings.nominatim_url,
                user_agent=settings.user_agent,
            )
            coord = place.coordinate
            print(place.display_name)
        elif args.lat is not None:
            coord = GeoCoordinate(latitude=args.lat, longitude=args.lng)
        else:
            coord = GeoCoordinate(
                latitude=settings.default_latitude,
                longitude=settings.default_longitude,
            )
    except (GeocodingError, InvalidLocation) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    asr_factor = AsrMethod.HANAFI if args.hanafi else settings.asr_method
    day = args.date or local_now().date()
    try:
        state = load_state(
            coord, day, provider=_make_provider(args.provider, settings), asr_factor=asr_factor
        )
        now = local_now()
        buffer = timedelta(minutes=settings.period_buffer_minutes)
        reading = read_clock(state, now, buffer=buffer) if day == now.date() else None
    except PolarUndefinedError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if state.warning:
        print(f"warning: {state.warning}", file=sys.stderr)

    schedule = state.schedule
    print(f"{day.isoformat()}  lat={coord.latitude:.4f} lng={coord.longitude:.4f}  ({schedule.source})")
    for key, moment in schedule.items():
        print(f"  {prayer_label(key):<8} {moment:%H:%M}")

    if state.twilight is not None:
        tw = state.twilight
        print("Twilight")
        print(f"  Astronomical {tw.astronomical_dawn:%H:%M} – {tw.astronomical_dusk:%H:%M}")
        print(f"  Nautical     {tw.nautical_dawn:%H:%M} – {tw.nautical_dusk:%H:%M}")
        print(f"  Civil        {tw.civil_dawn:%H:%M} – {tw.civil_dusk:%H:%M}")
        print(f"  Solar noon   {tw.solar_noon:%H:%M}")

    if reading is not None:
        print(
            f"Now: {prayer_label(reading.period)}, "
            f"{_format_delta(reading.remaining.total_seconds())} remaining, "
            f"next {prayer_label(reading.next.name)} at {reading.next.time:%H:%M}"
        )

    if args.save:
        from prayerclock.renderers.static import save_static_dial

        periods = compute_day_periods(schedule, state.twilight)
        path = save_static_dial(periods, args.save, now=reading.now if reading else None)
        print(f"Saved: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
