"""Runtime settings read from the environment (optionally populated from .env by the entry points)."""

import os
from dataclasses import dataclass
from pathlib import Path

from prayerclock.models import AsrMethod

_ROOT = Path(__file__).parent.parent.parent

# Mecca, used when no device location is available
DEFAULT_LATITUDE = 21.4225
DEFAULT_LONGITUDE = 39.8262


@dataclass(frozen=True)
class Settings:
    twilight_api_url: str = "https://api.sunrise-sunset.org/json"
    twilight_timeout: float = 10.0  # Seconds, applied by the HTTP transport
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "PrayerClock/1.0"
    asr_method: AsrMethod = AsrMethod.STANDARD
    period_buffer_minutes: int = 10
    default_latitude: float = DEFAULT_LATITUDE
    default_longitude: float = DEFAULT_LONGITUDE
    ephemeris_dir: Path = _ROOT / "resources"


def _parse_asr_method(value: str) -> AsrMethod:
    value = value.strip().lower()
    if value in ("hanafi", "2"):
        return AsrMethod.HANAFI
    if value in ("standard", "shafi", "1"):
        return AsrMethod.STANDARD
    raise ValueError(f"ASR_METHOD must be 'standard' or 'hanafi', got {value!r}")


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build Settings from environment variables, falling back to defaults.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Raises:
        ValueError: A variable is present but malformed.
    """
    env = os.environ if environ is None else environ
    defaults = Settings()
    return Settings(
        twilight_api_url=env.get("TWILIGHT_API_URL", defaults.twilight_api_url),
        twilight_timeout=float(env.get("TWILIGHT_TIMEOUT", defaults.twilight_timeout)),
        nominatim_url=env.get("NOMINATIM_URL", defaults.nominatim_url),
        user_agent=env.get("HTTP_USER_AGENT", defaults.user_agent),
        asr_method=_parse_asr_method(env.get("ASR_METHOD", "standard")),
        period_buffer_minutes=int(
            env.get("PERIOD_BUFFER_MINUTES", defaults.period_buffer_minutes)
        ),
        default_latitude=float(env.get("DEFAULT_LATITUDE", defaults.default_latitude)),
        default_longitude=float(
            env.get("DEFAULT_LONGITUDE", defaults.default_longitude)
        ),
        ephemeris_dir=Path(env.get("EPHEMERIS_DIR", defaults.ephemeris_dir)),
    )
