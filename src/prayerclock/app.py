"""PrayerClock — Streamlit app showing today's prayer times on a 24-hour dial."""

import html
from datetime import timedelta

import streamlit as st
from dotenv import load_dotenv
from streamlit_js_eval import get_geolocation, streamlit_js_eval

load_dotenv()

from prayerclock.clock import ClockState, load_state, read_clock, roll_over  # noqa: E402
from prayerclock.config import load_settings  # noqa: E402
from prayerclock.geocode import GeocodingError, geocode_place  # noqa: E402
from prayerclock.i18n import prayer_label, t  # noqa: E402
from prayerclock.localtime import now as local_now  # noqa: E402
from prayerclock.models import AsrMethod, GeoCoordinate, InvalidLocation  # noqa: E402
from prayerclock.periods import compute_day_periods  # noqa: E402
from prayerclock.renderers.plotly_dial import render_dial  # noqa: E402
from prayerclock.solar import PolarUndefinedError  # noqa: E402
from prayerclock.twilight import SunriseSunsetClient  # noqa: E402

settings = load_settings()

# --- Language detection (browser-first via streamlit-js-eval) ---
# navigator.language is read once and cached in session_state.
# On the first run the JS call returns None; the rerun triggered by
# streamlit_js_eval fills it in, at which point _lang is set correctly.
if "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ar" if _browser_lang.lower().startswith("ar") else "en"

_lang: str = st.session_state.get("lang", "en")

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="☾",
    layout="centered",
    initial_sidebar_state="collapsed",
)

# --- Session state initialization ---
if "coordinate" not in st.session_state:
    st.session_state.coordinate = None
if "place_display" not in st.session_state:
    st.session_state.place_display = ""
if "clock_state" not in st.session_state:
    st.session_state.clock_state = None
if "error_msg" not in st.session_state:
    st.session_state.error_msg = None
if "notice" not in st.session_state:
    st.session_state.notice = None
if "hanafi" not in st.session_state:
    st.session_state.hanafi = settings.asr_method == AsrMethod.HANAFI

st.markdown(
    """
    <style>
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #0a0a1e !important;
    }
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    label, [data-testid="stWidgetLabel"] p {
        color: #aaaaaa !important;
        font-size: 0.85rem !important;
    }
    .overlay-box {
        background: rgba(0, 0, 0, 0.45);
        border-radius: 12px;
        padding: 1rem 1.4rem;
        color: #e8e8e8;
        margin-bottom: 0.5rem;
    }
    .period-name { font-size: 1.6rem; color: #ffffff; margin: 0.2rem 0; }
    .muted { color: #999999; font-size: 0.8rem; text-transform: uppercase; }
    </style>
    """,
    unsafe_allow_html=True,
)


def _provider() -> SunriseSunsetClient:
    return SunriseSunsetClient(
        base_url=settings.twilight_api_url, timeout=settings.twilight_timeout
    )


def _asr_factor() -> AsrMethod:
    return AsrMethod.HANAFI if st.session_state.hanafi else AsrMethod.STANDARD


def _refresh_state(coord: GeoCoordinate) -> None:
    """Recompute the schedule for coord and today; errors become a message, not a crash."""
    st.session_state.error_msg = None
    try:
        st.session_state.clock_state = load_state(
            coord,
            local_now().date(),
            provider=_provider(),
            asr_factor=_asr_factor(),
        )
        st.session_state.coordinate = coord
    except PolarUndefinedError as e:
        st.session_state.clock_state = None
        st.session_state.error_msg = t("error_polar", _lang).format(error=html.escape(str(e)))


# --- Device geolocation, Mecca when unavailable ---
if st.session_state.coordinate is None:
    _geo = get_geolocation(component_key="_geo_detect")
    if _geo is not None:
        coords = _geo.get("coords") if isinstance(_geo, dict) else None
        try:
            if not coords:
                raise InvalidLocation("geolocation unavailable")
            _refresh_state(
                GeoCoordinate(latitude=coords["latitude"], longitude=coords["longitude"])
            )
        except InvalidLocation:
            st.session_state.notice = t("default_location", _lang)
            _refresh_state(
                GeoCoordinate(
                    latitude=settings.default_latitude,
                    longitude=settings.default_longitude,
                )
            )

# --- Location input ---
col1, col2 = st.columns([4, 1])
with col1:
    place = st.text_input(t("label_place", _lang), value=st.session_state.place_display)
with col2:
    st.markdown("<div style='height:1.9rem'></div>", unsafe_allow_html=True)
    search = st.button(t("btn_search", _lang), use_container_width=True)

_current: GeoCoordinate | None = st.session_state.coordinate
col3, col4, col5 = st.columns([2, 2, 1])
with col3:
    lat_val = st.number_input(
        t("label_latitude", _lang),
        min_value=-90.0,
        max_value=90.0,
        value=_current.latitude if _current else settings.default_latitude,
        format="%.4f",
    )
with col4:
    lng_val = st.number_input(
        t("label_longitude", _lang),
        min_value=-180.0,
        max_value=180.0,
        value=_current.longitude if _current else settings.default_longitude,
        format="%.4f",
    )
with col5:
    st.markdown("<div style='height:1.9rem'></div>", unsafe_allow_html=True)
    hanafi = st.toggle(t("label_hanafi", _lang), value=st.session_state.hanafi)

if search and place:
    try:
        found = geocode_place(
            place, base_url=settings.nominatim_url, user_agent=settings.user_agent
        )
        st.session_state.place_display = found.display_name
        st.session_state.notice = None
        _refresh_state(found.coordinate)
    except GeocodingError as e:
        st.session_state.error_msg = t("error_address", _lang).format(error=html.escape(str(e)))
    st.rerun()

if _current is not None and (
    (lat_val, lng_val) != (_current.latitude, _current.longitude)
    or hanafi != st.session_state.hanafi
):
    st.session_state.hanafi = hanafi
    try:
        _refresh_state(GeoCoordinate(latitude=lat_val, longitude=lng_val))
    except InvalidLocation as e:
        st.session_state.error_msg = t("error_location", _lang).format(error=html.escape(str(e)))
    st.rerun()

# --- Messages ---
if st.session_state.notice:
    st.markdown(
        f"<div class='overlay-box'>{st.session_state.notice}</div>", unsafe_allow_html=True
    )
if st.session_state.error_msg:
    st.markdown(
        f"<div class='overlay-box' style='border:1px solid #ff6b6b; color:#ff9999;'>"
        f"{st.session_state.error_msg}</div>",
        unsafe_allow_html=True,
    )


# --- Dial + current period, re-resolved every second ---
@st.fragment(run_every="1s")
def _clock_panel() -> None:
    state: ClockState | None = st.session_state.clock_state
    if state is None:
        st.markdown(f"<p class='muted'>{t('loading', _lang)}…</p>", unsafe_allow_html=True)
        return

    now = local_now()
    try:
        state = roll_over(state, now, provider=_provider())
    except PolarUndefinedError as e:
        st.session_state.error_msg = t("error_polar", _lang).format(error=html.escape(str(e)))
        return
    st.session_state.clock_state = state

    buffer = timedelta(minutes=settings.period_buffer_minutes)
    try:
        reading = read_clock(state, now, buffer=buffer)
    except PolarUndefinedError as e:
        st.session_state.error_msg = t("error_polar", _lang).format(error=html.escape(str(e)))
        return

    periods = compute_day_periods(state.schedule, state.twilight)
    st.plotly_chart(
        render_dial(periods, now=now, lang=_lang),
        use_container_width=False,
        config={"displayModeBar": False},
    )

    seconds = int(reading.remaining.total_seconds())
    remaining = f"{seconds // 3600:02d}:{seconds % 3600 // 60:02d}:{seconds % 60:02d}"
    st.markdown(
        f"<div class='overlay-box'>"
        f"<div class='muted'>{t('current_period', _lang)}</div>"
        f"<div class='period-name'>{prayer_label(reading.period, _lang)}</div>"
        f"<div>{t('next_prayer', _lang)}: {prayer_label(reading.next.name, _lang)} "
        f"({reading.next.time:%H:%M})</div>"
        f"<div>{t('time_remaining', _lang)}: {remaining}</div>"
        f"</div>",
        unsafe_allow_html=True,
    )
    if state.warning:
        st.caption(state.warning)

    cols = st.columns(6)
    for col, (key, moment) in zip(cols, state.schedule.items()):
        col.metric(prayer_label(key, _lang), f"{moment:%H:%M}")

    if state.twilight is not None:
        tw = state.twilight
        with st.expander(t("twilight_title", _lang)):
            st.markdown(
                f"| | Dawn | Dusk |\n|---|---|---|\n"
                f"| Astronomical | {tw.astronomical_dawn:%H:%M} | {tw.astronomical_dusk:%H:%M} |\n"
                f"| Nautical | {tw.nautical_dawn:%H:%M} | {tw.nautical_dusk:%H:%M} |\n"
                f"| Civil | {tw.civil_dawn:%H:%M} | {tw.civil_dusk:%H:%M} |\n"
                f"| Sun | {tw.sunrise:%H:%M} | {tw.sunset:%H:%M} |\n"
            )


_clock_panel()
