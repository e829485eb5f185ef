"""Simple two-language (en/ar) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "en": "Prayer Clock",
        "ar": "ساعة الصلاة",
    },
    "label_place": {
        "en": "City or address",
        "ar": "المدينة أو العنوان",
    },
    "label_latitude": {
        "en": "Latitude",
        "ar": "خط العرض",
    },
    "label_longitude": {
        "en": "Longitude",
        "ar": "خط الطول",
    },
    "label_hanafi": {
        "en": "Hanafi Asr",
        "ar": "العصر الحنفي",
    },
    "btn_search": {
        "en": "Search",
        "ar": "بحث",
    },
    "current_period": {
        "en": "Current Period",
        "ar": "الوقت الحالي",
    },
    "next_prayer": {
        "en": "Next Prayer",
        "ar": "الصلاة القادمة",
    },
    "time_remaining": {
        "en": "Time Remaining",
        "ar": "الوقت المتبقي",
    },
    "twilight_title": {
        "en": "Twilight Periods",
        "ar": "أوقات الشفق",
    },
    "loading": {
        "en": "Calculating prayer times",
        "ar": "جارٍ حساب أوقات الصلاة",
    },
    "default_location": {
        "en": "Could not get location. Using Mecca.",
        "ar": "تعذر تحديد الموقع. نستخدم مكة المكرمة.",
    },
    "error_address": {
        "en": "Address not found. Try a more specific address. ({error})",
        "ar": "لم يتم العثور على العنوان. جرّب عنوانًا أدق. ({error})",
    },
    "error_location": {
        "en": "Invalid location. ({error})",
        "ar": "موقع غير صالح. ({error})",
    },
    "error_polar": {
        "en": "Prayer times are undefined here today (continuous day or night). ({error})",
        "ar": "أوقات الصلاة غير محددة هنا اليوم (نهار أو ليل متواصل). ({error})",
    },
}

# Canonical key → (English display name, Arabic name)
_PRAYER_LABELS: dict[str, tuple[str, str]] = {
    "night": ("Night", "الليل"),
    "fajr": ("Fajr", "الفجر"),
    "sunrise": ("Sunrise", "الشروق"),
    "morning": ("Morning", "الضحى"),
    "dhuhr": ("Dhuhr", "الظهر"),
    "asr": ("Asr", "العصر"),
    "maghrib": ("Maghrib", "المغرب"),
    "isha": ("Isha", "العشاء"),
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key


def prayer_label(key: str, lang: str = "en") -> str:
    """Display name for a prayer or period key ("fajr", "night", "morning", ...)."""
    labels = _PRAYER_LABELS.get(key)
    if labels is None:
        return key.capitalize()
    english, arabic = labels
    return arabic if lang == "ar" else english
