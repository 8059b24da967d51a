"""Simple two-language (en/ar) translation helper."""

from salattimes.models import PrayerEvent

_STRINGS: dict[str, dict[str, str]] = {
    "fajr": {
        "en": "Fajr",
        "ar": "الفجر",
    },
    "sunrise": {
        "en": "Sunrise",
        "ar": "الشروق",
    },
    "dhuhr": {
        "en": "Dhuhr",
        "ar": "الظهر",
    },
    "asr": {
        "en": "ʿṢr",
        "ar": "العصر",
    },
    "maghrib": {
        "en": "Maġrib",
        "ar": "المغرب",
    },
    "isha": {
        "en": "ʿIshāʾ",
        "ar": "العشاء",
    },
    "middleOfTheNight": {
        "en": "1/2 Night Begins",
        "ar": "منتصف الليل",
    },
    "lastThirdOfTheNight": {
        "en": "Last 1/3 Night Begins",
        "ar": "الثلث الأخير من الليل",
    },
    "no_time": {
        "en": "—",
        "ar": "—",
    },
    "header_event": {
        "en": "Event",
        "ar": "الوقت",
    },
    "header_time": {
        "en": "Time",
        "ar": "الساعة",
    },
    "header_date": {
        "en": "Date",
        "ar": "التاريخ",
    },
    "qibla": {
        "en": "Qibla {bearing:.1f}° from north",
        "ar": "القبلة {bearing:.1f}° من الشمال",
    },
    "next_event": {
        "en": "Next: {label} in {remaining}",
        "ar": "التالي: {label} بعد {remaining}",
    },
    "error_address": {
        "en": "Address not found. Try a more specific address. ({error})",
        "ar": "تعذر العثور على العنوان. جرّب عنوانًا أدق. ({error})",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key


def event_labels(lang: str = "en") -> dict[PrayerEvent, str]:
    """Display label for every event id in ``lang``."""
    return {event: t(event.value, lang) for event in PrayerEvent}
