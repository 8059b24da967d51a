# tests/test_formatting.py
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

import pytest
import pytz
from pytz import utc

from salattimes.formatting import (
    format_coordinate,
    format_date,
    format_time,
    month_label,
    resolve_timezone,
    short_timezone,
    to_local,
)
from salattimes.i18n import event_labels, t
from salattimes.models import PrayerEvent

NOON_UTC = datetime(2025, 1, 15, 12, 18, tzinfo=utc)


def test_format_time_in_zone() -> None:
    assert format_time(NOON_UTC, "America/New_York") == "7:18 AM"
    assert format_time(NOON_UTC, "Asia/Tokyo") == "9:18 PM"
    assert format_time(datetime(2025, 1, 15, 0, 5, tzinfo=utc), "UTC") == "12:05 AM"
    assert format_time(datetime(2025, 1, 15, 12, 0, tzinfo=utc), "UTC") == "12:00 PM"


def test_format_time_placeholder() -> None:
    assert format_time(None, "UTC") == "—"
    assert format_time(None, "UTC", placeholder="--:--") == "--:--"


def test_daylight_saving_is_applied() -> None:
    summer = datetime(2025, 7, 15, 12, 0, tzinfo=utc)
    assert to_local(summer, "America/New_York").utcoffset() == timedelta(hours=-4)
    assert short_timezone(summer, "America/New_York") == "EDT"
    assert short_timezone(NOON_UTC, "America/New_York") == "EST"


@pytest.mark.parametrize(
    "name, offset",
    [("+05:30", timedelta(hours=5, minutes=30)), ("UTC-3", timedelta(hours=-3))],
)
def test_fixed_offset_fallback(name: str, offset: timedelta) -> None:
    assert to_local(NOON_UTC, name).utcoffset() == offset


@pytest.mark.parametrize("name", ["UTC+24", "+30:00", "-12:75", "GMT-99"])
def test_out_of_range_offset_falls_back_to_utc(name: str, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="salattimes.formatting"):
        assert resolve_timezone(name) is pytz.utc
    assert "falling back to UTC" in caplog.text
    assert format_time(NOON_UTC, name) == "12:18 PM"


def test_unknown_zone_falls_back_to_utc(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="salattimes.formatting"):
        tz = resolve_timezone("Mars/Olympus_Mons")
    assert tz is pytz.utc
    assert "falling back to UTC" in caplog.text
    assert format_time(NOON_UTC, "Mars/Olympus_Mons") == "12:18 PM"


def test_format_date_and_month_label() -> None:
    assert format_date(date(2025, 1, 15)) == "Wednesday, January 15, 2025"
    assert format_date(date(2025, 3, 2)) == "Sunday, March 2, 2025"
    assert month_label(2025, 2) == "February 2025"


def test_format_coordinate() -> None:
    assert format_coordinate(-74.006, "E", "W") == "74.0060° W"
    assert format_coordinate(40.7128, "N", "S") == "40.7128° N"
    assert format_coordinate(0.0, "N", "S") == "0.0000° N"


# ---------- i18n ----------


def test_translation_fallbacks() -> None:
    assert t("fajr", "ar") == "الفجر"
    assert t("fajr", "fr") == "Fajr"
    assert t("no_such_key", "en") == "no_such_key"


def test_event_labels_cover_every_event() -> None:
    for lang in ("en", "ar"):
        labels = event_labels(lang)
        assert set(labels) == set(PrayerEvent)
        assert all(labels.values())
    assert event_labels()[PrayerEvent.MAGHRIB] == "Maġrib"


def test_templates_format() -> None:
    assert t("qibla", "en").format(bearing=58.4812) == "Qibla 58.5° from north"
    assert t("next_event", "en").format(label="Fajr", remaining="1h 2m 3s") == "Next: Fajr in 1h 2m 3s"
