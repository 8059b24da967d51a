# tests/test_methods.py
from __future__ import annotations

import math

import pytest

from salattimes.methods import (
    METHOD_PRESETS,
    UnknownMethodError,
    detect_method,
    get_preset,
    method_labels,
    parameters_for,
)
from salattimes.models import HighLatitudeRule, Madhab, PrayerAdjustments, Rounding


def test_presets_are_read_only() -> None:
    with pytest.raises(TypeError):
        METHOD_PRESETS["Custom"] = get_preset("Other")  # type: ignore[index]


def test_unknown_method_raises() -> None:
    with pytest.raises(UnknownMethodError, match="Nowhere"):
        get_preset("Nowhere")
    with pytest.raises(ValueError):
        parameters_for("Nowhere")


@pytest.mark.parametrize(
    "name, fajr, isha, interval",
    [
        ("MuslimWorldLeague", 18.0, 17.0, 0),
        ("Egyptian", 19.5, 17.5, 0),
        ("Karachi", 18.0, 18.0, 0),
        ("UmmAlQura", 18.5, 0.0, 90),
        ("NorthAmerica", 15.0, 15.0, 0),
        ("Qatar", 18.0, 0.0, 90),
        ("Other", 12.0, 12.0, 0),
    ],
)
def test_preset_angles(name: str, fajr: float, isha: float, interval: int) -> None:
    parameters = parameters_for(name)
    assert parameters.method == name
    assert parameters.fajr_angle == fajr
    assert parameters.isha_angle == isha
    assert parameters.isha_interval == interval


def test_singapore_rounds_up() -> None:
    assert parameters_for("Singapore").rounding is Rounding.UP
    assert parameters_for("MuslimWorldLeague").rounding is Rounding.NEAREST


def test_method_adjustments_come_from_preset() -> None:
    turkey = parameters_for("Turkey")
    assert turkey.method_adjustments == PrayerAdjustments(sunrise=-7, dhuhr=5, asr=4, maghrib=7)
    assert turkey.adjustments == PrayerAdjustments()


def test_overrides_replace_preset_values() -> None:
    parameters = parameters_for(
        "MuslimWorldLeague",
        fajr_angle=16.0,
        isha_angle=14.0,
        madhab=Madhab.HANAFI,
        high_latitude_rule=HighLatitudeRule.TWILIGHT_ANGLE,
        adjustments=PrayerAdjustments(isha=2),
    )
    assert (parameters.fajr_angle, parameters.isha_angle) == (16.0, 14.0)
    assert parameters.madhab is Madhab.HANAFI
    assert parameters.high_latitude_rule is HighLatitudeRule.TWILIGHT_ANGLE
    assert parameters.adjustments.isha == 2


@pytest.mark.parametrize("bad", [math.nan, math.inf, None])
def test_non_finite_overrides_fall_back(bad: float | None) -> None:
    parameters = parameters_for("Egyptian", fajr_angle=bad, isha_angle=bad, isha_interval=bad)
    assert parameters.fajr_angle == 19.5
    assert parameters.isha_angle == 17.5
    assert parameters.isha_interval == 0


def test_isha_interval_keeps_preset_isha_angle() -> None:
    parameters = parameters_for("MuslimWorldLeague", isha_angle=15.0, isha_interval=75)
    assert parameters.isha_interval == 75
    assert parameters.isha_angle == 17.0


@pytest.mark.parametrize(
    "fajr, isha, interval, expected",
    [
        (18.0, 17.0, 0, "MuslimWorldLeague"),
        (18.0, 18.0, 0, "Karachi"),
        (18.5, 0.0, 90, "UmmAlQura"),
        (18.0, 0.0, 90, "Qatar"),
        (15.004, 14.996, 0, "NorthAmerica"),
        (17.0, 17.0, 0, "Other"),
    ],
)
def test_detect_method(fajr: float, isha: float, interval: float, expected: str) -> None:
    assert detect_method(fajr, isha, interval) == expected


def test_method_labels_cover_every_preset() -> None:
    labels = method_labels()
    assert set(labels) == set(METHOD_PRESETS)
    assert labels["MuslimWorldLeague"] == "Muslim World League (18°, 17°)"
