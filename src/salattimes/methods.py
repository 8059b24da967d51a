"""Named calculation methods and helpers to build parameters from them."""

import math
from dataclasses import dataclass, field
from types import MappingProxyType

from salattimes.models import (
    CalculationParameters,
    HighLatitudeRule,
    Madhab,
    PrayerAdjustments,
    Rounding,
    Shafaq,
)


class UnknownMethodError(ValueError):
    """Method name is not one of METHOD_PRESETS."""


@dataclass(frozen=True)
class MethodPreset:
    label: str  # Display label for settings forms
    fajr_angle: float
    isha_angle: float
    isha_interval: int = 0
    method_adjustments: PrayerAdjustments = field(default_factory=PrayerAdjustments)
    rounding: Rounding = Rounding.NEAREST


METHOD_PRESETS: MappingProxyType[str, MethodPreset] = MappingProxyType(
    {
        "Other": MethodPreset("Nautical Twilight (12°, 12°)", 12.0, 12.0),
        "MuslimWorldLeague": MethodPreset(
            "Muslim World League (18°, 17°)",
            18.0,
            17.0,
            method_adjustments=PrayerAdjustments(dhuhr=1),
        ),
        "Egyptian": MethodPreset(
            "Egyptian General Authority (19.5°, 17.5°)",
            19.5,
            17.5,
            method_adjustments=PrayerAdjustments(dhuhr=1),
        ),
        "Karachi": MethodPreset(
            "Karachi - University of Islamic Sciences (18°, 18°)",
            18.0,
            18.0,
            method_adjustments=PrayerAdjustments(dhuhr=1),
        ),
        "UmmAlQura": MethodPreset(
            "Umm al-Qura - Makkah (18.5°, 90 min)", 18.5, 0.0, isha_interval=90
        ),
        "Dubai": MethodPreset(
            "Dubai (18.2°, 18.2°)",
            18.2,
            18.2,
            method_adjustments=PrayerAdjustments(sunrise=-3, dhuhr=3, asr=3, maghrib=3),
        ),
        "MoonsightingCommittee": MethodPreset(
            "Moonsighting Committee Worldwide (18°, 18°)",
            18.0,
            18.0,
            method_adjustments=PrayerAdjustments(dhuhr=5, maghrib=3),
        ),
        "NorthAmerica": MethodPreset(
            "North America - ISNA (15°, 15°)",
            15.0,
            15.0,
            method_adjustments=PrayerAdjustments(dhuhr=1),
        ),
        "Kuwait": MethodPreset("Kuwait (18°, 17.5°)", 18.0, 17.5),
        "Qatar": MethodPreset("Qatar (18°, 90 min)", 18.0, 0.0, isha_interval=90),
        "Singapore": MethodPreset(
            "Singapore (20°, 18°)",
            20.0,
            18.0,
            method_adjustments=PrayerAdjustments(dhuhr=1),
            rounding=Rounding.UP,
        ),
        "Turkey": MethodPreset(
            "Turkey - Diyanet (18°, 17°)",
            18.0,
            17.0,
            method_adjustments=PrayerAdjustments(sunrise=-7, dhuhr=5, asr=4, maghrib=7),
        ),
    }
)

_METHOD_TOLERANCE = 0.01


def get_preset(method: str) -> MethodPreset:
    try:
        return METHOD_PRESETS[method]
    except KeyError:
        raise UnknownMethodError(f"Unknown calculation method: {method}") from None


def method_labels() -> dict[str, str]:
    return {name: preset.label for name, preset in METHOD_PRESETS.items()}


def _finite_or(value: float | None, fallback: float) -> float:
    if value is None or not math.isfinite(value):
        return fallback
    return value


def parameters_for(
    method: str = "Other",
    fajr_angle: float | None = None,
    isha_angle: float | None = None,
    isha_interval: float | None = None,
    madhab: Madhab = Madhab.SHAFI,
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_THE_NIGHT,
    shafaq: Shafaq = Shafaq.GENERAL,
    adjustments: PrayerAdjustments | None = None,
) -> CalculationParameters:
    """Build CalculationParameters from a preset with optional overrides.

    Missing or non-finite overrides fall back to the preset. When an Isha
    interval is in effect the preset's Isha angle is kept, since the angle is
    unused.

    Raises:
        UnknownMethodError: ``method`` is not a known preset name.
    """
    preset = get_preset(method)
    interval = int(_finite_or(isha_interval, preset.isha_interval))
    isha = _finite_or(isha_angle, preset.isha_angle)
    if interval > 0:
        isha = preset.isha_angle
    return CalculationParameters(
        method=method,
        fajr_angle=_finite_or(fajr_angle, preset.fajr_angle),
        isha_angle=isha,
        isha_interval=interval,
        madhab=madhab,
        high_latitude_rule=high_latitude_rule,
        shafaq=shafaq,
        rounding=preset.rounding,
        adjustments=adjustments or PrayerAdjustments(),
        method_adjustments=preset.method_adjustments,
    )


def detect_method(fajr_angle: float, isha_angle: float, isha_interval: float) -> str:
    """Name of the preset whose angles and interval match, else ``"Other"``."""
    for name, preset in METHOD_PRESETS.items():
        if (
            abs(preset.isha_interval - isha_interval) < _METHOD_TOLERANCE
            and abs(preset.fajr_angle - fajr_angle) < _METHOD_TOLERANCE
            and abs(preset.isha_angle - isha_angle) < _METHOD_TOLERANCE
        ):
            return name
    return "Other"
