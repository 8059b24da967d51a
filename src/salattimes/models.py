"""Data model definitions — explicit boundaries between input, compute, and display layers."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class Madhab(str, Enum):
    """Asr convention. The value is the shadow-length multiplier name."""

    SHAFI = "shafi"
    HANAFI = "hanafi"

    @property
    def shadow_length(self) -> int:
        return 2 if self is Madhab.HANAFI else 1


class HighLatitudeRule(str, Enum):
    MIDDLE_OF_THE_NIGHT = "middleofthenight"
    SEVENTH_OF_THE_NIGHT = "seventhofthenight"
    TWILIGHT_ANGLE = "twilightangle"


class Shafaq(str, Enum):
    """Evening twilight colour used by the Moonsighting Committee curve."""

    GENERAL = "general"
    AHMER = "ahmer"
    ABYAD = "abyad"


class Rounding(str, Enum):
    NEAREST = "nearest"
    UP = "up"
    NONE = "none"


class PrayerEvent(str, Enum):
    """Event ids in canonical daily order."""

    FAJR = "fajr"
    SUNRISE = "sunrise"
    DHUHR = "dhuhr"
    ASR = "asr"
    MAGHRIB = "maghrib"
    ISHA = "isha"
    MIDDLE_OF_THE_NIGHT = "middleOfTheNight"
    LAST_THIRD_OF_THE_NIGHT = "lastThirdOfTheNight"

    @property
    def is_fard(self) -> bool:
        """True for the five obligatory prayers."""
        return self in _FARD


_FARD = frozenset(
    {
        PrayerEvent.FAJR,
        PrayerEvent.DHUHR,
        PrayerEvent.ASR,
        PrayerEvent.MAGHRIB,
        PrayerEvent.ISHA,
    }
)


@dataclass(frozen=True)
class Coordinates:
    """Observer position. Not validated."""

    latitude: float  # Decimal degrees, north positive
    longitude: float  # Decimal degrees, east positive


@dataclass(frozen=True)
class PrayerAdjustments:
    """Per-prayer offsets in whole minutes."""

    fajr: int = 0
    sunrise: int = 0
    dhuhr: int = 0
    asr: int = 0
    maghrib: int = 0
    isha: int = 0

    def __add__(self, other: "PrayerAdjustments") -> "PrayerAdjustments":
        return PrayerAdjustments(
            fajr=self.fajr + other.fajr,
            sunrise=self.sunrise + other.sunrise,
            dhuhr=self.dhuhr + other.dhuhr,
            asr=self.asr + other.asr,
            maghrib=self.maghrib + other.maghrib,
            isha=self.isha + other.isha,
        )


@dataclass(frozen=True)
class NightPortions:
    fajr: float  # Fraction of the night before sunrise
    isha: float  # Fraction of the night after sunset


@dataclass(frozen=True)
class CalculationParameters:
    """Everything the assembler needs besides the date and the observer.

    ``isha_interval`` > 0 switches Isha to a fixed number of minutes after
    sunset and makes ``isha_angle`` irrelevant.
    """

    method: str = "Other"
    fajr_angle: float = 12.0  # Degrees below the horizon
    isha_angle: float = 12.0  # Degrees below the horizon
    isha_interval: int = 0  # Minutes after sunset, 0 = disabled
    madhab: Madhab = Madhab.SHAFI
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    shafaq: Shafaq = Shafaq.GENERAL
    rounding: Rounding = Rounding.NEAREST
    adjustments: PrayerAdjustments = field(default_factory=PrayerAdjustments)
    method_adjustments: PrayerAdjustments = field(default_factory=PrayerAdjustments)

    def night_portions(self) -> NightPortions:
        if self.high_latitude_rule is HighLatitudeRule.SEVENTH_OF_THE_NIGHT:
            return NightPortions(fajr=1 / 7, isha=1 / 7)
        if self.high_latitude_rule is HighLatitudeRule.TWILIGHT_ANGLE:
            return NightPortions(fajr=self.fajr_angle / 60, isha=self.isha_angle / 60)
        return NightPortions(fajr=1 / 2, isha=1 / 2)


@dataclass(frozen=True)
class PrayerTimes:
    """Resolved instants for one civil date. ``None`` means no valid instant."""

    date: date
    coordinates: Coordinates
    parameters: CalculationParameters
    fajr: datetime | None
    sunrise: datetime | None
    dhuhr: datetime | None
    asr: datetime | None
    maghrib: datetime | None
    isha: datetime | None

    def time_for(self, event: PrayerEvent) -> datetime | None:
        return getattr(self, event.value)


@dataclass(frozen=True)
class NightMarkers:
    middle_of_the_night: datetime | None
    last_third_of_the_night: datetime | None


@dataclass(frozen=True)
class Timing:
    """A single labelled event."""

    event: PrayerEvent
    label: str  # Display label ("Fajr", "Maġrib", ...)
    instant: datetime | None  # UTC-aware, None when undefined for this date

    @property
    def is_fard(self) -> bool:
        return self.event.is_fard


@dataclass(frozen=True)
class PrayerSchedule:
    """Ordered timings for one day. Created fresh per query, never mutated."""

    date: date
    coordinates: Coordinates
    timings: tuple[Timing, ...]

    def get(self, event: PrayerEvent) -> Timing | None:
        for timing in self.timings:
            if timing.event is event:
                return timing
        return None


@dataclass(frozen=True)
class DailyTable:
    """A schedule plus the display fields the timetable needs."""

    date_label: str  # "Wednesday, January 15, 2025"
    schedule: PrayerSchedule
    next_event_time: datetime | None


@dataclass(frozen=True)
class PeriodTable:
    label: str  # "January 2025" or "2025"
    days: tuple[DailyTable, ...]


@dataclass(frozen=True)
class ObserverContext:
    """Result of geocoding + timezone lookup. Input to schedule computation."""

    coordinates: Coordinates
    timezone: str  # IANA zone name
    address_display: str  # Label returned by the geocoder (for display)


@dataclass(frozen=True)
class QueryInput:
    """Raw user input. Not yet validated."""

    address: str
    when: str  # "YYYY-MM-DD"
