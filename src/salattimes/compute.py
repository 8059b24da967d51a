"""Schedule assembly — solar time, safeguards and presets combined into daily timings."""

import logging
import math
from calendar import monthrange
from datetime import date, datetime, timedelta

from pytz import utc

from salattimes.dates import add_minutes, add_seconds, hours_to_datetime, round_to_minute
from salattimes.formatting import format_date, month_label
from salattimes.i18n import event_labels
from salattimes.location import geocode_address
from salattimes.models import (
    CalculationParameters,
    Coordinates,
    DailyTable,
    NightMarkers,
    ObserverContext,
    PeriodTable,
    PrayerEvent,
    PrayerSchedule,
    PrayerTimes,
    QueryInput,
    Timing,
)
from salattimes.safeguards import (
    MOONSIGHTING_COMMITTEE,
    resolve_fajr,
    resolve_isha,
    safe_fajr,
    safe_isha,
)
from salattimes.solar import SolarTime

logger = logging.getLogger(__name__)

_PRAYERS = (
    PrayerEvent.FAJR,
    PrayerEvent.SUNRISE,
    PrayerEvent.DHUHR,
    PrayerEvent.ASR,
    PrayerEvent.MAGHRIB,
    PrayerEvent.ISHA,
)

# Night events that can spill past midnight into the next civil day
_NIGHT_EVENT_COUNT = 3

# Moonsighting Committee switches to the seventh-of-the-night rule at this latitude
_MOONSIGHTING_HIGH_LATITUDE = 55


def _seconds_between(start: datetime | None, end: datetime | None) -> float:
    if start is None or end is None:
        return math.nan
    return (end - start).total_seconds()


def compute_prayer_times(
    coordinates: Coordinates,
    day: date,
    parameters: CalculationParameters,
) -> PrayerTimes:
    """Resolve the six prayer instants for one civil date.

    Args:
        coordinates: Observer position.
        day: Civil date, evaluated from its UTC midnight.
        parameters: Method angles, madhab, high-latitude policy and adjustments.

    Returns:
        PrayerTimes with UTC-aware instants. An instant is None when neither
        the geometric solution nor the safeguard is defined for this date.
    """
    solar_time = SolarTime(day, coordinates)
    tomorrow = day + timedelta(days=1)
    tomorrow_solar_time = solar_time.next_day()

    dhuhr = hours_to_datetime(solar_time.transit, day)
    sunrise = hours_to_datetime(solar_time.sunrise, day)
    sunset = hours_to_datetime(solar_time.sunset, day)
    asr = hours_to_datetime(solar_time.afternoon(parameters.madhab.shadow_length), day)
    tomorrow_sunrise = hours_to_datetime(tomorrow_solar_time.sunrise, tomorrow)
    night = _seconds_between(sunset, tomorrow_sunrise)

    moonsighting_high_latitude = (
        parameters.method == MOONSIGHTING_COMMITTEE
        and coordinates.latitude >= _MOONSIGHTING_HIGH_LATITUDE
    )

    fajr = hours_to_datetime(solar_time.hour_angle(-parameters.fajr_angle, False), day)
    if moonsighting_high_latitude:
        fajr = add_seconds(sunrise, -night / 7)
    fajr = resolve_fajr(
        fajr, safe_fajr(parameters, coordinates.latitude, day, sunrise, night)
    )

    if parameters.isha_interval > 0:
        isha = add_minutes(sunset, parameters.isha_interval)
    else:
        isha = hours_to_datetime(
            solar_time.hour_angle(-parameters.isha_angle, True), day
        )
        if moonsighting_high_latitude:
            isha = add_seconds(sunset, night / 7)
        isha = resolve_isha(
            isha, safe_isha(parameters, coordinates.latitude, day, sunset, night)
        )

    offsets = parameters.adjustments + parameters.method_adjustments
    resolved = {
        PrayerEvent.FAJR: (fajr, offsets.fajr),
        PrayerEvent.SUNRISE: (sunrise, offsets.sunrise),
        PrayerEvent.DHUHR: (dhuhr, offsets.dhuhr),
        PrayerEvent.ASR: (asr, offsets.asr),
        PrayerEvent.MAGHRIB: (sunset, offsets.maghrib),
        PrayerEvent.ISHA: (isha, offsets.isha),
    }
    final: dict[str, datetime | None] = {}
    for event, (instant, minutes) in resolved.items():
        value = round_to_minute(add_minutes(instant, minutes), parameters.rounding)
        if value is None:
            logger.info(
                "No valid %s time on %s at %s", event.value, day.isoformat(), coordinates
            )
        final[event.value] = value

    return PrayerTimes(
        date=day, coordinates=coordinates, parameters=parameters, **final
    )


def compute_night_markers(prayer_times: PrayerTimes) -> NightMarkers:
    """Middle and last third of the night between Maghrib and the next Fajr."""
    tomorrow = compute_prayer_times(
        prayer_times.coordinates,
        prayer_times.date + timedelta(days=1),
        prayer_times.parameters,
    )
    night = _seconds_between(prayer_times.maghrib, tomorrow.fajr)
    return NightMarkers(
        middle_of_the_night=round_to_minute(
            add_seconds(prayer_times.maghrib, night / 2)
        ),
        last_third_of_the_night=round_to_minute(
            add_seconds(prayer_times.maghrib, night * (2 / 3))
        ),
    )


def _sort_key(timing: Timing) -> tuple[bool, datetime]:
    return (timing.instant is None, timing.instant or datetime.max.replace(tzinfo=utc))


def compute_schedule(
    coordinates: Coordinates,
    day: date,
    parameters: CalculationParameters,
    lang: str = "en",
) -> PrayerSchedule:
    """Six prayers plus night markers for one date, ordered by instant.

    Undefined instants are placed last, in canonical order.
    """
    prayer_times = compute_prayer_times(coordinates, day, parameters)
    markers = compute_night_markers(prayer_times)
    labels = event_labels(lang)

    instants: dict[PrayerEvent, datetime | None] = {
        event: prayer_times.time_for(event) for event in _PRAYERS
    }
    instants[PrayerEvent.MIDDLE_OF_THE_NIGHT] = markers.middle_of_the_night
    instants[PrayerEvent.LAST_THIRD_OF_THE_NIGHT] = markers.last_third_of_the_night

    timings = [
        Timing(event=event, label=labels[event], instant=instant)
        for event, instant in instants.items()
    ]
    timings.sort(key=_sort_key)
    return PrayerSchedule(date=day, coordinates=coordinates, timings=tuple(timings))


def daily(
    coordinates: Coordinates,
    day: date,
    parameters: CalculationParameters,
    lang: str = "en",
    now: datetime | None = None,
) -> DailyTable:
    """Build one day of the timetable.

    Args:
        coordinates: Observer position.
        day: Civil date.
        parameters: Calculation parameters.
        lang: Label language ('en' or 'ar').
        now: Reference instant for ``next_event_time``; defaults to the current time.

    Returns:
        DailyTable with the schedule and the first event after ``now``.
    """
    schedule = compute_schedule(coordinates, day, parameters, lang=lang)
    if now is None:
        now = datetime.now(utc)
    upcoming = _next_timing(schedule.timings, now)
    return DailyTable(
        date_label=format_date(day),
        schedule=schedule,
        next_event_time=upcoming.instant if upcoming else None,
    )


def monthly(
    coordinates: Coordinates,
    year: int,
    month: int,
    parameters: CalculationParameters,
    lang: str = "en",
    now: datetime | None = None,
) -> PeriodTable:
    """One DailyTable per day of ``month``."""
    _, last_day = monthrange(year, month)
    days = tuple(
        daily(coordinates, date(year, month, d), parameters, lang=lang, now=now)
        for d in range(1, last_day + 1)
    )
    return PeriodTable(label=month_label(year, month), days=days)


def yearly(
    coordinates: Coordinates,
    year: int,
    parameters: CalculationParameters,
    lang: str = "en",
    now: datetime | None = None,
) -> PeriodTable:
    days: list[DailyTable] = []
    current = date(year, 1, 1)
    while current.year == year:
        days.append(daily(coordinates, current, parameters, lang=lang, now=now))
        current += timedelta(days=1)
    return PeriodTable(label=str(year), days=tuple(days))


def _next_timing(timings: tuple[Timing, ...], at: datetime) -> Timing | None:
    for timing in timings:
        if timing.instant is not None and timing.instant > at:
            return timing
    return None


def active_event(timings: tuple[Timing, ...], at: datetime) -> PrayerEvent | None:
    """The most recent event that has started by ``at``.

    Before the day's first event, the night events (the last three timings)
    are checked as if they happened yesterday, so the early morning still
    resolves to Isha or a night marker.
    """
    defined = [t for t in timings if t.instant is not None]
    if not defined:
        return None

    for timing in reversed(defined):
        if timing.instant <= at:
            return timing.event

    for timing in reversed(defined[-_NIGHT_EVENT_COUNT:]):
        if timing.instant - timedelta(days=1) <= at:
            return timing.event

    return defined[-1].event


def next_event(timings: tuple[Timing, ...], at: datetime) -> PrayerEvent | None:
    upcoming = _next_timing(timings, at)
    return upcoming.event if upcoming else None


def time_until_next(timings: tuple[Timing, ...], at: datetime) -> timedelta | None:
    upcoming = _next_timing(timings, at)
    return upcoming.instant - at if upcoming else None


def format_time_remaining(remaining: timedelta) -> str:
    """Format as ``"Xh Ym Zs"``."""
    total = int(remaining.total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}h {minutes}m {seconds}s"


def run(
    query: QueryInput,
    parameters: CalculationParameters,
    lang: str = "en",
) -> tuple[ObserverContext, DailyTable]:
    """Top-level entry point: takes a QueryInput and returns its timetable day.

    Args:
        query: User input (address, date string).
        parameters: Calculation parameters.
        lang: Label language ('en' or 'ar').

    Returns:
        The resolved observer context and the DailyTable for the requested date.

    Raises:
        GeocodingError: When the address or its timezone cannot be resolved.
    """
    context = geocode_address(query.address)
    day = datetime.strptime(query.when, "%Y-%m-%d").date()
    return context, daily(context.coordinates, day, parameters, lang=lang)
