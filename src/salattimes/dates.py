"""Civil calendar ↔ Julian Day conversions and instant helpers."""

import math
from datetime import date, datetime, timedelta

from pytz import utc

from salattimes.models import Rounding

J2000 = 2451545.0


def julian_day(year: int, month: int, day: int, hours: float = 0.0) -> float:
    """Julian Day for a Gregorian civil date (Meeus, ch. 7).

    January and February count as months 13 and 14 of the previous year.
    """
    y = year if month > 2 else year - 1
    m = month if month > 2 else month + 12
    d = day + hours / 24

    a = int(y / 100)
    b = int(2 - a + int(a / 4))

    i0 = int(365.25 * (y + 4716))
    i1 = int(30.6001 * (m + 1))

    return i0 + i1 + d + b - 1524.5


def julian_century(jd: float) -> float:
    return (jd - J2000) / 36525


def utc_midnight(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=utc)


def hours_to_datetime(hours: float, day: date) -> datetime | None:
    """Anchor a fractional hour count to ``day``'s UTC midnight.

    Hours, minutes and seconds are each floored, so the result carries no
    sub-second part. Values outside [0, 24) roll into the adjacent day.

    Returns:
        A UTC-aware datetime, or None when ``hours`` is not finite
        (the solver had no solution).
    """
    if not math.isfinite(hours):
        return None
    hour = math.floor(hours)
    minute = math.floor((hours - hour) * 60)
    second = math.floor((hours - (hour + minute / 60)) * 3600)
    return utc_midnight(day) + timedelta(hours=hour, minutes=minute, seconds=second)


def fractional_day_to_datetime(day_fraction: float, day: date) -> datetime | None:
    return hours_to_datetime(day_fraction * 24, day)


def add_seconds(instant: datetime | None, seconds: float) -> datetime | None:
    if instant is None or not math.isfinite(seconds):
        return None
    return instant + timedelta(seconds=seconds)


def add_minutes(instant: datetime | None, minutes: float) -> datetime | None:
    return add_seconds(instant, minutes * 60)


def round_to_minute(
    instant: datetime | None, rounding: Rounding = Rounding.NEAREST
) -> datetime | None:
    """Round to a whole minute. ``UP`` always moves forward, even from :00."""
    if instant is None:
        return None
    seconds = instant.second
    if rounding is Rounding.UP:
        offset = 60 - seconds
    elif rounding is Rounding.NONE:
        offset = 0
    else:
        offset = 60 - seconds if seconds >= 30 else -seconds
    return instant.replace(microsecond=0) + timedelta(seconds=offset)


def is_leap_year(year: int) -> bool:
    if year % 4 != 0:
        return False
    if year % 100 == 0 and year % 400 != 0:
        return False
    return True


def day_of_year(day: date) -> int:
    return day.timetuple().tm_yday


def days_since_solstice(day_of_year_value: int, year: int, latitude: float) -> int:
    """Days since the most recent winter solstice of the observer's hemisphere."""
    northern_offset = 10
    southern_offset = 173 if is_leap_year(year) else 172
    days_in_year = 366 if is_leap_year(year) else 365

    if latitude >= 0:
        days_since = day_of_year_value + northern_offset
        if days_since >= days_in_year:
            days_since -= days_in_year
        return days_since

    days_since = day_of_year_value - southern_offset
    if days_since < 0:
        days_since += days_in_year
    return days_since
