"""Display boundary: UTC instants rendered in an IANA time zone.

Time zones are only used here. All astronomy stays in UTC.
"""

import logging
import re
from datetime import date, datetime, tzinfo

import pytz

logger = logging.getLogger(__name__)

_FIXED_OFFSET_RE = re.compile(r"^(?:UTC|GMT)?\s*([+-])(\d{1,2})(?::?(\d{2}))?$", re.IGNORECASE)


def resolve_timezone(name: str) -> tzinfo:
    """Look up an IANA zone, falling back to a fixed offset or UTC.

    ``"+05:30"``, ``"UTC-3"`` and similar strings become fixed offsets.
    Anything else unknown renders in UTC. Never raises.
    """
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        match = _FIXED_OFFSET_RE.match(name.strip())
        if match:
            sign, hours, minutes = match.groups()
            hours, minutes = int(hours), int(minutes or 0)
            # pytz.FixedOffset rejects a full day or more
            if hours <= 23 and minutes <= 59:
                offset = hours * 60 + minutes
                logger.warning("Unknown time zone %r, using fixed offset", name)
                return pytz.FixedOffset(-offset if sign == "-" else offset)
        logger.warning("Unknown time zone %r, falling back to UTC", name)
        return pytz.utc


def to_local(instant: datetime, timezone_name: str) -> datetime:
    return instant.astimezone(resolve_timezone(timezone_name))


def format_time(instant: datetime | None, timezone_name: str, placeholder: str = "—") -> str:
    """12-hour local time such as ``"6:03 AM"``; ``placeholder`` for undefined instants."""
    if instant is None:
        return placeholder
    local = to_local(instant, timezone_name)
    hour = (local.hour + 11) % 12 + 1
    suffix = "PM" if local.hour >= 12 else "AM"
    return f"{hour}:{local.minute:02d} {suffix}"


def short_timezone(instant: datetime, timezone_name: str) -> str:
    """Abbreviation such as ``"EST"``; the zone name itself when there is none."""
    abbreviation = to_local(instant, timezone_name).tzname()
    return abbreviation or timezone_name


def format_date(day: date) -> str:
    """``"Wednesday, January 15, 2025"``"""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def month_label(year: int, month: int) -> str:
    return f"{date(year, month, 1):%B} {year}"


def format_coordinate(value: float, positive_label: str, negative_label: str) -> str:
    """``"43.6532° N"``"""
    direction = positive_label if value >= 0 else negative_label
    return f"{abs(value):.4f}° {direction}"
