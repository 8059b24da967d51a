"""High-latitude fallbacks for Fajr and Isha.

Two policies produce a bound when depression-angle twilight is undefined or
implausible: a portion of the night, or the Moonsighting Committee seasonal
curve. The decision helpers compare a bound against the geometric solution.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime

from salattimes.dates import add_seconds, day_of_year, days_since_solstice
from salattimes.models import CalculationParameters, Shafaq

logger = logging.getLogger(__name__)

MOONSIGHTING_COMMITTEE = "MoonsightingCommittee"


@dataclass(frozen=True)
class SeasonalCoefficients:
    """Minutes of twilight at the four seasonal anchor points."""

    a: float  # Winter solstice
    b: float  # Spring/autumn equinox
    c: float  # Mid-season
    d: float  # Summer solstice


# (base minutes, per-55°-of-latitude slope for a, b, c, d)
_MORNING = (75.0, (28.65, 19.44, 32.74, 48.1))
_EVENING: dict[Shafaq, tuple[float, tuple[float, float, float, float]]] = {
    Shafaq.GENERAL: (75.0, (25.6, 2.05, -9.21, 6.14)),
    Shafaq.AHMER: (62.0, (17.4, -7.16, 5.12, 19.44)),
    Shafaq.ABYAD: (75.0, (25.6, 7.16, 36.84, 81.84)),
}


def _coefficients(
    table: tuple[float, tuple[float, float, float, float]], latitude: float
) -> SeasonalCoefficients:
    base, slopes = table
    lat = abs(latitude)
    a, b, c, d = (base + (slope / 55.0) * lat for slope in slopes)
    return SeasonalCoefficients(a=a, b=b, c=c, d=d)


def morning_coefficients(latitude: float) -> SeasonalCoefficients:
    return _coefficients(_MORNING, latitude)


def evening_coefficients(latitude: float, shafaq: Shafaq) -> SeasonalCoefficients:
    return _coefficients(_EVENING[shafaq], latitude)


def evaluate_seasonal_adjustment(dyy: float, coeffs: SeasonalCoefficients) -> float:
    """Piecewise-linear twilight length (minutes) for ``dyy`` days since solstice.

    Segments break at 91, 137, 183, 229 and 275 days and the curve is
    continuous at every break.
    """
    a, b, c, d = coeffs.a, coeffs.b, coeffs.c, coeffs.d
    if dyy < 91:
        return a + ((b - a) / 91.0) * dyy
    if dyy < 137:
        return b + ((c - b) / 46.0) * (dyy - 91)
    if dyy < 183:
        return c + ((d - c) / 46.0) * (dyy - 137)
    if dyy < 229:
        return d + ((c - d) / 46.0) * (dyy - 183)
    if dyy < 275:
        return c + ((b - c) / 46.0) * (dyy - 229)
    return b + ((a - b) / 91.0) * (dyy - 275)


def season_adjusted_morning_twilight(
    latitude: float, day: date, sunrise: datetime | None
) -> datetime | None:
    dyy = days_since_solstice(day_of_year(day), day.year, latitude)
    adjustment = evaluate_seasonal_adjustment(dyy, morning_coefficients(latitude))
    return add_seconds(sunrise, math.floor(adjustment * -60.0 + 0.5))


def season_adjusted_evening_twilight(
    latitude: float, day: date, sunset: datetime | None, shafaq: Shafaq
) -> datetime | None:
    dyy = days_since_solstice(day_of_year(day), day.year, latitude)
    adjustment = evaluate_seasonal_adjustment(
        dyy, evening_coefficients(latitude, shafaq)
    )
    return add_seconds(sunset, math.floor(adjustment * 60.0 + 0.5))


def safe_fajr(
    parameters: CalculationParameters,
    latitude: float,
    day: date,
    sunrise: datetime | None,
    night_seconds: float,
) -> datetime | None:
    """Earliest acceptable Fajr under the configured policy."""
    if parameters.method == MOONSIGHTING_COMMITTEE:
        return season_adjusted_morning_twilight(latitude, day, sunrise)
    portion = parameters.night_portions().fajr
    return add_seconds(sunrise, -portion * night_seconds)


def safe_isha(
    parameters: CalculationParameters,
    latitude: float,
    day: date,
    sunset: datetime | None,
    night_seconds: float,
) -> datetime | None:
    """Latest acceptable Isha under the configured policy."""
    if parameters.method == MOONSIGHTING_COMMITTEE:
        return season_adjusted_evening_twilight(
            latitude, day, sunset, parameters.shafaq
        )
    portion = parameters.night_portions().isha
    return add_seconds(sunset, portion * night_seconds)


def resolve_fajr(
    geometric: datetime | None, safeguard: datetime | None
) -> datetime | None:
    """Keep the geometric Fajr unless it is undefined or earlier than the bound."""
    if geometric is None:
        logger.debug("Fajr undefined, using safeguard %s", safeguard)
        return safeguard
    if safeguard is not None and safeguard > geometric:
        logger.debug("Fajr %s earlier than safeguard %s", geometric, safeguard)
        return safeguard
    return geometric


def resolve_isha(
    geometric: datetime | None, safeguard: datetime | None
) -> datetime | None:
    """Keep the geometric Isha unless it is undefined or later than the bound."""
    if geometric is None:
        logger.debug("Isha undefined, using safeguard %s", safeguard)
        return safeguard
    if safeguard is not None and safeguard < geometric:
        logger.debug("Isha %s later than safeguard %s", geometric, safeguard)
        return safeguard
    return geometric
