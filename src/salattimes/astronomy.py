"""Low-precision solar ephemeris and hour-angle solver (Meeus, Astronomical Algorithms).

All angles are in degrees. Functions of ``t`` take the Julian Century since J2000.
"""

import math

from salattimes.dates import J2000

# Sunrise/sunset altitude: 34' refraction + 16' solar semi-diameter
SOLAR_ALTITUDE = -50.0 / 60.0

# Sidereal advance per mean solar day
SIDEREAL_RATE = 360.985647


def normalize_to_scale(num: float, maximum: float) -> float:
    return num - maximum * math.floor(num / maximum)


def unwind_angle(angle: float) -> float:
    """Wrap into [0, 360)."""
    return normalize_to_scale(angle, 360.0)


def quadrant_shift_angle(angle: float) -> float:
    """Wrap into [-180, 180]."""
    if -180 <= angle <= 180:
        return angle
    return angle - 360 * math.floor(angle / 360 + 0.5)


def _sin(deg: float) -> float:
    return math.sin(math.radians(deg))


def _cos(deg: float) -> float:
    return math.cos(math.radians(deg))


def mean_solar_longitude(t: float) -> float:
    """L0, referred to the mean equinox of the date."""
    return unwind_angle(280.4664567 + 36000.76983 * t + 0.0003032 * t * t)


def mean_lunar_longitude(t: float) -> float:
    """L′, used only by the nutation series."""
    return unwind_angle(218.3165 + 481267.8813 * t)


def ascending_lunar_node_longitude(t: float) -> float:
    """Ω, longitude of the Moon's ascending node."""
    return unwind_angle(
        125.04452 - 1934.136261 * t + 0.0020708 * t * t + t**3 / 450000
    )


def mean_solar_anomaly(t: float) -> float:
    return unwind_angle(357.52911 + 35999.05029 * t - 0.0001537 * t * t)


def solar_equation_of_the_center(t: float, mean_anomaly: float) -> float:
    """C, the correction from mean to true longitude for orbital eccentricity."""
    m = math.radians(mean_anomaly)
    term1 = (1.914602 - 0.004817 * t - 0.000014 * t**2) * math.sin(m)
    term2 = (0.019993 - 0.000101 * t) * math.sin(2 * m)
    term3 = 0.000289 * math.sin(3 * m)
    return term1 + term2 + term3


def apparent_solar_longitude(t: float, mean_longitude: float) -> float:
    """λ, true longitude corrected for nutation and aberration."""
    longitude = mean_longitude + solar_equation_of_the_center(t, mean_solar_anomaly(t))
    omega = 125.04 - 1934.136 * t
    return unwind_angle(longitude - 0.00569 - 0.00478 * _sin(omega))


def mean_obliquity_of_the_ecliptic(t: float) -> float:
    return 23.439291 - 0.013004167 * t - 0.0000001639 * t**2 + 0.0000005036 * t**3


def apparent_obliquity_of_the_ecliptic(t: float, mean_obliquity: float) -> float:
    omega = 125.04 - 1934.136 * t
    return mean_obliquity + 0.00256 * _cos(omega)


def mean_sidereal_time(t: float) -> float:
    """θ0 at Greenwich for the instant ``t`` (Meeus eq. 12.4)."""
    jd = t * 36525 + J2000
    theta = (
        280.46061837
        + 360.98564736629 * (jd - J2000)
        + 0.000387933 * t * t
        - t**3 / 38710000
    )
    return unwind_angle(theta)


def nutation_in_longitude(
    solar_longitude: float, lunar_longitude: float, ascending_node: float
) -> float:
    """Δψ in degrees from the four largest periodic terms."""
    term1 = (-17.2 / 3600) * _sin(ascending_node)
    term2 = (1.32 / 3600) * _sin(2 * solar_longitude)
    term3 = (0.23 / 3600) * _sin(2 * lunar_longitude)
    term4 = (0.21 / 3600) * _sin(2 * ascending_node)
    return term1 - term2 - term3 + term4


def nutation_in_obliquity(
    solar_longitude: float, lunar_longitude: float, ascending_node: float
) -> float:
    """Δε in degrees from the four largest periodic terms."""
    term1 = (9.2 / 3600) * _cos(ascending_node)
    term2 = (0.57 / 3600) * _cos(2 * solar_longitude)
    term3 = (0.10 / 3600) * _cos(2 * lunar_longitude)
    term4 = (0.09 / 3600) * _cos(2 * ascending_node)
    return term1 + term2 + term3 - term4


def altitude_of_celestial_body(
    observer_latitude: float, declination: float, local_hour_angle: float
) -> float:
    term1 = _sin(observer_latitude) * _sin(declination)
    term2 = _cos(observer_latitude) * _cos(declination) * _cos(local_hour_angle)
    return math.degrees(math.asin(term1 + term2))


def interpolate(y2: float, y1: float, y3: float, n: float) -> float:
    """Quadratic interpolation through (-1, y1), (0, y2), (1, y3) at ``n``."""
    a = y2 - y1
    b = y3 - y2
    c = b - a
    return y2 + (n / 2) * (a + b + n * c)


def interpolate_angles(y2: float, y1: float, y3: float, n: float) -> float:
    """Same as :func:`interpolate`, with differences unwound across 0°/360°."""
    a = unwind_angle(y2 - y1)
    b = unwind_angle(y3 - y2)
    c = b - a
    return y2 + (n / 2) * (a + b + n * c)


def approximate_transit(
    longitude: float, sidereal_time: float, right_ascension: float
) -> float:
    """m0, the transit as a fraction of the day in [0, 1)."""
    lw = -longitude
    return normalize_to_scale((right_ascension + lw - sidereal_time) / 360, 1)


def corrected_transit(
    approx_transit: float,
    longitude: float,
    sidereal_time: float,
    right_ascension: float,
    previous_right_ascension: float,
    next_right_ascension: float,
) -> float:
    """Transit in UTC hours after one interpolation-based correction."""
    m0 = approx_transit
    lw = -longitude
    theta = unwind_angle(sidereal_time + SIDEREAL_RATE * m0)
    a = unwind_angle(
        interpolate_angles(
            right_ascension, previous_right_ascension, next_right_ascension, m0
        )
    )
    h = quadrant_shift_angle(theta - lw - a)
    dm = h / -360
    return (m0 + dm) * 24


def corrected_hour_angle(
    approx_transit: float,
    angle: float,
    latitude: float,
    longitude: float,
    after_transit: bool,
    sidereal_time: float,
    right_ascension: float,
    previous_right_ascension: float,
    next_right_ascension: float,
    declination: float,
    previous_declination: float,
    next_declination: float,
) -> float:
    """UTC hours at which the sun crosses altitude ``angle``.

    A single Newton step refines the first estimate; it is not iterated.

    Returns:
        Hours from the date's UTC midnight, or NaN when the altitude is never
        reached on this date.
    """
    m0 = approx_transit
    h0 = angle
    lw = -longitude

    term1 = _sin(h0) - _sin(latitude) * _sin(declination)
    term2 = _cos(latitude) * _cos(declination)
    ratio = term1 / term2
    if not -1 <= ratio <= 1:
        return math.nan

    hour_angle0 = math.degrees(math.acos(ratio))
    m = m0 + hour_angle0 / 360 if after_transit else m0 - hour_angle0 / 360

    theta = unwind_angle(sidereal_time + SIDEREAL_RATE * m)
    a = unwind_angle(
        interpolate_angles(
            right_ascension, previous_right_ascension, next_right_ascension, m
        )
    )
    delta = interpolate(declination, previous_declination, next_declination, m)
    hour_angle = theta - lw - a
    h = altitude_of_celestial_body(latitude, delta, hour_angle)

    term3 = h - h0
    term4 = 360 * _cos(delta) * _cos(latitude) * _sin(hour_angle)
    dm = term3 / term4
    return (m + dm) * 24


def shadow_altitude(shadow_length: float, latitude: float, declination: float) -> float:
    """Sun altitude at which a gnomon's shadow is ``shadow_length`` times its
    height plus its noon shadow."""
    tangent = abs(latitude - declination)
    inverse = shadow_length + math.tan(math.radians(tangent))
    return math.degrees(math.atan(1.0 / inverse))
