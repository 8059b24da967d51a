"""Per-day solar coordinates and the three-day SolarTime bundle."""

import math
from datetime import date, timedelta

from salattimes import astronomy
from salattimes.dates import julian_century, julian_day
from salattimes.models import Coordinates


class SolarCoordinates:
    """Declination, right ascension and apparent sidereal time at a Julian Day."""

    __slots__ = ("declination", "right_ascension", "apparent_sidereal_time")

    def __init__(self, jd: float) -> None:
        t = julian_century(jd)
        l0 = astronomy.mean_solar_longitude(t)
        lp = astronomy.mean_lunar_longitude(t)
        omega = astronomy.ascending_lunar_node_longitude(t)
        lam = math.radians(astronomy.apparent_solar_longitude(t, l0))
        theta0 = astronomy.mean_sidereal_time(t)
        d_psi = astronomy.nutation_in_longitude(l0, lp, omega)
        d_epsilon = astronomy.nutation_in_obliquity(l0, lp, omega)
        epsilon0 = astronomy.mean_obliquity_of_the_ecliptic(t)
        epsilon = math.radians(astronomy.apparent_obliquity_of_the_ecliptic(t, epsilon0))

        self.declination = math.degrees(math.asin(math.sin(epsilon) * math.sin(lam)))
        self.right_ascension = astronomy.unwind_angle(
            math.degrees(
                math.atan2(math.cos(epsilon) * math.sin(lam), math.cos(lam))
            )
        )
        self.apparent_sidereal_time = theta0 + d_psi * math.cos(
            math.radians(epsilon0 + d_epsilon)
        )

    def __repr__(self) -> str:
        return (
            f"SolarCoordinates(declination={self.declination:.6f}, "
            f"right_ascension={self.right_ascension:.6f}, "
            f"apparent_sidereal_time={self.apparent_sidereal_time:.6f})"
        )


class SolarTime:
    """Transit, sunrise and sunset for one civil date at one observer.

    Holds the solar coordinates of the previous, current and next day so
    that any hour-angle query for this date can interpolate across midnight.
    All hour values are measured from the date's UTC midnight.
    """

    def __init__(self, day: date, coordinates: Coordinates) -> None:
        jd = julian_day(day.year, day.month, day.day)
        self.date = day
        self.observer = coordinates
        self.solar = SolarCoordinates(jd)
        self.prev_solar = SolarCoordinates(jd - 1)
        self.next_solar = SolarCoordinates(jd + 1)

        self.approx_transit = astronomy.approximate_transit(
            coordinates.longitude,
            self.solar.apparent_sidereal_time,
            self.solar.right_ascension,
        )
        self.transit = astronomy.corrected_transit(
            self.approx_transit,
            coordinates.longitude,
            self.solar.apparent_sidereal_time,
            self.solar.right_ascension,
            self.prev_solar.right_ascension,
            self.next_solar.right_ascension,
        )
        self.sunrise = self.hour_angle(astronomy.SOLAR_ALTITUDE, after_transit=False)
        self.sunset = self.hour_angle(astronomy.SOLAR_ALTITUDE, after_transit=True)

    def hour_angle(self, angle: float, after_transit: bool) -> float:
        """UTC hours when the sun reaches altitude ``angle``; NaN if it never does."""
        return astronomy.corrected_hour_angle(
            self.approx_transit,
            angle,
            self.observer.latitude,
            self.observer.longitude,
            after_transit,
            self.solar.apparent_sidereal_time,
            self.solar.right_ascension,
            self.prev_solar.right_ascension,
            self.next_solar.right_ascension,
            self.solar.declination,
            self.prev_solar.declination,
            self.next_solar.declination,
        )

    def afternoon(self, shadow_length: float) -> float:
        """UTC hours of the Asr shadow condition for the given multiplier."""
        angle = astronomy.shadow_altitude(
            shadow_length, self.observer.latitude, self.solar.declination
        )
        return self.hour_angle(angle, after_transit=True)

    def next_day(self) -> "SolarTime":
        return SolarTime(self.date + timedelta(days=1), self.observer)
