# tests/test_solar.py
from __future__ import annotations

import math
from datetime import date

import pytest
from hypothesis import given, settings

from salattimes.dates import julian_day
from salattimes.models import Coordinates
from salattimes.solar import SolarCoordinates, SolarTime

from strategies import civil_dates, latitudes, longitudes


def test_solar_coordinates_meeus_25a() -> None:
    solar = SolarCoordinates(julian_day(1992, 10, 13))
    assert solar.declination == pytest.approx(-7.78507, abs=1e-4)
    assert solar.right_ascension == pytest.approx(198.38083, abs=1e-4)


@given(civil_dates())
def test_declination_stays_within_obliquity(day: date) -> None:
    solar = SolarCoordinates(julian_day(day.year, day.month, day.day))
    assert abs(solar.declination) <= 23.46
    assert 0 <= solar.right_ascension < 360


def _circular_hours(a: float, b: float) -> float:
    diff = (a - b) % 24
    return min(diff, 24 - diff)


@settings(max_examples=50, deadline=None)
@given(civil_dates(), latitudes(60.0), longitudes())
def test_transit_near_local_mean_noon(day: date, latitude: float, longitude: float) -> None:
    # The equation of time never exceeds about 16.5 minutes
    solar_time = SolarTime(day, Coordinates(latitude, longitude))
    mean_noon = 12 - longitude / 15
    assert _circular_hours(solar_time.transit, mean_noon) < 17 / 60


def test_sunrise_transit_sunset_order(nyc: Coordinates, jan_15: date) -> None:
    solar_time = SolarTime(jan_15, nyc)
    assert solar_time.sunrise < solar_time.transit < solar_time.sunset
    # 7:18 AM EST
    assert solar_time.sunrise == pytest.approx(12.3, abs=0.1)


def test_no_sunset_in_polar_night() -> None:
    solar_time = SolarTime(date(2025, 12, 21), Coordinates(80.0, 0.0))
    assert math.isnan(solar_time.sunrise)
    assert math.isnan(solar_time.sunset)
    assert math.isfinite(solar_time.transit)


@settings(max_examples=50, deadline=None)
@given(civil_dates(), latitudes(55.0), longitudes())
def test_hanafi_asr_is_later(day: date, latitude: float, longitude: float) -> None:
    solar_time = SolarTime(day, Coordinates(latitude, longitude))
    shafi = solar_time.afternoon(1)
    hanafi = solar_time.afternoon(2)
    assert solar_time.transit < shafi < hanafi


def test_next_day_advances_date(nyc: Coordinates, jan_15: date) -> None:
    tomorrow = SolarTime(jan_15, nyc).next_day()
    assert tomorrow.date == date(2025, 1, 16)
    assert tomorrow.observer == nyc
