"""Qibla direction from an observer to the Kaaba."""

import math

from salattimes.astronomy import unwind_angle
from salattimes.models import Coordinates

KAABA = Coordinates(latitude=21.4225241, longitude=39.8261818)


def qibla_bearing(coordinates: Coordinates) -> float:
    """Initial great-circle bearing to the Kaaba, degrees clockwise from north."""
    lat = math.radians(coordinates.latitude)
    d_lon = math.radians(KAABA.longitude) - math.radians(coordinates.longitude)
    term1 = math.sin(d_lon)
    term2 = math.cos(lat) * math.tan(math.radians(KAABA.latitude))
    term3 = math.sin(lat) * math.cos(d_lon)
    return unwind_angle(math.degrees(math.atan2(term1, term2 - term3)))
