from __future__ import annotations

from datetime import date

import pytest

from salattimes.methods import parameters_for
from salattimes.models import CalculationParameters, Coordinates

# ---------- Shared fixtures ----------


@pytest.fixture
def nyc() -> Coordinates:
    """New York City, used by most end-to-end examples."""
    return Coordinates(latitude=40.7128, longitude=-74.0060)


@pytest.fixture
def mwl() -> CalculationParameters:
    return parameters_for("MuslimWorldLeague")


@pytest.fixture
def jan_15() -> date:
    return date(2025, 1, 15)

