"""
Shared fixtures for athantimes tests.
"""

from datetime import date

import pytest

from athantimes.methods import CalculationMethod
from athantimes.models import Coordinate


@pytest.fixture
def pavlodar():
    """Pavlodar, Kazakhstan (UTC+5 residents)."""
    return Coordinate(lat=52.2873, lng=76.9674)


@pytest.fixture
def strasbourg():
    """Strasbourg, France (UTC+1 residents)."""
    return Coordinate(lat=48.5734, lng=7.7521)


@pytest.fixture
def stockholm():
    """Stockholm: twilight never ends around the June solstice."""
    return Coordinate(lat=59.3293, lng=18.0686)


@pytest.fixture
def feb_23():
    return date(2026, 2, 23)


@pytest.fixture
def mwl():
    """Muslim World League parameters (Fajr 18°, Isha 17°)."""
    return CalculationMethod.MUSLIM_WORLD_LEAGUE.parameters()
