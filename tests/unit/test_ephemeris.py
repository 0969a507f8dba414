"""
athantimes Unit Tests - Solar Ephemeris

Run:
    pytest tests/unit/test_ephemeris.py -v
"""

import math
from datetime import date, timedelta

import pytest

from athantimes.ephemeris import julian_date, solar_position
from athantimes.models import SolarPosition


# =============================================================================
# Julian Dates
# =============================================================================


class TestJulianDate:
    """Tests for julian_date."""

    def test_j2000_epoch(self):
        """Test 2000-01-01 12:00 UTC maps to JD 2451545.0."""
        assert julian_date(date(2000, 1, 1), 12.0) == pytest.approx(2451545.0, abs=1e-4)

    def test_midnight_is_half_day(self):
        """Test 0h UTC falls on a .5 Julian date."""
        jd = julian_date(date(2026, 2, 23))
        assert jd % 1 == pytest.approx(0.5, abs=1e-4)

    def test_consecutive_days_differ_by_one(self):
        """Test successive civil dates are one Julian day apart."""
        first = julian_date(date(2026, 2, 22))
        second = julian_date(date(2026, 2, 23))
        assert second - first == pytest.approx(1.0, abs=1e-6)

    def test_hours_overflow_into_next_day(self):
        """Test hours past 24 roll into the following date."""
        assert julian_date(date(2026, 2, 23), 36.0) == pytest.approx(
            julian_date(date(2026, 2, 24), 12.0), abs=1e-6
        )

    def test_negative_hours_roll_back(self):
        """Test negative hours land on the previous date."""
        assert julian_date(date(2026, 2, 23), -6.0) == pytest.approx(
            julian_date(date(2026, 2, 22), 18.0), abs=1e-6
        )


# =============================================================================
# Solar Position
# =============================================================================


class TestSolarPosition:
    """Tests for solar_position."""

    def test_returns_solar_position(self):
        """Test the return type."""
        result = solar_position(julian_date(date(2026, 2, 23), 12.0))
        assert isinstance(result, SolarPosition)

    def test_june_solstice_declination(self):
        """Test declination peaks near +23.44° in June."""
        result = solar_position(julian_date(date(2026, 6, 21), 12.0))
        assert result.declination == pytest.approx(23.44, abs=0.05)

    def test_december_solstice_declination(self):
        """Test declination bottoms near -23.44° in December."""
        result = solar_position(julian_date(date(2026, 12, 21), 21.0))
        assert result.declination == pytest.approx(-23.44, abs=0.05)

    def test_march_equinox_declination(self):
        """Test declination crosses zero at the March 2026 equinox (20 Mar 14:46 UTC)."""
        result = solar_position(julian_date(date(2026, 3, 20), 14.77))
        assert result.declination == pytest.approx(0.0, abs=0.1)

    def test_february_equation_of_time_minimum(self):
        """Test the equation of time near its February minimum (about -14.2 min)."""
        result = solar_position(julian_date(date(2026, 2, 11), 12.0))
        assert result.equation_of_time == pytest.approx(-14.2, abs=0.5)

    def test_november_equation_of_time_maximum(self):
        """Test the equation of time near its November maximum (about +16.4 min)."""
        result = solar_position(julian_date(date(2026, 11, 3), 12.0))
        assert result.equation_of_time == pytest.approx(16.4, abs=0.5)

    def test_equation_of_time_never_wraps(self):
        """Test every day of a year stays within the physical range, equinox included."""
        day = date(2026, 1, 1)
        previous = None
        while day.year == 2026:
            eqt = solar_position(julian_date(day, 12.0)).equation_of_time
            assert -15.0 < eqt < 17.0
            if previous is not None:
                assert abs(eqt - previous) < 1.0
            previous = eqt
            day += timedelta(days=1)

    def test_deterministic(self):
        """Test identical inputs give bit-identical outputs."""
        jd = julian_date(date(2026, 2, 23), 7.0)
        assert solar_position(jd) == solar_position(jd)

    @pytest.mark.parametrize("year", [1000, 1600, 2400, 3000])
    def test_far_dates_stay_finite(self, year):
        """Test dates far from J2000 still produce finite values."""
        result = solar_position(julian_date(date(year, 6, 1), 12.0))
        assert math.isfinite(result.declination)
        assert math.isfinite(result.equation_of_time)
        assert -24.0 < result.declination < 24.0
