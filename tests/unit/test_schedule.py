"""
athantimes Unit Tests - Schedule Helpers

Run:
    pytest tests/unit/test_schedule.py -v
"""

from datetime import date, datetime, timedelta

import pytest
from pytz import FixedOffset, utc

from athantimes.compute import compute_prayer_times
from athantimes.exceptions import InvalidInput
from athantimes.models import Coordinate, PrayerTimeSet
from athantimes.schedule import (
    CITIES,
    current_prayer_index,
    format_local_time,
    get_city,
    is_night,
    local_date,
    next_prayer,
    prayer_times_for_city,
    sky_phase,
    solar_date,
)


@pytest.fixture
def day_times():
    """A hand-built set on 2026-02-23 (UTC)."""

    def at(hour, minute):
        return utc.localize(datetime(2026, 2, 23, hour, minute))

    return PrayerTimeSet(
        coordinate=Coordinate(48.5734, 7.7521),
        date=date(2026, 2, 23),
        method="MuslimWorldLeague",
        fajr=at(5, 10),
        dhuhr=at(11, 44),
        asr=at(14, 40),
        maghrib=at(17, 10),
        isha=at(18, 45),
    )


# =============================================================================
# Cities
# =============================================================================


class TestCities:
    """Preset cities."""

    def test_presets(self):
        assert set(CITIES) == {"strasbourg", "pavlodar"}
        assert get_city("pavlodar").utc_offset == 5
        assert get_city("strasbourg").utc_offset == 1

    def test_lookup_ignores_case(self):
        assert get_city("  Strasbourg ").name == "Strasbourg"

    def test_unknown_city(self):
        with pytest.raises(InvalidInput) as exc_info:
            get_city("atlantis")
        assert "pavlodar" in exc_info.value.details["known"]

    def test_prayer_times_for_city_uses_local_date(self, mwl):
        """Test 20:00 UTC on the 22nd is already the 23rd in Pavlodar."""
        times = prayer_times_for_city("pavlodar", utc.localize(datetime(2026, 2, 22, 20, 0)), mwl)
        assert times.date == date(2026, 2, 23)
        assert times == compute_prayer_times(get_city("pavlodar").coordinate, date(2026, 2, 23), mwl)


# =============================================================================
# Time Zone Helpers
# =============================================================================


class TestLocalTime:
    """local_date and format_local_time."""

    def test_local_date_ahead_of_utc(self):
        assert local_date(utc.localize(datetime(2026, 2, 22, 19, 0)), 5) == date(2026, 2, 23)

    def test_local_date_behind_utc(self):
        assert local_date(utc.localize(datetime(2026, 2, 23, 2, 0)), -5) == date(2026, 2, 22)

    def test_naive_is_utc(self):
        assert local_date(datetime(2026, 2, 23, 23, 30), 1) == date(2026, 2, 24)

    def test_aware_non_utc_input(self):
        """Test an aware instant in another zone is converted first."""
        when = FixedOffset(-300).localize(datetime(2026, 2, 22, 23, 0))  # 04:00 UTC on the 23rd
        assert local_date(when, 0) == date(2026, 2, 23)

    def test_format_local_time(self, day_times):
        assert format_local_time(day_times.dhuhr, 5) == "16:44"
        assert format_local_time(day_times.fajr, 1) == "06:10"

    def test_fractional_offset(self, day_times):
        """Test half-hour offsets such as India's."""
        assert format_local_time(day_times.dhuhr, 5.5) == "17:14"


# =============================================================================
# Current and Next Prayer
# =============================================================================


class TestCurrentPrayer:
    """current_prayer_index, next_prayer and is_night."""

    def test_before_fajr(self, day_times):
        now = day_times.fajr - timedelta(minutes=1)
        assert current_prayer_index(day_times, now) == -1
        assert next_prayer(day_times, now) == ("fajr", day_times.fajr)
        assert is_night(day_times, now)

    def test_between_dhuhr_and_asr(self, day_times):
        now = day_times.dhuhr + timedelta(minutes=30)
        assert current_prayer_index(day_times, now) == 1
        assert next_prayer(day_times, now) == ("asr", day_times.asr)
        assert not is_night(day_times, now)

    def test_exact_start_counts_as_upcoming(self, day_times):
        """Test a prayer at exactly ``now`` is next, not current."""
        assert current_prayer_index(day_times, day_times.asr) == 1
        assert next_prayer(day_times, day_times.asr) == ("asr", day_times.asr)

    def test_after_isha(self, day_times):
        now = day_times.isha + timedelta(hours=1)
        assert current_prayer_index(day_times, now) == 4
        assert next_prayer(day_times, now) is None
        assert is_night(day_times, now)

    def test_between_maghrib_and_isha_is_night(self, day_times):
        assert is_night(day_times, day_times.maghrib + timedelta(minutes=5))

    def test_naive_now_read_as_utc(self, day_times):
        assert current_prayer_index(day_times, datetime(2026, 2, 23, 12, 0)) == 1


# =============================================================================
# Sky Phase
# =============================================================================


class TestSkyPhase:
    """sky_phase over real computed times."""

    def test_noon_is_mid_day(self, strasbourg, mwl):
        times = compute_prayer_times(strasbourg, date(2026, 2, 23), mwl)
        phase = sky_phase(strasbourg, times.dhuhr, mwl)
        assert not phase.is_night
        assert 0.3 < phase.progress < 0.7

    def test_at_fajr_starts_day(self, strasbourg, mwl):
        times = compute_prayer_times(strasbourg, date(2026, 2, 23), mwl)
        phase = sky_phase(strasbourg, times.fajr, mwl)
        assert not phase.is_night
        assert phase.progress == pytest.approx(0.0)

    def test_evening_uses_tomorrows_fajr(self, strasbourg, mwl):
        """Test the night arc after Maghrib runs to the next day's Fajr."""
        day = date(2026, 2, 23)
        times = compute_prayer_times(strasbourg, day, mwl)
        tomorrow_fajr = compute_prayer_times(strasbourg, day + timedelta(days=1), mwl).fajr
        now = times.maghrib + (tomorrow_fajr - times.maghrib) / 4
        phase = sky_phase(strasbourg, now, mwl, day=day)
        assert phase.is_night
        assert phase.progress == pytest.approx(0.25, abs=1e-6)

    def test_before_dawn_uses_yesterdays_maghrib(self, strasbourg, mwl):
        day = date(2026, 2, 23)
        times = compute_prayer_times(strasbourg, day, mwl)
        phase = sky_phase(strasbourg, times.fajr - timedelta(minutes=1), mwl, day=day)
        assert phase.is_night
        assert 0.9 < phase.progress < 1.0

    def test_progress_is_clamped(self, strasbourg, mwl):
        """Test a ``now`` outside the chosen day's arc stays in [0, 1]."""
        phase = sky_phase(
            strasbourg, utc.localize(datetime(2026, 2, 25, 12, 0)), mwl, day=date(2026, 2, 23)
        )
        assert 0.0 <= phase.progress <= 1.0

    def test_default_day_far_east(self, pavlodar, mwl):
        """Test 23:59 UTC in Pavlodar (early morning on the 24th locally) is daytime after Fajr."""
        now = utc.localize(datetime(2026, 2, 23, 23, 59))
        assert compute_prayer_times(pavlodar, date(2026, 2, 24), mwl).fajr < now
        phase = sky_phase(pavlodar, now, mwl)
        assert not phase.is_night
        assert phase.progress < 0.1

    def test_default_day_far_west(self, mwl):
        """Test 02:00 UTC in Honolulu (mid-afternoon of the previous day locally) is daytime."""
        honolulu = Coordinate(21.3069, -157.8583)
        phase = sky_phase(honolulu, utc.localize(datetime(2026, 2, 24, 2, 0)), mwl)
        assert not phase.is_night
        assert 0.5 < phase.progress < 1.0


class TestSolarDate:
    """solar_date."""

    def test_east_rolls_forward(self):
        assert solar_date(utc.localize(datetime(2026, 2, 23, 20, 0)), 76.9674) == date(2026, 2, 24)

    def test_west_rolls_back(self):
        assert solar_date(utc.localize(datetime(2026, 2, 24, 2, 0)), -157.8583) == date(2026, 2, 23)

    def test_greenwich_matches_utc(self):
        assert solar_date(datetime(2026, 2, 23, 23, 59), 0.0) == date(2026, 2, 23)
