"""Solar ephemeris — Julian dates and the low-precision apparent solar position."""

import math
from datetime import date

from skyfield.api import load

from athantimes.models import SolarPosition

_ts = load.timescale(builtin=True)

_J2000 = 2451545.0


def julian_date(day: date, hours: float = 0.0) -> float:
    """Julian date (UT1) of ``hours`` after 0h UTC on ``day``.

    ``hours`` may be negative or past 24; skyfield normalizes the overflow
    into neighbouring days.
    """
    return float(_ts.utc(day.year, day.month, day.day, hours).ut1)


def solar_position(jd: float) -> SolarPosition:
    """Declination and equation of time for a Julian date.

    Uses the low-precision solar coordinates (mean anomaly, mean longitude,
    two-term equation of center, linear obliquity). Good to about a minute of
    time for dates within a few centuries of J2000; outside that range the
    result stays finite but drifts.

    Args:
        jd: Julian date, fractional day included.

    Returns:
        SolarPosition with declination in degrees and equation of time in minutes.
    """
    d = jd - _J2000
    g = _normalize_degrees(357.529 + 0.98560028 * d)  # mean anomaly
    q = _normalize_degrees(280.459 + 0.98564736 * d)  # mean longitude
    ecliptic_lng = _normalize_degrees(
        q + 1.915 * _sin(g) + 0.020 * _sin(2 * g)
    )
    obliquity = 23.439 - 0.00000036 * d

    # atan2 keeps right ascension in the same quadrant as the ecliptic longitude
    ra = math.degrees(
        math.atan2(_cos(obliquity) * _sin(ecliptic_lng), _cos(ecliptic_lng))
    )
    declination = math.degrees(math.asin(_sin(obliquity) * _sin(ecliptic_lng)))

    # q and ra wrap at different instants around the March equinox
    eqt_hours = (q - _normalize_degrees(ra)) / 15.0
    eqt_hours = (eqt_hours + 12.0) % 24.0 - 12.0

    return SolarPosition(declination=declination, equation_of_time=eqt_hours * 60.0)


def _normalize_degrees(angle: float) -> float:
    """Normalize angle to [0, 360)."""
    return angle % 360.0


def _sin(degrees: float) -> float:
    return math.sin(math.radians(degrees))


def _cos(degrees: float) -> float:
    return math.cos(math.radians(degrees))
