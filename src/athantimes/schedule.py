"""Host-side helpers over computed prayer times — city presets, current prayer, and the sun's arc.

Nothing here is needed by the calculator; these are the pieces a clock or
dashboard built on top of it keeps re-deriving from ``now``.
"""

from datetime import date, datetime, timedelta

from pytz import FixedOffset, utc

from athantimes.compute import compute_prayer_times
from athantimes.exceptions import InvalidInput
from athantimes.models import (
    PRAYER_NAMES,
    CalculationParameters,
    City,
    Coordinate,
    PrayerTimeSet,
    SkyPhase,
)

CITIES: dict[str, City] = {
    "strasbourg": City(
        key="strasbourg",
        name="Strasbourg",
        coordinate=Coordinate(lat=48.5734, lng=7.7521),
        utc_offset=1,
    ),
    "pavlodar": City(
        key="pavlodar",
        name="Pavlodar",
        coordinate=Coordinate(lat=52.2873, lng=76.9674),
        utc_offset=5,
    ),
}


def get_city(key: str) -> City:
    """Return the preset city for ``key`` (case-insensitive).

    Raises:
        InvalidInput: Unknown city key.
    """
    city = CITIES.get(key.strip().lower())
    if city is None:
        raise InvalidInput(f"Unknown city: {key}", {"known": ", ".join(CITIES)})
    return city


def _as_utc(when: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if when.tzinfo is None:
        return utc.localize(when)
    return when.astimezone(utc)


def local_date(when: datetime, utc_offset: float) -> date:
    """Civil date at a fixed UTC offset (hours)."""
    return _as_utc(when).astimezone(FixedOffset(round(utc_offset * 60))).date()


def solar_date(when: datetime, lng: float) -> date:
    """Civil date by local mean solar time, the date whose noon the calculator anchors to."""
    return local_date(when, lng / 15.0)


def prayer_times_for_city(
    city_key: str,
    when: datetime,
    params: CalculationParameters | None = None,
) -> PrayerTimeSet:
    """Prayer times for the civil date a city's residents see at ``when``."""
    city = get_city(city_key)
    return compute_prayer_times(city.coordinate, local_date(when, city.utc_offset), params)


def current_prayer_index(times: PrayerTimeSet, now: datetime) -> int:
    """Index into PRAYER_NAMES of the last prayer already started, or -1 before Fajr."""
    now = _as_utc(now)
    last = -1
    for i, instant in enumerate(times):
        if now > instant:
            last = i
    return last


def next_prayer(times: PrayerTimeSet, now: datetime) -> tuple[str, datetime] | None:
    """Name and instant of the first prayer still ahead of ``now``; None after Isha."""
    now = _as_utc(now)
    for name, instant in zip(PRAYER_NAMES, times):
        if instant >= now:
            return name, instant
    return None


def is_night(times: PrayerTimeSet, now: datetime) -> bool:
    """True before Fajr or after Maghrib."""
    now = _as_utc(now)
    return now < times.fajr or now > times.maghrib


def sky_phase(
    coordinate: Coordinate,
    now: datetime,
    params: CalculationParameters | None = None,
    day: date | None = None,
) -> SkyPhase:
    """Progress of ``now`` along the day arc (Fajr→Maghrib) or the night arc (Maghrib→Fajr).

    The night arc borrows the adjoining day's times: yesterday's Maghrib before
    dawn, tomorrow's Fajr after dusk.

    Args:
        coordinate: Observer position.
        now: Current instant; naive values are read as UTC.
        params: Convention; defaults to the calculator's default.
        day: Civil date the host considers current. Defaults to the local solar
            date of ``now`` at the coordinate's longitude.
    """
    now = _as_utc(now)
    if day is None:
        day = solar_date(now, coordinate.lng)
    times = compute_prayer_times(coordinate, day, params)

    if not is_night(times, now):
        start, end = times.fajr, times.maghrib
    elif now > times.maghrib:
        start = times.maghrib
        end = compute_prayer_times(coordinate, day + timedelta(days=1), params).fajr
    else:
        start = compute_prayer_times(coordinate, day - timedelta(days=1), params).maghrib
        end = times.fajr

    span = (end - start).total_seconds()
    progress = (now - start).total_seconds() / span if span > 0 else 0.0
    return SkyPhase(is_night=is_night(times, now), progress=min(1.0, max(0.0, progress)))


def format_local_time(instant: datetime, utc_offset: float) -> str:
    """``HH:MM`` of an instant shifted by a fixed UTC offset in hours."""
    shifted = _as_utc(instant).astimezone(FixedOffset(round(utc_offset * 60)))
    return shifted.strftime("%H:%M")
