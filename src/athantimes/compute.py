"""Prayer time computation layer — solar day geometry, high-latitude fallbacks, and rounding."""

import math
from datetime import date, datetime, timedelta

from pytz import utc

from athantimes.ephemeris import julian_date, solar_position
from athantimes.exceptions import InvalidInput
from athantimes.logging_config import get_logger
from athantimes.methods import DEFAULT_METHOD, CalculationMethod
from athantimes.models import (
    PRAYER_NAMES,
    CalculationParameters,
    Coordinate,
    PolarCircleResolution,
    PrayerTimeSet,
    QueryInput,
    Rounding,
    SolarPosition,
)

logger = get_logger(__name__)

SUNRISE_ALTITUDE = -0.833  # Upper limb on the horizon with standard refraction
LATITUDE_STEP = 0.5
MAX_DAY_SEARCH = 183


class _SolarDays:
    """Solar positions for one longitude, memoized by civil date.

    Each date is evaluated at local mean noon, so the transit solved from it
    belongs to that date even across the date line.
    """

    def __init__(self, lng: float) -> None:
        self._lng = lng
        self._positions: dict[date, SolarPosition] = {}

    def position(self, day: date) -> SolarPosition:
        if day not in self._positions:
            jd = julian_date(day, 12.0 - self._lng / 15.0)
            self._positions[day] = solar_position(jd)
        return self._positions[day]

    def declination(self, day: date) -> float:
        return self.position(day).declination

    def transit(self, day: date) -> float:
        """Solar noon in hours after 0h UTC of ``day``. Not wrapped into [0, 24)."""
        return 12.0 - self._lng / 15.0 - self.position(day).equation_of_time / 60.0


def validate_coordinate(coordinate: Coordinate) -> None:
    """Raise InvalidInput unless latitude is in [-90, 90] and longitude in [-180, 180]."""
    lat, lng = coordinate.lat, coordinate.lng
    if not (math.isfinite(lat) and -90.0 <= lat <= 90.0):
        raise InvalidInput("Latitude out of range", {"lat": lat})
    if not (math.isfinite(lng) and -180.0 <= lng <= 180.0):
        raise InvalidInput("Longitude out of range", {"lng": lng})


def hour_angle(lat: float, declination: float, altitude: float) -> float | None:
    """Hour angle (degrees) at which the sun crosses the given altitude.

    cos(H) = (sin(alt) - sin(lat)·sin(decl)) / (cos(lat)·cos(decl))

    Returns None if the sun stays entirely above or below that altitude all
    day (polar day/night, or twilight that never ends).
    """
    lat_r = math.radians(lat)
    decl_r = math.radians(declination)
    cos_h = (math.sin(math.radians(altitude)) - math.sin(lat_r) * math.sin(decl_r)) / (
        math.cos(lat_r) * math.cos(decl_r)
    )
    if cos_h < -1.0 or cos_h > 1.0:
        return None
    return math.degrees(math.acos(cos_h))


def asr_altitude(lat: float, declination: float, shadow_factor: int) -> float:
    """Solar altitude (degrees) at which a shadow reaches ``shadow_factor`` lengths plus the noon shadow."""
    noon_zenith = math.radians(abs(lat - declination))
    return math.degrees(math.atan(1.0 / (shadow_factor + math.tan(noon_zenith))))


def _has_regular_day(lat: float, declination: float) -> bool:
    return hour_angle(lat, declination, SUNRISE_ALTITUDE) is not None


def _nearest_regular_latitude(lat: float, today_decl: float, tomorrow_decl: float) -> float:
    """Step toward the equator until both days have a sunrise and a sunset.

    Every latitude within ±65° qualifies on every date, so the loop ends.
    """
    step = math.copysign(LATITUDE_STEP, lat)
    while not (_has_regular_day(lat, today_decl) and _has_regular_day(lat, tomorrow_decl)):
        lat -= step
    return lat


def _nearest_regular_day(lat: float, day: date, days: _SolarDays) -> tuple[float, float] | None:
    """Declinations (day, next day) of the closest date with regular sunrises at ``lat``."""
    for offset in range(1, MAX_DAY_SEARCH + 1):
        for candidate in (day + timedelta(days=offset), day - timedelta(days=offset)):
            decl = days.declination(candidate)
            next_decl = days.declination(candidate + timedelta(days=1))
            if _has_regular_day(lat, decl) and _has_regular_day(lat, next_decl):
                return decl, next_decl
    return None


def _resolve_polar_circle(
    lat: float,
    day: date,
    days: _SolarDays,
    resolution: PolarCircleResolution,
) -> tuple[float, float, float]:
    """Substitute (latitude, declination, next-day declination) with a regular day."""
    today_decl = days.declination(day)
    tomorrow_decl = days.declination(day + timedelta(days=1))
    if resolution is PolarCircleResolution.AQRAB_YAUM:
        resolved = _nearest_regular_day(lat, day, days)
        if resolved is not None:
            return lat, resolved[0], resolved[1]
        logger.debug("No regular day within %d days at lat=%.4f", MAX_DAY_SEARCH, lat)
    return (
        _nearest_regular_latitude(lat, today_decl, tomorrow_decl),
        today_decl,
        tomorrow_decl,
    )


def _twilight(
    transit: float, lat: float, declination: float, depression: float, morning: bool
) -> float | None:
    """Hours after 0h UTC when the sun is ``depression`` degrees below the horizon."""
    angle = hour_angle(lat, declination, -depression)
    if angle is None:
        return None
    return transit - angle / 15.0 if morning else transit + angle / 15.0


def _rounded(instant: datetime, rounding: Rounding) -> datetime:
    """Truncate to whole seconds, then round to the minute as requested."""
    instant = instant.replace(microsecond=0)
    seconds = instant.second
    if rounding is Rounding.NEAREST:
        offset = 60 - seconds if seconds >= 30 else -seconds
    elif rounding is Rounding.UP:
        offset = (60 - seconds) % 60
    else:
        offset = 0
    return instant + timedelta(seconds=offset)


def compute_prayer_times(
    coordinate: Coordinate,
    day: date,
    params: CalculationParameters | None = None,
) -> PrayerTimeSet:
    """Compute Fajr, Dhuhr, Asr, Maghrib and Isha for one civil date.

    All instants are UTC, measured from 0h UTC of ``day``; Fajr east of
    Greenwich and Isha west of it may therefore fall on the neighbouring UTC
    date. When the sun does not rise or set, the parameters' polar circle
    resolution supplies the geometry; when twilight never ends, the high
    latitude rule bounds Fajr and Isha by a portion of the night. Both set
    ``high_latitude_adjusted``, as does the final ordering guard when rounding
    or large adjustments leave a prayer at or before its predecessor.

    Args:
        coordinate: Observer latitude/longitude in degrees.
        day: Civil date whose solar noon anchors the calculation.
        params: Convention to apply. Defaults to the Muslim World League method.

    Returns:
        PrayerTimeSet with strictly increasing instants.

    Raises:
        InvalidInput: Latitude or longitude out of range.
    """
    validate_coordinate(coordinate)
    if params is None:
        params = DEFAULT_METHOD.parameters()

    days = _SolarDays(coordinate.lng)
    tomorrow = day + timedelta(days=1)
    lat = coordinate.lat
    decl = days.declination(day)
    next_decl = days.declination(tomorrow)
    adjusted = False

    if not (_has_regular_day(lat, decl) and _has_regular_day(lat, next_decl)):
        lat, decl, next_decl = _resolve_polar_circle(
            lat, day, days, params.polar_circle_resolution
        )
        adjusted = True
        logger.debug(
            "No sunrise/sunset at %s on %s; %s substitutes lat=%.1f decl=%.3f",
            coordinate,
            day,
            params.polar_circle_resolution.value,
            lat,
            decl,
        )

    transit = days.transit(day)
    half_day = hour_angle(lat, decl, SUNRISE_ALTITUDE) / 15.0
    sunrise = transit - half_day
    sunset = transit + half_day
    tomorrow_sunrise = (
        24.0 + days.transit(tomorrow) - hour_angle(lat, next_decl, SUNRISE_ALTITUDE) / 15.0
    )
    night = tomorrow_sunrise - sunset
    fajr_portion, isha_portion = params.night_portions()

    fajr = _twilight(transit, lat, decl, params.fajr_angle, morning=True)
    safe_fajr = sunrise - fajr_portion * night
    if fajr is None or fajr < safe_fajr:
        logger.debug("Fajr bounded by %s on %s", params.high_latitude_rule.value, day)
        fajr = safe_fajr
        adjusted = True

    # None only at a float tie with a 90° noon zenith
    asr_angle = hour_angle(lat, decl, asr_altitude(lat, decl, params.madhab.value))
    asr = transit + (asr_angle or 0.0) / 15.0

    if params.isha_interval > 0:
        isha = sunset + params.isha_interval / 60.0
    else:
        isha = _twilight(transit, lat, decl, params.isha_angle, morning=False)
        safe_isha = sunset + isha_portion * night
        if isha is None or isha > safe_isha:
            logger.debug("Isha bounded by %s on %s", params.high_latitude_rule.value, day)
            isha = safe_isha
            adjusted = True

    maghrib = sunset
    if params.maghrib_angle > 0:
        angle_maghrib = _twilight(transit, lat, decl, params.maghrib_angle, morning=False)
        if angle_maghrib is not None and sunset < angle_maghrib < isha:
            maghrib = angle_maghrib

    hours = {"fajr": fajr, "dhuhr": transit, "asr": asr, "maghrib": maghrib, "isha": isha}
    offsets = params.adjustments + params.method_adjustments
    midnight = utc.localize(datetime(day.year, day.month, day.day))
    instants = [
        _rounded(
            midnight + timedelta(hours=hours[name] + getattr(offsets, name) / 60.0),
            params.rounding,
        )
        for name in PRAYER_NAMES
    ]

    # Short resolved nights or large adjustments can collapse neighbours
    for i in range(1, len(instants)):
        if instants[i] <= instants[i - 1]:
            instants[i] = instants[i - 1] + timedelta(minutes=1)
            adjusted = True

    return PrayerTimeSet(
        coordinate,
        day,
        params.method,
        *instants,
        high_latitude_adjusted=adjusted,
    )


def parse_coordinate(lat: str, lng: str) -> Coordinate:
    """Parse and validate a typed latitude/longitude pair."""
    try:
        coordinate = Coordinate(lat=float(lat), lng=float(lng))
    except (TypeError, ValueError) as exc:
        raise InvalidInput("Coordinate is not a number", {"lat": lat, "lng": lng}) from exc
    validate_coordinate(coordinate)
    return coordinate


def parse_date(when: str) -> date:
    try:
        return datetime.strptime(when, "%Y-%m-%d").date()
    except (TypeError, ValueError) as exc:
        raise InvalidInput("Date must be YYYY-MM-DD", {"when": when}) from exc


def run(query: QueryInput) -> PrayerTimeSet:
    """Top-level entry point: takes a QueryInput and returns a PrayerTimeSet.

    Args:
        query: User input (latitude, longitude, date and method strings).

    Returns:
        Prayer times for the query's date.

    Raises:
        InvalidInput: Unparseable numbers or date, unknown method, or
            out-of-range coordinate.
    """
    coordinate = parse_coordinate(query.lat, query.lng)
    day = parse_date(query.when)
    params = CalculationMethod.from_name(query.method).parameters()
    return compute_prayer_times(coordinate, day, params)
