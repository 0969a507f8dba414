"""Data model definitions — explicit boundaries between input, ephemeris, and prayer-time layers."""

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Iterator

PRAYER_NAMES: tuple[str, ...] = ("fajr", "dhuhr", "asr", "maghrib", "isha")


class Madhab(Enum):
    """Asr convention. The value is the shadow-length factor."""

    SHAFI = 1
    HANAFI = 2


class HighLatitudeRule(Enum):
    """How far Fajr/Isha may stray from sunrise/sunset when twilight lingers."""

    MIDDLE_OF_THE_NIGHT = "middle_of_the_night"
    SEVENTH_OF_THE_NIGHT = "seventh_of_the_night"
    TWILIGHT_ANGLE = "twilight_angle"


class PolarCircleResolution(Enum):
    """Substitute geometry used when the sun does not rise or set."""

    AQRAB_BALAD = "aqrab_balad"  # nearest latitude with a regular day
    AQRAB_YAUM = "aqrab_yaum"  # nearest date with a regular day


class Rounding(Enum):
    NEAREST = "nearest"
    UP = "up"
    NONE = "none"


@dataclass(frozen=True)
class Coordinate:
    """Observer position. Validated by the calculator, not here."""

    lat: float  # Latitude (decimal degrees, north positive)
    lng: float  # Longitude (decimal degrees, east positive)


@dataclass(frozen=True)
class SolarPosition:
    """Apparent solar quantities for one Julian date."""

    declination: float  # Degrees north of the celestial equator
    equation_of_time: float  # Apparent minus mean solar time (minutes)


@dataclass(frozen=True)
class PrayerAdjustments:
    """Minute offsets added to each computed prayer."""

    fajr: int = 0
    dhuhr: int = 0
    asr: int = 0
    maghrib: int = 0
    isha: int = 0

    def __add__(self, other: "PrayerAdjustments") -> "PrayerAdjustments":
        return PrayerAdjustments(
            *(getattr(self, name) + getattr(other, name) for name in PRAYER_NAMES)
        )


@dataclass(frozen=True)
class CalculationParameters:
    """Angle set and rules for one calculation convention."""

    method: str  # Preset name ("MuslimWorldLeague", ...)
    fajr_angle: float  # Degrees below the horizon
    isha_angle: float  # Degrees below the horizon; ignored when isha_interval > 0
    isha_interval: int = 0  # Minutes after sunset
    maghrib_angle: float = 0.0  # Degrees below the horizon; 0 means sunset
    madhab: Madhab = Madhab.SHAFI
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    polar_circle_resolution: PolarCircleResolution = PolarCircleResolution.AQRAB_BALAD
    rounding: Rounding = Rounding.NEAREST
    adjustments: PrayerAdjustments = field(default_factory=PrayerAdjustments)
    method_adjustments: PrayerAdjustments = field(default_factory=PrayerAdjustments)

    def night_portions(self) -> tuple[float, float]:
        """Fraction of the night bounding Fajr and Isha, as (fajr, isha)."""
        if self.high_latitude_rule is HighLatitudeRule.SEVENTH_OF_THE_NIGHT:
            return 1 / 7, 1 / 7
        if self.high_latitude_rule is HighLatitudeRule.TWILIGHT_ANGLE:
            return self.fajr_angle / 60, self.isha_angle / 60
        return 1 / 2, 1 / 2

    def replace(self, **changes) -> "CalculationParameters":
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class PrayerTimeSet:
    """Five prayer instants (UTC) for one coordinate on one civil date."""

    coordinate: Coordinate
    date: date
    method: str
    fajr: datetime
    dhuhr: datetime
    asr: datetime
    maghrib: datetime
    isha: datetime
    # A high-latitude or polar fallback was applied, or the ordering guard
    # separated collapsed neighbours (short resolved nights, large adjustments)
    high_latitude_adjusted: bool = False

    def __iter__(self) -> Iterator[datetime]:
        return iter(self.as_tuple())

    def as_tuple(self) -> tuple[datetime, ...]:
        return tuple(getattr(self, name) for name in PRAYER_NAMES)

    def as_dict(self) -> dict[str, datetime]:
        return {name: getattr(self, name) for name in PRAYER_NAMES}


@dataclass(frozen=True)
class QueryInput:
    """Raw user input. Not yet validated."""

    lat: str  # Latitude as typed ("52.2873")
    lng: str  # Longitude as typed ("76.9674")
    when: str  # "YYYY-MM-DD" civil date
    method: str = "MuslimWorldLeague"  # Calculation method name


@dataclass(frozen=True)
class City:
    """Preset location with the display offset used by its residents."""

    key: str  # Lookup key ("strasbourg")
    name: str  # Display name
    coordinate: Coordinate
    utc_offset: float  # Hours east of UTC for display


@dataclass(frozen=True)
class SkyPhase:
    """Where "now" sits on the sun's daily arc."""

    is_night: bool  # Before Fajr or after Maghrib
    progress: float  # 0..1 across Fajr→Maghrib by day, Maghrib→Fajr by night
