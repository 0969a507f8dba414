"""Calculation method catalog — the fixed set of named conventions."""

from enum import Enum

from athantimes.exceptions import InvalidInput
from athantimes.models import CalculationParameters, PrayerAdjustments, Rounding


class CalculationMethod(Enum):
    """Named conventions. Values are the camel-case names used in output."""

    MUSLIM_WORLD_LEAGUE = "MuslimWorldLeague"
    EGYPTIAN = "Egyptian"
    KARACHI = "Karachi"
    UMM_AL_QURA = "UmmAlQura"
    DUBAI = "Dubai"
    QATAR = "Qatar"
    KUWAIT = "Kuwait"
    SINGAPORE = "Singapore"
    NORTH_AMERICA = "NorthAmerica"
    TEHRAN = "Tehran"
    TURKEY = "Turkey"

    def parameters(self) -> CalculationParameters:
        """Parameters for this convention."""
        return _PRESETS[self]

    @classmethod
    def from_name(cls, name: str) -> "CalculationMethod":
        """Look up a method by enum name or camel-case name, ignoring case.

        Raises:
            InvalidInput: No method carries that name.
        """
        key = name.strip().replace("-", "_").replace(" ", "_").lower()
        for method in cls:
            if key in (method.name.lower(), method.value.lower()):
                return method
        raise InvalidInput(
            f"Unknown calculation method: {name}",
            {"known": ", ".join(m.value for m in cls)},
        )


DEFAULT_METHOD = CalculationMethod.MUSLIM_WORLD_LEAGUE


def _preset(
    method: CalculationMethod,
    fajr_angle: float,
    isha_angle: float,
    **kwargs,
) -> CalculationParameters:
    return CalculationParameters(
        method=method.value, fajr_angle=fajr_angle, isha_angle=isha_angle, **kwargs
    )


# Angles and offsets follow the published conventions as tabulated by the adhan library
_PRESETS: dict[CalculationMethod, CalculationParameters] = {
    CalculationMethod.MUSLIM_WORLD_LEAGUE: _preset(
        CalculationMethod.MUSLIM_WORLD_LEAGUE,
        18,
        17,
        method_adjustments=PrayerAdjustments(dhuhr=1),
    ),
    CalculationMethod.EGYPTIAN: _preset(
        CalculationMethod.EGYPTIAN,
        19.5,
        17.5,
        method_adjustments=PrayerAdjustments(dhuhr=1),
    ),
    CalculationMethod.KARACHI: _preset(
        CalculationMethod.KARACHI,
        18,
        18,
        method_adjustments=PrayerAdjustments(dhuhr=1),
    ),
    CalculationMethod.UMM_AL_QURA: _preset(
        CalculationMethod.UMM_AL_QURA, 18.5, 0, isha_interval=90
    ),
    CalculationMethod.DUBAI: _preset(
        CalculationMethod.DUBAI,
        18.2,
        18.2,
        method_adjustments=PrayerAdjustments(dhuhr=3, asr=3, maghrib=3),
    ),
    CalculationMethod.QATAR: _preset(CalculationMethod.QATAR, 18, 0, isha_interval=90),
    CalculationMethod.KUWAIT: _preset(CalculationMethod.KUWAIT, 18, 17.5),
    CalculationMethod.SINGAPORE: _preset(
        CalculationMethod.SINGAPORE,
        20,
        18,
        method_adjustments=PrayerAdjustments(dhuhr=1),
        rounding=Rounding.UP,
    ),
    CalculationMethod.NORTH_AMERICA: _preset(
        CalculationMethod.NORTH_AMERICA,
        15,
        15,
        method_adjustments=PrayerAdjustments(dhuhr=1),
    ),
    CalculationMethod.TEHRAN: _preset(
        CalculationMethod.TEHRAN, 17.7, 14, maghrib_angle=4.5
    ),
    CalculationMethod.TURKEY: _preset(
        CalculationMethod.TURKEY,
        18,
        17,
        method_adjustments=PrayerAdjustments(dhuhr=5, asr=4, maghrib=7),
    ),
}
