"""Runtime settings read from the environment (and a .env file at entry points).

Variables:
    ATHANTIMES_METHOD              Calculation method name (default MuslimWorldLeague)
    ATHANTIMES_MADHAB              shafi | hanafi
    ATHANTIMES_HIGH_LATITUDE_RULE  middle_of_the_night | seventh_of_the_night | twilight_angle
    ATHANTIMES_POLAR_RESOLUTION    aqrab_balad | aqrab_yaum
    ATHANTIMES_LOG_LEVEL           DEBUG .. CRITICAL (default WARNING)
    ATHANTIMES_LANG                en | fr
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, TypeVar

from athantimes.exceptions import InvalidInput
from athantimes.methods import DEFAULT_METHOD, CalculationMethod
from athantimes.models import (
    CalculationParameters,
    HighLatitudeRule,
    Madhab,
    PolarCircleResolution,
)

ENV_PREFIX = "ATHANTIMES_"
SUPPORTED_LANGS = ("en", "fr")

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class Settings:
    method: CalculationMethod = DEFAULT_METHOD
    madhab: Madhab = Madhab.SHAFI
    high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_THE_NIGHT
    polar_resolution: PolarCircleResolution = PolarCircleResolution.AQRAB_BALAD
    log_level: str = "WARNING"
    lang: str = "en"

    def parameters(self) -> CalculationParameters:
        """The method's preset with this configuration's rules applied."""
        return self.method.parameters().replace(
            madhab=self.madhab,
            high_latitude_rule=self.high_latitude_rule,
            polar_circle_resolution=self.polar_resolution,
        )


def parse_choice(enum_cls: type[E], raw: str, setting: str) -> E:
    """Match ``raw`` against an enum's member names, case-insensitively."""
    key = raw.strip().replace("-", "_").upper()
    try:
        return enum_cls[key]
    except KeyError:
        raise InvalidInput(
            f"Invalid value for {setting}: {raw}",
            {"choices": ", ".join(m.name.lower() for m in enum_cls)},
        ) from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``environ`` (default: ``os.environ``).

    Unset variables keep their defaults.

    Raises:
        InvalidInput: A variable holds an unknown value.
    """
    env = os.environ if environ is None else environ
    defaults = Settings()

    def get(name: str) -> Optional[str]:
        value = env.get(ENV_PREFIX + name)
        return value if value else None

    method = get("METHOD")
    madhab = get("MADHAB")
    rule = get("HIGH_LATITUDE_RULE")
    polar = get("POLAR_RESOLUTION")
    lang = (get("LANG") or defaults.lang).lower()
    if lang not in SUPPORTED_LANGS:
        raise InvalidInput(f"Unsupported language: {lang}", {"choices": ", ".join(SUPPORTED_LANGS)})

    return Settings(
        method=CalculationMethod.from_name(method) if method else defaults.method,
        madhab=parse_choice(Madhab, madhab, "madhab") if madhab else defaults.madhab,
        high_latitude_rule=(
            parse_choice(HighLatitudeRule, rule, "high latitude rule")
            if rule
            else defaults.high_latitude_rule
        ),
        polar_resolution=(
            parse_choice(PolarCircleResolution, polar, "polar resolution")
            if polar
            else defaults.polar_resolution
        ),
        log_level=(get("LOG_LEVEL") or defaults.log_level).upper(),
        lang=lang,
    )
