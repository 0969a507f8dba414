"""CLI entry point for printing one day's prayer times.

    athantimes --city pavlodar --date 2026-02-23
    athantimes --lat 48.5734 --lng 7.7521 --method Karachi --tz auto
"""

import argparse
import sys
from datetime import datetime, tzinfo
from typing import Optional, Sequence

from dotenv import load_dotenv
from pytz import FixedOffset, UnknownTimeZoneError, timezone, utc
from timezonefinder import TimezoneFinder

from athantimes.compute import compute_prayer_times, parse_coordinate, parse_date
from athantimes.config import load_settings, parse_choice
from athantimes.exceptions import InvalidInput
from athantimes.i18n import t
from athantimes.logging_config import LOG_LEVELS, get_logger, setup_logging
from athantimes.methods import CalculationMethod
from athantimes.models import (
    PRAYER_NAMES,
    HighLatitudeRule,
    Madhab,
    PolarCircleResolution,
    PrayerTimeSet,
)
from athantimes.schedule import get_city, local_date, next_prayer, solar_date

logger = get_logger(__name__)

EXIT_INVALID_INPUT = 2


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="athantimes",
        description="Compute the five daily prayer times for a location and date.",
    )
    where = parser.add_mutually_exclusive_group(required=True)
    where.add_argument("--city", help="Preset city (strasbourg, pavlodar)")
    where.add_argument("--lat", help="Latitude in decimal degrees (requires --lng)")
    parser.add_argument("--lng", help="Longitude in decimal degrees")
    parser.add_argument("--date", help="Civil date YYYY-MM-DD (default: today)")
    parser.add_argument(
        "--method",
        choices=[m.value for m in CalculationMethod],
        help="Calculation method (default: ATHANTIMES_METHOD or MuslimWorldLeague)",
    )
    parser.add_argument("--madhab", choices=[m.name.lower() for m in Madhab])
    parser.add_argument(
        "--high-latitude-rule", choices=[r.name.lower() for r in HighLatitudeRule]
    )
    parser.add_argument(
        "--polar-resolution", choices=[r.name.lower() for r in PolarCircleResolution]
    )
    parser.add_argument(
        "--tz",
        help="Display zone: utc, auto (from coordinates) or an IANA name "
        "(default: the city's offset, else utc)",
    )
    parser.add_argument("--lang", choices=["en", "fr"])
    parser.add_argument("--log-level", choices=list(LOG_LEVELS))
    return parser


def resolve_display_zone(name: Optional[str], lat: float, lng: float) -> tzinfo:
    """Map a --tz value to a tzinfo; ``auto`` looks the zone up from the coordinates."""
    if name is None or name.lower() == "utc":
        return utc
    if name.lower() == "auto":
        zone_name = TimezoneFinder().timezone_at(lat=lat, lng=lng)
        if zone_name is None:
            logger.warning("No time zone found at lat=%s lng=%s; using UTC", lat, lng)
            return utc
        return timezone(zone_name)
    try:
        return timezone(name)
    except UnknownTimeZoneError:
        raise InvalidInput(f"Unknown time zone: {name}") from None


def zone_label(zone: tzinfo) -> str:
    """IANA name when the zone has one, else a UTC±HH:MM label."""
    name = getattr(zone, "zone", None)
    if name:
        return name
    minutes = int(zone.utcoffset(None).total_seconds() // 60)
    sign = "+" if minutes >= 0 else "-"
    hours, minutes = divmod(abs(minutes), 60)
    return f"UTC{sign}{hours:02d}:{minutes:02d}"


def format_times(
    times: PrayerTimeSet, zone: tzinfo, lang: str, place: str, now: Optional[datetime] = None
) -> str:
    """Render a PrayerTimeSet as the CLI's text block.

    Instants landing on another local date than requested carry a (+1)/(-1) marker.
    """
    lines = [
        t("header", lang).format(place=place, date=times.date.isoformat(), method=times.method),
        t("timezone", lang).format(tz=zone_label(zone)),
    ]
    for name, instant in zip(PRAYER_NAMES, times):
        local = instant.astimezone(zone)
        shift = (local.date() - times.date).days
        marker = f" ({shift:+d})" if shift else ""
        lines.append(f"  {t(name, lang):<8} {local.strftime('%H:%M')}{marker}")
    if times.high_latitude_adjusted:
        lines.append(t("high_latitude_note", lang))
    if now is not None:
        upcoming = next_prayer(times, now)
        if upcoming is not None:
            name, instant = upcoming
            lines.append(
                t("next_prayer", lang).format(
                    name=t(name, lang), time=instant.astimezone(zone).strftime("%H:%M")
                )
            )
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    parser = create_parser()
    args = parser.parse_args(argv)
    if args.lat is not None and args.lng is None:
        parser.error("--lat requires --lng")

    try:
        settings = load_settings()
    except InvalidInput as exc:
        print(t("error_input", "en").format(error=exc), file=sys.stderr)
        return EXIT_INVALID_INPUT
    lang = args.lang or settings.lang
    setup_logging(log_level=args.log_level or settings.log_level)

    try:
        params = settings.parameters()
        if args.method:
            params = CalculationMethod.from_name(args.method).parameters().replace(
                madhab=params.madhab,
                high_latitude_rule=params.high_latitude_rule,
                polar_circle_resolution=params.polar_circle_resolution,
            )
        if args.madhab:
            params = params.replace(madhab=parse_choice(Madhab, args.madhab, "madhab"))
        if args.high_latitude_rule:
            params = params.replace(
                high_latitude_rule=parse_choice(
                    HighLatitudeRule, args.high_latitude_rule, "high latitude rule"
                )
            )
        if args.polar_resolution:
            params = params.replace(
                polar_circle_resolution=parse_choice(
                    PolarCircleResolution, args.polar_resolution, "polar resolution"
                )
            )

        now = datetime.now(utc)
        if args.city:
            city = get_city(args.city)
            day = parse_date(args.date) if args.date else local_date(now, city.utc_offset)
            coordinate = city.coordinate
            place = city.name
            zone = (
                resolve_display_zone(args.tz, coordinate.lat, coordinate.lng)
                if args.tz
                else FixedOffset(round(city.utc_offset * 60))
            )
        else:
            coordinate = parse_coordinate(args.lat, args.lng)
            day = parse_date(args.date) if args.date else solar_date(now, coordinate.lng)
            place = f"{coordinate.lat:.4f}, {coordinate.lng:.4f}"
            zone = resolve_display_zone(args.tz, coordinate.lat, coordinate.lng)

        times = compute_prayer_times(coordinate, day, params)
    except InvalidInput as exc:
        logger.error("Rejected input: %s", exc)
        print(t("error_input", lang).format(error=exc), file=sys.stderr)
        return EXIT_INVALID_INPUT

    print(format_times(times, zone, lang, place, now=None if args.date else now))
    return 0


if __name__ == "__main__":
    sys.exit(main())
