"""CLI entry point for prayer timetables.

    salat-times "Central Park, New York" --date 2025-01-15
    salat-times --lat 40.7128 --lon -74.006 --timezone America/New_York --month
"""

import argparse
import logging
import sys
from datetime import date, datetime

from dotenv import load_dotenv

load_dotenv()

from pytz import utc  # noqa: E402

from salattimes.compute import (  # noqa: E402
    daily,
    format_time_remaining,
    monthly,
    next_event,
    time_until_next,
)
from salattimes.config import Settings, load_settings, parse_enum  # noqa: E402
from salattimes.formatting import format_coordinate, format_time  # noqa: E402
from salattimes.i18n import t  # noqa: E402
from salattimes.location import GeocodingError, geocode_address, timezone_for  # noqa: E402
from salattimes.logging_config import setup_logging  # noqa: E402
from salattimes.methods import METHOD_PRESETS  # noqa: E402
from salattimes.models import (  # noqa: E402
    Coordinates,
    DailyTable,
    HighLatitudeRule,
    Madhab,
    Shafaq,
)
from salattimes.qibla import qibla_bearing  # noqa: E402


def _build_parser(defaults: Settings) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="salat-times", description="Print daily or monthly prayer times."
    )
    p.add_argument("address", nargs="?", help="Address to geocode (omit with --lat/--lon)")
    p.add_argument("--lat", type=float, help="Latitude in decimal degrees")
    p.add_argument("--lon", type=float, help="Longitude in decimal degrees")
    p.add_argument("--date", type=date.fromisoformat, default=None, help="YYYY-MM-DD (default: today)")
    p.add_argument("--month", action="store_true", help="Print the whole month of --date")
    p.add_argument("--method", default=defaults.method, choices=sorted(METHOD_PRESETS))
    p.add_argument("--fajr-angle", type=float, default=defaults.fajr_angle)
    p.add_argument("--isha-angle", type=float, default=defaults.isha_angle)
    p.add_argument("--isha-interval", type=float, default=defaults.isha_interval)
    p.add_argument("--madhab", default=defaults.madhab.value)
    p.add_argument("--high-latitude-rule", default=defaults.high_latitude_rule.value)
    p.add_argument("--shafaq", default=defaults.shafaq.value)
    p.add_argument(
        "--timezone", default=None, help="IANA zone (default: SALAT_TIMEZONE, else from coordinates)"
    )
    p.add_argument("--lang", default=defaults.lang, choices=["en", "ar"])
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--log-file", default=None, help="Also write logs to this file")
    return p


def _print_day(table: DailyTable, tz_name: str, lang: str) -> None:
    print(f"{t('header_date', lang)}: {table.date_label}")
    print(f"    {t('header_event', lang):<24} {t('header_time', lang)}")
    for timing in table.schedule.timings:
        marker = "*" if timing.is_fard else " "
        when = format_time(timing.instant, tz_name, placeholder=t("no_time", lang))
        print(f"  {marker} {timing.label:<24} {when}")


def main(argv: list[str] | None = None) -> int:
    try:
        defaults = load_settings()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    args = _build_parser(defaults).parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, log_file=args.log_file)

    try:
        settings = Settings(
            method=args.method,
            fajr_angle=args.fajr_angle,
            isha_angle=args.isha_angle,
            isha_interval=args.isha_interval,
            madhab=parse_enum(Madhab, args.madhab),
            high_latitude_rule=parse_enum(HighLatitudeRule, args.high_latitude_rule),
            shafaq=parse_enum(Shafaq, args.shafaq),
            lang=args.lang,
        )
        parameters = settings.to_parameters()
    except ValueError as e:
        print(f"Invalid parameters: {e}", file=sys.stderr)
        return 2

    try:
        if args.lat is not None and args.lon is not None:
            coordinates = Coordinates(latitude=args.lat, longitude=args.lon)
            tz_name = args.timezone or defaults.timezone or timezone_for(coordinates)
            place = f"{format_coordinate(args.lat, 'N', 'S')}, {format_coordinate(args.lon, 'E', 'W')}"
        elif args.address:
            context = geocode_address(args.address, api_key=defaults.geocode_api_key)
            coordinates = context.coordinates
            tz_name = args.timezone or defaults.timezone or context.timezone
            place = context.address_display
        else:
            print("Give an address or both --lat and --lon.", file=sys.stderr)
            return 2
    except GeocodingError as e:
        print(t("error_address", args.lang).format(error=e), file=sys.stderr)
        return 1

    day = args.date or datetime.now(utc).date()
    print(place)
    print(t("qibla", args.lang).format(bearing=qibla_bearing(coordinates)))
    print()

    if args.month:
        period = monthly(coordinates, day.year, day.month, parameters, lang=args.lang)
        print(period.label)
        for table in period.days:
            _print_day(table, tz_name, args.lang)
        return 0

    table = daily(coordinates, day, parameters, lang=args.lang)
    _print_day(table, tz_name, args.lang)

    now = datetime.now(utc)
    upcoming = next_event(table.schedule.timings, now)
    remaining = time_until_next(table.schedule.timings, now)
    if upcoming is not None and remaining is not None:
        label = table.schedule.get(upcoming).label
        print()
        print(t("next_event", args.lang).format(label=label, remaining=format_time_remaining(remaining)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
