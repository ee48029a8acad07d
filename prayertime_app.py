#!/usr/bin/env python3
"""
Prayer Time console widget
Shows, for the current (or given) location:
  - Gregorian and Hijri date
  - Daily prayer times, current prayer highlighted
  - A live countdown to the next prayer, refreshed every second
"""

import argparse
import datetime
import logging
import sys
import time

import pytz

from prayertime import config
from prayertime.astronomy import qibla_direction
from prayertime.cache import JsonFileCache
from prayertime.errors import InputError
from prayertime.location import (
    Location,
    clear_manual_location,
    current_location,
    resolve_location,
    save_manual_location,
)
from prayertime.models import PRAYER_DISPLAY
from prayertime.prayer_api import AladhanClient
from prayertime.schedule import ScheduleResolver, format_countdown
from prayertime.service import PrayerTimeService, ViewStatus

REFRESH_SECONDS = 1  # update the countdown every second

logger = logging.getLogger("prayertime_app")


class PrayerTimeApp:
    def __init__(self, service: PrayerTimeService, location: Location, out=sys.stdout):
        self.service = service
        self.location = location
        self.tz = pytz.timezone(location.timezone)
        self.out = out
        self.view = None

    # ──────────────────────────────────────────────────────────────────────
    # Data loading (runs in background thread)
    # ──────────────────────────────────────────────────────────────────────
    def _start_data_load(self):
        self.view = self.service.load_prayer_schedule(self.location, self.location.timezone)

    def print_header(self):
        loc = self.location
        now = datetime.datetime.now(self.tz)
        hijri_view = self.service.get_hijri_date(now.date())
        self.out.write(f"📍 {loc.city or 'Unknown'}, {loc.country}  ({loc.latitude:.4f}, {loc.longitude:.4f})\n")
        self.out.write(f"📅 {now.strftime('%A, %d %B %Y')}\n")
        if hijri_view.is_ready:
            hijri = hijri_view.value
            line = f"☪  {hijri.full_date}  ·  {hijri.full_date_arabic}"
            if hijri.is_holiday:
                line += f"  ·  {hijri.holiday_name}"
            self.out.write(line + "\n")
        self.out.write(f"🧭 Qibla {qibla_direction(loc):.1f}°\n")

    def print_schedule(self, schedule):
        self.out.write(f"\nPrayer times ({schedule.source}):\n")
        for instant in schedule.instants:
            marker = "▶" if instant.is_current else ("…" if instant.is_next else " ")
            self.out.write(f" {marker} {PRAYER_DISPLAY[instant.name]:<16} {instant.time.strftime('%H:%M')}\n")
        self.out.write("\n")

    # ──────────────────────────────────────────────────────────────────────
    # Live clock + countdown tick
    # ──────────────────────────────────────────────────────────────────────
    def _tick(self, now):
        """Called every second; returns False once the view has failed."""
        view = self.view
        if view.status is ViewStatus.PENDING:
            self.out.write("\r⏳ Loading prayer times…")
        elif view.status is not ViewStatus.READY:
            self.out.write(f"\r⚠ Could not load prayer times: {view.error}\n")
            return False
        else:
            schedule = view.value
            if schedule.is_expired(now):
                # Next prayer has started: resolve again rather than extrapolate
                self.view = self.service.get_prayer_schedule(self.location, self.location.timezone)
                if self.view.is_ready:
                    self.print_schedule(self.view.value)
                return self.view.is_ready
            secs = schedule.seconds_remaining(now)
            self.out.write(
                f"\r{now.strftime('%H:%M:%S')}  {PRAYER_DISPLAY[schedule.next.name]} in {format_countdown(secs)} "
            )
        self.out.flush()
        return True

    def run(self, once: bool = False):
        self.print_header()
        if once:
            view = self.service.get_prayer_schedule(self.location, self.location.timezone)
            if not view.is_ready:
                self.out.write(f"⚠ Could not load prayer times: {view.error}\n")
                return 1
            self.print_schedule(view.value)
            self.out.write(f"Next: {view.value.next.name} in {format_countdown(view.value.seconds_until_next)}\n")
            return 0

        self._start_data_load()
        printed = False
        try:
            while True:
                if not printed and self.view.is_ready:
                    self.print_schedule(self.view.value)
                    printed = True
                if not self._tick(datetime.datetime.now(self.tz)):
                    return 1
                time.sleep(REFRESH_SECONDS)
        except KeyboardInterrupt:
            self.out.write("\n")
            return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Prayer times and Hijri date in the terminal")
    parser.add_argument("--lat", type=float, help="latitude in decimal degrees")
    parser.add_argument("--lon", type=float, help="longitude in decimal degrees")
    parser.add_argument("--timezone", help="IANA timezone, e.g. Asia/Riyadh")
    parser.add_argument("--city", default="", help="label for a manual location")
    parser.add_argument("--method", default=config.DEFAULT_METHOD, help="AlAdhan method id or name (MWL, ISNA, ...)")
    parser.add_argument("--school", default=config.DEFAULT_SCHOOL, help="0/shafi or 1/hanafi")
    parser.add_argument("--save", action="store_true", help="remember --lat/--lon/--timezone as the manual location")
    parser.add_argument("--clear-location", action="store_true", help="forget the saved manual location")
    parser.add_argument("--once", action="store_true", help="print the schedule and exit")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.clear_location:
        clear_manual_location()

    try:
        if args.lat is not None and args.lon is not None:
            location = resolve_location({
                "latitude": args.lat,
                "longitude": args.lon,
                "city": args.city,
                "timezone": args.timezone,
            })
            if args.save:
                save_manual_location(location)
        else:
            location = resolve_location(current_location())
    except InputError as e:
        parser.error(str(e))
    logger.info("Using location %s (%s)", location.city or "unnamed", location.timezone)

    provider = AladhanClient(cache=JsonFileCache())
    resolver = ScheduleResolver(provider=provider, method=args.method, school=args.school)
    app = PrayerTimeApp(PrayerTimeService(provider=provider, resolver=resolver), location)
    return app.run(once=args.once)


if __name__ == "__main__":
    sys.exit(main())
