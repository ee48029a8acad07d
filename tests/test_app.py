"""Tests for the console front-end."""

import datetime
import io
import unittest
from unittest.mock import patch

import pytz

from prayertime.location import Location
from prayertime.models import PrayerTimes
from prayertime.schedule import ScheduleResolver
from prayertime.service import PrayerTimeService, ScheduleView, ViewStatus
from prayertime_app import PrayerTimeApp, build_parser, main

RIYADH = Location(24.7136, 46.6753, city="Riyadh", country="Saudi Arabia", timezone="Asia/Riyadh")
TIMINGS = {"Fajr": "04:57", "Dhuhr": "12:21", "Asr": "15:35", "Maghrib": "18:32", "Isha": "19:50"}


class FakeProvider:
    def fetch_hijri_date(self, date=None, timezone=None):
        return None

    def fetch_prayer_times(self, coordinates, date, method, school, timezone=None):
        return PrayerTimes(date=date.strftime("%d-%m-%Y"), timings=dict(TIMINGS), source="remote")


def make_app():
    provider = FakeProvider()
    resolver = ScheduleResolver(
        provider=provider,
        clock=lambda: pytz.utc.localize(datetime.datetime(2024, 3, 11, 10, 0)),
    )
    out = io.StringIO()
    return PrayerTimeApp(PrayerTimeService(provider=provider, resolver=resolver), RIYADH, out=out), out


class TestPrayerTimeApp(unittest.TestCase):
    def test_run_once(self):
        app, out = make_app()
        self.assertEqual(app.run(once=True), 0)
        text = out.getvalue()
        self.assertIn("Riyadh", text)
        self.assertIn("AH", text)
        self.assertIn("Prayer times (remote)", text)
        self.assertIn("15:35", text)
        self.assertIn("Next: Asr in 02:35:00", text)

    def test_tick_shows_countdown(self):
        app, out = make_app()
        app.view = app.service.get_prayer_schedule(RIYADH, RIYADH.timezone)
        now = pytz.timezone("Asia/Riyadh").localize(datetime.datetime(2024, 3, 11, 15, 0))
        self.assertTrue(app._tick(now))
        self.assertIn("00:35:00", out.getvalue())

    def test_tick_while_loading(self):
        app, out = make_app()
        app.view = ScheduleView()
        self.assertTrue(app._tick(datetime.datetime.now(pytz.utc)))
        self.assertIn("Loading", out.getvalue())

    def test_tick_stops_on_error(self):
        app, out = make_app()
        app.view = ScheduleView(status=ViewStatus.UNAVAILABLE, error="no data")
        self.assertFalse(app._tick(datetime.datetime.now(pytz.utc)))
        self.assertIn("no data", out.getvalue())


class TestMain(unittest.TestCase):
    def test_parser(self):
        args = build_parser().parse_args(["--lat", "21.4", "--lon", "39.8", "--method", "MWL", "--once"])
        self.assertEqual(args.lat, 21.4)
        self.assertEqual(args.method, "MWL")
        self.assertTrue(args.once)

    def test_invalid_coordinates_exit(self):
        with patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                main(["--lat", "95", "--lon", "0", "--timezone", "UTC", "--once"])


if __name__ == "__main__":
    unittest.main()
