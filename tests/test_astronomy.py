"""Tests for the astronomy module."""

import datetime
import unittest

from prayertime.astronomy import compute_prayer_times, format_hours, qibla_direction, utc_offset_hours
from prayertime.errors import InputError
from prayertime.methods import AsrSchool, CalculationMethod
from prayertime.models import Coordinates

MECCA = Coordinates(21.3891, 39.8579)
DAY = datetime.date(2024, 3, 11)


def minutes(hhmm):
    h, m = map(int, hhmm.split(":"))
    return h * 60 + m


class TestComputePrayerTimes(unittest.TestCase):
    def test_mecca_is_plausible(self):
        times = compute_prayer_times(MECCA, DAY, CalculationMethod.MWL, timezone="Asia/Riyadh")
        self.assertEqual(times.source, "local")
        self.assertEqual(times.date, "11-03-2024")
        self.assertTrue(minutes("12:20") <= minutes(times["Dhuhr"]) <= minutes("12:40"), times["Dhuhr"])
        self.assertTrue(minutes("04:50") <= minutes(times["Fajr"]) <= minutes("05:25"), times["Fajr"])
        self.assertTrue(minutes("18:15") <= minutes(times["Maghrib"]) <= minutes("18:45"), times["Maghrib"])

    def test_times_are_in_order(self):
        times = compute_prayer_times(MECCA, DAY, CalculationMethod.MWL, timezone="Asia/Riyadh")
        order = ["Imsak", "Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha"]
        values = [minutes(times[name]) for name in order]
        self.assertEqual(values, sorted(values))
        self.assertEqual(len(set(values)), len(values))

    def test_hanafi_asr_is_later(self):
        shafi = compute_prayer_times(MECCA, DAY, school=AsrSchool.SHAFI, timezone="Asia/Riyadh")
        hanafi = compute_prayer_times(MECCA, DAY, school=AsrSchool.HANAFI, timezone="Asia/Riyadh")
        self.assertGreater(minutes(hanafi["Asr"]), minutes(shafi["Asr"]))
        self.assertEqual(hanafi["Dhuhr"], shafi["Dhuhr"])

    def test_fixed_isha_interval(self):
        times = compute_prayer_times(MECCA, DAY, CalculationMethod.MAKKAH, timezone="Asia/Riyadh")
        self.assertEqual(minutes(times["Isha"]) - minutes(times["Maghrib"]), 90)

    def test_maghrib_angle_is_after_sunset(self):
        times = compute_prayer_times(MECCA, DAY, CalculationMethod.TEHRAN, timezone="Asia/Riyadh")
        self.assertGreater(minutes(times["Maghrib"]), minutes(times["Sunset"]))

    def test_offset_estimated_from_longitude(self):
        with_tz = compute_prayer_times(MECCA, DAY, timezone="Asia/Riyadh")
        without_tz = compute_prayer_times(MECCA, DAY)
        self.assertEqual(with_tz.timings, without_tz.timings)

    def test_explicit_offset(self):
        riyadh = compute_prayer_times(MECCA, DAY, timezone="Asia/Riyadh")
        shifted = compute_prayer_times(MECCA, DAY, utc_offset=4)
        self.assertEqual(minutes(shifted["Dhuhr"]) - minutes(riyadh["Dhuhr"]), 60)

    def test_polar_latitude_still_produces_times(self):
        for coords in ((69.6492, 18.9553), (89.99, 0.0), (90.0, 0.0), (-78.0, 166.0)):
            times = compute_prayer_times(coords, datetime.date(2024, 6, 21), timezone="UTC")
            for name in ("Fajr", "Dhuhr", "Asr", "Maghrib", "Isha"):
                self.assertRegex(times[name], r"^\d{2}:\d{2}$")

    def test_invalid_input(self):
        with self.assertRaises(InputError):
            compute_prayer_times((91.0, 0.0), DAY)
        with self.assertRaises(InputError):
            compute_prayer_times(MECCA, DAY, method="nope")
        with self.assertRaises(InputError):
            compute_prayer_times(MECCA, DAY, school=2)

    def test_unknown_timezone_is_input_error(self):
        with self.assertRaises(InputError) as ctx:
            compute_prayer_times(MECCA, DAY, timezone="Mars/Olympus_Mons")
        self.assertIn("Mars/Olympus_Mons", str(ctx.exception))


class TestHelpers(unittest.TestCase):
    def test_format_hours_rounds_to_minute(self):
        self.assertEqual(format_hours(5.5), "05:30")
        self.assertEqual(format_hours(12.999), "13:00")
        self.assertEqual(format_hours(23.999), "00:00")
        self.assertEqual(format_hours(-1.0), "23:00")

    def test_utc_offset_follows_dst(self):
        self.assertEqual(utc_offset_hours("America/New_York", datetime.date(2024, 1, 15)), -5.0)
        self.assertEqual(utc_offset_hours("America/New_York", datetime.date(2024, 7, 15)), -4.0)
        self.assertEqual(utc_offset_hours("Asia/Kolkata", datetime.date(2024, 7, 15)), 5.5)


class TestQibla(unittest.TestCase):
    def test_known_bearings(self):
        self.assertAlmostEqual(qibla_direction((51.5074, -0.1278)), 119.0, delta=1.0)
        self.assertAlmostEqual(qibla_direction((40.7128, -74.0060)), 58.5, delta=1.0)
        self.assertAlmostEqual(qibla_direction((-6.2088, 106.8456)), 295.0, delta=1.0)

    def test_range(self):
        for coords in ((0.0, 0.0), (-33.87, 151.21), (64.13, -21.9), (21.0, 40.5)):
            bearing = qibla_direction(coords)
            self.assertGreaterEqual(bearing, 0.0)
            self.assertLess(bearing, 360.0)


if __name__ == "__main__":
    unittest.main()
