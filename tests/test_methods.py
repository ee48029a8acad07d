"""Tests for the methods and models modules."""

import unittest

from prayertime.errors import InputError
from prayertime.location import Location
from prayertime.methods import (
    AsrSchool,
    CalculationMethod,
    CalendarProfile,
    DEFAULT_PROFILE,
    get_method,
    get_school,
)
from prayertime.models import Coordinates, PrayerTimes, ensure_coordinates, validate_coordinates


class TestGetMethod(unittest.TestCase):
    def test_accepts_ids_and_names(self):
        self.assertIs(get_method(3), CalculationMethod.MWL)
        self.assertIs(get_method("4"), CalculationMethod.MAKKAH)
        self.assertIs(get_method("isna"), CalculationMethod.ISNA)
        self.assertIs(get_method(CalculationMethod.EGYPT), CalculationMethod.EGYPT)

    def test_rejects_unknown(self):
        for bad in (6, 99, "nope", None, 2.5j):
            with self.assertRaises(InputError, msg=repr(bad)):
                get_method(bad)

    def test_params(self):
        self.assertEqual(CalculationMethod.MWL.params.fajr_angle, 18)
        self.assertEqual(CalculationMethod.MAKKAH.params.isha_minutes, 90)
        self.assertIsNone(CalculationMethod.MAKKAH.params.isha_angle)
        self.assertEqual(CalculationMethod.TEHRAN.params.maghrib_angle, 4.5)
        for method in CalculationMethod:
            params = method.params
            self.assertTrue(params.isha_angle is not None or params.isha_minutes is not None, method)


class TestGetSchool(unittest.TestCase):
    def test_values(self):
        self.assertIs(get_school(0), AsrSchool.SHAFI)
        self.assertIs(get_school("hanafi"), AsrSchool.HANAFI)
        self.assertEqual(AsrSchool.SHAFI.shadow_factor, 1)
        self.assertEqual(AsrSchool.HANAFI.shadow_factor, 2)

    def test_rejects_unknown(self):
        with self.assertRaises(InputError):
            get_school(2)
        with self.assertRaises(InputError):
            get_school("maliki")


class TestCalendarProfile(unittest.TestCase):
    def test_every_profile_has_info(self):
        self.assertEqual(len(CalendarProfile), 10)
        for profile in CalendarProfile:
            self.assertTrue(profile.info.name)
        self.assertIs(DEFAULT_PROFILE, CalendarProfile.UMM_AL_QURA)
        self.assertIs(CalendarProfile("kuwaiti"), CalendarProfile.KUWAITI)


class TestCoordinates(unittest.TestCase):
    def test_valid(self):
        self.assertEqual(validate_coordinates("21.5", 39), Coordinates(21.5, 39.0))
        self.assertEqual(validate_coordinates(-90, 180), Coordinates(-90.0, 180.0))

    def test_invalid(self):
        for lat, lng in ((None, 0), (0, None), (True, 0), ("abc", 0), (float("nan"), 0), (90.1, 0), (0, -180.5)):
            with self.assertRaises(InputError, msg=(lat, lng)):
                validate_coordinates(lat, lng)

    def test_ensure_coordinates(self):
        self.assertEqual(ensure_coordinates((1, 2)), Coordinates(1.0, 2.0))
        self.assertEqual(ensure_coordinates(Location(1.0, 2.0)), Coordinates(1.0, 2.0))
        for bad in (None, (1, 2, 3), "1,2", 42):
            with self.assertRaises(InputError):
                ensure_coordinates(bad)

    def test_rounded(self):
        self.assertEqual(Coordinates(21.3891, 39.8579).rounded(), Coordinates(21.39, 39.86))


class TestPrayerTimes(unittest.TestCase):
    def test_lookup_covers_extras(self):
        times = PrayerTimes(
            date="11-03-2024",
            timings={"Fajr": "05:07"},
            source="remote",
            extras={"Sunrise": "06:22"},
        )
        self.assertEqual(times["Fajr"], "05:07")
        self.assertEqual(times["Sunrise"], "06:22")
        with self.assertRaises(KeyError):
            times["Tahajjud"]


if __name__ == "__main__":
    unittest.main()
