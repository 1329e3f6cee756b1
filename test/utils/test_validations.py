from datetime import date, time
from unittest import TestCase

from studio.utils.validations import (
    InvalidTimeRange,
    InvalidWeekdayCount,
    InvalidWeekdayToken,
    Weekday,
    calculate_age,
    calculate_years,
    validate_time_range,
    validate_weekdays,
)


class TestValidateWeekdays(TestCase):
    def test_empty_is_valid(self):
        self.assertIsNone(validate_weekdays(""))
        self.assertIsNone(validate_weekdays(None))

    def test_one_or_two_valid_days(self):
        for weekdays in ("MONDAY", "SUNDAY", "MONDAY,THURSDAY", " TUESDAY , FRIDAY "):
            with self.subTest(weekdays=weekdays):
                self.assertIsNone(validate_weekdays(weekdays))

    def test_more_than_two_days(self):
        for weekdays in ("MONDAY,TUESDAY,WEDNESDAY", "MONDAY,MONDAY,MONDAY", "a,b,c,d"):
            with self.subTest(weekdays=weekdays):
                self.assertIsInstance(validate_weekdays(weekdays), InvalidWeekdayCount)

    def test_unknown_token(self):
        error = validate_weekdays("MONDAY,FUNDAY")
        self.assertIsInstance(error, InvalidWeekdayToken)
        self.assertIn("FUNDAY", str(error))

    def test_tokens_are_case_sensitive(self):
        self.assertIsInstance(validate_weekdays("monday"), InvalidWeekdayToken)

    def test_every_weekday_has_display_name(self):
        self.assertEqual(Weekday.MONDAY.display_name, "Понедельник")
        self.assertEqual(len(list(Weekday)), 7)


class TestValidateTimeRange(TestCase):
    def test_start_before_end(self):
        self.assertIsNone(validate_time_range(time(10, 0), time(11, 30)))

    def test_start_equal_or_after_end(self):
        for start, end in ((time(10, 0), time(10, 0)), (time(12, 0), time(11, 0))):
            with self.subTest(start=start, end=end):
                self.assertIsInstance(validate_time_range(start, end), InvalidTimeRange)


class TestCalculateAge(TestCase):
    today = date(2026, 10, 19)

    def test_birthday_not_yet_this_year(self):
        self.assertEqual(calculate_years(date(2006, 10, 20), self.today), 19)

    def test_birthday_today(self):
        self.assertEqual(calculate_years(date(2006, 10, 19), self.today), 20)

    def test_twenty_years_and_a_day(self):
        self.assertEqual(calculate_age(date(2006, 10, 18), self.today), "20 лет")

    def test_plural_forms(self):
        cases = {
            1: "1 год",
            2: "2 года",
            4: "4 года",
            5: "5 лет",
            11: "11 лет",
            14: "14 лет",
            19: "19 лет",
            21: "21 год",
            22: "22 года",
            25: "25 лет",
            111: "111 лет",
            101: "101 год",
        }
        for years, expected in cases.items():
            with self.subTest(years=years):
                birth = date(self.today.year - years, 1, 1)
                self.assertEqual(calculate_age(birth, self.today), expected)
