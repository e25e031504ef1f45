from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.test import SimpleTestCase

from assignments import grading

DUE = datetime(2024, 3, 1, 12, 0, tzinfo=dt_timezone.utc)


class PointsEarnedTests(SimpleTestCase):
    def test_on_time_keeps_grade(self):
        self.assertEqual(
            grading.calculate_points_earned(80, is_late=False, late_penalty_percent=10), 80
        )

    def test_late_penalty_applied(self):
        self.assertEqual(
            grading.calculate_points_earned(80, is_late=True, late_penalty_percent=10), 72
        )

    def test_penalty_never_goes_below_zero(self):
        self.assertEqual(
            grading.calculate_points_earned(50, is_late=True, late_penalty_percent=150), 0
        )

    def test_rounds_half_up(self):
        self.assertEqual(
            grading.calculate_points_earned(
                Decimal("84.50"), is_late=False, late_penalty_percent=0
            ),
            85,
        )
        # 75 * 0.9 = 67.5
        self.assertEqual(
            grading.calculate_points_earned(75, is_late=True, late_penalty_percent=10), 68
        )

    def test_missing_grade(self):
        self.assertIsNone(
            grading.calculate_points_earned(None, is_late=True, late_penalty_percent=10)
        )


class ClampGradeTests(SimpleTestCase):
    def test_bounds(self):
        self.assertEqual(grading.clamp_grade(150), Decimal("100.00"))
        self.assertEqual(grading.clamp_grade(-10), Decimal("0.00"))
        self.assertEqual(grading.clamp_grade("87.456"), Decimal("87.46"))


class LetterGradeTests(SimpleTestCase):
    def test_thresholds(self):
        cases = {95: "A", 90: "A", 85: "B", 75: "C", 65: "D", 60: "D", 55: "F", 0: "F"}
        for grade, letter in cases.items():
            with self.subTest(grade=grade):
                self.assertEqual(grading.letter_grade(grade), letter)

    def test_no_grade(self):
        self.assertIsNone(grading.letter_grade(None))


class LatenessTests(SimpleTestCase):
    def test_is_late(self):
        self.assertTrue(grading.is_late(DUE + timedelta(seconds=1), DUE))
        self.assertFalse(grading.is_late(DUE, DUE))
        self.assertFalse(grading.is_late(None, DUE))

    def test_days_late(self):
        submitted = DUE + timedelta(days=3, hours=5)
        self.assertEqual(grading.days_late(submitted, DUE, is_late=True), 3)
        self.assertEqual(grading.days_late(DUE + timedelta(hours=5), DUE, is_late=True), 0)
        self.assertEqual(grading.days_late(submitted, DUE, is_late=False), 0)

    def test_whole_days_between_truncates_toward_zero(self):
        self.assertEqual(grading.whole_days_between(DUE, DUE + timedelta(days=2, hours=23)), 2)
        self.assertEqual(grading.whole_days_between(DUE + timedelta(days=2, hours=23), DUE), -2)
