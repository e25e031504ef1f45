"""Pure grading rules shared by the submission models and services.

Nothing here touches the database: the functions take plain values so the
lateness, penalty and letter-grade arithmetic can be tested in isolation.
Grades are percentages on a 0–100 scale and are handled as ``Decimal``.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

GRADE_MIN = Decimal("0")
GRADE_MAX = Decimal("100")

LETTER_GRADE_THRESHOLDS = (
    (Decimal("90"), "A"),
    (Decimal("80"), "B"),
    (Decimal("70"), "C"),
    (Decimal("60"), "D"),
)
FAILING_LETTER = "F"

_CENTS = Decimal("0.01")
_UNITS = Decimal("1")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(_UNITS, rounding=ROUND_HALF_UP))


def quantize_grade(value) -> Decimal:
    return to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def clamp_grade(score) -> Decimal:
    """Clamp ``score`` into [0, 100] and keep two decimal places."""

    value = to_decimal(score)
    return quantize_grade(max(GRADE_MIN, min(GRADE_MAX, value)))


def is_late(submitted_at: datetime | None, due_date: datetime | None) -> bool:
    if submitted_at is None or due_date is None:
        return False
    return submitted_at > due_date


def calculate_points_earned(grade, *, is_late: bool, late_penalty_percent) -> int | None:
    """Return the stored points figure for ``grade``.

    The points are the percentage grade itself (no scaling by the assignment's
    max points). A late submission loses ``late_penalty_percent`` of the grade;
    the result never drops below zero.
    """

    if grade is None:
        return None

    grade = to_decimal(grade)
    if not is_late:
        return round_half_up(grade)

    penalty = to_decimal(late_penalty_percent or 0)
    factor = Decimal("1") - penalty / Decimal("100")
    return max(0, round_half_up(grade * factor))


def letter_grade(grade) -> str | None:
    if grade is None:
        return None
    grade = to_decimal(grade)
    for threshold, letter in LETTER_GRADE_THRESHOLDS:
        if grade >= threshold:
            return letter
    return FAILING_LETTER


def whole_days_between(start: datetime, end: datetime) -> int:
    """Signed number of whole days from ``start`` to ``end``, truncated toward zero."""

    delta = end - start
    days = abs(delta) // timedelta(days=1)
    return days if delta >= timedelta(0) else -days


def days_late(
    submitted_at: datetime | None, due_date: datetime | None, *, is_late: bool
) -> int:
    if not is_late or submitted_at is None or due_date is None:
        return 0
    return whole_days_between(due_date, submitted_at)
