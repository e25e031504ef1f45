from __future__ import annotations

import statistics
from datetime import timedelta
from typing import Any

from django.db.models import Avg, Count, Q, QuerySet
from django.utils import timezone

from accounts.models import is_admin

from . import grading
from .models import Assignment, AssignmentSubmission

Status = AssignmentSubmission.Status

GRADED_STATUSES = (Status.GRADED, Status.RETURNED)
PASS_THRESHOLD = 60
EXCELLENCE_THRESHOLD = 90
UPCOMING_WINDOW = timedelta(days=7)

GRADE_BANDS = (
    ("A (90-100)", 90, None),
    ("B (80-89)", 80, 90),
    ("C (70-79)", 70, 80),
    ("D (60-69)", 60, 70),
    ("F (0-59)", None, 60),
)


def _percent(numerator: int, denominator: int) -> float:
    if not denominator:
        return 0.0
    return round(numerator / denominator * 100, 2)


def _round_grade(value) -> float | None:
    if value is None:
        return None
    return float(grading.quantize_grade(value))


def get_average_grade(assignment: Assignment) -> float | None:
    average = assignment.submissions.filter(grade__isnull=False).aggregate(
        value=Avg("grade")
    )["value"]
    return _round_grade(average)


def get_submission_stats(assignment: Assignment) -> dict[str, Any]:
    """Roster-level progress for ``assignment``.

    Rates are percentages rounded to two places and fall back to ``0`` when
    their denominator is empty; ``average_grade`` is ``None`` without grades.
    """

    total_students = assignment.school_class.enrollments.count()
    counts = assignment.submissions.aggregate(
        submitted=Count("id", filter=~Q(status=Status.DRAFT)),
        graded=Count("id", filter=Q(status__in=GRADED_STATUSES)),
        late=Count("id", filter=Q(is_late=True)),
    )
    submitted_count = counts["submitted"]
    graded_count = counts["graded"]

    return {
        "total_students": total_students,
        "submitted_count": submitted_count,
        "graded_count": graded_count,
        "late_count": counts["late"],
        "submission_rate": _percent(submitted_count, total_students),
        "grading_progress": _percent(graded_count, submitted_count),
        "average_grade": get_average_grade(assignment),
    }


def _in_band(grade: float, low, high) -> bool:
    if low is not None and grade < low:
        return False
    if high is not None and grade >= high:
        return False
    return True


def get_grade_analytics(assignment: Assignment) -> dict[str, Any]:
    grades = [
        float(value)
        for value in assignment.submissions.filter(grade__isnull=False).values_list(
            "grade", flat=True
        )
    ]
    total_submissions = assignment.submissions.count()
    late_submissions = assignment.submissions.filter(is_late=True).count()

    if grades:
        summary = {
            "average": round(statistics.fmean(grades), 2),
            "median": round(statistics.median(grades), 2),
            "min": min(grades),
            "max": max(grades),
            "std_deviation": round(statistics.stdev(grades), 2) if len(grades) > 1 else 0,
        }
    else:
        summary = {
            "average": None,
            "median": None,
            "min": None,
            "max": None,
            "std_deviation": 0,
        }

    distribution = {
        label: sum(1 for grade in grades if _in_band(grade, low, high))
        for label, low, high in GRADE_BANDS
    }

    return {
        "assignment_id": assignment.id,
        "assignment_title": assignment.title,
        "total_students": assignment.school_class.enrollments.count(),
        "submission_stats": get_submission_stats(assignment),
        "grade_analytics": summary,
        "grade_distribution": distribution,
        "performance_insights": {
            "pass_rate": _percent(
                sum(1 for grade in grades if grade >= PASS_THRESHOLD), len(grades)
            ),
            "excellence_rate": _percent(
                sum(1 for grade in grades if grade >= EXCELLENCE_THRESHOLD), len(grades)
            ),
            "late_submission_rate": _percent(late_submissions, total_submissions),
        },
    }


def assignments_for(user) -> QuerySet[Assignment]:
    queryset = Assignment.objects.select_related("school_class", "subject", "teacher")
    if is_admin(user):
        return queryset
    return queryset.filter(teacher=user)


def filter_by_status(queryset: QuerySet[Assignment], status: str, now=None) -> QuerySet[Assignment]:
    now = now or timezone.now()
    if status == "published":
        return queryset.filter(is_published=True)
    if status == "draft":
        return queryset.filter(is_published=False)
    if status == "overdue":
        return queryset.filter(is_published=True, due_date__lt=now)
    if status == "upcoming":
        return queryset.filter(
            is_published=True, due_date__range=(now, now + UPCOMING_WINDOW)
        )
    return queryset


def grading_queue(user) -> QuerySet[Assignment]:
    """Assignments owned by ``user`` with submitted work still waiting for a grade."""

    return (
        assignments_for(user)
        .annotate(
            pending_submissions=Count(
                "submissions", filter=Q(submissions__status=Status.SUBMITTED)
            )
        )
        .filter(pending_submissions__gt=0)
        .order_by("due_date")
    )


def assignments_for_student(student) -> QuerySet[Assignment]:
    return (
        Assignment.objects.filter(
            is_published=True, school_class__enrollments__student=student
        )
        .select_related("school_class", "subject", "teacher")
        .distinct()
        .order_by("due_date")
    )
