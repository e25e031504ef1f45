from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from assignments import stats
from assignments.models import AssignmentSubmission

from .factories import (
    create_admin,
    create_assignment,
    create_class,
    create_student,
    create_submission,
    create_teacher,
)

Status = AssignmentSubmission.Status


class SubmissionStatsTests(TestCase):
    def setUp(self):
        self.teacher = create_teacher()
        self.students = [create_student() for _ in range(5)]
        self.school_class = create_class(teacher=self.teacher, students=self.students)
        self.assignment = create_assignment(
            teacher=self.teacher, school_class=self.school_class
        )

    def test_rates_and_average(self):
        now = timezone.now()
        create_submission(
            assignment=self.assignment,
            student=self.students[0],
            status=Status.GRADED,
            submitted_at=now,
            grade=Decimal("90"),
        )
        create_submission(
            assignment=self.assignment,
            student=self.students[1],
            status=Status.RETURNED,
            submitted_at=now,
            grade=Decimal("75.5"),
        )
        create_submission(
            assignment=self.assignment,
            student=self.students[2],
            status=Status.SUBMITTED,
            submitted_at=now,
            is_late=True,
        )
        create_submission(assignment=self.assignment, student=self.students[3])

        result = stats.get_submission_stats(self.assignment)

        self.assertEqual(result["total_students"], 5)
        self.assertEqual(result["submitted_count"], 3)
        self.assertEqual(result["graded_count"], 2)
        self.assertEqual(result["late_count"], 1)
        self.assertEqual(result["submission_rate"], 60.0)
        self.assertEqual(result["grading_progress"], 66.67)
        self.assertEqual(result["average_grade"], 82.75)

    def test_empty_assignment(self):
        result = stats.get_submission_stats(self.assignment)
        self.assertEqual(result["submitted_count"], 0)
        self.assertEqual(result["submission_rate"], 0.0)
        self.assertEqual(result["grading_progress"], 0.0)
        self.assertIsNone(result["average_grade"])

    def test_no_enrolled_students(self):
        assignment = create_assignment(teacher=self.teacher)
        result = stats.get_submission_stats(assignment)
        self.assertEqual(result["total_students"], 0)
        self.assertEqual(result["submission_rate"], 0.0)


class GradeAnalyticsTests(TestCase):
    def test_distribution_and_insights(self):
        assignment = create_assignment()
        for value, late in ((95, False), (85, True), (55, False)):
            create_submission(
                assignment=assignment,
                status=Status.GRADED,
                submitted_at=timezone.now(),
                grade=Decimal(value),
                is_late=late,
            )

        result = stats.get_grade_analytics(assignment)

        summary = result["grade_analytics"]
        self.assertEqual(summary["average"], 78.33)
        self.assertEqual(summary["median"], 85.0)
        self.assertEqual(summary["min"], 55.0)
        self.assertEqual(summary["max"], 95.0)
        self.assertEqual(result["grade_distribution"]["A (90-100)"], 1)
        self.assertEqual(result["grade_distribution"]["B (80-89)"], 1)
        self.assertEqual(result["grade_distribution"]["F (0-59)"], 1)
        insights = result["performance_insights"]
        self.assertEqual(insights["pass_rate"], 66.67)
        self.assertEqual(insights["excellence_rate"], 33.33)
        self.assertEqual(insights["late_submission_rate"], 33.33)

    def test_without_grades(self):
        result = stats.get_grade_analytics(create_assignment())
        self.assertIsNone(result["grade_analytics"]["average"])
        self.assertEqual(result["grade_analytics"]["std_deviation"], 0)
        self.assertEqual(result["performance_insights"]["pass_rate"], 0.0)


class AssignmentQueryTests(TestCase):
    def setUp(self):
        self.teacher = create_teacher()
        self.other = create_teacher()
        self.now = timezone.now()
        self.mine = create_assignment(teacher=self.teacher, due_date=self.now + timedelta(days=2))
        self.overdue = create_assignment(
            teacher=self.teacher, due_date=self.now - timedelta(days=1)
        )
        self.draft = create_assignment(
            teacher=self.teacher, due_date=self.now + timedelta(days=30), is_published=False
        )
        self.theirs = create_assignment(teacher=self.other)

    def test_teacher_sees_only_own(self):
        ids = set(stats.assignments_for(self.teacher).values_list("id", flat=True))
        self.assertEqual(ids, {self.mine.id, self.overdue.id, self.draft.id})

    def test_admin_sees_all(self):
        self.assertEqual(stats.assignments_for(create_admin()).count(), 4)

    def test_status_filters(self):
        queryset = stats.assignments_for(self.teacher)
        self.assertEqual(
            list(stats.filter_by_status(queryset, "overdue", now=self.now)), [self.overdue]
        )
        self.assertEqual(
            list(stats.filter_by_status(queryset, "upcoming", now=self.now)), [self.mine]
        )
        self.assertEqual(list(stats.filter_by_status(queryset, "draft")), [self.draft])

    def test_grading_queue_counts_pending(self):
        create_submission(
            assignment=self.mine, status=Status.SUBMITTED, submitted_at=self.now
        )
        create_submission(
            assignment=self.mine, status=Status.SUBMITTED, submitted_at=self.now
        )
        create_submission(assignment=self.overdue, status=Status.GRADED, grade=Decimal("80"))

        queue = list(stats.grading_queue(self.teacher))
        self.assertEqual(queue, [self.mine])
        self.assertEqual(queue[0].pending_submissions, 2)
