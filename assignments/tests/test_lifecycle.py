from datetime import timedelta
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from assignments import services
from assignments.models import AssignmentSubmission

from .factories import (
    create_assignment,
    create_student,
    create_submission,
    create_teacher,
)

Status = AssignmentSubmission.Status


def fixed_clock(moment):
    return lambda: moment


class SubmitTests(TestCase):
    def setUp(self):
        self.now = timezone.now()
        self.teacher = create_teacher()
        self.student = create_student()
        self.assignment = create_assignment(
            teacher=self.teacher, due_date=self.now + timedelta(days=2)
        )
        self.submission = services.start_submission(self.assignment, self.student)

    def test_start_submission_creates_single_draft(self):
        again = services.start_submission(self.assignment, self.student)
        self.assertEqual(again.pk, self.submission.pk)
        self.assertEqual(self.submission.status, Status.DRAFT)
        self.assertEqual(AssignmentSubmission.objects.count(), 1)

    def test_duplicate_submission_rejected_by_database(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            AssignmentSubmission.objects.create(
                assignment=self.assignment, student=self.student
            )

    def test_submit_on_time(self):
        result = services.submit(self.submission, clock=fixed_clock(self.now))
        self.assertTrue(result)
        self.assertEqual(result.submission.status, Status.SUBMITTED)
        self.assertEqual(result.submission.submitted_at, self.now)
        self.assertFalse(result.submission.is_late)
        # The caller's instance reflects the stored row.
        self.assertEqual(self.submission.status, Status.SUBMITTED)

    def test_submit_twice_is_rejected(self):
        services.submit(self.submission, clock=fixed_clock(self.now))
        result = services.submit(self.submission, clock=fixed_clock(self.now))
        self.assertFalse(result)
        self.assertEqual(result.reason, services.Reason.INVALID_STATUS)
        self.submission.refresh_from_db()
        self.assertEqual(self.submission.submitted_at, self.now)

    def test_unpublished_assignment_not_available(self):
        self.assignment.is_published = False
        self.assignment.save()
        result = services.submit(self.submission, clock=fixed_clock(self.now))
        self.assertFalse(result)
        self.assertEqual(result.reason, services.Reason.NOT_AVAILABLE)
        self.submission.refresh_from_db()
        self.assertEqual(self.submission.status, Status.DRAFT)

    def test_before_available_from_not_available(self):
        self.assignment.available_from = self.now + timedelta(days=1)
        self.assignment.save()
        result = services.submit(self.submission, clock=fixed_clock(self.now))
        self.assertEqual(result.reason, services.Reason.NOT_AVAILABLE)

    def test_overdue_without_late_policy(self):
        after_due = self.assignment.due_date + timedelta(hours=1)
        result = services.submit(self.submission, clock=fixed_clock(after_due))
        self.assertFalse(result)
        self.assertEqual(result.reason, services.Reason.LATE_NOT_ALLOWED)

    def test_late_submission_allowed(self):
        self.assignment.allow_late_submission = True
        self.assignment.save()
        after_due = self.assignment.due_date + timedelta(days=3, hours=2)
        result = services.submit(self.submission, clock=fixed_clock(after_due))
        self.assertTrue(result)
        self.assertTrue(result.submission.is_late)
        self.assertEqual(result.submission.days_late, 3)

    def test_save_draft_only_while_draft(self):
        result = services.save_draft(self.submission, content="First attempt")
        self.assertTrue(result)
        self.assertEqual(result.submission.content, "First attempt")

        services.submit(self.submission, clock=fixed_clock(self.now))
        result = services.save_draft(self.submission, content="Changed")
        self.assertFalse(result)
        self.submission.refresh_from_db()
        self.assertEqual(self.submission.content, "First attempt")


class GradeAndReturnTests(TestCase):
    def setUp(self):
        self.now = timezone.now()
        self.teacher = create_teacher()
        self.assignment = create_assignment(
            teacher=self.teacher,
            due_date=self.now - timedelta(days=1),
            allow_late_submission=True,
            late_penalty_percent=10,
        )

    def _submitted(self, *, is_late=False):
        submitted_at = self.assignment.due_date + (
            timedelta(hours=5) if is_late else -timedelta(hours=5)
        )
        return create_submission(
            assignment=self.assignment,
            status=Status.SUBMITTED,
            submitted_at=submitted_at,
            is_late=is_late,
        )

    def test_grade_from_draft_rejected(self):
        submission = create_submission(assignment=self.assignment)
        result = services.grade(submission, 90, grader=self.teacher)
        self.assertFalse(result)
        self.assertEqual(result.reason, services.Reason.INVALID_STATUS)
        submission.refresh_from_db()
        self.assertIsNone(submission.grade)

    def test_grade_on_time(self):
        submission = self._submitted()
        result = services.grade(
            submission, 80, feedback="Good", grader=self.teacher, clock=fixed_clock(self.now)
        )
        self.assertTrue(result)
        graded = result.submission
        self.assertEqual(graded.status, Status.GRADED)
        self.assertEqual(graded.grade, Decimal("80.00"))
        self.assertEqual(graded.points_earned, 80)
        self.assertEqual(graded.feedback, "Good")
        self.assertEqual(graded.graded_by, self.teacher)
        self.assertEqual(graded.graded_at, self.now)
        self.assertEqual(graded.letter_grade, "B")

    def test_grade_late_applies_penalty(self):
        result = services.grade(self._submitted(is_late=True), 80, grader=self.teacher)
        self.assertEqual(result.submission.points_earned, 72)

    def test_grade_is_clamped(self):
        high = services.grade(self._submitted(), 150).submission
        self.assertEqual(high.grade, Decimal("100.00"))
        self.assertEqual(high.points_earned, 100)

        low = services.grade(self._submitted(), -10).submission
        self.assertEqual(low.grade, Decimal("0.00"))
        self.assertEqual(low.points_earned, 0)

    def test_grading_twice_rejected(self):
        submission = self._submitted()
        services.grade(submission, 70)
        result = services.grade(submission, 95)
        self.assertFalse(result)
        submission.refresh_from_db()
        self.assertEqual(submission.grade, Decimal("70.00"))

    def test_return_requires_graded(self):
        submission = self._submitted()
        self.assertFalse(services.return_to_student(submission))

        services.grade(submission, 88)
        result = services.return_to_student(submission)
        self.assertTrue(result)
        self.assertEqual(result.submission.status, Status.RETURNED)
        self.assertFalse(services.return_to_student(submission))

    def test_grade_from_returned_rejected(self):
        submission = self._submitted()
        services.grade(submission, 88, grader=self.teacher)
        services.return_to_student(submission)

        result = services.grade(submission, 40, grader=self.teacher)

        self.assertFalse(result)
        self.assertEqual(result.reason, services.Reason.INVALID_STATUS)
        submission.refresh_from_db()
        self.assertEqual(submission.status, Status.RETURNED)
        self.assertEqual(submission.grade, Decimal("88.00"))
        self.assertEqual(submission.points_earned, 88)

    def test_submit_after_grading_rejected(self):
        submission = self._submitted()
        submitted_at = submission.submitted_at
        services.grade(submission, 75)

        for expected_status in (Status.GRADED, Status.RETURNED):
            with self.subTest(status=expected_status):
                if expected_status == Status.RETURNED:
                    services.return_to_student(submission)
                result = services.submit(submission, clock=fixed_clock(self.now))
                self.assertFalse(result)
                self.assertEqual(result.reason, services.Reason.INVALID_STATUS)
                submission.refresh_from_db()
                self.assertEqual(submission.status, expected_status)
                self.assertEqual(submission.submitted_at, submitted_at)
                self.assertEqual(submission.grade, Decimal("75.00"))


class RecomputeLatenessTests(TestCase):
    def test_due_date_change_updates_lateness_and_points(self):
        now = timezone.now()
        assignment = create_assignment(
            due_date=now + timedelta(days=1), late_penalty_percent=25
        )
        submission = create_submission(
            assignment=assignment,
            status=Status.SUBMITTED,
            submitted_at=now,
        )
        services.grade(submission, 80)
        self.assertEqual(submission.points_earned, 80)

        assignment.due_date = now - timedelta(days=2)
        assignment.save()
        updated = services.recompute_lateness(submission)
        self.assertTrue(updated.is_late)
        self.assertEqual(updated.points_earned, 60)
        self.assertEqual(updated.days_late, 2)

    def test_draft_is_never_late(self):
        assignment = create_assignment(due_date=timezone.now() - timedelta(days=1))
        submission = create_submission(assignment=assignment)
        self.assertFalse(services.recompute_lateness(submission).is_late)

    def test_recompute_assignment_skips_drafts(self):
        now = timezone.now()
        assignment = create_assignment(due_date=now + timedelta(days=1))
        create_submission(assignment=assignment)
        submitted = create_submission(
            assignment=assignment, status=Status.SUBMITTED, submitted_at=now
        )
        assignment.due_date = now - timedelta(hours=1)
        assignment.save()

        self.assertEqual(services.recompute_assignment_lateness(assignment), 1)
        submitted.refresh_from_db()
        self.assertTrue(submitted.is_late)
