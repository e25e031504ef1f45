"""Submission lifecycle: draft -> submitted -> graded -> returned.

Every transition re-reads the submission row with ``select_for_update`` inside
one transaction, checks the status precondition and writes the new state
before the transaction commits, so two concurrent graders cannot both move a
submission out of ``submitted``.

Illegal transitions do not raise. They return a falsy :class:`TransitionResult`
carrying a reason code and leave the row untouched; callers must check it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable

from django.db import transaction
from django.utils import timezone

from students.models import Student

from . import grading
from .models import Assignment, AssignmentSubmission

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Status = AssignmentSubmission.Status


class Reason:
    INVALID_STATUS = "invalid_status"
    NOT_AVAILABLE = "not_available"
    LATE_NOT_ALLOWED = "late_not_allowed"


# action -> (required status, resulting status)
TRANSITIONS = {
    "submit": (Status.DRAFT, Status.SUBMITTED),
    "grade": (Status.SUBMITTED, Status.GRADED),
    "return": (Status.GRADED, Status.RETURNED),
}


@dataclass(frozen=True)
class TransitionResult:
    ok: bool
    submission: AssignmentSubmission
    reason: str = ""

    def __bool__(self) -> bool:
        return self.ok


def _lock(submission: AssignmentSubmission) -> AssignmentSubmission:
    return (
        AssignmentSubmission.objects.select_for_update()
        .select_related("assignment")
        .get(pk=submission.pk)
    )


def _reject(submission: AssignmentSubmission, action: str, reason: str) -> TransitionResult:
    logger.debug(
        "Rejected %s for submission %s in status %s: %s",
        action,
        submission.pk,
        submission.status,
        reason,
    )
    return TransitionResult(ok=False, submission=submission, reason=reason)


def _guard(submission: AssignmentSubmission, action: str) -> str:
    required, _ = TRANSITIONS[action]
    if submission.status != required:
        return Reason.INVALID_STATUS
    return ""


def _apply_points(submission: AssignmentSubmission) -> None:
    submission.points_earned = grading.calculate_points_earned(
        submission.grade,
        is_late=submission.is_late,
        late_penalty_percent=submission.assignment.late_penalty_percent,
    )


def _sync(caller: AssignmentSubmission, locked: AssignmentSubmission) -> None:
    if caller is not locked:
        caller.refresh_from_db()


def start_submission(assignment: Assignment, student: Student) -> AssignmentSubmission:
    """Return the student's submission for ``assignment``, creating a draft."""

    submission, created = AssignmentSubmission.objects.get_or_create(
        assignment=assignment,
        student=student,
        defaults={"status": Status.DRAFT},
    )
    if created:
        logger.info(
            "Draft submission %s created for assignment %s by student %s",
            submission.pk,
            assignment.pk,
            student.pk,
        )
    return submission


def save_draft(
    submission: AssignmentSubmission,
    *,
    content: str | None = None,
    attachments: list | None = None,
) -> TransitionResult:
    """Edit the body of a submission that has not been submitted yet."""

    with transaction.atomic():
        locked = _lock(submission)
        if locked.status != Status.DRAFT:
            return _reject(locked, "save_draft", Reason.INVALID_STATUS)

        fields = ["updated_at"]
        if content is not None:
            locked.content = content
            fields.append("content")
        if attachments is not None:
            locked.attachments = list(attachments)
            fields.append("attachments")
        locked.save(update_fields=fields)

    _sync(submission, locked)
    return TransitionResult(ok=True, submission=locked)


def submit(
    submission: AssignmentSubmission,
    *,
    submitted_at: datetime | None = None,
    clock: Clock = timezone.now,
) -> TransitionResult:
    """Move a draft to ``submitted`` and stamp its lateness.

    The assignment must be open: published and inside its availability window,
    and either not yet due or accepting late work.
    """

    with transaction.atomic():
        locked = _lock(submission)
        reason = _guard(locked, "submit")
        if reason:
            return _reject(locked, "submit", reason)

        now = clock()
        assignment = locked.assignment
        if not assignment.is_available(now):
            return _reject(locked, "submit", Reason.NOT_AVAILABLE)
        if assignment.is_overdue(now) and not assignment.can_submit_late(now):
            return _reject(locked, "submit", Reason.LATE_NOT_ALLOWED)

        locked.submitted_at = submitted_at or now
        locked.is_late = grading.is_late(locked.submitted_at, assignment.due_date)
        locked.status = TRANSITIONS["submit"][1]
        locked.save(update_fields=["submitted_at", "is_late", "status", "updated_at"])

    logger.info(
        "Submission %s submitted (late=%s)", locked.pk, locked.is_late
    )
    _sync(submission, locked)
    return TransitionResult(ok=True, submission=locked)


def grade(
    submission: AssignmentSubmission,
    score,
    *,
    feedback: str | None = None,
    grader=None,
    clock: Clock = timezone.now,
) -> TransitionResult:
    """Grade a submitted piece of work.

    ``score`` is clamped into [0, 100]; ``points_earned`` is recomputed from
    the clamped score and the assignment's late policy.
    """

    with transaction.atomic():
        locked = _lock(submission)
        reason = _guard(locked, "grade")
        if reason:
            return _reject(locked, "grade", reason)

        locked.grade = grading.clamp_grade(score)
        locked.feedback = feedback
        locked.graded_by = grader
        locked.graded_at = clock()
        locked.status = TRANSITIONS["grade"][1]
        _apply_points(locked)
        locked.save(
            update_fields=[
                "grade",
                "feedback",
                "graded_by",
                "graded_at",
                "status",
                "points_earned",
                "updated_at",
            ]
        )

    logger.info(
        "Submission %s graded %s (%s points) by %s",
        locked.pk,
        locked.grade,
        locked.points_earned,
        getattr(grader, "pk", None),
    )
    _sync(submission, locked)
    return TransitionResult(ok=True, submission=locked)


def return_to_student(submission: AssignmentSubmission) -> TransitionResult:
    with transaction.atomic():
        locked = _lock(submission)
        reason = _guard(locked, "return")
        if reason:
            return _reject(locked, "return", reason)

        locked.status = TRANSITIONS["return"][1]
        locked.save(update_fields=["status", "updated_at"])

    logger.info("Submission %s returned to student", locked.pk)
    _sync(submission, locked)
    return TransitionResult(ok=True, submission=locked)


def recompute_lateness(submission: AssignmentSubmission) -> AssignmentSubmission:
    """Re-evaluate ``is_late`` against the assignment's current due date.

    Points are re-derived as well when the submission already has a grade.
    """

    with transaction.atomic():
        locked = _lock(submission)
        locked.is_late = grading.is_late(locked.submitted_at, locked.assignment.due_date)
        _apply_points(locked)
        locked.save(update_fields=["is_late", "points_earned", "updated_at"])

    _sync(submission, locked)
    return locked


def recompute_assignment_lateness(assignment: Assignment) -> int:
    """Recompute lateness for every non-draft submission of ``assignment``."""

    submissions: Iterable[AssignmentSubmission] = assignment.submissions.exclude(
        status=Status.DRAFT
    ).only("pk")
    count = 0
    for submission in submissions:
        recompute_lateness(submission)
        count += 1
    if count:
        logger.info(
            "Recomputed lateness for %s submissions of assignment %s", count, assignment.pk
        )
    return count
