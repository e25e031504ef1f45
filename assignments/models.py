"""Assignments published to a class and the per-student submissions."""

from __future__ import annotations

from datetime import datetime

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from classes.models import SchoolClass
from students.models import Student
from subjects.models import Subject

from . import grading


def validate_assignment_window(
    available_from: datetime | None,
    due_date: datetime | None,
    available_until: datetime | None,
) -> dict[str, str]:
    """Return field errors when the availability window is out of order."""

    errors: dict[str, str] = {}
    if available_from and due_date and available_from >= due_date:
        errors["available_from"] = "Must be earlier than the due date."
    if available_until and due_date and available_until <= due_date:
        errors["available_until"] = "Must be later than the due date."
    return errors


class Assignment(models.Model):
    class Type(models.TextChoices):
        HOMEWORK = "homework", "Homework"
        QUIZ = "quiz", "Quiz"
        EXAM = "exam", "Exam"
        PROJECT = "project", "Project"
        LAB = "lab", "Lab Work"

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    instructions = models.TextField(blank=True)
    school_class = models.ForeignKey(
        SchoolClass, on_delete=models.CASCADE, related_name="assignments"
    )
    subject = models.ForeignKey(
        Subject, on_delete=models.CASCADE, related_name="assignments"
    )
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="assignments_created",
    )
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.HOMEWORK)
    max_points = models.PositiveIntegerField(
        default=100, validators=[MinValueValidator(1)]
    )
    due_date = models.DateTimeField()
    available_from = models.DateTimeField(null=True, blank=True)
    available_until = models.DateTimeField(null=True, blank=True)
    allow_late_submission = models.BooleanField(default=False)
    late_penalty_percent = models.PositiveSmallIntegerField(
        default=0, validators=[MaxValueValidator(100)]
    )
    attachments = models.JSONField(default=list, blank=True)
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-due_date",)
        indexes = [
            models.Index(fields=["school_class", "due_date"], name="assignment_class_due_idx"),
            models.Index(fields=["teacher"], name="assignment_teacher_idx"),
            models.Index(fields=["is_published"], name="assignment_published_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return self.title

    def clean(self):
        errors = validate_assignment_window(
            self.available_from, self.due_date, self.available_until
        )
        if errors:
            raise ValidationError(errors)

    def is_available(self, now: datetime | None = None) -> bool:
        now = now or timezone.now()
        if not self.is_published:
            return False
        if self.available_from and now < self.available_from:
            return False
        if self.available_until and now > self.available_until:
            return False
        return True

    def is_overdue(self, now: datetime | None = None) -> bool:
        now = now or timezone.now()
        return now > self.due_date

    def can_submit_late(self, now: datetime | None = None) -> bool:
        now = now or timezone.now()
        if not self.allow_late_submission:
            return False
        if not self.is_overdue(now):
            return False
        if self.available_until and now > self.available_until:
            return False
        return True

    def days_until_due(self, now: datetime | None = None) -> int:
        """Whole days until the due date; negative once overdue."""
        now = now or timezone.now()
        return grading.whole_days_between(now, self.due_date)


class AssignmentSubmission(models.Model):
    """A student's work on an assignment.

    Status only moves forward: draft -> submitted -> graded -> returned. The
    transitions live in :mod:`assignments.services`; ``points_earned`` is
    always derived from ``grade`` there and never written directly.
    """

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        SUBMITTED = "submitted", "Submitted"
        GRADED = "graded", "Graded"
        RETURNED = "returned", "Returned"

    assignment = models.ForeignKey(
        Assignment, on_delete=models.CASCADE, related_name="submissions"
    )
    student = models.ForeignKey(
        Student, on_delete=models.CASCADE, related_name="assignment_submissions"
    )
    content = models.TextField(blank=True)
    attachments = models.JSONField(default=list, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    is_late = models.BooleanField(default=False)
    grade = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    points_earned = models.IntegerField(null=True, blank=True, editable=False)
    feedback = models.TextField(null=True, blank=True)
    graded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="graded_submissions",
    )
    graded_at = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["assignment", "student"], name="unique_submission_per_student"
            )
        ]
        indexes = [
            models.Index(fields=["status"], name="submission_status_idx"),
            models.Index(fields=["submitted_at"], name="submission_submitted_at_idx"),
            models.Index(fields=["graded_at"], name="submission_graded_at_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.student} - {self.assignment} ({self.status})"

    def is_submitted(self) -> bool:
        return self.status != self.Status.DRAFT

    def is_graded(self) -> bool:
        return self.status in (self.Status.GRADED, self.Status.RETURNED)

    @property
    def percentage_grade(self):
        return self.grade

    @property
    def letter_grade(self) -> str | None:
        return grading.letter_grade(self.grade)

    @property
    def days_late(self) -> int:
        return grading.days_late(
            self.submitted_at, self.assignment.due_date, is_late=self.is_late
        )
