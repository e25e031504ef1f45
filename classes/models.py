"""Models for school classes and their student rosters."""

from django.conf import settings
from django.db import models

from students.models import Student
from subjects.models import Subject


class SchoolClass(models.Model):
    """A class (grade + section) taught by a homeroom teacher."""

    name = models.CharField(max_length=120)
    code = models.CharField(max_length=32, unique=True, db_index=True)
    grade_level = models.CharField(max_length=20)
    section = models.CharField(max_length=10, blank=True)
    academic_year = models.CharField(max_length=20, blank=True)
    description = models.TextField(blank=True)
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="classes_taught",
    )
    max_students = models.PositiveIntegerField(default=30)
    is_active = models.BooleanField(default=True)
    subjects = models.ManyToManyField(Subject, blank=True, related_name="classes")
    students = models.ManyToManyField(
        Student,
        through="ClassEnrollment",
        blank=True,
        related_name="classes",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["grade_level", "section", "name"]
        verbose_name = "class"
        verbose_name_plural = "classes"
        indexes = [
            models.Index(fields=["grade_level"], name="classes_grade_level_idx"),
            models.Index(fields=["academic_year"], name="classes_academic_year_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - representation only
        return self.name

    @property
    def full_name(self) -> str:
        return f"Grade {self.grade_level} - Section {self.section}"

    @property
    def available_spots(self) -> int:
        return max(0, self.max_students - self.enrollments.count())

    def is_full(self) -> bool:
        return self.enrollments.count() >= self.max_students


class ClassEnrollment(models.Model):
    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["school_class", "student"], name="unique_class_student"
            )
        ]
        indexes = [models.Index(fields=["student"], name="classes_enrollment_student_idx")]

    school_class = models.ForeignKey(
        SchoolClass, on_delete=models.CASCADE, related_name="enrollments"
    )
    student = models.ForeignKey(
        Student, on_delete=models.CASCADE, related_name="class_enrollments"
    )
    enrolled_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover - representation only
        return f"{self.student} -> {self.school_class}"
