"""Student records. A student may optionally be linked to a login account."""

from django.conf import settings
from django.db import models


class Student(models.Model):
    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        GRADUATED = "graduated", "Graduated"
        TRANSFERRED = "transferred", "Transferred"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="student_record",
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    student_id = models.CharField(max_length=32, unique=True, db_index=True)
    grade_level = models.CharField(max_length=20, blank=True)
    parent_name = models.CharField(max_length=255, blank=True)
    parent_email = models.EmailField(blank=True)
    parent_phone = models.CharField(max_length=32, blank=True)
    address = models.TextField(blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    enrollment_date = models.DateField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)
        indexes = [
            models.Index(fields=["status"], name="students_status_idx"),
            models.Index(fields=["grade_level"], name="students_grade_level_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.name} ({self.student_id})"

    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE

    def has_graduated(self) -> bool:
        return self.status == self.Status.GRADUATED
