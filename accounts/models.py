from django.conf import settings
from django.db import models


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    TEACHER = "teacher", "Teacher"
    STUDENT = "student", "Student"
    GUEST = "guest", "Guest"


class TeacherProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="teacher_profile"
    )
    bio = models.TextField(blank=True)
    phone = models.CharField(max_length=32, blank=True)

    def __str__(self):
        return f"{self.user.username} (teacher)"


def is_admin(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    return bool(user.is_staff or user.is_superuser)


def is_teacher(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    return TeacherProfile.objects.filter(user=user).exists()


def user_role(user) -> str:
    """Return the effective role of ``user``.

    Admin wins over teacher; a user linked to a ``students.Student`` record is
    a student; any other authenticated user has no elevated role.
    """

    if is_admin(user):
        return Role.ADMIN
    if is_teacher(user):
        return Role.TEACHER
    if user and user.is_authenticated and hasattr(user, "student_record"):
        return Role.STUDENT
    return Role.GUEST
