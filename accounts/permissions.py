from rest_framework import permissions

from .models import is_admin, is_teacher


class IsTeacherOrAdmin(permissions.BasePermission):
    message = "Access denied. Teacher or admin role required."

    def has_permission(self, request, view) -> bool:
        return is_admin(request.user) or is_teacher(request.user)


class IsAdmin(permissions.BasePermission):
    message = "Access denied. Admin role required."

    def has_permission(self, request, view) -> bool:
        return is_admin(request.user)


class IsStudent(permissions.BasePermission):
    message = "Access denied. Student account required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and hasattr(user, "student_record"))


def owns_or_admin(user, owner_id) -> bool:
    """Teachers may only touch objects they own; admins may touch anything."""

    if is_admin(user):
        return True
    return owner_id is not None and owner_id == user.pk
