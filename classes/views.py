from django.shortcuts import get_object_or_404
from rest_framework import exceptions, generics
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import is_admin
from accounts.permissions import IsTeacherOrAdmin, owns_or_admin
from students.models import Student

from . import services
from .models import SchoolClass
from .serializers import (
    SchoolClassDetailSerializer,
    SchoolClassSerializer,
    StudentIdsSerializer,
    StudentSummarySerializer,
)


def _classes_for(user):
    queryset = SchoolClass.objects.prefetch_related("subjects")
    if is_admin(user):
        return queryset
    return queryset.filter(teacher=user)


class SchoolClassListCreateView(generics.ListCreateAPIView):
    serializer_class = SchoolClassSerializer
    permission_classes = [IsTeacherOrAdmin]

    def get_queryset(self):
        queryset = _classes_for(self.request.user)
        grade_level = self.request.query_params.get("grade_level")
        if grade_level:
            queryset = queryset.filter(grade_level=grade_level)
        academic_year = self.request.query_params.get("academic_year")
        if academic_year:
            queryset = queryset.filter(academic_year=academic_year)
        return queryset

    def perform_create(self, serializer):
        serializer.save(teacher=self.request.user)


class SchoolClassDetailView(generics.RetrieveUpdateDestroyAPIView):
    serializer_class = SchoolClassDetailSerializer
    permission_classes = [IsTeacherOrAdmin]

    def get_queryset(self):
        return _classes_for(self.request.user).prefetch_related("students")


class _ClassRosterView(APIView):
    permission_classes = [IsTeacherOrAdmin]

    def _get_class(self, request, pk: int) -> SchoolClass:
        school_class = get_object_or_404(SchoolClass, pk=pk)
        if not owns_or_admin(request.user, school_class.teacher_id):
            raise exceptions.PermissionDenied(
                "Access denied. You can only manage your own classes."
            )
        return school_class

    def _student_ids(self, request) -> list[int]:
        serializer = StudentIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data["student_ids"]


class EnrollStudentsView(_ClassRosterView):
    def post(self, request, pk: int, *args, **kwargs):
        school_class = self._get_class(request, pk)
        result = services.enroll_students(school_class, self._student_ids(request))
        return Response(
            {
                "enrolled": result.enrolled,
                "already_enrolled": result.already_enrolled,
                "rejected": result.rejected,
                "available_spots": school_class.available_spots,
            }
        )


class RemoveStudentsView(_ClassRosterView):
    def post(self, request, pk: int, *args, **kwargs):
        school_class = self._get_class(request, pk)
        removed = services.remove_students(school_class, self._student_ids(request))
        return Response({"removed": removed, "available_spots": school_class.available_spots})


class AvailableStudentsView(generics.ListAPIView):
    """Active students, optionally excluding those already in ``class_id``."""

    serializer_class = StudentSummarySerializer
    permission_classes = [IsTeacherOrAdmin]

    def get_queryset(self):
        queryset = Student.objects.filter(status=Student.Status.ACTIVE)
        class_id = self.request.query_params.get("class_id")
        if class_id:
            queryset = queryset.exclude(class_enrollments__school_class_id=class_id)
        return queryset
