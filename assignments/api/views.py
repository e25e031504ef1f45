import logging

from django.db.models import Count
from django.shortcuts import get_object_or_404
from rest_framework import exceptions, generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsStudent, IsTeacherOrAdmin, owns_or_admin

from .. import services, stats
from ..models import Assignment, AssignmentSubmission
from .serializers import (
    AssignmentDetailSerializer,
    AssignmentSerializer,
    DraftInputSerializer,
    GradeInputSerializer,
    StudentAssignmentSerializer,
    SubmissionSerializer,
)

logger = logging.getLogger(__name__)

LATENESS_FIELDS = ("due_date", "late_penalty_percent")

REASON_MESSAGES = {
    services.Reason.INVALID_STATUS: "Submission cannot be updated while {status}.",
    services.Reason.NOT_AVAILABLE: "Assignment is not open for submissions.",
    services.Reason.LATE_NOT_ALLOWED: "Assignment is past due and does not accept late submissions.",
}


def _transition_response(result: services.TransitionResult, request) -> Response:
    if not result:
        return Response(
            {
                "detail": REASON_MESSAGES[result.reason].format(status=result.submission.status),
                "reason": result.reason,
                "status": result.submission.status,
            },
            status=status.HTTP_409_CONFLICT,
        )
    serializer = SubmissionSerializer(result.submission, context={"request": request})
    return Response(serializer.data)


def _check_class_access(user, school_class) -> None:
    if not owns_or_admin(user, school_class.teacher_id):
        raise exceptions.PermissionDenied(
            "Access denied. You can only create assignments for your own classes."
        )


class AssignmentAccessMixin:
    """Resolve ``pk`` to an assignment the current teacher may manage."""

    permission_classes = [IsTeacherOrAdmin]

    def get_assignment(self, request, pk: int) -> Assignment:
        assignment = get_object_or_404(
            Assignment.objects.select_related("school_class", "subject", "teacher"), pk=pk
        )
        if not owns_or_admin(request.user, assignment.teacher_id):
            raise exceptions.PermissionDenied(
                "Access denied. You can only manage your own assignments."
            )
        return assignment

    def get_submission(self, request, pk: int, submission_id: int) -> AssignmentSubmission:
        assignment = self.get_assignment(request, pk)
        try:
            return assignment.submissions.select_related("student", "assignment").get(
                pk=submission_id
            )
        except AssignmentSubmission.DoesNotExist as exc:
            raise exceptions.NotFound("Submission does not belong to this assignment.") from exc


class AssignmentListCreateView(generics.ListCreateAPIView):
    serializer_class = AssignmentSerializer
    permission_classes = [IsTeacherOrAdmin]

    def get_queryset(self):
        queryset = stats.assignments_for(self.request.user).annotate(
            submissions_count=Count("submissions")
        )
        params = self.request.query_params
        if params.get("class_id"):
            queryset = queryset.filter(school_class_id=params["class_id"])
        if params.get("subject_id"):
            queryset = queryset.filter(subject_id=params["subject_id"])
        if params.get("type"):
            queryset = queryset.filter(type=params["type"])
        if params.get("status"):
            queryset = stats.filter_by_status(queryset, params["status"])
        return queryset.order_by("-due_date")

    def perform_create(self, serializer):
        _check_class_access(self.request.user, serializer.validated_data["school_class"])
        assignment = serializer.save(teacher=self.request.user)
        logger.info("Assignment %s created by %s", assignment.pk, self.request.user.pk)


class AssignmentDetailView(AssignmentAccessMixin, generics.RetrieveUpdateDestroyAPIView):
    serializer_class = AssignmentDetailSerializer

    def get_object(self):
        return self.get_assignment(self.request, self.kwargs["pk"])

    def perform_update(self, serializer):
        new_class = serializer.validated_data.get("school_class")
        if new_class is not None:
            _check_class_access(self.request.user, new_class)

        before = {name: getattr(serializer.instance, name) for name in LATENESS_FIELDS}
        assignment = serializer.save()
        if any(getattr(assignment, name) != value for name, value in before.items()):
            services.recompute_assignment_lateness(assignment)

    def destroy(self, request, *args, **kwargs):
        assignment = self.get_object()
        if assignment.submissions.exists():
            return Response(
                {
                    "detail": "Cannot delete assignment with submissions. "
                    "Please remove submissions first."
                },
                status=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )
        assignment.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class _PublishStateView(AssignmentAccessMixin, APIView):
    publish = True

    def post(self, request, pk: int, *args, **kwargs):
        assignment = self.get_assignment(request, pk)
        assignment.is_published = self.publish
        assignment.save(update_fields=["is_published", "updated_at"])
        return Response(
            {"id": assignment.id, "title": assignment.title, "is_published": assignment.is_published}
        )


class AssignmentPublishView(_PublishStateView):
    publish = True


class AssignmentUnpublishView(_PublishStateView):
    publish = False


class AssignmentSubmissionsView(AssignmentAccessMixin, APIView):
    def get(self, request, pk: int, *args, **kwargs):
        assignment = self.get_assignment(request, pk)
        submissions = (
            assignment.submissions.select_related("student", "assignment")
            .order_by("-submitted_at", "id")
        )
        serializer = SubmissionSerializer(submissions, many=True, context={"request": request})
        return Response(
            {
                "assignment_id": assignment.id,
                "assignment_title": assignment.title,
                "submissions": serializer.data,
                "total_submissions": len(serializer.data),
                "submission_stats": stats.get_submission_stats(assignment),
            }
        )


class GradeSubmissionView(AssignmentAccessMixin, APIView):
    def post(self, request, pk: int, submission_id: int, *args, **kwargs):
        submission = self.get_submission(request, pk, submission_id)
        serializer = GradeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.grade(
            submission,
            serializer.validated_data["grade"],
            feedback=serializer.validated_data.get("feedback"),
            grader=request.user,
        )
        return _transition_response(result, request)


class ReturnSubmissionView(AssignmentAccessMixin, APIView):
    def post(self, request, pk: int, submission_id: int, *args, **kwargs):
        submission = self.get_submission(request, pk, submission_id)
        return _transition_response(services.return_to_student(submission), request)


class RecomputeLatenessView(AssignmentAccessMixin, APIView):
    def post(self, request, pk: int, submission_id: int, *args, **kwargs):
        submission = self.get_submission(request, pk, submission_id)
        submission = services.recompute_lateness(submission)
        return Response(SubmissionSerializer(submission, context={"request": request}).data)


class AssignmentAnalyticsView(AssignmentAccessMixin, APIView):
    def get(self, request, pk: int, *args, **kwargs):
        assignment = self.get_assignment(request, pk)
        return Response(stats.get_grade_analytics(assignment))


class GradingQueueView(APIView):
    permission_classes = [IsTeacherOrAdmin]

    def get(self, request, *args, **kwargs):
        data = [
            {
                "id": assignment.id,
                "title": assignment.title,
                "type": assignment.type,
                "due_date": assignment.due_date,
                "is_overdue": assignment.is_overdue(),
                "class": {
                    "id": assignment.school_class.id,
                    "name": assignment.school_class.name,
                    "full_name": assignment.school_class.full_name,
                },
                "subject": {
                    "id": assignment.subject.id,
                    "name": assignment.subject.name,
                    "code": assignment.subject.code,
                },
                "pending_submissions": assignment.pending_submissions,
            }
            for assignment in stats.grading_queue(request.user)
        ]
        return Response(data)


class AssignmentTypesView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return Response(
            [{"value": value, "label": label} for value, label in Assignment.Type.choices]
        )


class StudentAssignmentMixin:
    permission_classes = [IsStudent]

    def get_student(self, request):
        return request.user.student_record

    def get_assignment(self, request, pk: int) -> Assignment:
        student = self.get_student(request)
        try:
            return stats.assignments_for_student(student).get(pk=pk)
        except Assignment.DoesNotExist as exc:
            raise exceptions.NotFound("Assignment not found.") from exc


class MyAssignmentListView(StudentAssignmentMixin, APIView):
    def get(self, request, *args, **kwargs):
        student = self.get_student(request)
        serializer = StudentAssignmentSerializer(
            stats.assignments_for_student(student),
            many=True,
            context={"request": request, "student": student},
        )
        return Response(serializer.data)


class MySubmissionView(StudentAssignmentMixin, APIView):
    """Read or edit the current student's draft for an assignment."""

    def get(self, request, pk: int, *args, **kwargs):
        assignment = self.get_assignment(request, pk)
        submission = services.start_submission(assignment, self.get_student(request))
        return Response(SubmissionSerializer(submission, context={"request": request}).data)

    def put(self, request, pk: int, *args, **kwargs):
        assignment = self.get_assignment(request, pk)
        serializer = DraftInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        submission = services.start_submission(assignment, self.get_student(request))
        result = services.save_draft(submission, **serializer.validated_data)
        return _transition_response(result, request)


class MySubmissionSubmitView(StudentAssignmentMixin, APIView):
    def post(self, request, pk: int, *args, **kwargs):
        assignment = self.get_assignment(request, pk)
        submission = services.start_submission(assignment, self.get_student(request))
        return _transition_response(services.submit(submission), request)
