from rest_framework import serializers

from classes.models import SchoolClass
from students.models import Student
from subjects.models import Subject

from .. import stats
from ..models import Assignment, AssignmentSubmission, validate_assignment_window


class ClassSummarySerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = SchoolClass
        fields = ["id", "name", "full_name", "grade_level"]
        read_only_fields = fields


class SubjectSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Subject
        fields = ["id", "name", "code"]
        read_only_fields = fields


class StudentSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Student
        fields = ["id", "name", "student_id", "email"]
        read_only_fields = fields


class AssignmentSerializer(serializers.ModelSerializer):
    school_class = serializers.PrimaryKeyRelatedField(queryset=SchoolClass.objects.all())
    subject = serializers.PrimaryKeyRelatedField(queryset=Subject.objects.all())
    class_info = ClassSummarySerializer(source="school_class", read_only=True)
    subject_info = SubjectSummarySerializer(source="subject", read_only=True)
    teacher = serializers.PrimaryKeyRelatedField(read_only=True)
    is_available = serializers.SerializerMethodField()
    is_overdue = serializers.SerializerMethodField()
    days_until_due = serializers.SerializerMethodField()
    submissions_count = serializers.SerializerMethodField()

    class Meta:
        model = Assignment
        fields = [
            "id",
            "title",
            "description",
            "instructions",
            "school_class",
            "class_info",
            "subject",
            "subject_info",
            "teacher",
            "type",
            "max_points",
            "due_date",
            "available_from",
            "available_until",
            "allow_late_submission",
            "late_penalty_percent",
            "attachments",
            "is_published",
            "is_available",
            "is_overdue",
            "days_until_due",
            "submissions_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "teacher", "created_at", "updated_at"]

    def get_is_available(self, obj: Assignment) -> bool:
        return obj.is_available()

    def get_is_overdue(self, obj: Assignment) -> bool:
        return obj.is_overdue()

    def get_days_until_due(self, obj: Assignment) -> int:
        return obj.days_until_due()

    def get_submissions_count(self, obj: Assignment) -> int:
        annotated = getattr(obj, "submissions_count", None)
        if annotated is not None:
            return annotated
        return obj.submissions.count()

    def validate_attachments(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Attachments must be a list.")
        return value

    def validate(self, attrs):
        instance = self.instance

        def _current(name):
            if name in attrs:
                return attrs[name]
            return getattr(instance, name, None)

        errors = validate_assignment_window(
            _current("available_from"), _current("due_date"), _current("available_until")
        )
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class AssignmentDetailSerializer(AssignmentSerializer):
    submission_stats = serializers.SerializerMethodField()

    class Meta(AssignmentSerializer.Meta):
        fields = AssignmentSerializer.Meta.fields + ["submission_stats"]

    def get_submission_stats(self, obj: Assignment) -> dict:
        return stats.get_submission_stats(obj)


class SubmissionSerializer(serializers.ModelSerializer):
    student = StudentSummarySerializer(read_only=True)
    percentage_grade = serializers.DecimalField(
        max_digits=5, decimal_places=2, read_only=True, allow_null=True
    )
    letter_grade = serializers.CharField(read_only=True, allow_null=True)
    days_late = serializers.IntegerField(read_only=True)

    class Meta:
        model = AssignmentSubmission
        fields = [
            "id",
            "assignment",
            "student",
            "status",
            "content",
            "attachments",
            "submitted_at",
            "is_late",
            "days_late",
            "grade",
            "percentage_grade",
            "letter_grade",
            "points_earned",
            "feedback",
            "graded_by",
            "graded_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class DraftInputSerializer(serializers.Serializer):
    content = serializers.CharField(required=False, allow_blank=True)
    attachments = serializers.ListField(
        child=serializers.CharField(max_length=500), required=False
    )


class GradeInputSerializer(serializers.Serializer):
    # Out-of-range grades are clamped by the service, not rejected here.
    grade = serializers.FloatField()
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class StudentAssignmentSerializer(AssignmentSerializer):
    """Assignment as seen by an enrolled student, with their own submission."""

    my_submission = serializers.SerializerMethodField()

    class Meta(AssignmentSerializer.Meta):
        fields = [
            "id",
            "title",
            "description",
            "instructions",
            "class_info",
            "subject_info",
            "type",
            "max_points",
            "due_date",
            "available_from",
            "available_until",
            "allow_late_submission",
            "late_penalty_percent",
            "attachments",
            "is_available",
            "is_overdue",
            "days_until_due",
            "my_submission",
        ]
        read_only_fields = fields

    def get_my_submission(self, obj: Assignment):
        student = self.context.get("student")
        if student is None:
            return None
        submission = obj.submissions.filter(student=student).first()
        if submission is None:
            return None
        return {
            "id": submission.id,
            "status": submission.status,
            "is_late": submission.is_late,
            "grade": submission.grade,
            "letter_grade": submission.letter_grade,
        }
