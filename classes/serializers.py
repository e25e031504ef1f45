from rest_framework import serializers

from students.models import Student
from subjects.models import Subject

from .models import SchoolClass


class SubjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = Subject
        fields = ["id", "name", "code"]


class StudentSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Student
        fields = ["id", "name", "student_id", "email", "grade_level", "status"]


class SchoolClassSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    available_spots = serializers.IntegerField(read_only=True)
    students_count = serializers.SerializerMethodField()
    subjects = SubjectSerializer(many=True, read_only=True)
    subject_ids = serializers.PrimaryKeyRelatedField(
        source="subjects",
        queryset=Subject.objects.all(),
        many=True,
        required=False,
        write_only=True,
    )

    class Meta:
        model = SchoolClass
        fields = [
            "id",
            "name",
            "code",
            "grade_level",
            "section",
            "academic_year",
            "description",
            "teacher",
            "max_students",
            "is_active",
            "full_name",
            "available_spots",
            "students_count",
            "subjects",
            "subject_ids",
        ]
        read_only_fields = ["teacher"]

    def get_students_count(self, obj: SchoolClass) -> int:
        return obj.enrollments.count()


class SchoolClassDetailSerializer(SchoolClassSerializer):
    students = StudentSummarySerializer(many=True, read_only=True)

    class Meta(SchoolClassSerializer.Meta):
        fields = SchoolClassSerializer.Meta.fields + ["students"]


class StudentIdsSerializer(serializers.Serializer):
    student_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1), allow_empty=False
    )
