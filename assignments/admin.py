from django.contrib import admin

from .models import Assignment, AssignmentSubmission


class AssignmentSubmissionInline(admin.TabularInline):
    model = AssignmentSubmission
    extra = 0
    fields = ("student", "status", "submitted_at", "is_late", "grade", "points_earned")
    readonly_fields = fields
    can_delete = False
    show_change_link = True


@admin.register(Assignment)
class AssignmentAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "school_class",
        "subject",
        "type",
        "due_date",
        "is_published",
    )
    list_filter = ("type", "is_published", "school_class", "subject")
    search_fields = ("title", "description")
    date_hierarchy = "due_date"
    readonly_fields = ("created_at", "updated_at")
    inlines = [AssignmentSubmissionInline]


@admin.register(AssignmentSubmission)
class AssignmentSubmissionAdmin(admin.ModelAdmin):
    list_display = (
        "assignment",
        "student",
        "status",
        "submitted_at",
        "is_late",
        "grade",
        "points_earned",
    )
    list_filter = ("status", "is_late", "assignment")
    search_fields = ("student__name", "student__student_id", "assignment__title")
    # Status, grade and points change only through the lifecycle services.
    readonly_fields = (
        "status",
        "submitted_at",
        "is_late",
        "grade",
        "points_earned",
        "graded_by",
        "graded_at",
        "created_at",
        "updated_at",
    )
