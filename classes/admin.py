from django.contrib import admin

from .models import ClassEnrollment, SchoolClass


class ClassEnrollmentInline(admin.TabularInline):
    model = ClassEnrollment
    extra = 0
    raw_id_fields = ("student",)


@admin.register(SchoolClass)
class SchoolClassAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "grade_level", "section", "academic_year", "teacher", "is_active")
    list_filter = ("grade_level", "academic_year", "is_active")
    search_fields = ("name", "code")
    filter_horizontal = ("subjects",)
    inlines = [ClassEnrollmentInline]
