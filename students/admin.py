from django.contrib import admin

from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("name", "student_id", "grade_level", "status")
    list_filter = ("status", "grade_level")
    search_fields = ("name", "student_id", "email")
    raw_id_fields = ("user",)
