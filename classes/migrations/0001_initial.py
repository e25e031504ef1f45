from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("students", "0001_initial"),
        ("subjects", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="SchoolClass",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("code", models.CharField(db_index=True, max_length=32, unique=True)),
                ("grade_level", models.CharField(max_length=20)),
                ("section", models.CharField(blank=True, max_length=10)),
                ("academic_year", models.CharField(blank=True, max_length=20)),
                ("description", models.TextField(blank=True)),
                ("max_students", models.PositiveIntegerField(default=30)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "teacher",
                    models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="classes_taught", to=settings.AUTH_USER_MODEL),
                ),
                ("subjects", models.ManyToManyField(blank=True, related_name="classes", to="subjects.subject")),
            ],
            options={
                "verbose_name": "class",
                "verbose_name_plural": "classes",
                "ordering": ["grade_level", "section", "name"],
                "indexes": [
                    models.Index(fields=["grade_level"], name="classes_grade_level_idx"),
                    models.Index(fields=["academic_year"], name="classes_academic_year_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ClassEnrollment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("enrolled_at", models.DateTimeField(auto_now_add=True)),
                (
                    "school_class",
                    models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="enrollments", to="classes.schoolclass"),
                ),
                (
                    "student",
                    models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="class_enrollments", to="students.student"),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["student"], name="classes_enrollment_student_idx")],
            },
        ),
        migrations.AddConstraint(
            model_name="classenrollment",
            constraint=models.UniqueConstraint(fields=("school_class", "student"), name="unique_class_student"),
        ),
        migrations.AddField(
            model_name="schoolclass",
            name="students",
            field=models.ManyToManyField(blank=True, related_name="classes", through="classes.ClassEnrollment", to="students.student"),
        ),
    ]
