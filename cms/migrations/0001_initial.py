import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Content",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("slug", models.SlugField(blank=True, max_length=255, unique=True)),
                ("body", models.TextField(blank=True)),
                ("type", models.CharField(choices=[("page", "Page"), ("post", "Blog Post"), ("announcement", "Announcement"), ("news", "News Article")], default="page", max_length=20)),
                ("status", models.CharField(choices=[("draft", "Draft"), ("published", "Published"), ("archived", "Archived")], default="draft", max_length=20)),
                ("meta_data", models.JSONField(blank=True, default=dict)),
                ("template", models.CharField(choices=[("default", "Default Template"), ("full-width", "Full Width"), ("sidebar", "With Sidebar"), ("landing", "Landing Page")], default="default", max_length=30)),
                ("rendering_strategy", models.CharField(choices=[("markdown", "Markdown"), ("html", "HTML"), ("plain", "Plain text")], default="markdown", max_length=20)),
                ("sort_order", models.IntegerField(default=0)),
                ("is_featured", models.BooleanField(default=False)),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("author", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="contents", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("sort_order", "-updated_at"),
                "indexes": [
                    models.Index(fields=["type", "status"], name="cms_content_type_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ContentVersion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("body", models.TextField(blank=True)),
                ("meta_data", models.JSONField(blank=True, default=dict)),
                ("template", models.CharField(blank=True, max_length=30)),
                ("version_number", models.PositiveIntegerField()),
                ("change_summary", models.TextField(blank=True)),
                ("is_current", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("content", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="versions", to="cms.content")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="content_versions", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-version_number",),
                "constraints": [
                    models.UniqueConstraint(fields=("content", "version_number"), name="unique_content_version_number"),
                    models.UniqueConstraint(condition=models.Q(("is_current", True)), fields=("content",), name="unique_current_content_version"),
                ],
            },
        ),
        migrations.AddField(
            model_name="content",
            name="current_version",
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="cms.contentversion"),
        ),
    ]
