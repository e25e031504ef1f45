from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.text import slugify

from accounts.models import is_admin


class Content(models.Model):
    class Type(models.TextChoices):
        PAGE = "page", "Page"
        POST = "post", "Blog Post"
        ANNOUNCEMENT = "announcement", "Announcement"
        NEWS = "news", "News Article"

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ARCHIVED = "archived", "Archived"

    class Template(models.TextChoices):
        DEFAULT = "default", "Default Template"
        FULL_WIDTH = "full-width", "Full Width"
        SIDEBAR = "sidebar", "With Sidebar"
        LANDING = "landing", "Landing Page"

    class RenderingStrategy(models.TextChoices):
        MARKDOWN = "markdown", "Markdown"
        HTML = "html", "HTML"
        PLAIN = "plain", "Plain text"

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    body = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.PAGE)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    meta_data = models.JSONField(default=dict, blank=True)
    template = models.CharField(
        max_length=30, choices=Template.choices, default=Template.DEFAULT
    )
    rendering_strategy = models.CharField(
        max_length=20,
        choices=RenderingStrategy.choices,
        default=RenderingStrategy.MARKDOWN,
    )
    sort_order = models.IntegerField(default=0)
    is_featured = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="contents",
    )
    current_version = models.ForeignKey(
        "ContentVersion",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("sort_order", "-updated_at")
        indexes = [
            models.Index(fields=["type", "status"], name="cms_content_type_status_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return self.title

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = self._unique_slug()
        super().save(*args, **kwargs)

    def _unique_slug(self) -> str:
        base = slugify(self.title)[:240] or "content"
        slug = base
        suffix = 2
        while Content.objects.filter(slug=slug).exclude(pk=self.pk).exists():
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    def is_published(self, now=None) -> bool:
        now = now or timezone.now()
        return (
            self.status == self.Status.PUBLISHED
            and self.published_at is not None
            and self.published_at <= now
        )

    def can_edit(self, user) -> bool:
        return is_admin(user) or (user.is_authenticated and user.pk == self.author_id)


class ContentVersion(models.Model):
    """Immutable snapshot of a content item; one per edit."""

    content = models.ForeignKey(Content, on_delete=models.CASCADE, related_name="versions")
    title = models.CharField(max_length=255)
    body = models.TextField(blank=True)
    meta_data = models.JSONField(default=dict, blank=True)
    template = models.CharField(max_length=30, blank=True)
    version_number = models.PositiveIntegerField()
    change_summary = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="content_versions",
    )
    is_current = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-version_number",)
        constraints = [
            models.UniqueConstraint(
                fields=["content", "version_number"], name="unique_content_version_number"
            ),
            models.UniqueConstraint(
                fields=["content"],
                condition=Q(is_current=True),
                name="unique_current_content_version",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple representation
        return f"{self.content} {self.label}"

    @property
    def label(self) -> str:
        return f"v{self.version_number}"
