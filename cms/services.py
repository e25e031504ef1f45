"""Linear content versioning.

Every edit of a :class:`~cms.models.Content` is stored as a numbered
:class:`~cms.models.ContentVersion`. Exactly one version per content carries
``is_current``; publishing a version moves that flag and copies the snapshot
back onto the content row.
"""
from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from .models import Content, ContentVersion

logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS = ("title", "body", "meta_data", "template")
CONTENT_FIELDS = (
    "title",
    "slug",
    "body",
    "type",
    "status",
    "meta_data",
    "template",
    "rendering_strategy",
    "sort_order",
    "is_featured",
    "published_at",
)
# An update produces a new version only when one of these changes.
VERSIONED_FIELDS = ("title", "body", "meta_data")


def create_version(
    content: Content,
    fields: dict[str, Any] | None = None,
    author=None,
    *,
    change_summary: str = "",
) -> ContentVersion:
    """Store a new snapshot of ``content`` with the next version number.

    Snapshot values missing from ``fields`` are taken from the content row.
    The new version is not current until it is published.
    """

    fields = fields or {}
    with transaction.atomic():
        locked = Content.objects.select_for_update().get(pk=content.pk)
        latest = locked.versions.aggregate(value=Max("version_number"))["value"] or 0
        version = ContentVersion.objects.create(
            content=locked,
            version_number=latest + 1,
            change_summary=change_summary,
            created_by=author,
            is_current=False,
            **{name: fields.get(name, getattr(locked, name)) for name in SNAPSHOT_FIELDS},
        )

    logger.info("Content %s: created %s", content.pk, version.label)
    return version


def publish_version(content: Content, version: ContentVersion) -> Content:
    """Make ``version`` the current version of ``content`` and publish it."""

    if version.content_id != content.pk:
        raise ValueError(
            f"Version {version.pk} does not belong to content {content.pk}."
        )

    with transaction.atomic():
        locked = Content.objects.select_for_update().get(pk=content.pk)
        # Clear first so the partial unique index never sees two current rows.
        locked.versions.filter(is_current=True).update(is_current=False)
        ContentVersion.objects.filter(pk=version.pk).update(is_current=True)

        for name in SNAPSHOT_FIELDS:
            setattr(locked, name, getattr(version, name))
        locked.current_version = version
        locked.status = Content.Status.PUBLISHED
        if locked.published_at is None:
            locked.published_at = timezone.now()
        locked.save()

    version.is_current = True
    if locked is not content:
        content.refresh_from_db()
    logger.info("Content %s: published %s", content.pk, version.label)
    return content


def create_content(fields: dict[str, Any], author=None) -> Content:
    """Create a content item together with its first version."""

    values = {name: fields[name] for name in CONTENT_FIELDS if name in fields}
    publish = values.get("status") == Content.Status.PUBLISHED
    # Published state is reached through publish_version below.
    values["status"] = Content.Status.DRAFT
    published_at = values.pop("published_at", None)

    with transaction.atomic():
        content = Content.objects.create(author=author, published_at=published_at, **values)
        version = create_version(
            content, author=author, change_summary=fields.get("change_summary") or "Initial version"
        )
        if publish:
            publish_version(content, version)
        else:
            content.current_version = version
            content.save(update_fields=["current_version", "updated_at"])
            ContentVersion.objects.filter(pk=version.pk).update(is_current=True)

    logger.info("Content %s created by %s", content.pk, getattr(author, "pk", None))
    return content


def update_content(content: Content, fields: dict[str, Any], author=None) -> Content:
    """Apply ``fields`` to ``content`` and version the change when needed.

    A new version is recorded (and made current) only when the title, body or
    meta data differ from the stored values.
    """

    changed = any(
        name in fields and fields[name] != getattr(content, name)
        for name in VERSIONED_FIELDS
    )

    with transaction.atomic():
        for name in CONTENT_FIELDS:
            if name in fields:
                setattr(content, name, fields[name])
        if content.status == Content.Status.PUBLISHED and content.published_at is None:
            content.published_at = timezone.now()
        content.save()

        if changed:
            version = create_version(
                content,
                author=author,
                change_summary=fields.get("change_summary") or "Content updated",
            )
            content.versions.filter(is_current=True).update(is_current=False)
            ContentVersion.objects.filter(pk=version.pk).update(is_current=True)
            content.current_version = version
            content.save(update_fields=["current_version", "updated_at"])

    return content


def version_differences(older: ContentVersion, newer: ContentVersion) -> dict[str, dict]:
    """Map each snapshot field that differs to its ``{"old", "new"}`` values."""

    return {
        name: {"old": getattr(older, name), "new": getattr(newer, name)}
        for name in SNAPSHOT_FIELDS
        if getattr(older, name) != getattr(newer, name)
    }
