from datetime import timedelta

from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from assignments.tests.factories import create_admin, create_teacher
from cms import services
from cms.models import Content, ContentVersion


class ContentVersioningTests(TestCase):
    def setUp(self):
        self.author = create_teacher()
        self.content = services.create_content(
            {"title": "Welcome", "body": "Hello", "type": Content.Type.PAGE},
            author=self.author,
        )

    def test_initial_version_is_current(self):
        version = self.content.versions.get()
        self.assertEqual(version.version_number, 1)
        self.assertTrue(version.is_current)
        self.assertEqual(self.content.current_version, version)
        self.assertEqual(self.content.slug, "welcome")
        self.assertEqual(self.content.status, Content.Status.DRAFT)

    def test_version_numbers_increase(self):
        second = services.create_version(self.content, {"body": "Second"}, self.author)
        third = services.create_version(self.content, {"body": "Third"}, self.author)
        self.assertEqual([second.version_number, third.version_number], [2, 3])
        self.assertEqual(second.title, "Welcome")
        self.assertFalse(third.is_current)

    def test_publish_version_moves_current_flag(self):
        second = services.create_version(
            self.content, {"title": "Welcome back", "body": "Second"}, self.author
        )
        services.create_version(self.content, {"body": "Third"}, self.author)

        services.publish_version(self.content, second)

        current = list(self.content.versions.filter(is_current=True))
        self.assertEqual(current, [second])
        self.content.refresh_from_db()
        self.assertEqual(self.content.title, "Welcome back")
        self.assertEqual(self.content.body, "Second")
        self.assertEqual(self.content.current_version, second)
        self.assertEqual(self.content.status, Content.Status.PUBLISHED)
        self.assertIsNotNone(self.content.published_at)

    def test_publish_keeps_existing_published_at(self):
        published_at = timezone.now() - timedelta(days=10)
        self.content.published_at = published_at
        self.content.save()
        version = services.create_version(self.content, {"body": "Later"}, self.author)
        services.publish_version(self.content, version)
        self.content.refresh_from_db()
        self.assertEqual(self.content.published_at, published_at)

    def test_foreign_version_rejected(self):
        other = services.create_content({"title": "Other"}, author=self.author)
        with self.assertRaises(ValueError):
            services.publish_version(self.content, other.versions.get())

    def test_only_one_current_version_in_database(self):
        second = services.create_version(self.content, {"body": "Second"}, self.author)
        with self.assertRaises(IntegrityError), transaction.atomic():
            ContentVersion.objects.filter(pk=second.pk).update(is_current=True)

    def test_update_versions_only_on_content_change(self):
        services.update_content(self.content, {"sort_order": 5}, self.author)
        self.assertEqual(self.content.versions.count(), 1)

        services.update_content(
            self.content, {"body": "Edited", "change_summary": "Typo"}, self.author
        )
        self.assertEqual(self.content.versions.count(), 2)
        latest = self.content.versions.first()
        self.assertEqual(latest.version_number, 2)
        self.assertEqual(latest.change_summary, "Typo")
        self.assertTrue(latest.is_current)
        self.assertEqual(self.content.current_version, latest)

    def test_create_published_content(self):
        content = services.create_content(
            {"title": "News", "status": Content.Status.PUBLISHED}, author=self.author
        )
        self.assertEqual(content.status, Content.Status.PUBLISHED)
        self.assertIsNotNone(content.published_at)
        self.assertTrue(content.is_published())

    def test_version_differences(self):
        second = services.create_version(
            self.content, {"title": "Renamed", "body": "Hello"}, self.author
        )
        diff = services.version_differences(self.content.versions.get(version_number=1), second)
        self.assertEqual(diff, {"title": {"old": "Welcome", "new": "Renamed"}})

    def test_can_edit(self):
        self.assertTrue(self.content.can_edit(self.author))
        self.assertTrue(self.content.can_edit(create_admin()))
        self.assertFalse(self.content.can_edit(create_teacher()))

    def test_duplicate_titles_get_unique_slugs(self):
        other = services.create_content({"title": "Welcome"}, author=self.author)
        self.assertEqual(other.slug, "welcome-2")
