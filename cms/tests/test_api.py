from datetime import timedelta

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from assignments.tests.factories import create_student_user, create_teacher
from cms import services
from cms.models import Content


class ContentApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.teacher = create_teacher()
        self.client.force_login(self.teacher)

    def _create(self, **fields):
        data = {"title": "About us", "body": "We teach.", "type": "page", **fields}
        return self.client.post(
            reverse("cms:content-list"), data=data, content_type="application/json"
        )

    def test_create_content_records_first_version(self):
        response = self._create()
        self.assertEqual(response.status_code, 201, response.content)
        payload = response.json()
        self.assertEqual(payload["slug"], "about-us")
        self.assertEqual(payload["current_version"]["version_number"], 1)
        self.assertIn("<p>We teach.</p>", payload["rendered_body"])
        self.assertTrue(payload["can_edit"])

    def test_list_filters(self):
        self._create(title="Sports day", type="news")
        self._create(title="Exam rules", body="No phones", type="page")
        response = self.client.get(reverse("cms:content-list"), {"type": "news"})
        self.assertEqual([item["title"] for item in response.json()], ["Sports day"])
        response = self.client.get(reverse("cms:content-list"), {"search": "phones"})
        self.assertEqual([item["title"] for item in response.json()], ["Exam rules"])

    def test_patch_creates_version(self):
        content_id = self._create().json()["id"]
        response = self.client.patch(
            reverse("cms:content-detail", args=[content_id]),
            data={"body": "We teach well.", "change_summary": "Wording"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200, response.content)
        self.assertEqual(response.json()["current_version"]["version_number"], 2)

        response = self.client.get(reverse("cms:content-versions", args=[content_id]))
        versions = response.json()["versions"]
        self.assertEqual([item["version_number"] for item in versions], [2, 1])
        self.assertEqual(
            versions[0]["changes"],
            {"body": {"old": "We teach.", "new": "We teach well."}},
        )

    def test_publish_version(self):
        content_id = self._create().json()["id"]
        content = Content.objects.get(pk=content_id)
        version = services.create_version(content, {"title": "About the school"}, self.teacher)
        response = self.client.post(
            reverse("cms:content-publish-version", args=[content_id]),
            data={"version_id": version.id},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200, response.content)
        payload = response.json()
        self.assertEqual(payload["status"], "published")
        self.assertEqual(payload["title"], "About the school")

    def test_publish_foreign_version_rejected(self):
        first = self._create().json()["id"]
        other = Content.objects.get(pk=self._create(title="Other").json()["id"])
        response = self.client.post(
            reverse("cms:content-publish-version", args=[first]),
            data={"version_id": other.current_version_id},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 422)

    def test_non_author_cannot_edit(self):
        content_id = self._create().json()["id"]
        self.client.force_login(create_teacher())
        response = self.client.patch(
            reverse("cms:content-detail", args=[content_id]),
            data={"title": "Hijacked"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 403)
        response = self.client.get(reverse("cms:content-detail", args=[content_id]))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["can_edit"])

    def test_student_forbidden(self):
        user, _ = create_student_user()
        self.client.force_login(user)
        response = self.client.get(reverse("cms:content-list"))
        self.assertEqual(response.status_code, 403)

    def test_choice_endpoints(self):
        types = self.client.get(reverse("cms:content-types")).json()
        self.assertIn({"value": "post", "label": "Blog Post"}, types)
        templates = self.client.get(reverse("cms:content-templates")).json()
        self.assertIn({"value": "landing", "label": "Landing Page"}, templates)


class PublicContentApiTests(TestCase):
    def setUp(self):
        cache.clear()
        author = create_teacher()
        self.published = services.create_content(
            {"title": "Open day", "body": "Visit us", "status": "published"}, author=author
        )
        services.create_content({"title": "Secret draft"}, author=author)
        services.create_content(
            {
                "title": "Next week",
                "status": "published",
                "published_at": timezone.now() + timedelta(days=7),
            },
            author=author,
        )

    def test_lists_only_published(self):
        response = self.client.get(reverse("cms:public-content-list"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["slug"] for item in response.json()], ["open-day"])

    def test_detail_by_slug(self):
        response = self.client.get(reverse("cms:public-content-detail", args=["open-day"]))
        self.assertEqual(response.status_code, 200)
        self.assertIn("Visit us", response.json()["rendered_body"])

    def test_draft_not_exposed(self):
        response = self.client.get(reverse("cms:public-content-detail", args=["secret-draft"]))
        self.assertEqual(response.status_code, 404)
