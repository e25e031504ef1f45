from django.core.cache import cache
from django.test import TestCase, override_settings
from django.urls import reverse

from assignments.tests.factories import create_teacher


class HealthViewTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_health(self):
        response = self.client.get(reverse("health"))
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["status"], "healthy")
        self.assertIn("timestamp", payload)
        self.assertIn("version", payload)


@override_settings(
    RATE_LIMITS={
        "rules": {"api": "3/m", "public": "2/m"},
        "routes": [("/api/health/", "public"), ("/api/", "api")],
    }
)
class RateLimitMiddlewareTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_headers_on_allowed_requests(self):
        response = self.client.get(reverse("health"))
        self.assertEqual(response["X-RateLimit-Limit"], "2")
        self.assertEqual(response["X-RateLimit-Remaining"], "1")
        self.assertIn("X-RateLimit-Reset", response)

    def test_anonymous_limit_by_ip(self):
        for _ in range(2):
            self.assertEqual(self.client.get(reverse("health")).status_code, 200)
        response = self.client.get(reverse("health"))
        self.assertEqual(response.status_code, 429)
        payload = response.json()
        self.assertEqual(payload["error_code"], "RATE_LIMIT_EXCEEDED")
        self.assertFalse(payload["success"])
        self.assertGreaterEqual(payload["retry_after"], 0)

    def test_authenticated_users_counted_separately(self):
        first = create_teacher()
        second = create_teacher()
        url = reverse("assignments:assignment-types")

        self.client.force_login(first)
        for _ in range(3):
            self.assertEqual(self.client.get(url).status_code, 200)
        self.assertEqual(self.client.get(url).status_code, 429)

        self.client.force_login(second)
        self.assertEqual(self.client.get(url).status_code, 200)

    def test_unmatched_paths_not_limited(self):
        for _ in range(5):
            response = self.client.get("/status/")
            self.assertNotIn("X-RateLimit-Limit", response)
