from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework.authtoken.models import Token

from assignments.tests.factories import (
    create_admin,
    create_student_user,
    create_teacher,
    create_user,
)

from .models import Role, user_role


class UserRoleTests(TestCase):
    def test_roles(self):
        student_user, _ = create_student_user()
        self.assertEqual(user_role(create_admin()), Role.ADMIN)
        self.assertEqual(user_role(create_teacher()), Role.TEACHER)
        self.assertEqual(user_role(student_user), Role.STUDENT)
        self.assertEqual(user_role(create_user()), Role.GUEST)


class AuthApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.teacher = create_teacher("ms_smith")

    def test_login_returns_token(self):
        response = self.client.post(
            reverse("accounts:login"),
            data={"username": "ms_smith", "password": "secret"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200, response.content)
        payload = response.json()
        self.assertEqual(payload["token"], Token.objects.get(user=self.teacher).key)
        self.assertEqual(payload["user"]["role"], "teacher")

    def test_login_with_bad_password(self):
        response = self.client.post(
            reverse("accounts:login"),
            data={"username": "ms_smith", "password": "wrong"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)

    def test_token_authenticates_api(self):
        token = Token.objects.create(user=self.teacher)
        response = self.client.get(
            reverse("accounts:current-user"), HTTP_AUTHORIZATION=f"Token {token.key}"
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["username"], "ms_smith")

    def test_current_user_requires_authentication(self):
        response = self.client.get(reverse("accounts:current-user"))
        self.assertIn(response.status_code, (401, 403))

    def test_logout_revokes_token(self):
        token = Token.objects.create(user=self.teacher)
        response = self.client.post(
            reverse("accounts:logout"), HTTP_AUTHORIZATION=f"Token {token.key}"
        )
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Token.objects.filter(user=self.teacher).exists())
