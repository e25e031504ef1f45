from django.test import TestCase

from .models import Subject


class SubjectModelTests(TestCase):
    def test_slug_derived_from_name(self):
        subject = Subject.objects.create(name="Computer Science", code="CS")
        self.assertEqual(subject.slug, "computer-science")

    def test_explicit_slug_kept(self):
        subject = Subject.objects.create(name="Mathematics", slug="maths")
        self.assertEqual(subject.slug, "maths")
