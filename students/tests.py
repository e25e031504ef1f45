from django.db import IntegrityError, transaction
from django.test import TestCase

from .models import Student


class StudentModelTests(TestCase):
    def test_status_helpers(self):
        student = Student.objects.create(name="Ada", student_id="S-1")
        self.assertTrue(student.is_active())
        self.assertFalse(student.has_graduated())

        student.status = Student.Status.GRADUATED
        self.assertTrue(student.has_graduated())
        self.assertFalse(student.is_active())

    def test_student_id_is_unique(self):
        Student.objects.create(name="Ada", student_id="S-1")
        with self.assertRaises(IntegrityError), transaction.atomic():
            Student.objects.create(name="Grace", student_id="S-1")
