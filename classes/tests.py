from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse

from assignments.tests.factories import (
    create_class,
    create_student,
    create_subject,
    create_teacher,
)

from . import services
from .models import ClassEnrollment


class EnrollmentServiceTests(TestCase):
    def test_capacity_and_duplicates(self):
        school_class = create_class(max_students=2)
        first, second, third = (create_student() for _ in range(3))
        ClassEnrollment.objects.create(school_class=school_class, student=first)

        result = services.enroll_students(
            school_class, [first.id, second.id, third.id, 999999]
        )

        self.assertEqual(result.enrolled, [second.id])
        self.assertEqual(result.already_enrolled, [first.id])
        self.assertEqual(result.rejected, [third.id, 999999])
        self.assertTrue(school_class.is_full())
        self.assertEqual(school_class.available_spots, 0)

    def test_remove_students(self):
        student = create_student()
        school_class = create_class(students=[student])
        self.assertEqual(services.remove_students(school_class, [student.id]), 1)
        self.assertFalse(school_class.enrollments.exists())


class SchoolClassApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.teacher = create_teacher()
        self.client.force_login(self.teacher)

    def test_create_class_with_subjects(self):
        subject = create_subject("History")
        response = self.client.post(
            reverse("classes:class-list"),
            data={
                "name": "10A",
                "code": "10A-2024",
                "grade_level": "10",
                "section": "A",
                "subject_ids": [subject.id],
            },
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 201, response.content)
        payload = response.json()
        self.assertEqual(payload["teacher"], self.teacher.id)
        self.assertEqual(payload["full_name"], "Grade 10 - Section A")
        self.assertEqual([item["name"] for item in payload["subjects"]], ["History"])

    def test_enroll_and_remove(self):
        school_class = create_class(teacher=self.teacher)
        student = create_student()
        response = self.client.post(
            reverse("classes:class-enroll-students", args=[school_class.id]),
            data={"student_ids": [student.id]},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["enrolled"], [student.id])

        response = self.client.get(reverse("classes:class-detail", args=[school_class.id]))
        self.assertEqual([item["id"] for item in response.json()["students"]], [student.id])

        response = self.client.post(
            reverse("classes:class-remove-students", args=[school_class.id]),
            data={"student_ids": [student.id]},
            content_type="application/json",
        )
        self.assertEqual(response.json()["removed"], 1)

    def test_foreign_class_roster_forbidden(self):
        school_class = create_class(teacher=create_teacher())
        response = self.client.post(
            reverse("classes:class-enroll-students", args=[school_class.id]),
            data={"student_ids": [create_student().id]},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 403)

    def test_available_students_excludes_enrolled(self):
        enrolled = create_student()
        free = create_student()
        school_class = create_class(teacher=self.teacher, students=[enrolled])
        response = self.client.get(
            reverse("classes:available-students"), {"class_id": school_class.id}
        )
        ids = [item["id"] for item in response.json()]
        self.assertIn(free.id, ids)
        self.assertNotIn(enrolled.id, ids)
