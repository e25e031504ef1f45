from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from django.db import transaction

from students.models import Student

from .models import ClassEnrollment, SchoolClass

logger = logging.getLogger(__name__)


@dataclass
class EnrollmentResult:
    enrolled: list[int] = field(default_factory=list)
    already_enrolled: list[int] = field(default_factory=list)
    rejected: list[int] = field(default_factory=list)


@transaction.atomic
def enroll_students(school_class: SchoolClass, student_ids: Iterable[int]) -> EnrollmentResult:
    """Add students to the roster, skipping duplicates and honouring capacity."""

    school_class = SchoolClass.objects.select_for_update().get(pk=school_class.pk)
    result = EnrollmentResult()
    existing = set(
        ClassEnrollment.objects.filter(school_class=school_class).values_list(
            "student_id", flat=True
        )
    )
    spots = max(0, school_class.max_students - len(existing))

    requested = list(dict.fromkeys(int(pk) for pk in student_ids))
    known = set(Student.objects.filter(pk__in=requested).values_list("pk", flat=True))

    for student_id in requested:
        if student_id not in known:
            result.rejected.append(student_id)
        elif student_id in existing:
            result.already_enrolled.append(student_id)
        elif spots <= 0:
            result.rejected.append(student_id)
        else:
            ClassEnrollment.objects.create(school_class=school_class, student_id=student_id)
            result.enrolled.append(student_id)
            spots -= 1

    if result.rejected:
        logger.info(
            "Class %s rejected enrollment of %s", school_class.pk, result.rejected
        )
    return result


def remove_students(school_class: SchoolClass, student_ids: Iterable[int]) -> int:
    deleted, _ = ClassEnrollment.objects.filter(
        school_class=school_class, student_id__in=list(student_ids)
    ).delete()
    return deleted
