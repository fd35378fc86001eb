import pytest
from django.db import IntegrityError, transaction

from core.exceptions import DependencyConflict, NotFound, ValidationFailed
from courses import services
from courses.models import Course, Enrollment

pytestmark = pytest.mark.django_db


def test_create_course_strips_fields():
    course = services.create_course('  PH101 ', ' Physics ', '3', ' Mechanics ')

    assert (course.course_code, course.course_name, course.credits, course.description) == (
        'PH101', 'Physics', 3, 'Mechanics',
    )


@pytest.mark.parametrize('code, name, credits', [
    ('', 'Physics', 3),
    ('PH101', '  ', 3),
    ('PH101', 'Physics', 0),
    ('PH101', 'Physics', -2),
    ('PH101', 'Physics', 'three'),
])
def test_create_course_validation(code, name, credits):
    with pytest.raises(ValidationFailed):
        services.create_course(code, name, credits)
    assert not Course.objects.exists()


def test_course_code_must_be_unique(course):
    with pytest.raises(ValidationFailed, match='already exists'):
        services.create_course('cs101', 'Other', 2)


def test_update_course(course, other_course):
    with pytest.raises(ValidationFailed):
        services.update_course(course.pk, other_course.course_code, 'Renamed', 3)

    updated = services.update_course(course.pk, 'CS102', 'Renamed', 5, 'New')
    assert (updated.course_code, updated.course_name, updated.credits) == ('CS102', 'Renamed', 5)


def test_update_missing_course():
    with pytest.raises(NotFound):
        services.update_course(9999, 'X1', 'X', 1)


def test_delete_course_blocked_by_enrollment(student, course):
    Enrollment.objects.create(user=student, course=course)

    with pytest.raises(DependencyConflict):
        services.delete_course(course.pk)

    assert Course.objects.filter(pk=course.pk).exists()


def test_delete_course(course):
    assert services.delete_course(course.pk) == 'CS101 – Intro to Programming'
    assert not Course.objects.exists()


def test_delete_missing_course():
    with pytest.raises(NotFound):
        services.delete_course(9999)


def test_enrollment_pair_is_unique(student, course):
    Enrollment.objects.create(user=student, course=course)

    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Enrollment.objects.create(user=student, course=course)


def test_ensure_enrollment_is_idempotent(student, course):
    first, created = services.ensure_enrollment(student, course)
    again, created_again = services.ensure_enrollment(student, course)

    assert created is True
    assert created_again is False
    assert first.pk == again.pk


def test_enroll_in_courses_skips_duplicates_and_missing(student, course, other_course):
    Enrollment.objects.create(user=student, course=other_course)

    inserted, skipped = services.enroll_in_courses(
        student, [course.pk, str(course.pk), '0', 'x', 9999, other_course.pk],
    )

    assert (inserted, skipped) == (1, 2)
    assert set(Enrollment.objects.filter(user=student).values_list('course_id', flat=True)) == {
        course.pk, other_course.pk,
    }


@pytest.mark.parametrize('ids', [[], None, ['0', '-1', 'abc']])
def test_enroll_in_courses_requires_a_selection(student, ids):
    with pytest.raises(ValidationFailed):
        services.enroll_in_courses(student, ids)


def test_enrolled_courses(student, course, other_course):
    services.enroll_in_courses(student, [course.pk, other_course.pk])

    names = [e.course.course_name for e in services.enrolled_courses(student)]
    assert names == ['Calculus I', 'Intro to Programming']
