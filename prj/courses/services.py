"""
courses/services.py
───────────────────
Course catalog CRUD and the enrollment registry.

ensure_enrollment() is the single place enrollments are created; both the
approval workflow and the self-service course picker go through it, so the
"one row per (user, course)" rule lives here.
"""

import logging

from django.db import transaction
from django.utils import timezone

from audit import services as audit
from core.exceptions import DependencyConflict, NotFound, ValidationFailed

from .models import Course, Enrollment

logger = logging.getLogger(__name__)


def _clean_course_fields(course_code, course_name, credits):
    course_code = (course_code or '').strip()
    course_name = (course_name or '').strip()
    try:
        credits = int(credits)
    except (TypeError, ValueError):
        credits = 0
    if not course_code or not course_name or credits <= 0:
        raise ValidationFailed('Please provide course code, name and a positive credit value.')
    return course_code, course_name, credits


def get_course(course_id):
    try:
        return Course.objects.get(pk=course_id)
    except Course.DoesNotExist:
        raise NotFound('Course not found.')


def create_course(course_code, course_name, credits, description=''):
    course_code, course_name, credits = _clean_course_fields(course_code, course_name, credits)
    if Course.objects.filter(course_code__iexact=course_code).exists():
        raise ValidationFailed(f'A course with code {course_code} already exists.')
    course = Course.objects.create(
        course_code=course_code,
        course_name=course_name,
        credits=credits,
        description=(description or '').strip(),
    )
    logger.info('Course %s created', course.course_code)
    return course


def update_course(course_id, course_code, course_name, credits, description=''):
    course = get_course(course_id)
    course_code, course_name, credits = _clean_course_fields(course_code, course_name, credits)
    if Course.objects.filter(course_code__iexact=course_code).exclude(pk=course.pk).exists():
        raise ValidationFailed(f'A course with code {course_code} already exists.')

    course.course_code = course_code
    course.course_name = course_name
    course.credits     = credits
    course.description = (description or '').strip()
    course.save()
    return course


def delete_course(course_id, admin=None):
    """Delete a course unless students are enrolled in it."""
    course = get_course(course_id)
    if course.enrollments.exists():
        raise DependencyConflict(
            'Cannot delete course: there are enrolled students. Remove enrollments first.'
        )
    label = str(course)
    course.delete()
    audit.record_after_commit(audit.Level.INFO, f'Course {label} deleted.', user=admin)
    return label


# ── Enrollment registry ───────────────────────────────────────────────────────

def ensure_enrollment(user, course, when=None):
    """
    Enroll *user* in *course* unless they already are.
    Returns ``(enrollment, created)``.

    get_or_create looks first and inserts inside a savepoint; if a concurrent
    transaction wins the unique constraint the existing row is returned.
    """
    return Enrollment.objects.get_or_create(
        user=user,
        course=course,
        defaults={'enrolled_at': when or timezone.now()},
    )


def enroll_in_courses(user, course_ids):
    """
    Self-service enrollment in one or more courses.

    Non-positive and duplicate ids are dropped; unknown courses and courses the
    user is already enrolled in are skipped.  Returns ``(inserted, skipped)``.
    """
    selected = []
    for raw in course_ids or []:
        try:
            cid = int(raw)
        except (TypeError, ValueError):
            continue
        if cid > 0 and cid not in selected:
            selected.append(cid)

    if not selected:
        raise ValidationFailed('Please select at least one course to enroll.')

    inserted = skipped = 0
    now = timezone.now()
    with transaction.atomic():
        courses = Course.objects.in_bulk(selected)
        for cid in selected:
            course = courses.get(cid)
            if course is None:
                skipped += 1
                continue
            _, created = ensure_enrollment(user, course, when=now)
            if created:
                inserted += 1
            else:
                skipped += 1

    if inserted:
        audit.record_after_commit(
            audit.Level.INFO,
            f'{user.username} enrolled in {inserted} course(s).',
            user=user,
            context={'course_ids': selected},
        )
    return inserted, skipped


def enrolled_courses(user):
    return (
        Enrollment.objects
        .filter(user=user)
        .select_related('course')
        .order_by('course__course_name')
    )
