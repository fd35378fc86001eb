"""
courses/models.py
─────────────────
Course catalog and the enrollment registry.

Course     – a catalog entry, e.g. "CS101 – Intro to Programming (3 credits)".
Enrollment – a confirmed student ↔ course link.  Created by approving an
             application (or by the self-service course picker); never updated.
"""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Course(models.Model):
    course_code = models.CharField(
        max_length=20,
        unique=True,
        help_text="Short unique code, e.g. 'CS101'.",
    )
    course_name = models.CharField(max_length=200)
    credits = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text='Credit units; the default fee is credits × fee per credit.',
    )
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'courses'
        ordering = ['course_name']
        verbose_name = 'Course'
        verbose_name_plural = 'Courses'

    def __str__(self):
        return f"{self.course_code} – {self.course_name}"


class Enrollment(models.Model):
    """
    At most one row per (user, course).  The services check before inserting;
    the unique constraint closes the window between two concurrent approvals.
    Users and courses that are still referenced here cannot be deleted.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='enrollments',
    )
    course = models.ForeignKey(
        Course,
        on_delete=models.PROTECT,
        related_name='enrollments',
    )
    enrolled_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'enrollments'
        ordering = ['-enrolled_at']
        verbose_name = 'Enrollment'
        verbose_name_plural = 'Enrollments'
        constraints = [
            models.UniqueConstraint(fields=['user', 'course'], name='unique_enrollment_per_course'),
        ]

    def __str__(self):
        return f"{self.user} → {self.course.course_code}"
