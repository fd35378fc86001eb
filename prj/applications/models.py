"""
applications/models.py
──────────────────────
EnrollmentApplication – a student's request to enroll, with its embedded
student / parent records and uploaded documents.

The embedded records are stored as JSON; use the typed accessors
(``student``, ``parent``, ``documents``) rather than the raw dicts.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from .types import FileRef, ParentInfo, StudentInfo


class EnrollmentApplication(models.Model):

    class Status(models.TextChoices):
        SUBMITTED = 'submitted', 'Submitted'
        APPROVED  = 'approved',  'Approved'
        REJECTED  = 'rejected',  'Rejected'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='enrollment_applications',
    )
    course_ids = models.JSONField(
        default=list,
        help_text='Courses requested (a single course in the current form).',
    )
    notes = models.TextField(blank=True)
    files = models.JSONField(default=list, blank=True)
    parent_info = models.JSONField(default=dict, blank=True)
    student_info = models.JSONField(default=dict, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.SUBMITTED,
        db_index=True,
    )
    submitted_at = models.DateTimeField(default=timezone.now)
    processed_at = models.DateTimeField(null=True, blank=True)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='processed_applications',
    )

    class Meta:
        db_table = 'enrollment_applications'
        ordering = ['-submitted_at', '-id']
        verbose_name = 'Enrollment Application'
        verbose_name_plural = 'Enrollment Applications'

    def __str__(self):
        return f"Application #{self.pk} – {self.user} ({self.get_status_display()})"

    @property
    def student(self):
        return StudentInfo.from_dict(self.student_info)

    @property
    def parent(self):
        return ParentInfo.from_dict(self.parent_info)

    @property
    def documents(self):
        return [FileRef.from_dict(f) for f in self.files or []]

    @property
    def is_pending(self):
        return self.status == self.Status.SUBMITTED

    def course_id_list(self):
        ids = []
        for raw in self.course_ids or []:
            try:
                ids.append(int(raw))
            except (TypeError, ValueError):
                continue
        return ids
