"""
accounts/models.py
──────────────────
Identity model.

User – extends AbstractUser with a role (Student vs. Admin) and an optional
       middle name.  The role only changes through the explicit admin
       "promote" action.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user model for the enrollment portal.

    Roles
    -----
    STUDENT – applies, pays fees, picks courses.
    ADMIN   – reviews applications and manages the catalog, students, payments.
    """

    class Role(models.TextChoices):
        STUDENT = 'student', 'Student'
        ADMIN   = 'admin',   'Admin'

    middle_name = models.CharField(
        max_length=150,
        blank=True,
        help_text='Optional middle name.',
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.STUDENT,
        verbose_name='Role',
        help_text='Admins manage the portal; students apply and pay.',
    )

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def created_at(self):
        return self.date_joined

    def get_full_name(self):
        parts = [self.first_name, self.middle_name, self.last_name]
        return ' '.join(p.strip() for p in parts if p and p.strip())

    def __str__(self):
        return f"{self.get_full_name() or self.username} ({self.get_role_display()})"
