"""
accounts/services.py
────────────────────
Account management used by the registration / profile pages and by the admin
"Manage Students" page.

Every function takes the acting user (or target ids) explicitly and raises
``core.exceptions`` errors; none of them read the request or the session.
"""

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.utils.crypto import get_random_string

from applications.services import purge_application_files
from audit import services as audit
from core.exceptions import DependencyConflict, NotFound, ValidationFailed
from core.storage import remove_stored_file
from courses.models import Enrollment

logger = logging.getLogger(__name__)

TEMP_PASSWORD_CHARS = (
    'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789!@#$%^&*()-_=+'
)


def generate_temp_password(length=12):
    return get_random_string(length, allowed_chars=TEMP_PASSWORD_CHARS)


def _get_user(user_id):
    User = get_user_model()
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFound('User not found.')


def _check_identity(username, email, first_name, exclude_id=None):
    if not username or not first_name or not email:
        raise ValidationFailed('Please provide username, name and email.')
    try:
        validate_email(email)
    except ValidationError:
        raise ValidationFailed('Please enter a valid email address.')

    User = get_user_model()
    clash = User.objects.filter(username__iexact=username) | User.objects.filter(email__iexact=email)
    if exclude_id is not None:
        clash = clash.exclude(pk=exclude_id)
    if clash.exists():
        raise ValidationFailed('Username or email already exists.')


# ── Admin: manage students ────────────────────────────────────────────────────

def create_student(username, first_name, last_name, email, password='', middle_name=''):
    """
    Create a student account.  Returns ``(user, plain_password)``; when no
    password is given a temporary one is generated so the admin can hand it over.
    """
    username, email = username.strip(), email.strip()
    _check_identity(username, email, first_name.strip())

    plain = password.strip() or generate_temp_password(10)
    User = get_user_model()
    user = User.objects.create_user(
        username=username,
        email=email,
        password=plain,
        first_name=first_name.strip(),
        middle_name=middle_name.strip(),
        last_name=last_name.strip(),
        role=User.Role.STUDENT,
    )
    logger.info('Created student account %s (#%s)', user.username, user.pk)
    return user, plain


def update_student(user_id, username, first_name, last_name, email, middle_name=''):
    """Update identity fields (never the password or the role)."""
    user = _get_user(user_id)
    username, email = username.strip(), email.strip()
    _check_identity(username, email, first_name.strip(), exclude_id=user.pk)

    user.username    = username
    user.email       = email
    user.first_name  = first_name.strip()
    user.middle_name = middle_name.strip()
    user.last_name   = last_name.strip()
    user.save(update_fields=['username', 'email', 'first_name', 'middle_name', 'last_name'])
    return user


def promote_user(user_id, admin=None):
    user = _get_user(user_id)
    user.role = user.Role.ADMIN
    user.save(update_fields=['role'])
    audit.record_after_commit(
        audit.Level.INFO, f'User {user.username} promoted to admin.', user=admin,
    )
    return user


def reset_password(user_id):
    """Set a fresh temporary password and return it in plain text (shown once)."""
    user = _get_user(user_id)
    plain = generate_temp_password(10)
    user.set_password(plain)
    user.save(update_fields=['password'])
    return plain


def delete_user(user_id, admin=None):
    """
    Delete a student account.

    Refused for admin accounts and for users that still have enrollments.
    The student's own applications and payments go with the account; their
    stored documents are removed once the delete has committed, best-effort.
    """
    user = _get_user(user_id)
    if user.is_admin:
        raise DependencyConflict('Cannot delete an admin account.')
    if Enrollment.objects.filter(user=user).exists():
        raise DependencyConflict(
            'Cannot delete user: there are enrollments. Remove enrollments first.'
        )

    applications = list(user.enrollment_applications.all())
    proofs = [p.proof for p in user.payments.exclude(proof='')]
    username = user.username
    with transaction.atomic():
        user.delete()
        for application in applications:
            transaction.on_commit(lambda a=application: purge_application_files(a))
        for name in proofs:
            transaction.on_commit(lambda n=name: remove_stored_file(n))

    audit.record_after_commit(audit.Level.WARNING, f'User {username} deleted.', user=admin)
    return username


# ── Self-service: registration & profile ──────────────────────────────────────

def register_user(username, first_name, last_name, email, password, middle_name=''):
    """Create a student account from the public registration form."""
    user, _ = create_student(
        username=username,
        first_name=first_name,
        middle_name=middle_name,
        last_name=last_name,
        email=email,
        password=password,
    )
    audit.record_after_commit(audit.Level.INFO, f'New registration: {user.username}.', user=user)
    return user


def update_profile(user, first_name, last_name, email, middle_name=''):
    email = email.strip()
    if not first_name.strip() or not last_name.strip():
        raise ValidationFailed('Please provide your first and last name.')
    try:
        validate_email(email)
    except ValidationError:
        raise ValidationFailed('Please enter a valid email address.')

    User = get_user_model()
    if User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
        raise ValidationFailed('Another account already uses that email address.')

    user.first_name  = first_name.strip()
    user.middle_name = middle_name.strip()
    user.last_name   = last_name.strip()
    user.email       = email
    user.save(update_fields=['first_name', 'middle_name', 'last_name', 'email'])
    return user
