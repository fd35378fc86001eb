"""
core/storage.py
───────────────
Upload helpers on top of Django's default file storage (rooted at MEDIA_ROOT).

Stored names follow ``<folder>/user_<id>/<id>_<timestamp>_<random>.<ext>``.
Saving raises ``StorageFailure``; removing never raises (delete paths are
best-effort).
"""

import logging
import os
import time

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils.crypto import get_random_string

from .exceptions import StorageFailure, ValidationFailed

logger = logging.getLogger(__name__)

APPLICATION_FOLDER = 'enrollment_applications'
PAYMENT_FOLDER = 'payments'


def _megabytes(size):
    return size // (1024 * 1024)


def validate_upload(upload, max_size, label=''):
    """Reject files over *max_size* bytes or with a MIME type outside the allowed set."""
    name = os.path.basename(upload.name or '')
    suffix = f' for {label}' if label else ''
    if upload.size > max_size:
        raise ValidationFailed(
            f'File {name}{suffix} exceeds the {_megabytes(max_size)} MB limit.'
        )
    if upload.content_type not in settings.ALLOWED_UPLOAD_MIME_TYPES:
        raise ValidationFailed(
            f'File {name}{suffix} has unsupported file type. Accepts PDF, JPG, PNG.'
        )


def build_stored_name(folder, user_id, original_name):
    ext = os.path.splitext(original_name or '')[1].lstrip('.').lower() or 'bin'
    token = get_random_string(12, allowed_chars='0123456789abcdef')
    return f'{folder}/user_{user_id}/{user_id}_{int(time.time())}_{token}.{ext}'


def save_upload(upload, folder, user_id):
    """
    Write *upload* into per-user storage and return the storage-relative name
    actually used (the storage may append a suffix on collision).
    """
    target = build_stored_name(folder, user_id, upload.name)
    try:
        return default_storage.save(target, upload)
    except OSError as exc:
        logger.error('Failed to store upload %s: %s', upload.name, exc)
        raise StorageFailure(f'Failed to save uploaded file {os.path.basename(upload.name or "")}.') from exc


def remove_stored_file(name):
    """Delete *name* from storage if present.  Returns True when a file was removed."""
    if not name:
        return False
    try:
        if not default_storage.exists(name):
            return False
        default_storage.delete(name)
        return True
    except OSError as exc:
        logger.warning('Could not remove stored file %s: %s', name, exc)
        return False
