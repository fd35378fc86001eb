"""
Shared fixtures: accounts, courses, a throwaway MEDIA_ROOT and an uploaded-file
factory.
"""

import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile

from applications.types import Address, ParentInfo, StudentInfo
from courses.models import Course

PASSWORD = 'correct-horse-42'


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path / 'uploads'
    return settings.MEDIA_ROOT


@pytest.fixture
def make_user(db):
    User = get_user_model()

    def _make(username, role=User.Role.STUDENT, **extra):
        extra.setdefault('email', f'{username}@example.com')
        extra.setdefault('first_name', username.capitalize())
        extra.setdefault('last_name', 'Tester')
        return User.objects.create_user(username=username, password=PASSWORD, role=role, **extra)
    return _make


@pytest.fixture
def student(make_user):
    return make_user('juan')


@pytest.fixture
def other_student(make_user):
    return make_user('maria')


@pytest.fixture
def registrar(make_user):
    User = get_user_model()
    return make_user('registrar', role=User.Role.ADMIN)


@pytest.fixture
def course(db):
    return Course.objects.create(course_code='CS101', course_name='Intro to Programming', credits=3)


@pytest.fixture
def other_course(db):
    return Course.objects.create(course_code='MA101', course_name='Calculus I', credits=4)


@pytest.fixture
def student_info():
    return StudentInfo(
        first_name='Juan',
        last_name='Dela Cruz',
        email='juan.delacruz@example.com',
        contact='09171234567',
        address=Address(city='Quezon City', province='Metro Manila', country='Philippines'),
    )


@pytest.fixture
def parent_info():
    return ParentInfo(name='Rosa Dela Cruz', relation='Mother', contact='09181234567', consent=True)


@pytest.fixture
def upload():
    """``upload(name, size=…, content_type=…)`` → SimpleUploadedFile of *size* bytes."""
    def _upload(name='document.pdf', size=1024, content_type='application/pdf'):
        return SimpleUploadedFile(name, b'0' * size, content_type=content_type)
    return _upload


def stored_files(root):
    """Every file currently under *root*, as paths relative to it."""
    if not root.exists():
        return []
    return sorted(str(p.relative_to(root)) for p in root.rglob('*') if p.is_file())


@pytest.fixture
def list_stored(media_root):
    return lambda: stored_files(media_root)
