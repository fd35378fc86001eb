import pytest
from django.contrib.auth import get_user_model

from accounts import services
from applications.models import EnrollmentApplication
from applications.services import submit_application
from core.exceptions import DependencyConflict, NotFound, ValidationFailed
from courses.models import Enrollment
from finances.models import Payment
from finances.services import record_payment

pytestmark = pytest.mark.django_db


def test_create_student_with_generated_password():
    user, plain = services.create_student('ana.reyes', 'Ana', 'Reyes', 'ana@example.com')

    assert user.role == user.Role.STUDENT
    assert not user.is_admin
    assert len(plain) == 10
    assert user.check_password(plain)


def test_create_student_with_given_password():
    user, plain = services.create_student('ana', 'Ana', 'Reyes', 'ana@example.com', password='s3cret-pass')

    assert plain == 's3cret-pass'
    assert user.check_password('s3cret-pass')


@pytest.mark.parametrize('username, email', [
    ('JUAN', 'new@example.com'),
    ('newbie', 'JUAN@example.com'),
])
def test_username_and_email_are_unique(student, username, email):
    with pytest.raises(ValidationFailed, match='already exists'):
        services.create_student(username, 'New', 'User', email)


def test_invalid_email_is_rejected():
    with pytest.raises(ValidationFailed, match='valid email'):
        services.create_student('ana', 'Ana', 'Reyes', 'ana-at-example')


def test_update_student_keeps_password_and_role(student):
    services.update_student(student.pk, 'juan2', 'Juan', 'Cruz', 'juan2@example.com', middle_name='P')

    student.refresh_from_db()
    assert student.username == 'juan2'
    assert student.get_full_name() == 'Juan P Cruz'
    assert student.check_password('correct-horse-42')
    assert student.role == student.Role.STUDENT


def test_update_student_may_keep_own_username(student):
    services.update_student(student.pk, 'juan', 'Juan', 'Tester', 'juan@example.com')


def test_promote_user(student):
    services.promote_user(student.pk)

    student.refresh_from_db()
    assert student.is_admin


def test_reset_password(student):
    plain = services.reset_password(student.pk)

    student.refresh_from_db()
    assert student.check_password(plain)
    assert not student.check_password('correct-horse-42')


def test_missing_user():
    with pytest.raises(NotFound):
        services.reset_password(9999)


def test_delete_admin_is_refused(registrar):
    with pytest.raises(DependencyConflict):
        services.delete_user(registrar.pk)


def test_delete_user_with_enrollments_is_refused(student, course):
    Enrollment.objects.create(user=student, course=course)

    with pytest.raises(DependencyConflict, match='enrollments'):
        services.delete_user(student.pk)

    assert get_user_model().objects.filter(pk=student.pk).exists()


def test_delete_user_removes_applications_payments_and_files(
        student, course, student_info, parent_info, upload, list_stored,
        django_capture_on_commit_callbacks):
    submit_application(student, course.pk, student_info, parent_info, {'psa': upload()})
    record_payment(student, 100, proof=upload('receipt.png', content_type='image/png'))
    assert len(list_stored()) == 2

    with django_capture_on_commit_callbacks(execute=True):
        assert services.delete_user(student.pk) == 'juan'

    assert not get_user_model().objects.filter(pk=student.pk).exists()
    assert not EnrollmentApplication.objects.exists()
    assert not Payment.objects.exists()
    assert list_stored() == []


def test_delete_user_keeps_files_until_commit(
        student, course, student_info, parent_info, upload, list_stored,
        django_capture_on_commit_callbacks):
    submit_application(student, course.pk, student_info, parent_info, {'psa': upload()})
    record_payment(student, 100, proof=upload('receipt.png', content_type='image/png'))

    with django_capture_on_commit_callbacks() as callbacks:
        services.delete_user(student.pk)
        assert len(list_stored()) == 2

    assert len(list_stored()) == 2
    for callback in callbacks:
        callback()
    assert list_stored() == []


def test_register_user_creates_student():
    user = services.register_user('pedro_p', 'Pedro', 'Penduko', 'pedro@example.com', 'long-enough-pw')

    assert user.role == user.Role.STUDENT
    assert user.check_password('long-enough-pw')


def test_update_profile(student, other_student):
    with pytest.raises(ValidationFailed, match='Another account'):
        services.update_profile(student, 'Juan', 'Cruz', other_student.email)

    services.update_profile(student, 'Juanito', 'Cruz', 'juanito@example.com', middle_name='M')
    student.refresh_from_db()
    assert student.get_full_name() == 'Juanito M Cruz'
    assert student.email == 'juanito@example.com'
