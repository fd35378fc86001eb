from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.urls import reverse

from applications.models import EnrollmentApplication
from audit.models import SystemLog
from audit.services import record
from courses.models import Course, Enrollment
from finances.models import Payment

pytestmark = pytest.mark.django_db

PASSWORD = 'correct-horse-42'


def flashed(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


@pytest.fixture
def student_client(client, student):
    client.force_login(student)
    return client


@pytest.fixture
def registrar_client(client, registrar):
    client.force_login(registrar)
    return client


def application_payload(course, **extra):
    data = {
        'course': course.pk,
        'first_name': 'Juan',
        'last_name': 'Dela Cruz',
        'email': 'juan.delacruz@example.com',
        'city': 'Quezon City',
        'indigenous_belongs': 'no',
        'parent_name': 'Rosa Dela Cruz',
        'parent_relation': 'Mother',
        'parent_consent': 'on',
    }
    data.update(extra)
    return data


# ── Access control ────────────────────────────────────────────────────────────

def test_admin_pages_send_anonymous_users_to_login(client):
    response = client.get(reverse('admin_dashboard'))

    assert response.status_code == 302
    assert response.url == f"{reverse('login')}?next={reverse('admin_dashboard')}"


@pytest.mark.parametrize('name', [
    'admin_dashboard', 'manage_applications', 'manage_courses',
    'manage_students', 'manage_payments', 'system_logs',
])
def test_admin_pages_refuse_students(student_client, name):
    response = student_client.get(reverse(name))

    assert response.status_code == 302
    assert response.url == reverse('dashboard')
    assert 'Access denied – admin only.' in flashed(response)


@pytest.mark.parametrize('name', [
    'admin_dashboard', 'manage_applications', 'manage_courses',
    'manage_students', 'manage_payments', 'system_logs',
])
def test_admin_pages_render_for_admins(registrar_client, name):
    assert registrar_client.get(reverse(name)).status_code == 200


def test_dashboard_routes_by_role(client, student, registrar):
    client.force_login(student)
    assert client.get(reverse('dashboard')).status_code == 200

    client.force_login(registrar)
    response = client.get(reverse('dashboard'))
    assert response.status_code == 302
    assert response.url == reverse('admin_dashboard')


@pytest.mark.parametrize('name', ['homepage', 'about', 'login', 'register'])
def test_public_pages(client, name):
    assert client.get(reverse(name)).status_code == 200


# ── Login / logout / register ─────────────────────────────────────────────────

def test_login_and_logout(client, student):
    bad = client.post(reverse('login'), {'username': 'juan', 'password': 'wrong'})
    assert bad.status_code == 200
    assert 'Invalid username or password. Please try again.' in flashed(bad)

    good = client.post(reverse('login'), {'username': 'juan', 'password': PASSWORD})
    assert good.status_code == 302
    assert good.url == reverse('dashboard')

    assert client.get(reverse('logout')).status_code == 405
    out = client.post(reverse('logout'))
    assert out.url == reverse('login')


def test_login_ignores_offsite_next(client, student):
    response = client.post(reverse('login'), {
        'username': 'juan', 'password': PASSWORD, 'next': 'https://evil.example.com/',
    })

    assert response.url == reverse('dashboard')


def test_register(client):
    response = client.post(reverse('register'), {
        'username': 'new.student',
        'first_name': 'New',
        'last_name': 'Student',
        'email': 'new@example.com',
        'password1': 'a-long-password',
        'password2': 'a-long-password',
    })

    assert response.status_code == 302
    user = get_user_model().objects.get(username='new.student')
    assert user.role == user.Role.STUDENT


@pytest.mark.parametrize('overrides', [
    {'password2': 'something-else'},
    {'username': 'no spaces allowed'},
    {'first_name': 'N'},
    {'password1': 'short', 'password2': 'short'},
])
def test_register_validation(client, overrides):
    data = {
        'username': 'new.student', 'first_name': 'New', 'last_name': 'Student',
        'email': 'new@example.com', 'password1': 'a-long-password', 'password2': 'a-long-password',
    }
    data.update(overrides)

    response = client.post(reverse('register'), data)

    assert response.status_code == 200
    assert not get_user_model().objects.filter(email='new@example.com').exists()


def test_profile_update(student_client, student):
    response = student_client.post(reverse('profile'), {
        'first_name': 'Juanito', 'middle_name': '', 'last_name': 'Cruz', 'email': 'jc@example.com',
    })

    assert response.status_code == 302
    student.refresh_from_db()
    assert student.email == 'jc@example.com'


# ── Applications ──────────────────────────────────────────────────────────────

def test_apply_page(student_client, course):
    response = student_client.get(reverse('apply'))

    assert response.status_code == 200
    assert response.context['form'].initial['first_name'] == 'Juan'


def test_apply_with_documents(student_client, student, course, upload, list_stored):
    data = application_payload(course, psa=upload('psa.pdf'), documents=[upload('extra.png', content_type='image/png')])

    response = student_client.post(reverse('apply'), data)

    assert response.status_code == 302
    application = EnrollmentApplication.objects.get(user=student)
    assert [d.type for d in application.documents] == ['PSA', 'Additional']
    assert application.parent.consent is True
    assert application.student.indigenous.belongs is False
    assert Payment.objects.get(application=application).amount == Decimal('1500.00')
    assert len(list_stored()) == 2


def test_apply_rejects_bad_upload(student_client, course, upload, list_stored):
    data = application_payload(course, psa=upload('psa.exe', content_type='application/octet-stream'))

    response = student_client.post(reverse('apply'), data)

    assert response.status_code == 200
    assert not EnrollmentApplication.objects.exists()
    assert any('unsupported file type' in m for m in flashed(response))
    assert list_stored() == []


def test_approve_reject_delete_flow(registrar_client, student, course):
    application = EnrollmentApplication.objects.create(user=student, course_ids=[course.pk])

    assert registrar_client.get(reverse('approve_application', args=[application.pk])).status_code == 405

    response = registrar_client.post(reverse('approve_application', args=[application.pk]))
    assert response.url == reverse('manage_applications')
    assert Enrollment.objects.filter(user=student, course=course).exists()

    again = registrar_client.post(reverse('reject_application', args=[application.pk]), {'reason': 'late'})
    assert any('already approved' in m for m in flashed(again))

    refused = registrar_client.post(reverse('delete_application', args=[application.pk]), {'confirm': 'yes'})
    assert 'Approved applications cannot be deleted.' in flashed(refused)
    assert EnrollmentApplication.objects.filter(pk=application.pk).exists()


def test_delete_application_needs_confirmation(registrar_client, student, course):
    application = EnrollmentApplication.objects.create(user=student, course_ids=[course.pk])

    registrar_client.post(reverse('delete_application', args=[application.pk]))
    assert EnrollmentApplication.objects.filter(pk=application.pk).exists()

    registrar_client.post(reverse('delete_application', args=[application.pk]), {'confirm': 'yes'})
    assert not EnrollmentApplication.objects.filter(pk=application.pk).exists()


def test_application_detail_and_document(registrar_client, student, course, student_info, parent_info, upload):
    from applications.services import submit_application
    application = submit_application(student, course.pk, student_info, parent_info, {'psa': upload('psa.pdf', size=64)})

    detail = registrar_client.get(reverse('application_detail', args=[application.pk]))
    assert detail.status_code == 200
    assert b'psa.pdf' in detail.content

    document = registrar_client.get(reverse('application_document', args=[application.pk, 0]))
    assert document.status_code == 200
    assert b''.join(document.streaming_content) == b'0' * 64

    assert registrar_client.get(reverse('application_document', args=[application.pk, 5])).status_code == 404


# ── Courses ───────────────────────────────────────────────────────────────────

def test_manage_courses_add_edit_delete(registrar_client):
    registrar_client.post(reverse('manage_courses'), {
        'course_code': 'EN101', 'course_name': 'English', 'credits': 2, 'description': '',
    })
    course = Course.objects.get(course_code='EN101')

    registrar_client.post(reverse('edit_course', args=[course.pk]), {
        'course_code': 'EN101', 'course_name': 'English Composition', 'credits': 3, 'description': 'Essays',
    })
    course.refresh_from_db()
    assert (course.course_name, course.credits) == ('English Composition', 3)

    registrar_client.post(reverse('delete_course', args=[course.pk]))
    assert not Course.objects.exists()


def test_manage_courses_rejects_zero_credits(registrar_client):
    response = registrar_client.post(reverse('manage_courses'), {
        'course_code': 'EN101', 'course_name': 'English', 'credits': 0,
    })

    assert response.status_code == 200
    assert not Course.objects.exists()


def test_course_selection(student_client, student, course, other_course):
    response = student_client.post(reverse('course_selection'), {'course_ids': [course.pk, other_course.pk]})

    assert response.status_code == 302
    assert Enrollment.objects.filter(user=student).count() == 2

    page = student_client.get(reverse('course_selection'))
    assert page.context['enrolled_ids'] == {course.pk, other_course.pk}


# ── Payments ──────────────────────────────────────────────────────────────────

def test_student_records_payment_with_proof(student_client, student, upload):
    response = student_client.post(reverse('payments'), {
        'amount': '750.00', 'proof': upload('receipt.pdf'),
    })

    assert response.status_code == 302
    payment = Payment.objects.get(user=student)
    assert payment.amount == Decimal('750.00')
    assert payment.proof

    proof = student_client.get(reverse('payment_proof', args=[payment.pk]))
    assert proof.status_code == 200


def test_other_students_cannot_see_proof(client, student, other_student, upload):
    from finances.services import record_payment
    payment = record_payment(student, 100, proof=upload())
    client.force_login(other_student)

    assert client.get(reverse('payment_proof', args=[payment.pk])).status_code == 404


def test_admin_updates_and_deletes_payment(registrar_client, student):
    payment = Payment.objects.create(user=student, amount=100)

    registrar_client.post(reverse('update_payment_status', args=[payment.pk]), {'payment_status': 'completed'})
    payment.refresh_from_db()
    assert payment.payment_status == Payment.Status.COMPLETED

    bad = registrar_client.post(reverse('update_payment_status', args=[payment.pk]), {'payment_status': 'lost'})
    assert 'Invalid payment status.' in flashed(bad)

    registrar_client.post(reverse('delete_payment', args=[payment.pk]))
    assert not Payment.objects.exists()


def test_manage_payments_filters(registrar_client, student):
    Payment.objects.create(user=student, amount=100)
    Payment.objects.create(user=student, amount=200, payment_status=Payment.Status.COMPLETED)

    response = registrar_client.get(reverse('manage_payments'), {'status': 'completed'})

    assert [p.amount for p in response.context['payments']] == [Decimal('200')]


# ── Students ──────────────────────────────────────────────────────────────────

def test_admin_adds_student_with_temporary_password(registrar_client):
    response = registrar_client.post(reverse('manage_students'), {
        'username': 'ana', 'first_name': 'Ana', 'last_name': 'Reyes', 'email': 'ana@example.com',
    })

    assert response.status_code == 302
    assert any('Temporary password:' in m for m in flashed(response))
    assert get_user_model().objects.filter(username='ana').exists()


def test_admin_promotes_and_deletes(registrar_client, student, other_student):
    registrar_client.post(reverse('promote_user', args=[student.pk]))
    student.refresh_from_db()
    assert student.is_admin

    registrar_client.post(reverse('delete_user', args=[other_student.pk]))
    assert not get_user_model().objects.filter(pk=other_student.pk).exists()


def test_admin_cannot_delete_self(registrar_client, registrar):
    response = registrar_client.post(reverse('delete_user', args=[registrar.pk]))

    assert 'You cannot delete your own account.' in flashed(response)


# ── System logs ───────────────────────────────────────────────────────────────

def test_system_logs_pagination_defaults(registrar_client):
    for i in range(30):
        record('info', f'event {i}')

    response = registrar_client.get(reverse('system_logs'), {'per_page': 7})
    assert response.context['per_page'] == 25
    assert len(response.context['page'].object_list) == 25

    response = registrar_client.get(reverse('system_logs'), {'per_page': 10, 'page': 3})
    assert len(response.context['page'].object_list) == 10


def test_clear_logs_requires_typed_confirmation(registrar_client):
    record('info', 'keep me')

    registrar_client.post(reverse('clear_logs'), {'confirm': 'clear'})
    assert SystemLog.objects.exists()

    registrar_client.post(reverse('clear_logs'), {'confirm': 'CLEAR'})
    assert not SystemLog.objects.exists()


def test_delete_single_log(registrar_client):
    row = record('warning', 'remove me')

    registrar_client.post(reverse('delete_log', args=[row.pk]))

    assert not SystemLog.objects.filter(pk=row.pk).exists()


def test_export_logs_csv(registrar_client):
    record('error', 'Payment gateway down')
    record('info', 'Something fine')

    response = registrar_client.get(reverse('export_logs'), {'level': 'error'})

    assert response['Content-Type'].startswith('text/csv')
    assert 'attachment' in response['Content-Disposition']
    body = response.content.decode('utf-8')
    assert body.startswith('\ufeff')
    assert 'Payment gateway down' in body
    assert 'Something fine' not in body
