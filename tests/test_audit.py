import io
from datetime import datetime, timedelta

import pytest
from django.db import DatabaseError
from django.utils import timezone

from audit import services
from audit.models import SystemLog
from core import reporting
from courses.models import Enrollment
from finances.models import Payment

pytestmark = pytest.mark.django_db


def log_at(when, level='info', message='event', **kwargs):
    row = services.record(level, message, **kwargs)
    SystemLog.objects.filter(pk=row.pk).update(created_at=when)
    row.refresh_from_db()
    return row


def test_record_serializes_context(student):
    row = services.record(services.Level.WARNING, 'Something odd', user=student, context={'b': 2, 'a': 1})

    assert row.level == 'warning'
    assert row.user == student
    assert row.context == '{"a": 1, "b": 2}'


def test_record_swallows_database_errors(monkeypatch):
    def boom(**kwargs):
        raise DatabaseError('table missing')
    monkeypatch.setattr(SystemLog.objects, 'create', boom)

    assert services.record(services.Level.INFO, 'lost') is None


def test_record_after_commit_waits_for_commit(django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks() as callbacks:
        services.record_after_commit(services.Level.INFO, 'later')
        assert not SystemLog.objects.exists()

    assert len(callbacks) == 1
    callbacks[0]()
    assert SystemLog.objects.get().message == 'later'


def test_filter_logs_by_level_text_and_dates():
    now = timezone.now()
    old = log_at(now - timedelta(days=10), level='error', message='Payment failed', context='gateway')
    mid = log_at(now - timedelta(days=3), level='info', message='Application approved')
    new = log_at(now, level='info', message='Course created')

    assert list(services.filter_logs(level='error')) == [old]
    assert list(services.filter_logs(q='approved')) == [mid]
    assert list(services.filter_logs(q='gateway')) == [old]
    assert list(services.filter_logs()) == [new, mid, old]

    day = timezone.localtime(mid.created_at).strftime('%Y-%m-%d')
    assert list(services.filter_logs(date_from=day, date_to=day)) == [mid]


def test_filter_logs_ignores_unparseable_dates():
    services.record('info', 'kept')

    assert services.filter_logs(date_from='yesterday', date_to='31/12/2030').count() == 1


def test_parse_bound_whole_day():
    start = services._parse_bound('2025-06-01', end_of_day=False)
    end = services._parse_bound('2025-06-01', end_of_day=True)

    assert timezone.localtime(start).replace(tzinfo=None) == datetime(2025, 6, 1, 0, 0)
    assert timezone.localtime(end).date() == start.date()
    assert (end - start) > timedelta(hours=23, minutes=59)


def test_delete_and_clear_logs():
    row = services.record('info', 'one')
    services.record('info', 'two')

    assert services.delete_log(row.pk) is True
    assert services.delete_log(row.pk) is False
    assert services.clear_logs() == 1
    assert not SystemLog.objects.exists()


def test_write_csv_starts_with_bom(student):
    services.record('info', 'Hello, "world"', user=student)
    services.record('debug', 'anonymous')

    out = services.write_csv(services.filter_logs(), io.StringIO()).getvalue()

    assert out.startswith('\ufeff')
    lines = out.lstrip('\ufeff').splitlines()
    assert lines[0] == 'id,created_at,level,message,context,user'
    assert len(lines) == 3
    assert '"Hello, ""world"""' in out
    assert lines[1].endswith(',')
    assert lines[2].endswith(',juan')


# ── Dashboard figures ─────────────────────────────────────────────────────────

def test_dashboard_figures(student, other_student, course, other_course):
    Enrollment.objects.create(user=student, course=course)
    Enrollment.objects.create(user=student, course=other_course)
    Payment.objects.create(user=student, amount=100)
    Payment.objects.create(user=other_student, amount=100, payment_status=Payment.Status.COMPLETED)
    services.record('info', 'hello')

    figures = reporting.dashboard_figures()

    assert figures['course_count'] == 2
    assert figures['enrolled_students'] == 1
    assert figures['pending_payments'] == 1
    assert figures['completed_payments'] == 1
    assert figures['submitted_applications'] == 0
    assert figures['applicant_count'] == 0
    assert [log.message for log in figures['recent_logs']] == ['hello']


def test_safe_value_degrades_to_none():
    def broken():
        raise DatabaseError('no such table: payments')

    assert reporting.safe_value('payments', broken) is None
    assert reporting.safe_value('answer', lambda: 42) == 42
