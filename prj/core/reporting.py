"""
core/reporting.py
─────────────────
Admin dashboard figures.

Each figure is computed on its own; if a query fails the figure becomes None
(shown as "—") and a warning is logged, so one broken table never takes the
whole dashboard down.
"""

import logging

from django.db import DatabaseError, transaction

from applications.models import EnrollmentApplication
from audit.models import SystemLog
from courses.models import Course, Enrollment
from finances.models import Payment

logger = logging.getLogger(__name__)

RECENT_LOG_COUNT = 10


def safe_value(label, compute):
    """Run *compute()*; on a database error log it and return None."""
    try:
        with transaction.atomic():
            return compute()
    except DatabaseError as exc:
        logger.warning('Dashboard figure %r unavailable: %s', label, exc)
        return None


def dashboard_figures():
    Status = EnrollmentApplication.Status
    return {
        'course_count': safe_value(
            'courses', lambda: Course.objects.count(),
        ),
        'enrolled_students': safe_value(
            'enrolled students',
            lambda: Enrollment.objects.order_by().values('user').distinct().count(),
        ),
        'pending_payments': safe_value(
            'pending payments',
            lambda: Payment.objects.filter(payment_status=Payment.Status.PENDING).count(),
        ),
        'completed_payments': safe_value(
            'completed payments',
            lambda: Payment.objects.filter(payment_status=Payment.Status.COMPLETED).count(),
        ),
        'submitted_applications': safe_value(
            'submitted applications',
            lambda: EnrollmentApplication.objects.filter(status=Status.SUBMITTED).count(),
        ),
        'applicant_count': safe_value(
            'applicants',
            lambda: EnrollmentApplication.objects.order_by().values('user').distinct().count(),
        ),
        'recent_logs': safe_value(
            'recent logs',
            lambda: list(SystemLog.objects.select_related('user')[:RECENT_LOG_COUNT]),
        ),
    }
