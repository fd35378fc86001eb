"""
core/views.py
─────────────
Landing / about pages, the student dashboard, the admin dashboard, and the
custom error handlers (404 / 500) registered in prj/urls.py.
"""

from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render

from applications.services import applications_for_user, attach_courses
from courses.services import enrolled_courses
from finances.services import payments_for_user, totals_by_status

from .decorators import admin_required
from .reporting import dashboard_figures


def home_view(req):
    """Landing page – authenticated users go straight to their dashboard."""
    if req.user.is_authenticated:
        return redirect('admin_dashboard' if req.user.is_admin else 'dashboard')
    return render(req, 'core/home.html')


def about_view(req):
    return render(req, 'core/about.html')


@login_required
def dashboard_view(req):
    """
    Student dashboard: enrolled courses, own applications (latest first) and
    own payments with per-status totals.  Admins are sent to /manage/.
    """
    if req.user.is_admin:
        return redirect('admin_dashboard')

    applications = attach_courses(applications_for_user(req.user))
    payments = payments_for_user(req.user)
    return render(req, 'core/dashboard.html', {
        'enrollments':   enrolled_courses(req.user),
        'applications':  applications,
        'payments':      payments[:10],
        'totals':        totals_by_status(payments),
    })


@admin_required
def admin_dashboard_view(req):
    return render(req, 'core/admin_dashboard.html', dashboard_figures())


# ── Custom error pages ────────────────────────────────────────────────────────

def handler404(req, exception):
    return render(req, 'core/404.html', status=404)


def handler500(req):
    return render(req, 'core/500.html', status=500)
