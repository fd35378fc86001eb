"""
core/context_processors.py
──────────────────────────
Global template context injected into every request.

Registered in settings.py → TEMPLATES[0]['OPTIONS']['context_processors'].
"""

from applications.models import EnrollmentApplication

from .reporting import safe_value


def portal_badges(request):
    """
    Navigation badges:

        pending_application_count – submitted applications awaiting review
                                    (admins only; None if unavailable)
    """
    count = 0
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated and user.is_admin:
        count = safe_value(
            'pending applications badge',
            lambda: EnrollmentApplication.objects.filter(
                status=EnrollmentApplication.Status.SUBMITTED,
            ).count(),
        )
    return {'pending_application_count': count}
