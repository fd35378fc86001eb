"""
core/decorators.py
──────────────────
Access-control and method decorators shared by every app's views.
"""

from functools import wraps

from django.contrib import messages
from django.contrib.auth.views import redirect_to_login
from django.http import HttpResponseNotAllowed
from django.shortcuts import redirect


def admin_required(view_fn):
    """
    Decorator: unauthenticated users → login (with ?next=), non-admins → their
    dashboard with an error message.
    """
    @wraps(view_fn)
    def wrapper(req, *args, **kwargs):
        if not req.user.is_authenticated:
            return redirect_to_login(req.get_full_path())
        if not req.user.is_admin:
            messages.error(req, 'Access denied – admin only.')
            return redirect('dashboard')
        return view_fn(req, *args, **kwargs)
    return wrapper


def require_POST_or_405(view_fn):
    """Decorator: return 405 for any non-POST request."""
    @wraps(view_fn)
    def wrapper(req, *args, **kwargs):
        if req.method != 'POST':
            return HttpResponseNotAllowed(['POST'])
        return view_fn(req, *args, **kwargs)
    return wrapper


def add_form_control_class(form):
    """Inject a uniform CSS class onto every visible widget."""
    for field in form.fields.values():
        field.widget.attrs.setdefault('class', 'form-control-input')
    return form
