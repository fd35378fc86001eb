"""
audit/views.py
──────────────
Admin system-log viewer: filter, paginate, delete one row, clear all, export CSV.
"""

from django.contrib import messages
from django.core.paginator import Paginator
from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.utils import timezone

from core.decorators import admin_required, require_POST_or_405

from . import services
from .models import SystemLog

PER_PAGE_CHOICES = (10, 25, 50, 100)
DEFAULT_PER_PAGE = 25

CLEAR_CONFIRMATION = 'CLEAR'


def _filters(req):
    level = req.GET.get('level', '').strip()
    if level not in SystemLog.Level.values:
        level = ''
    return {
        'level':     level,
        'q':         req.GET.get('q', '').strip(),
        'date_from': req.GET.get('date_from', '').strip(),
        'date_to':   req.GET.get('date_to', '').strip(),
    }


def _per_page(req):
    try:
        per_page = int(req.GET.get('per_page', DEFAULT_PER_PAGE))
    except (TypeError, ValueError):
        return DEFAULT_PER_PAGE
    return per_page if per_page in PER_PAGE_CHOICES else DEFAULT_PER_PAGE


@admin_required
def system_logs_view(req):
    filters = _filters(req)
    per_page = _per_page(req)
    logs = services.filter_logs(**filters)
    page = Paginator(logs, per_page).get_page(req.GET.get('page'))

    querystring = req.GET.copy()
    querystring.pop('page', None)

    return render(req, 'audit/system_logs.html', {
        'page':             page,
        'filters':          filters,
        'per_page':         per_page,
        'per_page_choices': PER_PAGE_CHOICES,
        'levels':           SystemLog.Level.choices,
        'querystring':      querystring.urlencode(),
    })


@admin_required
@require_POST_or_405
def delete_log_view(req, log_id):
    if services.delete_log(log_id):
        messages.success(req, 'Log entry deleted.')
    else:
        messages.error(req, 'Log entry not found.')
    return redirect('system_logs')


@admin_required
@require_POST_or_405
def clear_logs_view(req):
    if req.POST.get('confirm', '').strip() != CLEAR_CONFIRMATION:
        messages.error(req, f'Type {CLEAR_CONFIRMATION} to confirm clearing all logs.')
        return redirect('system_logs')
    deleted = services.clear_logs()
    messages.success(req, f'Cleared {deleted} log entries.')
    return redirect('system_logs')


@admin_required
def export_logs_view(req):
    """CSV download of every row matching the current filters."""
    logs = services.filter_logs(**_filters(req))
    filename = f"system_logs_{timezone.localtime():%Y%m%d_%H%M%S}.csv"
    response = HttpResponse(content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    services.write_csv(logs.iterator(), response)
    return response
