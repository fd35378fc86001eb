"""
audit/services.py
─────────────────
Writing and querying the system log.

record(level, message, user=None, context=None)
    Insert one SystemLog row right now.  Never raises: a database error is
    logged and swallowed, since the audit trail is a side channel.

record_after_commit(level, message, user=None, context=None)
    Schedule ``record`` for after the surrounding transaction commits.  If the
    transaction rolls back nothing is written.  Outside a transaction it runs
    immediately.

filter_logs(level='', q='', date_from='', date_to='')
    Queryset behind the log viewer and the CSV export.
"""

import csv
import json
import logging
from datetime import datetime, time

from django.db import DatabaseError, transaction
from django.db.models import Q
from django.utils import timezone

from .models import SystemLog

logger = logging.getLogger(__name__)

Level = SystemLog.Level

EXPORT_COLUMNS = ('id', 'created_at', 'level', 'message', 'context', 'user')


def _format_context(context):
    if context is None:
        return ''
    if isinstance(context, str):
        return context
    return json.dumps(context, default=str, sort_keys=True)


def record(level, message, user=None, context=None):
    """Append one log row.  Returns the row, or None if the write failed."""
    try:
        with transaction.atomic():
            return SystemLog.objects.create(
                level=level,
                message=message,
                context=_format_context(context),
                user=user if user is not None and user.pk else None,
            )
    except DatabaseError as exc:
        logger.warning('Audit log write failed (%s): %s', message, exc)
        return None


def record_after_commit(level, message, user=None, context=None):
    transaction.on_commit(lambda: record(level, message, user=user, context=context))


# ── Log viewer queries ────────────────────────────────────────────────────────

def _parse_bound(value, end_of_day):
    """
    Accept ``YYYY-MM-DD`` (whole day) or ``YYYY-MM-DD HH:MM[:SS]``.
    Returns an aware datetime, or None for blank / unparseable input.
    """
    value = (value or '').strip()
    if not value:
        return None
    for fmt in ('%Y-%m-%d %H:%M:%S', '%Y-%m-%d %H:%M', '%Y-%m-%dT%H:%M'):
        try:
            return timezone.make_aware(datetime.strptime(value, fmt))
        except ValueError:
            continue
    try:
        day = datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        return None
    return timezone.make_aware(datetime.combine(day, time.max if end_of_day else time.min))


def filter_logs(level='', q='', date_from='', date_to=''):
    qs = SystemLog.objects.select_related('user')
    if level:
        qs = qs.filter(level=level)
    if q:
        qs = qs.filter(Q(message__icontains=q) | Q(context__icontains=q))
    start = _parse_bound(date_from, end_of_day=False)
    if start:
        qs = qs.filter(created_at__gte=start)
    end = _parse_bound(date_to, end_of_day=True)
    if end:
        qs = qs.filter(created_at__lte=end)
    return qs.order_by('-created_at', '-id')


def delete_log(log_id):
    deleted, _ = SystemLog.objects.filter(pk=log_id).delete()
    return bool(deleted)


def clear_logs():
    """Remove every log row.  Returns how many were deleted."""
    deleted, _ = SystemLog.objects.all().delete()
    logger.warning('System log cleared (%s rows)', deleted)
    return deleted


def write_csv(rows, stream):
    """
    Write *rows* to *stream* as CSV with a UTF-8 BOM so spreadsheet tools pick
    up the encoding.  Nulls become empty strings.
    """
    stream.write('\ufeff')
    writer = csv.writer(stream)
    writer.writerow(EXPORT_COLUMNS)
    for row in rows:
        writer.writerow([
            row.pk,
            timezone.localtime(row.created_at).strftime('%Y-%m-%d %H:%M:%S'),
            row.level,
            row.message,
            row.context,
            row.user.username if row.user else '',
        ])
    return stream
