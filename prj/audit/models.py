"""
audit/models.py
───────────────
SystemLog – one row per business-visible event (application approved,
            payment deleted, user promoted …) so admins can see who did what.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class SystemLog(models.Model):
    """
    Append-only audit trail shown on the admin "System Logs" page.

    Rows are written after the main transaction commits; a failed write never
    undoes the action it describes.
    """

    class Level(models.TextChoices):
        DEBUG   = 'debug',   'Debug'
        INFO    = 'info',    'Info'
        WARNING = 'warning', 'Warning'
        ERROR   = 'error',   'Error'

    level = models.CharField(
        max_length=10,
        choices=Level.choices,
        default=Level.INFO,
    )
    message = models.TextField()
    context = models.TextField(
        blank=True,
        help_text='Free-form details (JSON or key=value pairs).',
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='system_logs',
        help_text='The user who triggered the event, if any.',
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'system_logs'
        ordering = ['-created_at', '-id']
        verbose_name = 'System Log'
        verbose_name_plural = 'System Logs'

    def __str__(self):
        return f"[{self.get_level_display()}] {self.message[:60]} ({self.created_at:%Y-%m-%d %H:%M})"
