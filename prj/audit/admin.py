"""
audit/admin.py
──────────────
Admin for SystemLog.
"""

from django.contrib import admin

from .models import SystemLog


@admin.register(SystemLog)
class SystemLogAdmin(admin.ModelAdmin):
    list_display    = ('created_at', 'level', 'message', 'user')
    list_filter     = ('level', 'created_at')
    search_fields   = ('message', 'context', 'user__username')
    readonly_fields = ('created_at',)
    raw_id_fields   = ('user',)
