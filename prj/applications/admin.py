"""
applications/admin.py
─────────────────────
Admin registration for EnrollmentApplication (read-mostly; the workflow
actions live on the /manage/applications/ pages).
"""

from django.contrib import admin

from .models import EnrollmentApplication


@admin.register(EnrollmentApplication)
class EnrollmentApplicationAdmin(admin.ModelAdmin):
    list_display    = ('id', 'user', 'course_ids', 'status', 'submitted_at', 'processed_at', 'processed_by')
    list_filter     = ('status',)
    search_fields   = ('user__username', 'user__first_name', 'user__last_name', 'user__email')
    readonly_fields = ('submitted_at', 'processed_at', 'processed_by')
    raw_id_fields   = ('user',)
