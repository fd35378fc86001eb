"""
courses/admin.py
────────────────
Admin registrations for Course and Enrollment.
"""

from django.contrib import admin

from .models import Course, Enrollment


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display    = ('course_code', 'course_name', 'credits', 'created_at')
    search_fields   = ('course_code', 'course_name', 'description')
    readonly_fields = ('created_at',)


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display  = ('user', 'course', 'enrolled_at')
    list_filter   = ('course',)
    search_fields = ('user__username', 'user__last_name', 'course__course_code')
    raw_id_fields = ('user',)
