"""
accounts/admin.py
─────────────────
Admin registration for the portal User.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Extends the default UserAdmin to surface the portal role and middle name.
    """

    list_display  = BaseUserAdmin.list_display + ('role',)
    list_filter   = BaseUserAdmin.list_filter  + ('role',)

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Portal', {'fields': ('role', 'middle_name')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Portal', {'fields': ('role', 'middle_name')}),
    )
