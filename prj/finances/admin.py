"""
finances/admin.py
─────────────────
Admin registration for Payment.
"""

from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display  = ('id', 'user', 'application', 'amount', 'payment_status', 'payment_date')
    list_filter   = ('payment_status',)
    search_fields = ('user__username', 'user__first_name', 'user__last_name', 'user__email')
    raw_id_fields = ('user', 'application')
