"""
finances/urls.py
────────────────
Include in the root urls.py with:
    path('', include('finances.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    # ── Student ───────────────────────────────────────────────────────────────
    path('payments/', views.payments_view, name='payments'),
    path('payments/<int:payment_id>/proof/', views.payment_proof_view, name='payment_proof'),

    # ── Admin ─────────────────────────────────────────────────────────────────
    path('manage/payments/', views.manage_payments_view, name='manage_payments'),
    path('manage/payments/<int:payment_id>/status/', views.update_payment_status_view, name='update_payment_status'),
    path('manage/payments/<int:payment_id>/delete/', views.delete_payment_view, name='delete_payment'),
]
