"""
finances/views.py
─────────────────
Student:  /payments/                      – record a payment, own payment history
Admin:    /manage/payments/               – all payments, status filter, search
          /manage/payments/<id>/status/   – POST: overwrite status
          /manage/payments/<id>/delete/   – POST: hard delete
          /manage/payments/<id>/proof/    – stream the uploaded proof
"""

import os

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.files.storage import default_storage
from django.http import FileResponse, Http404
from django.shortcuts import get_object_or_404, redirect, render

from core.decorators import admin_required, require_POST_or_405
from core.exceptions import PortalError

from . import services
from .forms import PaymentForm, PaymentStatusForm
from .models import Payment


# ── Student ───────────────────────────────────────────────────────────────────

@login_required
def payments_view(req):
    if req.method == 'POST':
        form = PaymentForm(req.POST, req.FILES, user=req.user)
        if form.is_valid():
            cd = form.cleaned_data
            try:
                services.record_payment(
                    req.user,
                    cd['amount'],
                    application_id=cd['application'].pk if cd['application'] else None,
                    proof=cd.get('proof'),
                )
                messages.success(req, 'Payment recorded. It will be verified by an administrator.')
                return redirect('payments')
            except PortalError as exc:
                messages.error(req, exc.message)
        else:
            messages.error(req, 'Please fix the errors below.')
    else:
        form = PaymentForm(user=req.user)

    my_payments = services.payments_for_user(req.user)
    return render(req, 'finances/payments.html', {
        'form':        form,
        'my_payments': my_payments,
        'totals':      services.totals_by_status(my_payments),
    })


# ── Admin ─────────────────────────────────────────────────────────────────────

@admin_required
def manage_payments_view(req):
    status = req.GET.get('status', '').strip()
    if status not in Payment.Status.values:
        status = ''
    search = req.GET.get('q', '').strip()

    payments = services.search_payments(status=status, search=search)
    return render(req, 'finances/manage_payments.html', {
        'payments': payments,
        'totals':   services.totals_by_status(payments),
        'status':   status,
        'q':        search,
        'statuses': Payment.Status.choices,
    })


@admin_required
@require_POST_or_405
def update_payment_status_view(req, payment_id):
    form = PaymentStatusForm(req.POST)
    if not form.is_valid():
        messages.error(req, 'Invalid payment status.')
        return redirect('manage_payments')
    try:
        payment = services.update_payment_status(
            payment_id, form.cleaned_data['payment_status'], admin=req.user,
        )
        messages.success(req, f'Payment #{payment.pk} marked {payment.get_payment_status_display().lower()}.')
    except PortalError as exc:
        messages.error(req, exc.message)
    return redirect('manage_payments')


@admin_required
@require_POST_or_405
def delete_payment_view(req, payment_id):
    try:
        pk = services.delete_payment(payment_id, admin=req.user)
        messages.success(req, f'Payment #{pk} deleted.')
    except PortalError as exc:
        messages.error(req, exc.message)
    return redirect('manage_payments')


@login_required
def payment_proof_view(req, payment_id):
    """Proof files are visible to admins and to the payer."""
    payment = get_object_or_404(Payment, pk=payment_id)
    if not (req.user.is_admin or payment.user_id == req.user.pk):
        raise Http404('Payment not found.')
    if not payment.proof or not default_storage.exists(payment.proof):
        raise Http404('No proof file.')
    return FileResponse(
        default_storage.open(payment.proof, 'rb'),
        filename=os.path.basename(payment.proof),
    )
