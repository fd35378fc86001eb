"""
finances/services.py
────────────────────
The payment ledger.

record_payment        – student records a payment, optionally with a proof file
update_payment_status – admin overwrites the status (pending/completed/failed)
delete_payment        – admin hard delete; the proof file goes best-effort
search_payments       – admin listing filtered by status and payer
"""

import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction
from django.db.models import Q, Sum

from applications.models import EnrollmentApplication
from audit import services as audit
from core.exceptions import NotFound, ValidationFailed
from core.storage import PAYMENT_FOLDER, remove_stored_file, save_upload, validate_upload

from .models import Payment

logger = logging.getLogger(__name__)


def _parse_amount(raw):
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationFailed('Please enter a valid amount.')
    if not amount.is_finite() or amount <= 0:
        raise ValidationFailed('Please enter a valid amount.')
    return amount.quantize(Decimal('0.01'))


def _get_payment(payment_id):
    try:
        return Payment.objects.get(pk=payment_id)
    except Payment.DoesNotExist:
        raise NotFound('Payment not found.')


def _own_application(user, application_id):
    """The user's application with *application_id*, or None (logged) if it can't be linked."""
    if not application_id:
        return None
    try:
        application = EnrollmentApplication.objects.filter(pk=int(application_id)).first()
    except (TypeError, ValueError):
        application = None
    if application is None or application.user_id != user.pk:
        logger.warning(
            'Payment by %s references application #%s which is missing or not theirs; '
            'recording it unlinked', user.username, application_id,
        )
        return None
    return application


def record_payment(user, amount, application_id=None, proof=None):
    """Create a ``pending`` payment for *user*.  Returns the Payment."""
    amount = _parse_amount(amount)

    stored = ''
    if proof:
        validate_upload(proof, settings.PAYMENT_PROOF_MAX_SIZE, 'proof of payment')
        stored = save_upload(proof, PAYMENT_FOLDER, user.pk)

    try:
        with transaction.atomic():
            payment = Payment.objects.create(
                application=_own_application(user, application_id),
                user=user,
                amount=amount,
                payment_status=Payment.Status.PENDING,
                proof=stored,
            )
    except Exception:
        remove_stored_file(stored)
        raise

    audit.record_after_commit(
        audit.Level.INFO,
        f'Payment #{payment.pk} of {amount} recorded by {user.username}.',
        user=user,
        context={'application_id': payment.application_id},
    )
    return payment


def update_payment_status(payment_id, status, admin=None):
    if status not in Payment.Status.values:
        raise ValidationFailed('Invalid payment status.')
    payment = _get_payment(payment_id)
    previous = payment.payment_status
    payment.payment_status = status
    payment.save(update_fields=['payment_status'])

    audit.record_after_commit(
        audit.Level.INFO,
        f'Payment #{payment.pk} status {previous} → {status}.',
        user=admin,
    )
    return payment


def delete_payment(payment_id, admin=None):
    payment = _get_payment(payment_id)
    proof, pk = payment.proof, payment.pk
    payment.delete()
    if proof:
        transaction.on_commit(lambda: remove_stored_file(proof))

    audit.record_after_commit(audit.Level.WARNING, f'Payment #{pk} deleted.', user=admin)
    return pk


# ── Listings ──────────────────────────────────────────────────────────────────

def payments_for_user(user):
    return (
        Payment.objects
        .filter(user=user)
        .select_related('application')
        .order_by('-payment_date', '-id')
    )


def search_payments(status='', search=''):
    qs = Payment.objects.select_related('user', 'application')
    if status:
        qs = qs.filter(payment_status=status)
    if search:
        qs = qs.filter(
            Q(user__username__icontains=search)
            | Q(user__first_name__icontains=search)
            | Q(user__last_name__icontains=search)
            | Q(user__email__icontains=search)
        )
    return qs.order_by('-payment_date', '-id')


def totals_by_status(qs):
    """``{status: Decimal}`` for the given queryset, zero-filled."""
    totals = {value: Decimal('0.00') for value in Payment.Status.values}
    for row in qs.order_by().values('payment_status').annotate(total=Sum('amount')):
        totals[row['payment_status']] = row['total'] or Decimal('0.00')
    return totals
