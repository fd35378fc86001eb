"""
finances/models.py
──────────────────
The payment ledger.

Payment – money a student has paid (or owes) towards enrollment.  Created
          ``pending`` either together with an application (the computed
          fee) or by the student from the payments page; admins move it
          to ``completed`` / ``failed``.
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Payment(models.Model):

    class Status(models.TextChoices):
        PENDING   = 'pending',   'Pending'
        COMPLETED = 'completed', 'Completed'
        FAILED    = 'failed',    'Failed'

    application = models.ForeignKey(
        'applications.EnrollmentApplication',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments',
        help_text='Application this payment belongs to, if any.',
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='payments',
    )
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    payment_date = models.DateTimeField(default=timezone.now)
    payment_status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    proof = models.CharField(
        max_length=255,
        blank=True,
        help_text='Storage-relative path of the uploaded proof of payment.',
    )

    class Meta:
        db_table = 'payments'
        ordering = ['-payment_date', '-id']
        verbose_name = 'Payment'
        verbose_name_plural = 'Payments'

    def __str__(self):
        return f"{self.user} – {self.amount} ({self.get_payment_status_display()})"

