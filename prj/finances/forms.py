"""
finances/forms.py
─────────────────
Student "record a payment" form and the admin status form.
"""

from decimal import Decimal

from django import forms

from applications.models import EnrollmentApplication

from .models import Payment


class PaymentForm(forms.Form):
    """
    Student form to record a payment.  The application dropdown is limited to
    the student's own applications.
    """
    amount = forms.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0.01'),
        label='Amount paid',
        widget=forms.NumberInput(attrs={'step': '0.01', 'min': '0.01', 'placeholder': '0.00', 'class': 'form-control'}),
    )
    application = forms.ModelChoiceField(
        queryset=EnrollmentApplication.objects.none(),
        required=False,
        label='For application (optional)',
        empty_label='— not linked —',
    )
    proof = forms.FileField(
        required=False,
        label='Proof of payment (PDF, JPG or PNG)',
    )

    def __init__(self, *args, **kwargs):
        user = kwargs.pop('user')
        super().__init__(*args, **kwargs)
        self.fields['application'].queryset = (
            EnrollmentApplication.objects.filter(user=user).order_by('-submitted_at')
        )
        self.fields['application'].label_from_instance = (
            lambda a: f'#{a.pk} – {a.get_status_display()} ({a.submitted_at:%Y-%m-%d})'
        )


class PaymentStatusForm(forms.Form):
    payment_status = forms.ChoiceField(
        choices=Payment.Status.choices,
        label='Status',
        widget=forms.Select(attrs={'class': 'form-control'}),
    )
