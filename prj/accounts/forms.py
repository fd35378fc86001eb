"""
accounts/forms.py
─────────────────
Public registration, the profile form, and the admin "add / edit student" form.

The forms check shape (lengths, formats, matching passwords); uniqueness and
persistence are handled in ``accounts.services``.
"""

from django import forms
from django.core.validators import RegexValidator

USERNAME_VALIDATOR = RegexValidator(
    r'^[A-Za-z0-9._-]{3,30}$',
    'Username must be 3–30 characters: letters, numbers, dot, underscore or dash.',
)

MIN_PASSWORD_LENGTH = 8


class RegistrationForm(forms.Form):
    username    = forms.CharField(max_length=30, validators=[USERNAME_VALIDATOR])
    first_name  = forms.CharField(max_length=150, min_length=2, label='First name')
    middle_name = forms.CharField(max_length=150, required=False, label='Middle name (optional)')
    last_name   = forms.CharField(max_length=150, min_length=2, label='Last name')
    email       = forms.EmailField()
    password1   = forms.CharField(
        label='Password',
        min_length=MIN_PASSWORD_LENGTH,
        widget=forms.PasswordInput(attrs={'autocomplete': 'new-password'}),
    )
    password2   = forms.CharField(
        label='Confirm password',
        widget=forms.PasswordInput(attrs={'autocomplete': 'new-password'}),
    )

    def clean(self):
        cleaned = super().clean()
        p1, p2 = cleaned.get('password1'), cleaned.get('password2')
        if p1 and p2 and p1 != p2:
            self.add_error('password2', 'Passwords do not match.')
        return cleaned


class ProfileForm(forms.Form):
    first_name  = forms.CharField(max_length=150, min_length=2, label='First name')
    middle_name = forms.CharField(max_length=150, required=False, label='Middle name')
    last_name   = forms.CharField(max_length=150, min_length=2, label='Last name')
    email       = forms.EmailField()


class StudentAdminForm(forms.Form):
    """
    Admin form used for both "add student" and "edit student".  The password is
    only offered when adding; leave it blank to generate a temporary one.
    """
    username    = forms.CharField(max_length=30, validators=[USERNAME_VALIDATOR])
    first_name  = forms.CharField(max_length=150, label='First name')
    middle_name = forms.CharField(max_length=150, required=False, label='Middle name')
    last_name   = forms.CharField(max_length=150, required=False, label='Last name')
    email       = forms.EmailField()
    password    = forms.CharField(
        required=False,
        label='Password (leave blank to generate)',
        widget=forms.PasswordInput(attrs={'autocomplete': 'new-password'}),
    )

    def __init__(self, *args, editing=False, **kwargs):
        super().__init__(*args, **kwargs)
        if editing:
            del self.fields['password']

    @classmethod
    def for_user(cls, user):
        return cls(editing=True, initial={
            'username':    user.username,
            'first_name':  user.first_name,
            'middle_name': user.middle_name,
            'last_name':   user.last_name,
            'email':       user.email,
        })
