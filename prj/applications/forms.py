"""
applications/forms.py
─────────────────────
The student enrollment application form and the admin reject form.

ApplicationForm only parses the request; business rules (approved-application
check, fee, upload limits) are enforced by ``applications.services``.
"""

from django import forms

from courses.models import Course

from .services import DOCUMENT_SLOTS
from .types import Address, Indigenous, ParentInfo, StudentInfo


class MultipleFileInput(forms.ClearableFileInput):
    allow_multiple_selected = True


class MultipleFileField(forms.FileField):
    """FileField that accepts any number of files and cleans to a list."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('widget', MultipleFileInput())
        super().__init__(*args, **kwargs)

    def clean(self, data, initial=None):
        single_clean = super().clean
        if isinstance(data, (list, tuple)):
            return [single_clean(d, initial) for d in data if d]
        return [single_clean(data, initial)] if data else []


YES_NO = [('', '—'), ('yes', 'Yes'), ('no', 'No')]

GENDER_CHOICES = [('', '— select —'), ('male', 'Male'), ('female', 'Female'), ('other', 'Other')]


class ApplicationForm(forms.Form):

    # ── Course & payment ──────────────────────────────────────────────────────
    course = forms.ModelChoiceField(
        queryset=Course.objects.order_by('course_name'),
        empty_label='— select course —',
        label='Course',
    )
    manual_amount = forms.DecimalField(
        required=False,
        max_digits=10,
        decimal_places=2,
        label='Down payment (optional)',
        help_text='Leave blank to pay the full course fee.',
        widget=forms.NumberInput(attrs={'step': '0.01', 'min': '0', 'placeholder': '0.00'}),
    )
    notes = forms.CharField(
        required=False,
        label='Notes (optional)',
        widget=forms.Textarea(attrs={'rows': 2}),
    )

    # ── Student ───────────────────────────────────────────────────────────────
    first_name  = forms.CharField(max_length=150)
    middle_name = forms.CharField(max_length=150, required=False)
    last_name   = forms.CharField(max_length=150)
    birth_date  = forms.DateField(
        required=False,
        widget=forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
        input_formats=['%Y-%m-%d'],
    )
    birthplace = forms.CharField(max_length=200, required=False)
    gender     = forms.ChoiceField(choices=GENDER_CHOICES, required=False)
    religion   = forms.CharField(max_length=100, required=False)
    age        = forms.IntegerField(required=False, min_value=0, max_value=200)
    contact    = forms.CharField(max_length=50, required=False, label='Contact number')
    email      = forms.EmailField()

    house_no = forms.CharField(max_length=50,  required=False, label='House no.')
    street   = forms.CharField(max_length=150, required=False)
    barangay = forms.CharField(max_length=150, required=False)
    city     = forms.CharField(max_length=150, required=False)
    province = forms.CharField(max_length=150, required=False)
    country  = forms.CharField(max_length=100, required=False)
    zip      = forms.CharField(max_length=20,  required=False, label='ZIP')

    indigenous_belongs = forms.ChoiceField(
        choices=YES_NO, required=False,
        label='Belongs to an indigenous group?',
    )
    indigenous_specify = forms.CharField(max_length=150, required=False, label='If yes, specify')

    # ── Parent / guardian ─────────────────────────────────────────────────────
    parent_name     = forms.CharField(max_length=200, required=False, label='Parent / guardian name')
    parent_relation = forms.CharField(max_length=50,  required=False, label='Relation')
    parent_contact  = forms.CharField(max_length=50,  required=False, label='Parent contact number')
    parent_consent  = forms.BooleanField(required=False, label='Parent consents to this enrollment')
    lives_with      = forms.BooleanField(required=False, label='Student lives with this parent')
    father_name         = forms.CharField(max_length=200, required=False)
    mother_maiden_name  = forms.CharField(max_length=200, required=False)
    legal_guardian_name = forms.CharField(max_length=200, required=False)
    guardian_contact    = forms.CharField(max_length=50,  required=False)

    # ── Documents ─────────────────────────────────────────────────────────────
    psa         = forms.FileField(required=False, label='PSA')
    report_card = forms.FileField(required=False, label='Report Card')
    form_138    = forms.FileField(required=False, label='Form 138')
    good_moral  = forms.FileField(required=False, label='Good Moral')
    documents   = MultipleFileField(required=False, label='Additional documents')

    STUDENT_FIELDS = (
        'first_name', 'middle_name', 'last_name', 'birth_date', 'birthplace',
        'gender', 'religion', 'age', 'contact', 'email',
    )
    ADDRESS_FIELDS = ('house_no', 'street', 'barangay', 'city', 'province', 'country', 'zip')
    PARENT_FIELDS = (
        'parent_name', 'parent_relation', 'parent_contact', 'father_name',
        'mother_maiden_name', 'legal_guardian_name', 'guardian_contact',
    )
    DOCUMENT_FIELDS = ('psa', 'report_card', 'form_138', 'good_moral', 'documents')

    # Bound-field groups for the template.
    def student_fields(self):
        return [self[name] for name in self.STUDENT_FIELDS]

    def address_fields(self):
        return [self[name] for name in self.ADDRESS_FIELDS]

    def parent_fields(self):
        return [self[name] for name in self.PARENT_FIELDS]

    def document_fields(self):
        return [self[name] for name in self.DOCUMENT_FIELDS]

    def student_info(self):
        cd = self.cleaned_data
        belongs = {'yes': True, 'no': False}.get(cd.get('indigenous_belongs'))
        return StudentInfo(
            first_name=cd['first_name'],
            middle_name=cd.get('middle_name', ''),
            last_name=cd['last_name'],
            birth_date=cd.get('birth_date'),
            birthplace=cd.get('birthplace', ''),
            gender=cd.get('gender', ''),
            religion=cd.get('religion', ''),
            age=cd.get('age'),
            contact=cd.get('contact', ''),
            email=cd['email'],
            address=Address(
                house_no=cd.get('house_no', ''),
                street=cd.get('street', ''),
                barangay=cd.get('barangay', ''),
                city=cd.get('city', ''),
                province=cd.get('province', ''),
                country=cd.get('country', ''),
                zip=cd.get('zip', ''),
            ),
            indigenous=Indigenous(belongs=belongs, specify=cd.get('indigenous_specify', '')),
        )

    def parent_info(self):
        cd = self.cleaned_data
        return ParentInfo(
            name=cd.get('parent_name', ''),
            relation=cd.get('parent_relation', ''),
            contact=cd.get('parent_contact', ''),
            consent=bool(cd.get('parent_consent')),
            lives_with=bool(cd.get('lives_with')),
            father_name=cd.get('father_name', ''),
            mother_maiden_name=cd.get('mother_maiden_name', ''),
            legal_guardian_name=cd.get('legal_guardian_name', ''),
            guardian_contact=cd.get('guardian_contact', ''),
        )

    def uploads(self):
        cd = self.cleaned_data
        files = {slot: cd.get(slot) for slot, _ in DOCUMENT_SLOTS}
        files['documents'] = cd.get('documents') or []
        return files


class RejectForm(forms.Form):
    reason = forms.CharField(
        required=False,
        max_length=500,
        label='Reason (optional)',
        widget=forms.TextInput(attrs={'placeholder': 'Shown in the system log'}),
    )
