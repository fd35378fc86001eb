"""
courses/forms.py
────────────────
Admin form for adding / editing a catalog course.
"""

from django import forms

from .models import Course


class CourseForm(forms.ModelForm):

    class Meta:
        model  = Course
        fields = ['course_code', 'course_name', 'credits', 'description']
        widgets = {
            'course_code': forms.TextInput(attrs={'placeholder': 'e.g. CS101'}),
            'course_name': forms.TextInput(attrs={'placeholder': 'e.g. Introduction to Programming'}),
            'credits':     forms.NumberInput(attrs={'min': '1', 'step': '1'}),
            'description': forms.Textarea(attrs={'rows': 3, 'placeholder': 'Optional details…'}),
        }
        labels = {
            'course_code': 'Course code',
            'course_name': 'Course name',
            'credits':     'Credits',
            'description': 'Description (optional)',
        }

    def clean_course_code(self):
        return self.cleaned_data['course_code'].strip()

    def clean_credits(self):
        credits = self.cleaned_data['credits']
        if credits is None or credits <= 0:
            raise forms.ValidationError('Credits must be a positive number.')
        return credits
