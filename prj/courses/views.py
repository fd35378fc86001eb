"""
courses/views.py
────────────────
Admin course management (list / add / edit / delete) and the student
self-service course picker.
"""

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render

from core.decorators import add_form_control_class, admin_required, require_POST_or_405
from core.exceptions import PortalError

from . import services
from .forms import CourseForm
from .models import Course


# ── Admin: manage courses ─────────────────────────────────────────────────────

@admin_required
def manage_courses_view(req, course_id=None):
    """
    GET  /manage/courses/             – list + blank "add course" form
    GET  /manage/courses/<id>/edit/   – list + pre-filled edit form
    POST                              – validate, save, redirect back to the list
    """
    instance = None
    if course_id:
        instance = Course.objects.filter(pk=course_id).first()
        if instance is None:
            messages.error(req, 'Course not found.')
            return redirect('manage_courses')

    if req.method == 'POST':
        form = CourseForm(req.POST, instance=instance)
        if form.is_valid():
            cd = form.cleaned_data
            try:
                if instance:
                    services.update_course(instance.pk, cd['course_code'], cd['course_name'],
                                           cd['credits'], cd['description'])
                    messages.success(req, 'Course updated successfully.')
                else:
                    services.create_course(cd['course_code'], cd['course_name'],
                                           cd['credits'], cd['description'])
                    messages.success(req, 'Course added successfully.')
                return redirect('manage_courses')
            except PortalError as exc:
                form.add_error(None, exc.message)
        messages.error(req, 'Please fix the errors below.')
    else:
        form = CourseForm(instance=instance)

    add_form_control_class(form)
    courses = Course.objects.order_by('course_name')
    return render(req, 'courses/manage_courses.html', {
        'form':     form,
        'instance': instance,
        'courses':  courses,
    })


@admin_required
@require_POST_or_405
def delete_course_view(req, course_id):
    try:
        label = services.delete_course(course_id, admin=req.user)
        messages.success(req, f'Course "{label}" deleted successfully.')
    except PortalError as exc:
        messages.error(req, exc.message)
    return redirect('manage_courses')


# ── Student: self-service course selection ────────────────────────────────────

@login_required
def course_selection_view(req):
    """
    Lists every course with the student's current enrollments ticked.
    POST enrolls the student in the selected courses, skipping duplicates.
    """
    if req.method == 'POST':
        selected = req.POST.getlist('course_ids') or [req.POST.get('course_id')]
        try:
            inserted, skipped = services.enroll_in_courses(req.user, selected)
            msg = f'Enrolled in {inserted} course(s).'
            if skipped:
                msg += f' {skipped} skipped (already enrolled or unavailable).'
            messages.success(req, msg)
            return redirect('course_selection')
        except PortalError as exc:
            messages.error(req, exc.message)

    enrolled_ids = set(
        services.enrolled_courses(req.user).values_list('course_id', flat=True)
    )
    return render(req, 'courses/course_selection.html', {
        'courses':      Course.objects.order_by('course_name'),
        'enrolled_ids': enrolled_ids,
    })
