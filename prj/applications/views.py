"""
applications/views.py
─────────────────────
Student:  /apply/                         – application form + own applications
Admin:    /manage/applications/           – list with status filter / search
          /manage/applications/<id>/      – detail (student, parent, documents)
          …/<id>/approve|reject|delete/   – POST-only workflow actions
          …/<id>/documents/<n>/           – stream one stored document
"""

import os

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.files.storage import default_storage
from django.http import FileResponse, Http404
from django.shortcuts import get_object_or_404, redirect, render

from core.decorators import add_form_control_class, admin_required, require_POST_or_405
from core.exceptions import PortalError

from . import services
from .forms import ApplicationForm, RejectForm
from .models import EnrollmentApplication


# ── Student ───────────────────────────────────────────────────────────────────

@login_required
def apply_view(req):
    if req.method == 'POST':
        form = ApplicationForm(req.POST, req.FILES)
        if form.is_valid():
            try:
                application = services.submit_application(
                    user=req.user,
                    course_id=form.cleaned_data['course'].pk,
                    student_info=form.student_info(),
                    parent_info=form.parent_info(),
                    uploads=form.uploads(),
                    notes=form.cleaned_data.get('notes', ''),
                    manual_amount=form.cleaned_data.get('manual_amount'),
                )
                messages.success(
                    req, f'Application #{application.pk} submitted. We will review it shortly.'
                )
                return redirect('apply')
            except PortalError as exc:
                messages.error(req, exc.message)
        else:
            messages.error(req, 'Please fix the errors below.')
    else:
        initial = {
            'first_name':  req.user.first_name,
            'middle_name': req.user.middle_name,
            'last_name':   req.user.last_name,
            'email':       req.user.email,
        }
        form = ApplicationForm(initial=initial)

    add_form_control_class(form)
    applications = services.attach_courses(services.applications_for_user(req.user))
    return render(req, 'applications/apply.html', {
        'form':           form,
        'applications':   applications,
        'already_approved': any(
            a.status == EnrollmentApplication.Status.APPROVED for a in applications
        ),
    })


# ── Admin ─────────────────────────────────────────────────────────────────────

@admin_required
def manage_applications_view(req):
    status = req.GET.get('status', '').strip()
    if status not in EnrollmentApplication.Status.values:
        status = ''
    search = req.GET.get('q', '').strip()

    applications = services.attach_courses(services.search_applications(status=status, search=search))
    return render(req, 'applications/manage_applications.html', {
        'applications':  applications,
        'status':        status,
        'q':             search,
        'statuses':      EnrollmentApplication.Status.choices,
        'reject_form':   RejectForm(),
    })


@admin_required
def application_detail_view(req, application_id):
    application = get_object_or_404(
        EnrollmentApplication.objects.select_related('user', 'processed_by'),
        pk=application_id,
    )
    services.attach_courses([application])
    return render(req, 'applications/application_detail.html', {
        'application':   application,
        'student':       application.student,
        'parent':        application.parent,
        'documents':     list(enumerate(application.documents)),
        'payments':      application.payments.order_by('-payment_date'),
        'reject_form':   RejectForm(),
    })


@admin_required
@require_POST_or_405
def approve_application_view(req, application_id):
    try:
        application, enrolled = services.approve_application(application_id, admin=req.user)
        messages.success(
            req, f'Application #{application.pk} approved; {enrolled} enrollment(s) created.'
        )
    except PortalError as exc:
        messages.error(req, exc.message)
    return redirect('manage_applications')


@admin_required
@require_POST_or_405
def reject_application_view(req, application_id):
    form = RejectForm(req.POST)
    reason = form.cleaned_data['reason'] if form.is_valid() else ''
    try:
        application = services.reject_application(application_id, admin=req.user, reason=reason)
        messages.success(req, f'Application #{application.pk} rejected.')
    except PortalError as exc:
        messages.error(req, exc.message)
    return redirect('manage_applications')


@admin_required
@require_POST_or_405
def delete_application_view(req, application_id):
    confirmed = req.POST.get('confirm') == 'yes'
    try:
        pk = services.delete_application(application_id, admin=req.user, confirmed=confirmed)
        messages.success(req, f'Application #{pk} deleted.')
    except PortalError as exc:
        messages.error(req, exc.message)
    return redirect('manage_applications')


@admin_required
def application_document_view(req, application_id, index):
    application = get_object_or_404(EnrollmentApplication, pk=application_id)
    documents = application.documents
    if index < 0 or index >= len(documents):
        raise Http404('Document not found.')
    ref = documents[index]
    if not default_storage.exists(ref.stored_name):
        raise Http404('Document file is missing.')
    return FileResponse(
        default_storage.open(ref.stored_name, 'rb'),
        content_type=ref.mime or None,
        filename=os.path.basename(ref.original_name or ref.stored_name),
    )
