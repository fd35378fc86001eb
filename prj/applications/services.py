"""
applications/services.py
────────────────────────
Application intake and the approval workflow.

    submitted ──approve──▶ approved
        └──────reject───▶ rejected

Both transitions lock the application row (select_for_update) so two admins
acting at once cannot process the same application twice.  Audit entries are
written after commit and never affect the outcome.
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from audit import services as audit
from core.exceptions import InvalidState, NotConfirmed, NotFound, ValidationFailed
from core.storage import APPLICATION_FOLDER, remove_stored_file, save_upload, validate_upload
from courses.models import Course
from courses.services import ensure_enrollment
from finances.models import Payment

from .models import EnrollmentApplication
from .types import FileRef, ParentInfo, StudentInfo

logger = logging.getLogger(__name__)

# Named document slots on the application form, in display order.
DOCUMENT_SLOTS = (
    ('psa',         'PSA'),
    ('report_card', 'Report Card'),
    ('form_138',    'Form 138'),
    ('good_moral',  'Good Moral'),
)
ADDITIONAL_LABEL = 'Additional'

MAX_AGE = 200


# ── Fees ──────────────────────────────────────────────────────────────────────

def compute_fee(course_id):
    """credits × FEE_PER_CREDIT for the course, or 0 when it does not exist."""
    course = Course.objects.filter(pk=course_id).only('credits').first()
    if course is None:
        return Decimal('0.00')
    fee = Decimal(course.credits) * Decimal(settings.FEE_PER_CREDIT)
    return fee.quantize(Decimal('0.01'))


def _parse_manual_amount(raw):
    if raw is None or raw == '':
        return None
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        raise ValidationFailed('Amount must be a number.')
    if not amount.is_finite():
        raise ValidationFailed('Amount must be a number.')
    minimum = Decimal(settings.ENROLLMENT_MIN_DOWN_PAYMENT)
    if amount < minimum:
        raise ValidationFailed(f'Minimum down payment is {minimum:,.2f}.')
    return amount.quantize(Decimal('0.01'))


# ── Intake ────────────────────────────────────────────────────────────────────

def age_on(birth_date, today=None):
    today = today or timezone.localdate()
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


def _clean_student(info):
    """Validate *info* in place and return it; derive age from the birth date."""
    if isinstance(info, dict):
        info = StudentInfo.from_dict(info)

    info.first_name = (info.first_name or '').strip()
    info.last_name = (info.last_name or '').strip()
    info.email = (info.email or '').strip()
    if not info.first_name or not info.last_name:
        raise ValidationFailed('Student first and last name are required.')
    try:
        validate_email(info.email)
    except ValidationError:
        raise ValidationFailed('Please enter a valid student email address.')

    if isinstance(info.birth_date, str):
        try:
            info.birth_date = date.fromisoformat(info.birth_date) if info.birth_date else None
        except ValueError:
            raise ValidationFailed('Birth date is not a valid date.')

    if info.age is not None and info.age != '':
        try:
            info.age = int(info.age)
        except (TypeError, ValueError):
            raise ValidationFailed('Age must be a whole number.')
        if not 0 <= info.age <= MAX_AGE:
            raise ValidationFailed(f'Age must be between 0 and {MAX_AGE}.')
    elif info.birth_date:
        info.age = age_on(info.birth_date)
    else:
        info.age = None

    if info.gender and info.gender not in StudentInfo.GENDERS:
        raise ValidationFailed('Please choose a valid gender.')
    return info


def _iter_uploads(uploads):
    """Yield ``(label, file)`` for the named slots, then every additional document."""
    uploads = uploads or {}
    for slot, label in DOCUMENT_SLOTS:
        upload = uploads.get(slot)
        if upload:
            yield label, upload
    for upload in uploads.get('documents') or []:
        if upload:
            yield ADDITIONAL_LABEL, upload


def _store_uploads(user, uploads):
    """
    Validate and store every upload.  If any one fails, everything stored so far
    is removed and the error propagates.
    """
    stored = []
    try:
        for label, upload in _iter_uploads(uploads):
            validate_upload(upload, settings.APPLICATION_MAX_UPLOAD_SIZE, label)
            name = save_upload(upload, APPLICATION_FOLDER, user.pk)
            stored.append(FileRef(
                original_name=upload.name,
                stored_name=name,
                mime=upload.content_type,
                size=upload.size,
                type=label,
            ))
    except Exception:
        _discard(stored)
        raise
    return stored


def _discard(refs):
    for ref in refs:
        remove_stored_file(ref.stored_name)


def submit_application(user, course_id, student_info, parent_info, uploads,
                       notes='', manual_amount=None):
    """
    Store the documents, then create the application and its pending payment in
    one transaction.  Returns the new EnrollmentApplication.
    """
    if has_approved_application(user):
        raise InvalidState('You already have an approved application.')

    try:
        course_id = int(course_id)
    except (TypeError, ValueError):
        course_id = 0
    if course_id <= 0:
        raise ValidationFailed('Please choose a course.')

    student = _clean_student(student_info)
    parent = parent_info if isinstance(parent_info, ParentInfo) else ParentInfo.from_dict(parent_info)
    amount = _parse_manual_amount(manual_amount)
    if amount is None:
        amount = compute_fee(course_id)

    refs = _store_uploads(user, uploads)
    try:
        with transaction.atomic():
            application = EnrollmentApplication.objects.create(
                user=user,
                course_ids=[course_id],
                notes=(notes or '').strip(),
                files=[ref.to_dict() for ref in refs],
                parent_info=parent.to_dict(),
                student_info=student.to_dict(),
            )
            if amount > 0:
                Payment.objects.create(
                    application=application,
                    user=user,
                    amount=amount,
                    payment_status=Payment.Status.PENDING,
                )
    except Exception:
        logger.exception('Application insert failed for user #%s; removing uploads', user.pk)
        _discard(refs)
        raise

    logger.info('Application #%s submitted by %s (%s file(s), fee %s)',
                application.pk, user.username, len(refs), amount)
    audit.record_after_commit(
        audit.Level.INFO,
        f'Enrollment application #{application.pk} submitted by {user.username}.',
        user=user,
        context={'course_ids': [course_id], 'amount': str(amount)},
    )
    return application


# ── Approval workflow ─────────────────────────────────────────────────────────

def _lock(application_id):
    try:
        return (
            EnrollmentApplication.objects
            .select_for_update()
            .get(pk=application_id)
        )
    except EnrollmentApplication.DoesNotExist:
        raise NotFound('Application not found.')


def _require_submitted(application):
    if application.status != EnrollmentApplication.Status.SUBMITTED:
        raise InvalidState(
            f'Application #{application.pk} was already {application.status}.'
        )


def approve_application(application_id, admin):
    """
    Approve a submitted application and enroll the applicant in each requested
    course.  Courses that no longer exist, and courses the student is already
    enrolled in, are skipped.  Returns ``(application, enrolled_count)``.
    """
    now = timezone.now()
    enrolled = 0
    with transaction.atomic():
        application = _lock(application_id)
        _require_submitted(application)

        course_ids = application.course_id_list()
        courses = Course.objects.in_bulk(course_ids)
        for cid in course_ids:
            course = courses.get(cid)
            if course is None:
                logger.warning('Application #%s: course #%s no longer exists', application.pk, cid)
                continue
            _, created = ensure_enrollment(application.user, course, when=now)
            if created:
                enrolled += 1

        application.status = EnrollmentApplication.Status.APPROVED
        application.processed_at = now
        application.processed_by = admin
        application.save(update_fields=['status', 'processed_at', 'processed_by'])

    audit.record_after_commit(
        audit.Level.INFO,
        f'Application #{application.pk} approved.',
        user=admin,
        context={'enrolled': enrolled},
    )
    return application, enrolled


def reject_application(application_id, admin, reason=''):
    with transaction.atomic():
        application = _lock(application_id)
        _require_submitted(application)

        application.status = EnrollmentApplication.Status.REJECTED
        application.processed_at = timezone.now()
        application.processed_by = admin
        application.save(update_fields=['status', 'processed_at', 'processed_by'])

    message = f'Application #{application.pk} rejected.'
    reason = (reason or '').strip()
    if reason:
        message += f' Reason: {reason}'
    audit.record_after_commit(audit.Level.INFO, message, user=admin)
    return application


def purge_application_files(application):
    """Remove every stored document of *application*.  Returns how many were removed."""
    removed = 0
    for ref in application.documents:
        if remove_stored_file(ref.stored_name):
            removed += 1
    return removed


def delete_application(application_id, admin, confirmed):
    """
    Delete a submitted or rejected application.  Linked payments are kept but
    unlinked; stored documents are removed once the delete has committed.
    """
    if confirmed is not True:
        raise NotConfirmed('Please confirm the deletion.')

    with transaction.atomic():
        application = _lock(application_id)
        if application.status == EnrollmentApplication.Status.APPROVED:
            raise InvalidState('Approved applications cannot be deleted.')

        unlinked = Payment.objects.filter(application=application).update(application=None)
        pk = application.pk
        documents = application.documents
        application.delete()
        transaction.on_commit(lambda: _discard(documents))

    logger.info('Application #%s deleted (%s payment(s) unlinked)', pk, unlinked)
    audit.record_after_commit(audit.Level.WARNING, f'Application #{pk} deleted.', user=admin)
    return pk


# ── Listings ──────────────────────────────────────────────────────────────────

def applications_for_user(user):
    return EnrollmentApplication.objects.filter(user=user).order_by('-submitted_at', '-id')


def has_approved_application(user):
    return EnrollmentApplication.objects.filter(
        user=user, status=EnrollmentApplication.Status.APPROVED,
    ).exists()


def search_applications(status='', search=''):
    qs = EnrollmentApplication.objects.select_related('user', 'processed_by')
    if status:
        qs = qs.filter(status=status)
    if search:
        qs = qs.filter(
            Q(user__username__icontains=search)
            | Q(user__first_name__icontains=search)
            | Q(user__last_name__icontains=search)
            | Q(user__email__icontains=search)
        )
    return qs.order_by('-submitted_at', '-id')


def attach_courses(applications):
    """
    Set ``application.courses`` (list of existing Course rows, in request order)
    on every application.  Returns the applications as a list.
    """
    applications = list(applications)
    ids = set()
    for application in applications:
        ids.update(application.course_id_list())
    by_id = Course.objects.in_bulk(ids)
    for application in applications:
        application.courses = [by_id[cid] for cid in application.course_id_list() if cid in by_id]
    return applications
