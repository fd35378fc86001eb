"""
accounts/views.py
─────────────────
Authentication (login, logout, register, password change), the student's own
profile, and the admin "Manage Students" pages.
"""

from django.contrib import messages
from django.contrib.auth import authenticate, get_user_model, login, logout, update_session_auth_hash
from django.contrib.auth.decorators import login_required
from django.contrib.auth.forms import PasswordChangeForm
from django.db.models import Count, Q
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from core.decorators import add_form_control_class, admin_required, require_POST_or_405
from core.exceptions import PortalError

from . import services
from .forms import ProfileForm, RegistrationForm, StudentAdminForm


def _landing(user):
    return 'admin_dashboard' if user.is_admin else 'dashboard'


# ── Login / Logout / Register ─────────────────────────────────────────────────

def login_view(req):
    """Show the login form (GET) or authenticate and redirect (POST)."""
    if req.user.is_authenticated:
        return redirect(_landing(req.user))

    if req.method == 'POST':
        username = req.POST.get('username', '').strip()
        password = req.POST.get('password', '')
        user = authenticate(req, username=username, password=password)
        if user is not None:
            login(req, user)
            messages.success(req, f'Welcome back, {user.get_full_name() or user.username}!')
            next_url = req.POST.get('next') or req.GET.get('next')
            if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={req.get_host()}):
                return redirect(next_url)
            return redirect(_landing(user))
        messages.error(req, 'Invalid username or password. Please try again.')

    return render(req, 'accounts/login.html', {'next': req.GET.get('next', '')})


@require_POST_or_405
def logout_view(req):
    logout(req)
    messages.info(req, 'You have been logged out.')
    return redirect('login')


def register_view(req):
    if req.user.is_authenticated:
        return redirect(_landing(req.user))

    if req.method == 'POST':
        form = RegistrationForm(req.POST)
        if form.is_valid():
            cd = form.cleaned_data
            try:
                user = services.register_user(
                    username=cd['username'],
                    first_name=cd['first_name'],
                    middle_name=cd['middle_name'],
                    last_name=cd['last_name'],
                    email=cd['email'],
                    password=cd['password1'],
                )
                login(req, user, backend='django.contrib.auth.backends.ModelBackend')
                messages.success(req, 'Registration successful. Welcome!')
                return redirect('dashboard')
            except PortalError as exc:
                form.add_error(None, exc.message)
        messages.error(req, 'Please fix the errors below.')
    else:
        form = RegistrationForm()

    add_form_control_class(form)
    return render(req, 'accounts/register.html', {'form': form})


# ── Profile & password ────────────────────────────────────────────────────────

@login_required
def profile_view(req):
    if req.method == 'POST':
        form = ProfileForm(req.POST)
        if form.is_valid():
            try:
                services.update_profile(req.user, **form.cleaned_data)
                messages.success(req, 'Profile updated.')
                return redirect('profile')
            except PortalError as exc:
                form.add_error(None, exc.message)
        messages.error(req, 'Please fix the errors below.')
    else:
        form = ProfileForm(initial={
            'first_name':  req.user.first_name,
            'middle_name': req.user.middle_name,
            'last_name':   req.user.last_name,
            'email':       req.user.email,
        })

    add_form_control_class(form)
    return render(req, 'accounts/profile.html', {'form': form})


@login_required
def password_change_view(req):
    """Allow a logged-in user to change their own password."""
    if req.method == 'POST':
        form = PasswordChangeForm(req.user, req.POST)
        if form.is_valid():
            user = form.save()
            update_session_auth_hash(req, user)
            messages.success(req, 'Your password was updated successfully.')
            return redirect('password_change_done')
        messages.error(req, 'Please fix the errors below.')
    else:
        form = PasswordChangeForm(req.user)

    add_form_control_class(form)
    return render(req, 'accounts/password_change.html', {'form': form})


@login_required
def password_change_done_view(req):
    return render(req, 'accounts/password_change_done.html')


# ── Admin: manage students ────────────────────────────────────────────────────

@admin_required
def manage_students_view(req, user_id=None):
    """
    GET  /manage/students/             – list + blank "add student" form
    GET  /manage/students/<id>/edit/   – list + pre-filled edit form
    POST                               – create / update, then back to the list
    """
    User = get_user_model()
    editing = None
    if user_id:
        editing = User.objects.filter(pk=user_id).first()
        if editing is None:
            messages.error(req, 'User not found.')
            return redirect('manage_students')

    if req.method == 'POST':
        form = StudentAdminForm(req.POST, editing=editing is not None)
        if form.is_valid():
            cd = form.cleaned_data
            try:
                if editing:
                    services.update_student(
                        editing.pk, cd['username'], cd['first_name'], cd['last_name'],
                        cd['email'], middle_name=cd['middle_name'],
                    )
                    messages.success(req, 'Student updated.')
                else:
                    user, plain = services.create_student(
                        cd['username'], cd['first_name'], cd['last_name'], cd['email'],
                        password=cd.get('password', ''), middle_name=cd['middle_name'],
                    )
                    msg = f'Student {user.username} created.'
                    if not cd.get('password'):
                        msg += f' Temporary password: {plain}'
                    messages.success(req, msg)
                return redirect('manage_students')
            except PortalError as exc:
                form.add_error(None, exc.message)
        messages.error(req, 'Please fix the errors below.')
    elif editing:
        form = StudentAdminForm.for_user(editing)
    else:
        form = StudentAdminForm()

    add_form_control_class(form)

    search = req.GET.get('q', '').strip()
    users = User.objects.annotate(enrollment_count=Count('enrollments'))
    if search:
        users = users.filter(
            Q(username__icontains=search)
            | Q(first_name__icontains=search)
            | Q(last_name__icontains=search)
            | Q(email__icontains=search)
        )
    return render(req, 'accounts/manage_students.html', {
        'form':    form,
        'editing': editing,
        'users':   users.order_by('role', 'last_name', 'first_name', 'username'),
        'q':       search,
    })


@admin_required
@require_POST_or_405
def promote_user_view(req, user_id):
    try:
        user = services.promote_user(user_id, admin=req.user)
        messages.success(req, f'{user.username} is now an admin.')
    except PortalError as exc:
        messages.error(req, exc.message)
    return redirect('manage_students')


@admin_required
@require_POST_or_405
def reset_password_view(req, user_id):
    try:
        plain = services.reset_password(user_id)
        messages.success(req, f'Password reset. Temporary password: {plain}')
    except PortalError as exc:
        messages.error(req, exc.message)
    return redirect('manage_students')


@admin_required
@require_POST_or_405
def delete_user_view(req, user_id):
    if int(user_id) == req.user.pk:
        messages.error(req, 'You cannot delete your own account.')
        return redirect('manage_students')
    try:
        username = services.delete_user(user_id, admin=req.user)
        messages.success(req, f'User {username} deleted.')
    except PortalError as exc:
        messages.error(req, exc.message)
    return redirect('manage_students')
