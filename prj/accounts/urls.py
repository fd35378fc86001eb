"""
accounts/urls.py
────────────────
URL patterns for authentication, the profile page and student management.
Include in the root urls.py with:
    path('', include('accounts.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    path('login/',    views.login_view,    name='login'),
    path('logout/',   views.logout_view,   name='logout'),
    path('register/', views.register_view, name='register'),
    path('profile/',  views.profile_view,  name='profile'),
    path('password-change/',       views.password_change_view,      name='password_change'),
    path('password-change/done/',  views.password_change_done_view, name='password_change_done'),

    # ── Admin: manage students ────────────────────────────────────────────────
    path('manage/students/',                        views.manage_students_view, name='manage_students'),
    path('manage/students/<int:user_id>/edit/',     views.manage_students_view, name='edit_student'),
    path('manage/students/<int:user_id>/promote/',  views.promote_user_view,    name='promote_user'),
    path('manage/students/<int:user_id>/reset-password/', views.reset_password_view, name='reset_password'),
    path('manage/students/<int:user_id>/delete/',   views.delete_user_view,     name='delete_user'),
]
