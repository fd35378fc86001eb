"""
courses/urls.py
───────────────
Include in the root urls.py with:
    path('', include('courses.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    path('courses/', views.course_selection_view, name='course_selection'),

    path('manage/courses/',                        views.manage_courses_view, name='manage_courses'),
    path('manage/courses/<int:course_id>/edit/',   views.manage_courses_view, name='edit_course'),
    path('manage/courses/<int:course_id>/delete/', views.delete_course_view,  name='delete_course'),
]
