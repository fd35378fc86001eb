"""
applications/urls.py
────────────────────
Include in the root urls.py with:
    path('', include('applications.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    path('apply/', views.apply_view, name='apply'),

    path('manage/applications/',                          views.manage_applications_view,  name='manage_applications'),
    path('manage/applications/<int:application_id>/',         views.application_detail_view,   name='application_detail'),
    path('manage/applications/<int:application_id>/approve/', views.approve_application_view,  name='approve_application'),
    path('manage/applications/<int:application_id>/reject/',  views.reject_application_view,   name='reject_application'),
    path('manage/applications/<int:application_id>/delete/',  views.delete_application_view,   name='delete_application'),
    path('manage/applications/<int:application_id>/documents/<int:index>/',
         views.application_document_view, name='application_document'),
]
