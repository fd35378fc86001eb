"""
core/urls.py
────────────
URL patterns for public pages and the two dashboards.
Include in the root urls.py with:
    path('', include('core.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    path('',           views.home_view,            name='homepage'),
    path('about/',     views.about_view,           name='about'),
    path('dashboard/', views.dashboard_view,       name='dashboard'),
    path('manage/',    views.admin_dashboard_view, name='admin_dashboard'),
]
