"""
audit/urls.py
─────────────
Include in the root urls.py with:
    path('manage/logs/', include('audit.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    path('',                     views.system_logs_view, name='system_logs'),
    path('<int:log_id>/delete/', views.delete_log_view,  name='delete_log'),
    path('clear/',               views.clear_logs_view,  name='clear_logs'),
    path('export/',              views.export_logs_view, name='export_logs'),
]
