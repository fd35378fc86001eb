"""
URL configuration for prj project.

  path('', include('core.urls'))          – landing, about, dashboards
  path('', include('accounts.urls'))      – login / register / profile / manage students
  path('', include('courses.urls'))       – course picker, manage courses
  path('', include('applications.urls'))  – apply, manage applications
  path('', include('finances.urls'))      – payments, manage payments
  path('manage/logs/', include('audit.urls'))
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),

    path('', include('core.urls')),
    path('', include('accounts.urls')),
    path('', include('courses.urls')),
    path('', include('applications.urls')),
    path('', include('finances.urls')),
    path('manage/logs/', include('audit.urls')),
]

handler404 = 'core.views.handler404'
handler500 = 'core.views.handler500'
