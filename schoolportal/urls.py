"""
URL configuration for the schoolportal project.

All JSON endpoints live under ``/api/``; the Django admin is kept for staff.
"""
from django.contrib import admin
from django.urls import include, path

from .views import HealthView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health/', HealthView.as_view(), name='health'),
    path('api/auth/', include(('accounts.urls', 'accounts'), namespace='accounts')),
    path('api/', include(('classes.urls', 'classes'), namespace='classes')),
    path('api/', include(('assignments.api.urls', 'assignments'), namespace='assignments')),
    path('api/', include(('cms.api.urls', 'cms'), namespace='cms')),
]
