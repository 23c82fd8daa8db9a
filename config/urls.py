"""
URL configuration for activity_tracker project.
"""

from django.urls import path, include
from django.conf import settings

urlpatterns = [
    path('activity/', include('apps.activity_log.urls', namespace='activity_log')),
    path('reports/', include('apps.reports.urls', namespace='reports')),
]

if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [
        path('__debug__/', include(debug_toolbar.urls)),
    ] + urlpatterns
