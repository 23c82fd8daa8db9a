"""
URL configuration for activity_log app.
"""

from django.urls import path
from . import views

app_name = 'activity_log'

urlpatterns = [
    path('', views.activity_overview_view, name='overview'),
]
