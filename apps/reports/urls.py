"""
URL configuration for reports app.
"""

from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    path('export/table/', views.export_table_view, name='export_table'),
    path('export/projects/', views.export_projects_view, name='export_projects'),
]
