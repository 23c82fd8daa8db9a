"""
Views for reports app.

Both exports read the same filter parameters as the activity dashboard and
return the rendered document as a downloadable file.
"""

from django.http import HttpResponse
from django.views.decorators.http import require_GET

from apps.activity_log.filters import filter_activities
from apps.activity_log.forms import ActivityFilterForm
from apps.activity_log.services import (
    build_indices, get_self_profile, load_snapshot, resolve_resources,
)

from .export import document_response
from .services import render_editorial, render_flat_table


def _filtered_export_data(request):
    """
    Load the snapshot and apply the request's filters.

    Returns:
        (snapshot, indices, filtered, None) on success, or
        (None, None, None, HttpResponse) with a 400 for invalid parameters
    """
    snapshot = load_snapshot()
    self_profile = get_self_profile(request.user)
    form = ActivityFilterForm(request.GET, snapshot=snapshot, self_profile=self_profile)
    if not form.is_valid():
        return None, None, None, HttpResponse(form.errors.as_text(), status=400)

    indices = build_indices(
        snapshot.projects, snapshot.profiles, snapshot.activities,
        self_profile=self_profile,
    )
    filtered = filter_activities(snapshot.activities, form.to_filter())
    return snapshot, indices, filtered, None


@require_GET
def export_table_view(request):
    """Flat table export (one row per activity, merged labels)."""
    _, indices, filtered, error = _filtered_export_data(request)
    if error:
        return error
    return document_response(render_flat_table(filtered, indices))


@require_GET
def export_projects_view(request):
    """Editorial export (one section per project)."""
    snapshot, indices, filtered, error = _filtered_export_data(request)
    if error:
        return error
    document = render_editorial(
        snapshot.projects, filtered, resolve_resources(filtered), indices
    )
    return document_response(document)
