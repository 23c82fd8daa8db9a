"""
Views for activity_log app.
"""

from django.http import HttpResponse
from django.shortcuts import render
from django.views.decorators.http import require_GET

from .filters import filter_activities
from .forms import ActivityFilterForm
from .services import (
    build_indices, collaborator_board, get_self_profile, load_snapshot,
    project_overview,
)


@require_GET
def activity_overview_view(request):
    """
    Activity dashboard: collaborator staleness board plus filtered
    activities grouped by project.

    Query parameters are those of ActivityFilterForm; `expand` (repeatable)
    lists projects shown without the preview limit.
    """
    snapshot = load_snapshot()
    self_profile = get_self_profile(request.user)
    form = ActivityFilterForm(request.GET, snapshot=snapshot, self_profile=self_profile)
    if not form.is_valid():
        return HttpResponse(form.errors.as_text(), status=400)

    indices = build_indices(
        snapshot.projects, snapshot.profiles, snapshot.activities,
        self_profile=self_profile,
    )
    filtered = filter_activities(snapshot.activities, form.to_filter())

    context = {
        'form': form,
        'board': collaborator_board(snapshot.profiles, snapshot.activities),
        'overview': project_overview(
            snapshot.projects, filtered, indices,
            expanded=request.GET.getlist('expand'),
        ),
        'activity_count': len(filtered),
    }
    return render(request, 'activity_log/overview.html', context)
