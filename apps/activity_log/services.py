"""
Service layer for activity_log app.

All aggregation over activity snapshots is centralized here so that the
overview page and the report exports share one implementation.

Services:
- load_snapshot: Materialize the store into immutable records
- build_indices: Lookup tables by project id, profile id and project
- evaluate_staleness: Per-user last activity and fresh/warning/stale status
- collaborator_board: Staleness rows for every collaborator profile
- resolve_resources: Distinct authors per project in a filtered set
- is_project_past: Whether a project's end date has passed
- project_overview: Per-project grouping with preview clamp
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

from .records import (
    Role, Snapshot, Profile,
    display_name, accent_color, project_title, title_sort_key,
)

logger = logging.getLogger(__name__)


def load_snapshot():
    """
    Read projects, profiles and activities from the store in one pass.

    Ordering matches what the dashboard has always received: projects by
    title, profiles by name, activities newest first.
    """
    from .models import (
        Project as ProjectModel,
        Profile as ProfileModel,
        Activity as ActivityModel,
    )

    snapshot = Snapshot.from_rows(
        projects=ProjectModel.objects.order_by('title').values(
            'id', 'title', 'subtitle', 'start_date', 'end_date'
        ),
        profiles=ProfileModel.objects.order_by('name').values(
            'id', 'email', 'name', 'color', 'role'
        ),
        activities=ActivityModel.objects.order_by('-created_at').values(
            'id', 'project_id', 'user_id', 'created_at', 'text'
        ),
    )
    logger.debug(
        "Loaded snapshot: %d projects, %d profiles, %d activities",
        len(snapshot.projects), len(snapshot.profiles), len(snapshot.activities),
    )
    return snapshot


def get_self_profile(user):
    """Return the acting user's profile record, or None."""
    from .models import Profile as ProfileModel

    if user is None or not user.is_authenticated:
        return None
    row = ProfileModel.objects.filter(user=user).values(
        'id', 'email', 'name', 'color', 'role'
    ).first()
    return Profile.from_row(row) if row else None


# =============================================================================
# Indexer
# =============================================================================

@dataclass(frozen=True)
class Indices:
    projects_by_id: dict = field(default_factory=dict)
    profiles_by_id: dict = field(default_factory=dict)
    activities_by_project: dict = field(default_factory=dict)

    def project(self, project_id):
        return self.projects_by_id.get(project_id)

    def profile(self, user_id):
        return self.profiles_by_id.get(user_id)

    def project_title(self, project_id):
        return project_title(self.project(project_id))

    def display_name(self, user_id):
        return display_name(self.profile(user_id))

    def accent_color(self, user_id):
        return accent_color(self.profile(user_id))


def build_indices(projects, profiles, activities, self_profile=None):
    """
    Build lookup tables for one snapshot.

    Args:
        projects: Iterable of Project records
        profiles: Iterable of Profile records
        activities: Iterable of Activity records
        self_profile: Acting user's own Profile; added when the profile
                      collection does not contain it (profile visibility
                      can be scoped by the store)

    Returns:
        Indices with id -> Project, id -> Profile and
        project_id -> [Activity, ...] in source order
    """
    projects_by_id = {p.id: p for p in projects}

    profiles_by_id = {p.id: p for p in profiles}
    if self_profile is not None and self_profile.id not in profiles_by_id:
        profiles_by_id[self_profile.id] = self_profile

    activities_by_project = {}
    for activity in activities:
        activities_by_project.setdefault(activity.project_id, []).append(activity)

    return Indices(
        projects_by_id=projects_by_id,
        profiles_by_id=profiles_by_id,
        activities_by_project=activities_by_project,
    )


# =============================================================================
# Staleness Evaluator
# =============================================================================

class StalenessStatus(models.TextChoices):
    FRESH = 'fresh', 'Fresh'
    WARNING = 'warning', 'Warning'
    STALE = 'stale', 'Stale'


STATUS_COLORS = {
    StalenessStatus.FRESH: '#16a34a',
    StalenessStatus.WARNING: '#f59e0b',
    StalenessStatus.STALE: '#dc2626',
}


@dataclass(frozen=True)
class Staleness:
    last_activity: object
    status: str

    @property
    def color(self):
        return STATUS_COLORS[self.status]


def days_since(moment, now):
    """Whole days elapsed from moment to now (floored)."""
    return (now - moment) // timedelta(days=1)


def classify_age(days):
    """Map an age in whole days (None = never) to a staleness status."""
    if days is None:
        return StalenessStatus.STALE
    if days <= settings.ACTIVITY_FRESH_DAYS:
        return StalenessStatus.FRESH
    if days <= settings.ACTIVITY_WARNING_DAYS:
        return StalenessStatus.WARNING
    return StalenessStatus.STALE


def evaluate_staleness(activities, now=None, profiles=()):
    """
    Compute last activity and staleness status per user.

    Every activity author gets an entry. Profiles passed in `profiles`
    without any activity are reported as stale with no last activity.
    Ties on created_at keep the first occurrence in source order.

    Returns:
        dict user_id -> Staleness
    """
    now = now or timezone.now()

    last_by_user = {}
    for activity in activities:
        current = last_by_user.get(activity.user_id)
        if current is None or activity.created_at > current:
            last_by_user[activity.user_id] = activity.created_at

    result = {}
    for user_id, last in last_by_user.items():
        result[user_id] = Staleness(
            last_activity=last,
            status=classify_age(days_since(last, now)),
        )
    for profile in profiles:
        if profile.id not in result:
            result[profile.id] = Staleness(
                last_activity=None,
                status=StalenessStatus.STALE,
            )
    return result


def collaborator_board(profiles, activities, now=None):
    """
    Staleness rows for every collaborator profile, in profile order.

    Returns:
        list of dicts with profile, name, last_activity, days, status, color
    """
    now = now or timezone.now()
    collaborators = [p for p in profiles if p.role == Role.COLLAB]
    staleness = evaluate_staleness(activities, now=now, profiles=collaborators)

    board = []
    for profile in collaborators:
        entry = staleness[profile.id]
        last = entry.last_activity
        board.append({
            'profile': profile,
            'name': display_name(profile),
            'last_activity': last,
            'days': days_since(last, now) if last is not None else None,
            'status': entry.status,
            'color': entry.color,
        })
    return board


# =============================================================================
# Resource Resolver
# =============================================================================

class ResourceMap(dict):
    """project_id -> frozenset of author ids; unknown projects map to empty."""

    def __missing__(self, key):
        return frozenset()


def resolve_resources(filtered):
    """Distinct authors per project within an already filtered activity list."""
    authors = {}
    for activity in filtered:
        authors.setdefault(activity.project_id, set()).add(activity.user_id)
    return ResourceMap(
        (project_id, frozenset(user_ids)) for project_id, user_ids in authors.items()
    )


def newest_first(activities):
    """Sort by created_at descending; equal timestamps keep input order."""
    return sorted(activities, key=lambda a: a.created_at, reverse=True)


def ordered_resource_names(activities, resource_ids, indices):
    """
    Display names of the given author ids, each once, ordered by first
    appearance in `activities`.
    """
    names = []
    seen = set()
    for activity in activities:
        user_id = activity.user_id
        if user_id in resource_ids and user_id not in seen:
            seen.add(user_id)
            names.append(indices.display_name(user_id))
    return names


# =============================================================================
# Project overview
# =============================================================================

def is_project_past(project, now=None):
    """True once now is past the project's end date at 23:59:59 local time."""
    end = project.end_of_last_day()
    if end is None:
        return False
    return (now or timezone.now()) > end


def project_overview(projects, filtered, indices, expanded=(), now=None, limit=None):
    """
    Group filtered activities by project for the overview page.

    Args:
        projects: Project records (any order; sorted by title here)
        filtered: Activities already passed through filter_activities
        indices: Indices of the same snapshot
        expanded: Project ids whose full activity list is shown
        limit: Activities shown per collapsed project
               (default: ACTIVITY_PREVIEW_LIMIT)

    Returns:
        list of dicts with project, is_past, activities, hidden_count,
        rows (activity with author name and color), resources (display
        names), expanded
    """
    now = now or timezone.now()
    if limit is None:
        limit = settings.ACTIVITY_PREVIEW_LIMIT
    expanded = {str(pk) for pk in expanded}

    by_project = {}
    for activity in filtered:
        by_project.setdefault(activity.project_id, []).append(activity)
    resources = resolve_resources(filtered)

    overview = []
    for project in sorted(projects, key=lambda p: title_sort_key(p.title)):
        acts = newest_first(by_project.get(project.id, []))
        is_expanded = str(project.id) in expanded
        shown = acts if is_expanded else acts[:limit]
        overview.append({
            'project': project,
            'is_past': is_project_past(project, now),
            'activities': shown,
            'rows': [
                {
                    'activity': a,
                    'name': indices.display_name(a.user_id),
                    'color': indices.accent_color(a.user_id),
                }
                for a in shown
            ],
            'hidden_count': len(acts) - len(shown),
            'resources': ordered_resource_names(acts, resources[project.id], indices),
            'expanded': is_expanded,
        })
    return overview
