"""
Tests for activity records: row parsing and shared display helpers.
"""

from datetime import date, datetime, timezone as dt_timezone

import pytest
from django.utils import timezone

from apps.activity_log.records import (
    FALLBACK_COLOR, PLACEHOLDER, Activity, Profile, Project, Snapshot,
    accent_color, display_name, format_datetime, project_title, title_sort_key,
)

from .factories import at


# =============================================================================
# Row parsing
# =============================================================================

def test_activity_from_row_parses_iso_timestamp():
    activity = Activity.from_row({
        'id': 'a1', 'project_id': 'p1', 'user_id': 'u1',
        'created_at': '2024-06-14T08:00:00+00:00', 'text': 'Sopralluogo',
    })

    assert timezone.is_aware(activity.created_at)
    assert activity.created_at == datetime(2024, 6, 14, 8, 0, tzinfo=dt_timezone.utc)
    assert activity.text == 'Sopralluogo'


def test_activity_from_row_makes_naive_timestamp_local():
    activity = Activity.from_row({
        'id': 1, 'project_id': 1, 'user_id': 1,
        'created_at': datetime(2024, 6, 14, 10, 0), 'text': None,
    })

    assert activity.created_at == at(2024, 6, 14, 10, 0)
    assert activity.text == ''


def test_activity_from_row_rejects_garbage_timestamp():
    with pytest.raises(ValueError):
        Activity.from_row({'id': 1, 'project_id': 1, 'user_id': 1, 'created_at': 'ieri'})


def test_project_from_row_parses_dates_and_blank_subtitle():
    project = Project.from_row({
        'id': 1, 'title': 'Archivio', 'subtitle': '',
        'start_date': '2024-01-01', 'end_date': date(2024, 3, 31),
    })

    assert project.subtitle is None
    assert project.start_date == date(2024, 1, 1)
    assert project.end_date == date(2024, 3, 31)


def test_profile_from_row_fills_defaults():
    profile = Profile.from_row({'id': 1, 'email': 'x@example.com', 'color': None, 'role': None})

    assert profile.color == FALLBACK_COLOR
    assert profile.role == 'collab'


def test_snapshot_from_rows_builds_tuples():
    snapshot = Snapshot.from_rows(
        projects=[{'id': 1, 'title': 'A', 'start_date': '2024-01-01', 'end_date': '2024-02-01'}],
        profiles=[{'id': 2, 'email': 'a@example.com'}],
        activities=[],
    )

    assert isinstance(snapshot.projects, tuple)
    assert snapshot.projects[0].title == 'A'
    assert snapshot.activities == ()


def test_end_of_last_day_is_local_end_of_day():
    project = Project(id=1, title='A', end_date=date(2024, 6, 14))

    assert project.end_of_last_day() == at(2024, 6, 14, 23, 59, 59)
    assert Project(id=2, title='B').end_of_last_day() is None


# =============================================================================
# Display helpers
# =============================================================================

def test_display_name_falls_back_to_email_then_dash():
    assert display_name(Profile(id=1, name='Anna', email='a@example.com')) == 'Anna'
    assert display_name(Profile(id=1, name='', email='a@example.com')) == 'a@example.com'
    assert display_name(Profile(id=1, name='', email='')) == PLACEHOLDER
    assert display_name(None) == PLACEHOLDER


def test_accent_color_falls_back_to_neutral():
    assert accent_color(Profile(id=1, color='#ff0000')) == '#ff0000'
    assert accent_color(Profile(id=1, color='')) == FALLBACK_COLOR
    assert accent_color(None) == FALLBACK_COLOR


def test_project_title_placeholder():
    assert project_title(None) == PLACEHOLDER
    assert project_title(Project(id=1, title='')) == PLACEHOLDER


def test_format_datetime():
    assert format_datetime(at(2024, 6, 5, 9, 7)) == '05/06/2024, 09:07'
    assert format_datetime(None) == '-'


def test_title_sort_key_ignores_accents_and_case():
    titles = ['zeta', 'Òmega', 'alfa', 'Ètna', 'beta']

    assert sorted(titles, key=title_sort_key) == ['alfa', 'beta', 'Ètna', 'Òmega', 'zeta']
