"""
Tests for activity filters and the dashboard filter form.
"""

import logging
from collections import Counter
from datetime import date, timedelta

import pytest
from django.core.exceptions import ValidationError

from apps.activity_log.filters import ActivityFilter, custom_range, filter_activities
from apps.activity_log.forms import ActivityFilterForm
from apps.activity_log.records import Snapshot

from .factories import at, make_activity, make_profile, sample_snapshot

NOW = at(2024, 6, 15, 12, 0)


def ids(activities):
    return [a.id for a in activities]


# =============================================================================
# Filter Engine
# =============================================================================

def test_no_filter_returns_the_same_multiset(snapshot):
    _, _, activities = snapshot

    result = filter_activities(activities, ActivityFilter(), now=NOW)

    assert Counter(result) == Counter(activities)


def test_project_filter(snapshot):
    _, _, activities = snapshot

    result = filter_activities(activities, ActivityFilter(project=2), now=NOW)

    assert ids(result) == [103, 105]


def test_user_filter_accepts_query_string_ids(snapshot):
    _, _, activities = snapshot

    result = filter_activities(activities, ActivityFilter(user='20'), now=NOW)

    assert ids(result) == [103, 104]


def test_filters_combine_with_and(snapshot):
    _, _, activities = snapshot

    result = filter_activities(activities, ActivityFilter(project=1, user=20), now=NOW)

    assert ids(result) == [104]


def test_last7_is_rolling_and_inclusive():
    activities = [
        make_activity(1, 1, 10, NOW - timedelta(days=7)),
        make_activity(2, 1, 10, NOW - timedelta(days=7, seconds=1)),
        make_activity(3, 1, 10, NOW - timedelta(hours=1)),
    ]

    result = filter_activities(activities, ActivityFilter(period='last7'), now=NOW)

    assert ids(result) == [1, 3]


def test_custom_range_includes_whole_days():
    activities = [
        make_activity(1, 1, 10, at(2024, 6, 12, 0, 0, 0)),
        make_activity(2, 1, 10, at(2024, 6, 12, 23, 59, 59)),
        make_activity(3, 1, 10, at(2024, 6, 13, 0, 0, 0)),
        make_activity(4, 1, 10, at(2024, 6, 11, 23, 59, 59)),
    ]
    spec = ActivityFilter(period='custom', date_from='2024-06-12', date_to=date(2024, 6, 12))

    assert ids(filter_activities(activities, spec, now=NOW)) == [1, 2]


def test_inverted_custom_range_is_empty(snapshot):
    _, _, activities = snapshot
    spec = ActivityFilter(period='custom', date_from='2024-06-30', date_to='2024-06-01')

    assert filter_activities(activities, spec, now=NOW) == []


@pytest.mark.parametrize('date_from, date_to', [
    ('2024-13-45', '2024-06-30'),
    ('2024-02-31', '2024-06-30'),
    ('ieri', '2024-06-30'),
    ('2024-06-01', None),
    ('', ''),
])
def test_unusable_custom_bounds_fail_soft(snapshot, caplog, date_from, date_to):
    _, _, activities = snapshot
    spec = ActivityFilter(period='custom', date_from=date_from, date_to=date_to)

    with caplog.at_level(logging.WARNING, logger='apps.activity_log.filters'):
        result = filter_activities(activities, spec, now=NOW)

    assert result == []
    assert 'unusable custom range' in caplog.text


def test_custom_bounds_ignored_outside_custom_period(snapshot):
    _, _, activities = snapshot
    spec = ActivityFilter(period='all', date_from='garbage', date_to=None)

    assert len(filter_activities(activities, spec, now=NOW)) == len(activities)


def test_custom_range_bounds():
    start, end = custom_range('2024-06-01', '2024-06-02')

    assert start == at(2024, 6, 1)
    assert end.date() == date(2024, 6, 2)
    assert (end.hour, end.minute, end.second) == (23, 59, 59)


def test_zero_matches_is_not_an_error(snapshot):
    _, _, activities = snapshot

    assert filter_activities(activities, ActivityFilter(project=999), now=NOW) == []
    assert filter_activities([], ActivityFilter(period='last7'), now=NOW) == []


def test_unknown_period_is_rejected():
    with pytest.raises(ValidationError):
        ActivityFilter(period='yesterday')


def test_none_selection_means_all(snapshot):
    _, _, activities = snapshot

    spec = ActivityFilter(project=None, user=None)

    assert (spec.project, spec.user) == ('all', 'all')
    assert not spec.is_filtered
    assert filter_activities(activities, spec, now=NOW) == list(activities)


def test_is_filtered():
    assert not ActivityFilter().is_filtered
    assert ActivityFilter(user=10).is_filtered
    assert ActivityFilter(period='last7').is_filtered


# =============================================================================
# Filter form
# =============================================================================

def _snapshot():
    projects, profiles, activities = sample_snapshot()
    return Snapshot(projects=tuple(projects), profiles=tuple(profiles), activities=tuple(activities))


def test_empty_form_means_no_filter():
    form = ActivityFilterForm({}, snapshot=_snapshot())

    assert form.is_valid(), form.errors
    assert form.to_filter() == ActivityFilter()


def test_form_choices_come_from_snapshot():
    form = ActivityFilterForm(snapshot=_snapshot())

    project_labels = [label for _, label in form.fields['project'].choices]
    user_choices = dict(form.fields['user'].choices)
    assert project_labels[1:] == ['Archivio', 'Bonifica Area Nord', 'Census Zero']
    assert user_choices['20'] == 'bruno@example.com'


def test_form_builds_custom_filter():
    form = ActivityFilterForm({
        'project': '1', 'user': '10', 'period': 'custom',
        'date_from': '2024-06-01', 'date_to': 'non una data',
    }, snapshot=_snapshot())

    assert form.is_valid(), form.errors
    assert form.to_filter() == ActivityFilter(
        project='1', user='10', period='custom',
        date_from='2024-06-01', date_to='non una data',
    )


def test_form_rejects_unknown_project():
    form = ActivityFilterForm({'project': '999'}, snapshot=_snapshot())

    assert not form.is_valid()
    assert 'project' in form.errors


def test_form_rejects_unknown_period():
    form = ActivityFilterForm({'period': 'domani'}, snapshot=_snapshot())

    assert not form.is_valid()
    assert 'period' in form.errors


def test_form_offers_the_acting_profile_missing_from_snapshot():
    me = make_profile(30, name='Io Stesso')

    form = ActivityFilterForm({'user': '30'}, snapshot=_snapshot(), self_profile=me)

    assert form.is_valid(), form.errors
    assert dict(form.fields['user'].choices)['30'] == 'Io Stesso'
    assert form.to_filter() == ActivityFilter(user='30')


def test_form_does_not_duplicate_a_known_acting_profile():
    snapshot = _snapshot()

    form = ActivityFilterForm(snapshot=snapshot, self_profile=snapshot.profiles[0])

    user_ids = [value for value, _ in form.fields['user'].choices]
    assert user_ids == ['all', '10', '20']
