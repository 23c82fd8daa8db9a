"""
Tests for report template filters.
"""

import pytest

from apps.reports.templatetags import report_tags

from .factories import at


@pytest.mark.parametrize('days, expected', [
    (None, 'mai'),
    (0, 'oggi'),
    (1, '1 giorno fa'),
    (12, '12 giorni fa'),
    ('abc', 'mai'),
])
def test_days_ago(days, expected):
    assert report_tags.days_ago(days) == expected


def test_staleness_label_and_color():
    assert report_tags.staleness_label('warning') == 'Da sollecitare'
    assert report_tags.staleness_label('unknown') == ''
    assert report_tags.staleness_color('fresh') == '#16a34a'
    assert report_tags.staleness_color('unknown') == '#dc2626'


def test_format_timestamp():
    assert report_tags.format_timestamp(at(2024, 6, 15, 9, 5)) == '15/06/2024, 09:05'
    assert report_tags.format_timestamp(None) == '-'
