"""
Activity filters for dashboard views and report exports.

Filters are independent predicates combined with AND:
- project: Activities on one project ('all' or None disables)
- user: Activities by one collaborator ('all' or None disables)
- period: 'all', 'last7' (rolling 7 days) or 'custom' (date_from..date_to)

Usage:
    spec = ActivityFilter(project='all', user=profile_id, period='last7')
    activities = filter_activities(snapshot.activities, spec)
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from django.core.exceptions import ValidationError
from django.utils import timezone
from django.utils.dateparse import parse_date

logger = logging.getLogger(__name__)

ALL = 'all'

PERIOD_ALL = 'all'
PERIOD_LAST_7 = 'last7'
PERIOD_CUSTOM = 'custom'

PERIOD_CHOICES = [
    (PERIOD_ALL, 'Tutto'),
    (PERIOD_LAST_7, 'Ultimi 7GG'),
    (PERIOD_CUSTOM, 'Da / A'),
]

ROLLING_WINDOW = timedelta(days=7)


@dataclass(frozen=True)
class ActivityFilter:
    """
    Filter specification for activity lists.

    date_from / date_to are only read when period is 'custom'. They may be
    date objects or ISO strings as typed by the user; no ordering check is
    made, so an inverted range simply matches nothing.
    """
    project: object = ALL
    user: object = ALL
    period: str = PERIOD_ALL
    date_from: object = None
    date_to: object = None

    def __post_init__(self):
        # None means no selection, same as 'all'
        for name in ('project', 'user'):
            if getattr(self, name) is None:
                object.__setattr__(self, name, ALL)

        valid_periods = [choice for choice, _ in PERIOD_CHOICES]
        if self.period not in valid_periods:
            raise ValidationError(f"Invalid period: {self.period}")

    @property
    def is_filtered(self):
        """True when at least one filter narrows the result."""
        return (
            str(self.project) != ALL
            or str(self.user) != ALL
            or self.period != PERIOD_ALL
        )


def _parse_bound(value):
    """Return a date for a custom range bound, or None if unusable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return parse_date(str(value).strip())
    except ValueError:
        # Well formed but impossible, e.g. 2024-02-31
        return None


def custom_range(date_from, date_to):
    """
    Inclusive local-time bounds for a custom range.

    Returns:
        (start, end) aware datetimes, or None if either bound is missing
        or unparseable.
    """
    start_day = _parse_bound(date_from)
    end_day = _parse_bound(date_to)
    if start_day is None or end_day is None:
        return None
    start = timezone.make_aware(datetime.combine(start_day, time.min))
    end = timezone.make_aware(datetime.combine(end_day, time.max))
    return start, end


def filter_activities(activities, spec, now=None):
    """
    Apply a filter specification to an activity list.

    Args:
        activities: Iterable of Activity records
        spec: ActivityFilter
        now: Reference instant for the rolling window (default: now)

    Returns:
        list of matching activities in input order
    """
    result = list(activities)

    if str(spec.project) != ALL:
        project = str(spec.project)
        result = [a for a in result if str(a.project_id) == project]

    if str(spec.user) != ALL:
        user = str(spec.user)
        result = [a for a in result if str(a.user_id) == user]

    if spec.period == PERIOD_LAST_7:
        since = (now or timezone.now()) - ROLLING_WINDOW
        result = [a for a in result if a.created_at >= since]

    elif spec.period == PERIOD_CUSTOM:
        bounds = custom_range(spec.date_from, spec.date_to)
        if bounds is None:
            logger.warning(
                "Ignoring activities for unusable custom range %r - %r",
                spec.date_from, spec.date_to,
            )
            return []
        start, end = bounds
        result = [a for a in result if start <= a.created_at <= end]

    return result
