"""
Template tags and filters for reports app.

Filters:
- format_timestamp: Format an activity timestamp as "dd/mm/yyyy, HH:MM"
- staleness_label: Italian label for a staleness status
- staleness_color: Accent color for a staleness status
- days_ago: "oggi", "1 giorno fa", "5 giorni fa" or "mai"

Usage:
    {% load report_tags %}

    {{ activity.created_at|format_timestamp }}
    {{ row.status|staleness_label }}
    {{ row.days|days_ago }}
"""

from django import template

from apps.activity_log.records import format_datetime
from apps.activity_log.services import STATUS_COLORS, StalenessStatus

register = template.Library()

STALENESS_LABELS = {
    StalenessStatus.FRESH: 'Aggiornato',
    StalenessStatus.WARNING: 'Da sollecitare',
    StalenessStatus.STALE: 'Fermo',
}


@register.filter
def format_timestamp(value):
    """
    Format a timestamp for display.

    Examples:
        2024-06-15 09:05 (Europe/Rome) -> "15/06/2024, 09:05"
        None -> "-"
    """
    return format_datetime(value)


@register.filter
def staleness_label(status):
    """Return the display label for a staleness status (empty if unknown)."""
    return STALENESS_LABELS.get(status, '')


@register.filter
def staleness_color(status):
    """Return the accent color for a staleness status; stale when unknown."""
    return STATUS_COLORS.get(status, STATUS_COLORS[StalenessStatus.STALE])


@register.filter
def days_ago(days):
    """
    Format an age in whole days.

    Examples:
        None -> "mai"
        0 -> "oggi"
        1 -> "1 giorno fa"
        12 -> "12 giorni fa"
    """
    if days is None:
        return 'mai'

    try:
        days = int(days)
    except (ValueError, TypeError):
        return 'mai'

    if days <= 0:
        return 'oggi'
    if days == 1:
        return '1 giorno fa'
    return f'{days} giorni fa'

