"""
Immutable records for the activity engine.

The engine never touches the ORM: the store hands over a Snapshot of three
collections and every service in this app works on these value objects.

Records:
- Project: time-boxed project (calendar start/end dates)
- Profile: collaborator with display name, accent color and role
- Activity: timestamped free-text entry by one profile on one project
- Snapshot: the three collections taken together

Display helpers (shared by the overview and both report layouts):
- display_name: name -> email -> placeholder dash
- accent_color: profile color -> neutral fallback
- format_datetime: dd/mm/yyyy, HH:MM in local time
"""

import unicodedata
from dataclasses import dataclass, field
from datetime import date, datetime, time

from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


PLACEHOLDER = '—'
EMPTY_DATETIME = '-'
FALLBACK_COLOR = '#111111'


class Role(models.TextChoices):
    ADMIN = 'admin', 'Admin'
    COLLAB = 'collab', 'Collaboratore'
    DASHBOARD = 'dashboard', 'Dashboard'


def _to_datetime(value):
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(str(value)) if value else None
        if parsed is None:
            raise ValueError(f"Invalid timestamp: {value!r}")
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _to_date(value):
    """Parse a calendar date; None and empty strings stay None."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_date(str(value))
    if parsed is None:
        raise ValueError(f"Invalid date: {value!r}")
    return parsed


@dataclass(frozen=True)
class Project:
    id: object
    title: str
    subtitle: str = None
    start_date: date = None
    end_date: date = None

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            title=row.get('title') or '',
            subtitle=row.get('subtitle') or None,
            start_date=_to_date(row.get('start_date')),
            end_date=_to_date(row.get('end_date')),
        )

    def end_of_last_day(self):
        """Local instant at 23:59:59 of end_date, or None without an end date."""
        if self.end_date is None:
            return None
        return timezone.make_aware(
            datetime.combine(self.end_date, time(23, 59, 59))
        )


@dataclass(frozen=True)
class Profile:
    id: object
    email: str = ''
    name: str = ''
    color: str = FALLBACK_COLOR
    role: str = Role.COLLAB

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            email=row.get('email') or '',
            name=row.get('name') or '',
            color=row.get('color') or FALLBACK_COLOR,
            role=row.get('role') or Role.COLLAB,
        )

    @property
    def display_name(self):
        return self.name or self.email or PLACEHOLDER


@dataclass(frozen=True)
class Activity:
    id: object
    project_id: object
    user_id: object
    created_at: datetime
    text: str = ''

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row['id'],
            project_id=row['project_id'],
            user_id=row['user_id'],
            created_at=_to_datetime(row['created_at']),
            text=row.get('text') or '',
        )


@dataclass(frozen=True)
class Snapshot:
    """A consistent read of the store: never mutated during a pass."""
    projects: tuple = field(default_factory=tuple)
    profiles: tuple = field(default_factory=tuple)
    activities: tuple = field(default_factory=tuple)

    @classmethod
    def from_rows(cls, projects=(), profiles=(), activities=()):
        return cls(
            projects=tuple(Project.from_row(r) for r in projects),
            profiles=tuple(Profile.from_row(r) for r in profiles),
            activities=tuple(Activity.from_row(r) for r in activities),
        )


# =============================================================================
# Display helpers
# =============================================================================

def display_name(profile):
    """Name, then email, then a dash when the profile is unknown."""
    if profile is None:
        return PLACEHOLDER
    return profile.display_name


def accent_color(profile):
    if profile is None or not profile.color:
        return FALLBACK_COLOR
    return profile.color


def project_title(project):
    if project is None or not project.title:
        return PLACEHOLDER
    return project.title


def format_datetime(value):
    """Format as dd/mm/yyyy, HH:MM in the current time zone."""
    if value is None:
        return EMPTY_DATETIME
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime('%d/%m/%Y, %H:%M')


def title_sort_key(title):
    """
    Collation key approximating an Italian locale compare.

    Accents and case are ignored on the first pass; the raw title breaks
    ties so the order stays total and stable.
    """
    title = title or ''
    decomposed = unicodedata.normalize('NFKD', title)
    base = ''.join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), title)
