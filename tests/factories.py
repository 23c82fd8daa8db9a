"""
Record builders shared by the test modules.
"""

from datetime import date, datetime

import fitz  # PyMuPDF
from django.utils import timezone

from apps.activity_log.records import Activity, Profile, Project, Role


def at(year, month, day, hour=0, minute=0, second=0):
    """Aware datetime in the configured local time zone."""
    return timezone.make_aware(datetime(year, month, day, hour, minute, second))


def read_pdf(content):
    """Page count and extracted text of PDF bytes."""
    with fitz.open(stream=content, filetype='pdf') as pdf:
        return pdf.page_count, '\n'.join(page.get_text() for page in pdf)


def make_project(pk, title, subtitle=None, start=date(2024, 1, 1), end=date(2024, 12, 31)):
    return Project(id=pk, title=title, subtitle=subtitle, start_date=start, end_date=end)


def make_profile(pk, name='', email='', color='#2563eb', role=Role.COLLAB):
    return Profile(id=pk, email=email or f'user{pk}@example.com', name=name, color=color, role=role)


def make_activity(pk, project_id, user_id, created_at, text='Attività'):
    return Activity(id=pk, project_id=project_id, user_id=user_id, created_at=created_at, text=text)


def sample_snapshot():
    """
    Three projects, two collaborators, five activities (newest first).

    'Census Zero' has no activities; Bruno has no name, only an email.
    """
    projects = [
        make_project(1, 'Bonifica Area Nord', subtitle='Lotto 2'),
        make_project(2, 'Archivio'),
        make_project(3, 'Census Zero'),
    ]
    profiles = [
        make_profile(10, name='Anna', color='#ff0000'),
        make_profile(20, email='bruno@example.com'),
    ]
    activities = [
        make_activity(101, 1, 10, at(2024, 6, 14, 10, 0), 'Sopralluogo'),
        make_activity(102, 1, 10, at(2024, 6, 13, 9, 0), 'Rilievi'),
        make_activity(103, 2, 20, at(2024, 6, 12, 16, 30), 'Scansione faldoni'),
        make_activity(104, 1, 20, at(2024, 6, 10, 8, 15), 'Campionamento'),
        make_activity(105, 2, 10, at(2024, 6, 1, 11, 0), 'Inventario'),
    ]
    return projects, profiles, activities
