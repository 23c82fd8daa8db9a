"""
Service layer for reports app.

Both compliance exports take an already filtered activity list plus the
indices of the same snapshot and return a paginated Document:

- render_flat_table: one table sorted by project then newest first, with
  repeated project/collaborator labels blanked to read as merged cells
- render_editorial: one section per project with its period, the
  collaborators involved and a table of its activities
"""

import logging

from apps.activity_log.records import (
    PLACEHOLDER, format_datetime, title_sort_key,
)
from apps.activity_log.services import newest_first, ordered_resource_names

from .document import Document, Section
from .layout import MARGIN, TableLayout

logger = logging.getLogger(__name__)

TITLE_FONT_SIZE = 14
SECTION_TITLE_FONT_SIZE = 12
META_FONT_SIZE = 9

FLAT_TABLE_START_Y = 60
FLAT_TABLE = TableLayout(
    head=('NOME PROGETTI', 'ATTIVITÀ SVOLTE', 'COLLABORATORI'),
    column_widths=(190, 430, 170),
)

# A section starting below this line begins on a new page
SECTION_BREAK_Y = 720
SECTION_GAP = 18
EDITORIAL_TABLE = TableLayout(
    head=('DATA', 'COLLABORATORE', 'ATTIVITÀ'),
    column_widths=(120, 140, 260),
)


def activity_label(activity):
    """Timestamp and text as shown in the flat table."""
    return f"{format_datetime(activity.created_at)} — {activity.text}"


def resources_line(names):
    if not names:
        return f"Risorse interessate: {PLACEHOLDER}"
    return f"Risorse interessate: {', '.join(names)}"


def period_line(project):
    start = project.start_date.isoformat() if project.start_date else PLACEHOLDER
    end = project.end_date.isoformat() if project.end_date else PLACEHOLDER
    return f"Periodo: {start} → {end}"


def merge_repeated_labels(rows):
    """
    Blank project and collaborator cells repeated from the previous row.

    A project change always shows the collaborator again. State starts
    fresh for every call, never per page.

    Args:
        rows: Iterable of (project, activity, collaborator) triples,
              already sorted

    Returns:
        list of (project or '', activity, collaborator or '') triples
    """
    merged = []
    last_project = None
    last_collaborator = None

    for project, activity, collaborator in rows:
        show_project = project != last_project
        show_collaborator = show_project or collaborator != last_collaborator
        last_project = project
        last_collaborator = collaborator

        merged.append((
            project if show_project else '',
            activity,
            collaborator if show_collaborator else '',
        ))
    return merged


def sort_for_flat_table(filtered, indices):
    """Project title (locale aware), then newest first within a project."""
    rows = newest_first(filtered)
    rows.sort(key=lambda a: title_sort_key(indices.project_title(a.project_id)))
    return rows


def render_flat_table(filtered, indices):
    """
    Render the merged-cell flat table export.

    Args:
        filtered: Activities returned by filter_activities
        indices: Indices of the same snapshot

    Returns:
        Document (landscape A4)
    """
    document = Document(
        title='Export Attività (tabella)',
        orientation='landscape',
        filename_prefix='export_attivita_tabella',
    )
    document.add_page()
    document.text(document.title, MARGIN, MARGIN, TITLE_FONT_SIZE)

    body = merge_repeated_labels(
        (
            indices.project_title(a.project_id),
            activity_label(a),
            indices.display_name(a.user_id),
        )
        for a in sort_for_flat_table(filtered, indices)
    )
    FLAT_TABLE.place(document, body, start_y=FLAT_TABLE_START_Y)

    logger.debug(
        "Rendered flat table export: %d rows on %d pages",
        len(body), len(document.pages),
    )
    return document


def render_editorial(projects, filtered, resources, indices):
    """
    Render the per-project editorial export.

    Projects without activities in `filtered` get no section. A section's
    heading block (title, subtitle, period, resources) always starts on the
    same page; only its activity table may continue on following pages.

    Args:
        projects: Project records of the snapshot
        filtered: Activities returned by filter_activities
        resources: ResourceMap from resolve_resources(filtered)
        indices: Indices of the same snapshot

    Returns:
        Document (portrait A4)
    """
    document = Document(
        title='Export Attività (per progetto)',
        orientation='portrait',
        filename_prefix='export_attivita_progetti',
    )
    document.add_page()
    y = MARGIN
    document.text(document.title, MARGIN, y, TITLE_FONT_SIZE)
    y += 20

    by_project = {}
    for activity in filtered:
        by_project.setdefault(activity.project_id, []).append(activity)

    for project in sorted(projects, key=lambda p: title_sort_key(p.title)):
        activities = newest_first(by_project.get(project.id, []))
        if not activities:
            continue

        if y > SECTION_BREAK_Y:
            document.add_page()
            y = MARGIN

        section = Section(
            project_id=project.id,
            title=project.title or PLACEHOLDER,
            subtitle=project.subtitle or PLACEHOLDER,
            period=period_line(project),
            resources=resources_line(
                ordered_resource_names(activities, resources[project.id], indices)
            ),
            rows=[
                (
                    format_datetime(a.created_at),
                    indices.display_name(a.user_id),
                    a.text,
                )
                for a in activities
            ],
        )

        document.text(section.title, MARGIN, y, SECTION_TITLE_FONT_SIZE)
        y += 14
        document.text(section.subtitle, MARGIN, y, META_FONT_SIZE)
        y += 12
        document.text(section.period, MARGIN, y, META_FONT_SIZE)
        y += 10
        document.text(section.resources, MARGIN, y, META_FONT_SIZE)
        y += 12

        y = EDITORIAL_TABLE.place(document, section.rows, start_y=y) + SECTION_GAP
        document.sections.append(section)

    logger.debug(
        "Rendered editorial export: %d sections on %d pages",
        len(document.sections), len(document.pages),
    )
    return document
