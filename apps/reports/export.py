"""
PDF backend for report documents.

Every page of a Document becomes a PDF page of the same size with its items
drawn at their layout coordinates. Cells are wrapped with the same fonts the
layout measured with, so nothing drawn falls outside the computed rows.
"""

import time

import fitz  # PyMuPDF
from django.http import HttpResponse
from django.utils.crypto import get_random_string
from django.utils.http import int_to_base36

from .layout import FONTS, LINE_HEIGHT_FACTOR, wrap_cell

UID_CHARS = 'abcdefghijklmnopqrstuvwxyz0123456789'

TEXT_COLOR = (0.067, 0.094, 0.153)      # #111827
HEADER_FILL = (0.067, 0.094, 0.153)
HEADER_TEXT_COLOR = (1, 1, 1)
RULE_COLOR = (0.898, 0.906, 0.922)      # #e5e7eb


def export_uid():
    """Random part plus millisecond timestamp, both base 36."""
    return f"{get_random_string(8, UID_CHARS)}_{int_to_base36(int(time.time() * 1000))}"


def _write_cells(writer, table, cells, top, bold):
    x = table.x
    line_height = table.font_size * LINE_HEIGHT_FACTOR
    for cell, width in zip(cells, table.column_widths):
        lines = wrap_cell(cell, width, table.font_size, table.cell_padding, bold)
        for index, line in enumerate(lines):
            if not line:
                continue
            baseline = top + table.cell_padding + index * line_height + table.font_size
            writer.append(
                (x + table.cell_padding, baseline), line,
                font=FONTS[bold], fontsize=table.font_size,
            )
        x += width


def _draw_table(sheet, table, body, head):
    right = table.x + table.width

    sheet.draw_rect(
        fitz.Rect(table.x, table.y, right, table.y + table.head_height),
        color=None, fill=HEADER_FILL,
    )
    _write_cells(head, table, table.head, table.y, bold=True)

    top = table.y + table.head_height
    for row, height in zip(table.rows, table.row_heights):
        _write_cells(body, table, row, top, bold=False)
        top += height
        sheet.draw_line((table.x, top), (right, top), color=RULE_COLOR, width=0.5)


def render_document_pdf(document):
    """
    Draw a Document into PDF bytes.

    Text lines are placed with their y on the baseline; tables are placed
    with their y on the top edge of the header row.
    """
    with fitz.open() as pdf:
        for page in document.pages:
            sheet = pdf.new_page(width=document.width, height=document.height)
            body = fitz.TextWriter(sheet.rect, color=TEXT_COLOR)
            head = fitz.TextWriter(sheet.rect, color=HEADER_TEXT_COLOR)

            for item in page.items:
                if item.kind == 'text':
                    if item.text:
                        body.append(
                            (item.x, item.y), item.text,
                            font=FONTS[False], fontsize=item.font_size,
                        )
                else:
                    _draw_table(sheet, item, body, head)

            body.write_text(sheet)
            head.write_text(sheet)

        pdf.set_metadata({'title': document.title, 'producer': 'activity-tracker'})
        return pdf.tobytes(garbage=3, deflate=True)


def document_response(document):
    """
    Serve a Document as a downloadable PDF attachment.

    File name: <prefix>_<uid>.pdf, e.g. export_attivita_tabella_k3x9a0qz_lx2m4p1c.pdf
    """
    response = HttpResponse(
        render_document_pdf(document),
        content_type='application/pdf',
    )
    filename = document.filename(export_uid())
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
