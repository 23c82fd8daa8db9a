"""
Table layout for report documents.

Cell text is wrapped with the Helvetica metrics the PDF backend draws with,
so the computed row heights are the heights that end up on paper. A row
that does not fit above the bottom margin moves to a new page, where the
header is repeated; a row taller than a whole page is split line by line
across pages.
"""

import math

import fitz  # PyMuPDF

from .document import TableFragment

MARGIN = 40
FONT_SIZE = 9
CELL_PADDING = 6
LINE_HEIGHT_FACTOR = 1.15

FONTS = {
    False: fitz.Font('helv'),
    True: fitz.Font('hebo'),
}


def text_width(text, font_size=FONT_SIZE, bold=False):
    """Width of text in points."""
    return FONTS[bold].text_length(text, fontsize=font_size)


def _split_word(word, available, font_size, bold):
    """Cut a word wider than the column into pieces that fit."""
    pieces = []
    while len(word) > 1 and text_width(word, font_size, bold) > available:
        cut = len(word) - 1
        while cut > 1 and text_width(word[:cut], font_size, bold) > available:
            cut -= 1
        pieces.append(word[:cut])
        word = word[cut:]
    pieces.append(word)
    return pieces


def wrap_cell(text, width, font_size=FONT_SIZE, cell_padding=CELL_PADDING, bold=False):
    """Split cell text into the lines it occupies inside a column."""
    available = width - 2 * cell_padding
    lines = []
    for paragraph in str(text).split('\n'):
        line = ''
        for word in paragraph.split():
            candidate = f"{line} {word}" if line else word
            if text_width(candidate, font_size, bold) <= available:
                line = candidate
                continue
            if line:
                lines.append(line)
            *full, line = _split_word(word, available, font_size, bold)
            lines.extend(full)
        lines.append(line)
    return lines


class TableLayout:
    """
    Column setup for one kind of table.

    Usage:
        layout = TableLayout(head=('A', 'B'), column_widths=(100, 200))
        final_y = layout.place(document, rows, start_y=60)
    """

    def __init__(self, head, column_widths, font_size=FONT_SIZE,
                 cell_padding=CELL_PADDING, x=MARGIN):
        if len(head) != len(column_widths):
            raise ValueError("Table head and column widths differ in length")
        self.head = tuple(head)
        self.column_widths = tuple(column_widths)
        self.font_size = font_size
        self.cell_padding = cell_padding
        self.x = x

    @property
    def line_height(self):
        return self.font_size * LINE_HEIGHT_FACTOR

    def wrap_row(self, row, bold=False):
        return [
            wrap_cell(cell, width, self.font_size, self.cell_padding, bold)
            for cell, width in zip(row, self.column_widths)
        ]

    def block_height(self, line_count):
        return line_count * self.line_height + 2 * self.cell_padding

    def row_height(self, row, bold=False):
        return self.block_height(max(len(lines) for lines in self.wrap_row(row, bold)))

    @property
    def head_height(self):
        return self.row_height(self.head, bold=True)

    def _open_fragment(self, document, y):
        fragment = TableFragment(
            head=self.head,
            column_widths=self.column_widths,
            x=self.x,
            y=y,
            head_height=self.head_height,
            font_size=self.font_size,
            cell_padding=self.cell_padding,
        )
        document.current_page.items.append(fragment)
        return fragment

    def place(self, document, rows, start_y):
        """
        Lay rows out from start_y on the document's current page.

        Returns:
            y just below the table's final row
        """
        bottom = document.height - MARGIN
        head_height = self.head_height
        fragment = None
        y = start_y

        for row in rows:
            row = tuple(row)
            pending = self.wrap_row(row)
            split = False

            while pending:
                line_count = max(len(lines) for lines in pending)
                room = bottom - y - (head_height if fragment is None else 0)

                if self.block_height(line_count) <= room:
                    part = tuple('\n'.join(lines) for lines in pending) if split else row
                    pending = None
                else:
                    fresh_room = bottom - MARGIN - head_height
                    fitting = math.floor((room - 2 * self.cell_padding) / self.line_height)
                    if self.block_height(line_count) <= fresh_room or fitting < 1:
                        document.add_page()
                        y = MARGIN
                        fragment = None
                        continue
                    # Taller than a page: keep what fits, carry the rest over
                    line_count = fitting
                    part = tuple('\n'.join(lines[:fitting]) for lines in pending)
                    pending = [lines[fitting:] for lines in pending]
                    split = True

                if fragment is None:
                    fragment = self._open_fragment(document, y)
                    y += head_height
                height = self.block_height(line_count)
                fragment.rows.append(part)
                fragment.row_heights.append(height)
                y += height

                if pending is not None:
                    document.add_page()
                    y = MARGIN
                    fragment = None

        if fragment is None:
            self._open_fragment(document, y)
            y += head_height

        return y
