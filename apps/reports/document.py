"""
Paginated document description produced by the report renderers.

A Document is a list of pages; each page holds positioned items in points
(origin top-left):
- TextLine: a single line of text
- TableFragment: the part of a table that landed on that page, header
  included

Editorial exports also record one Section per project so that callers and
tests can inspect the grouping without walking the page items.
"""

from dataclasses import dataclass, field

PAGE_SIZES = {
    'portrait': (595.28, 841.89),
    'landscape': (841.89, 595.28),
}


@dataclass
class TextLine:
    text: str
    x: float
    y: float
    font_size: float

    kind = 'text'


@dataclass
class TableFragment:
    head: tuple
    column_widths: tuple
    x: float
    y: float
    head_height: float
    font_size: float
    cell_padding: float
    rows: list = field(default_factory=list)
    row_heights: list = field(default_factory=list)

    kind = 'table'

    @property
    def width(self):
        return sum(self.column_widths)

    @property
    def bottom(self):
        return self.y + self.head_height + sum(self.row_heights)


@dataclass
class Page:
    number: int
    items: list = field(default_factory=list)

    @property
    def tables(self):
        return [item for item in self.items if item.kind == 'table']


@dataclass
class Section:
    project_id: object
    title: str
    subtitle: str
    period: str
    resources: str
    rows: list = field(default_factory=list)


@dataclass
class Document:
    title: str
    orientation: str
    filename_prefix: str
    pages: list = field(default_factory=list)
    sections: list = field(default_factory=list)

    @property
    def width(self):
        return PAGE_SIZES[self.orientation][0]

    @property
    def height(self):
        return PAGE_SIZES[self.orientation][1]

    @property
    def current_page(self):
        if not self.pages:
            return self.add_page()
        return self.pages[-1]

    def add_page(self):
        page = Page(number=len(self.pages) + 1)
        self.pages.append(page)
        return page

    def text(self, text, x, y, font_size):
        line = TextLine(text=text, x=x, y=y, font_size=font_size)
        self.current_page.items.append(line)
        return line

    def table_rows(self):
        """All table body rows in layout order, across pages."""
        return [
            row
            for page in self.pages
            for table in page.tables
            for row in table.rows
        ]

    def filename(self, suffix, extension='pdf'):
        return f"{self.filename_prefix}_{suffix}.{extension}"
