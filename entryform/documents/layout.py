"""
Declarative layout of the printed entry form.

``build_document`` maps a Submission to a tree of page, paragraph and table
nodes. It does not touch any document library, so what the form contains can
be tested without opening a .docx file. ``entryform.documents.render`` turns
the tree into bytes.

Sizes are in points, widths and margins in twips (1/1440 inch).
"""

# Standard library imports
from dataclasses import dataclass, field
from typing import Tuple, Union

FONT_NAME = 'Times New Roman'
BODY_SIZE = 12
HEADER_SIZE = 14
TITLE_SIZE = 14

# A4 portrait with ~2 cm margins
A4_WIDTH = 11906
A4_HEIGHT = 16838
PAGE_MARGIN = 1134

HEADER_SHADING = 'D9D9D9'
CELL_MARGIN = 120

# Minimum canvas printed when the roster is empty, for filling in by hand
BLANK_ROSTER_ROWS = 8

ALIGN_LEFT = 'left'
ALIGN_CENTER = 'center'

TITLE = 'ЗАЯВКА'
SUBTITLE = 'на участие в открытом турнире по художественной гимнастике'
EVENT_NAME_RUNS = ('«Акварель ', 'Dance»')
LOCATION = 'г. Мытищи'
CAPTION = 'Индивидуальные упражнения'

INFO_COLUMN_WIDTHS = (5500, 5500)
PARTICIPANT_COLUMNS = (
    ('№\nп/п', 900),
    ('ФИО гимнастки', 3500),
    ('Год рождения', 1400),
    ('Имеет разряд', 1700),
    ('Выступает разряд', 1900),
    ('Виза врача', 1500),
)


@dataclass(frozen=True)
class Run:
    text: str
    size: int = BODY_SIZE
    bold: bool = False
    italic: bool = False
    font: str = FONT_NAME


@dataclass(frozen=True)
class Paragraph:
    runs: Tuple[Run, ...] = ()
    align: str = ALIGN_LEFT
    space_before: int = 0
    space_after: int = 0

    @property
    def text(self) -> str:
        return ''.join(run.text for run in self.runs)


@dataclass(frozen=True)
class Cell:
    text: str
    width: int
    bold: bool = False
    align: str = ALIGN_LEFT
    shading: str = None


@dataclass(frozen=True)
class Row:
    cells: Tuple[Cell, ...]
    header: bool = False

    @property
    def texts(self) -> Tuple[str, ...]:
        return tuple(cell.text for cell in self.cells)


@dataclass(frozen=True)
class Table:
    name: str
    column_widths: Tuple[int, ...]
    rows: Tuple[Row, ...]

    @property
    def body_rows(self) -> Tuple[Row, ...]:
        return tuple(row for row in self.rows if not row.header)


@dataclass(frozen=True)
class Page:
    width: int = A4_WIDTH
    height: int = A4_HEIGHT
    margin: int = PAGE_MARGIN


Block = Union[Paragraph, Table]


@dataclass(frozen=True)
class DocumentTree:
    page: Page
    blocks: Tuple[Block, ...] = field(default_factory=tuple)

    def table(self, name: str) -> Table:
        for block in self.blocks:
            if isinstance(block, Table) and block.name == name:
                return block
        raise KeyError(name)

    @property
    def paragraphs(self) -> Tuple[Paragraph, ...]:
        return tuple(block for block in self.blocks if isinstance(block, Paragraph))


def _centered(*runs: Run) -> Paragraph:
    return Paragraph(runs=runs, align=ALIGN_CENTER)


def _spacer(after: int) -> Paragraph:
    return Paragraph(runs=(Run(' '),), space_after=after)


def build_header(submission) -> Tuple[Paragraph, ...]:
    """Letterhead: title, subtitle, event name and the location/date line."""
    return (
        _centered(Run(TITLE, size=TITLE_SIZE, bold=True)),
        _centered(Run(SUBTITLE)),
        _centered(*(Run(text, bold=True, italic=True) for text in EVENT_NAME_RUNS)),
        _centered(Run(f'{LOCATION}, {submission.date}')),
    )


def build_info_table(submission) -> Table:
    """Two-column club/coach/judge table."""
    label_width, value_width = INFO_COLUMN_WIDTHS
    attributes = (
        ('Название клуба/спортивной школы', submission.club),
        ('Город', submission.city),
        ('Контакты (телефон, электронная почта)', submission.contacts),
        ('Тренер (Ф.И.О)', submission.coach),
        ('Судья (Ф.И.О), судейская категория', submission.judge_line),
    )
    rows = tuple(
        Row(cells=(Cell(label, label_width), Cell(value or '', value_width)))
        for label, value in attributes
    )
    return Table(name='info', column_widths=INFO_COLUMN_WIDTHS, rows=rows)


def build_caption() -> Paragraph:
    """Italic section caption printed above the roster table."""
    return Paragraph(
        runs=(Run(CAPTION, size=HEADER_SIZE, italic=True),),
        space_before=200,
        space_after=120,
    )


def build_participant_table(submission) -> Table:
    """
    Six-column roster table.

    An empty roster is printed as ``BLANK_ROSTER_ROWS`` numbered empty rows.
    """
    widths = tuple(width for _, width in PARTICIPANT_COLUMNS)
    header = Row(
        cells=tuple(
            Cell(title, width, bold=True, align=ALIGN_CENTER, shading=HEADER_SHADING)
            for title, width in PARTICIPANT_COLUMNS
        ),
        header=True,
    )

    if submission.participants:
        values = [
            (str(p.idx), p.name, p.birth_year, p.has_rank, p.performing_rank, p.medical_visa)
            for p in submission.participants
        ]
    else:
        values = [(str(n), '', '', '', '', '') for n in range(1, BLANK_ROSTER_ROWS + 1)]

    body = tuple(
        Row(cells=tuple(Cell(text or '', width) for text, width in zip(row, widths)))
        for row in values
    )
    return Table(name='participants', column_widths=widths, rows=(header,) + body)


def build_document(submission) -> DocumentTree:
    """
    Build the full document tree for a submission.

    Args:
        submission: Normalized Submission.

    Returns:
        DocumentTree: Page setup plus ordered paragraph/table blocks.
    """
    blocks = (
        *build_header(submission),
        _spacer(after=200),
        build_info_table(submission),
        _spacer(after=160),
        build_caption(),
        build_participant_table(submission),
    )
    return DocumentTree(page=Page(), blocks=blocks)
