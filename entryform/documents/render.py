"""
python-docx rendering of a DocumentTree.
"""

# Standard library imports
import io

# Third-party imports
from docx import Document
from docx.enum.section import WD_ORIENT
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, Twips

# Local application imports
from entryform.documents.layout import (
    ALIGN_CENTER, BODY_SIZE, CELL_MARGIN, FONT_NAME, Paragraph, Table, build_document
)

DOCX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'

ALIGNMENTS = {
    ALIGN_CENTER: WD_ALIGN_PARAGRAPH.CENTER,
}


def _set_font(run_or_style, name, size=None, bold=None, italic=None):
    font = run_or_style.font
    font.name = name
    if size is not None:
        font.size = Pt(size)
    if bold is not None:
        font.bold = bold
    if italic is not None:
        font.italic = italic
    # font.name only covers latin text; force the same face for every script
    r_fonts = run_or_style.element.get_or_add_rPr().get_or_add_rFonts()
    r_fonts.set(qn('w:eastAsia'), name)
    r_fonts.set(qn('w:cs'), name)


def _add_runs(paragraph, runs):
    for node in runs:
        run = paragraph.add_run(node.text)
        _set_font(run, node.font, node.size, node.bold, node.italic)


def _cell_borders(tc_pr):
    borders = OxmlElement('w:tcBorders')
    for edge in ('top', 'left', 'bottom', 'right'):
        border = OxmlElement(f'w:{edge}')
        border.set(qn('w:val'), 'single')
        border.set(qn('w:sz'), '4')
        border.set(qn('w:space'), '0')
        border.set(qn('w:color'), '000000')
        borders.append(border)
    tc_pr.append(borders)


def _cell_shading(tc_pr, fill):
    shd = OxmlElement('w:shd')
    shd.set(qn('w:val'), 'clear')
    shd.set(qn('w:color'), 'auto')
    shd.set(qn('w:fill'), fill)
    tc_pr.append(shd)


def _cell_margins(tc_pr, margin):
    tc_mar = OxmlElement('w:tcMar')
    for edge in ('top', 'left', 'bottom', 'right'):
        node = OxmlElement(f'w:{edge}')
        node.set(qn('w:w'), str(margin))
        node.set(qn('w:type'), 'dxa')
        tc_mar.append(node)
    tc_pr.append(tc_mar)


def _render_paragraph(doc, node: Paragraph):
    paragraph = doc.add_paragraph()
    paragraph.alignment = ALIGNMENTS.get(node.align, WD_ALIGN_PARAGRAPH.LEFT)
    if node.space_before:
        paragraph.paragraph_format.space_before = Twips(node.space_before)
    if node.space_after:
        paragraph.paragraph_format.space_after = Twips(node.space_after)
    _add_runs(paragraph, node.runs)


def _render_table(doc, node: Table):
    table = doc.add_table(rows=0, cols=len(node.column_widths))
    table.autofit = False  # fixed layout
    for column, width in zip(table.columns, node.column_widths):
        column.width = Twips(width)

    for row_node in node.rows:
        cells = table.add_row().cells
        for cell, cell_node in zip(cells, row_node.cells):
            # tcW first: tcPr children must stay in schema order
            cell.width = Twips(cell_node.width)
            tc_pr = cell._tc.get_or_add_tcPr()
            _cell_borders(tc_pr)
            if cell_node.shading:
                _cell_shading(tc_pr, cell_node.shading)
            _cell_margins(tc_pr, CELL_MARGIN)

            paragraph = cell.paragraphs[0]
            paragraph.alignment = ALIGNMENTS.get(cell_node.align, WD_ALIGN_PARAGRAPH.LEFT)
            run = paragraph.add_run(cell_node.text)
            _set_font(run, FONT_NAME, BODY_SIZE, bold=cell_node.bold)


def render_docx(tree) -> bytes:
    """
    Render a DocumentTree to .docx bytes.

    Args:
        tree: DocumentTree produced by ``build_document``.

    Returns:
        bytes: The serialized .docx package.
    """
    doc = Document()

    section = doc.sections[0]
    section.orientation = WD_ORIENT.PORTRAIT
    section.page_width = Twips(tree.page.width)
    section.page_height = Twips(tree.page.height)
    section.top_margin = section.bottom_margin = Twips(tree.page.margin)
    section.left_margin = section.right_margin = Twips(tree.page.margin)

    _set_font(doc.styles['Normal'], FONT_NAME, BODY_SIZE)

    for block in tree.blocks:
        if isinstance(block, Table):
            _render_table(doc, block)
        else:
            _render_paragraph(doc, block)

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def render_submission(submission) -> bytes:
    """Build and render the entry form document for a submission."""
    return render_docx(build_document(submission))
