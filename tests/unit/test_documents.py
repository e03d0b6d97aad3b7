"""
Unit tests for the entry form document (layout tree and .docx rendering).
"""
import io
import pytest
from datetime import datetime

from docx import Document
from docx.shared import Pt, Twips

from entryform.documents import build_document, render_docx, render_submission
from entryform.documents.layout import (
    BLANK_ROSTER_ROWS, CAPTION, FONT_NAME, HEADER_SHADING, HEADER_SIZE, PARTICIPANT_COLUMNS, Paragraph, Table
)
from entryform.utils import normalize_submission


def _open(document_bytes):
    return Document(io.BytesIO(document_bytes))


def _all_runs(doc):
    for paragraph in doc.paragraphs:
        yield from paragraph.runs
    for table in doc.tables:
        for row in table.rows:
            for cell in row.cells:
                for paragraph in cell.paragraphs:
                    yield from paragraph.runs


@pytest.mark.unit
class TestDocumentLayout:
    """Test cases for the declarative document tree."""

    def test_header_lines(self, full_payload):
        tree = build_document(normalize_submission(full_payload))
        texts = [p.text for p in tree.paragraphs]

        assert texts[0] == 'ЗАЯВКА'
        assert texts[1] == 'на участие в открытом турнире по художественной гимнастике'
        assert texts[2] == '«Акварель Dance»'
        assert texts[3] == 'г. Мытищи, 12.10.2025'

        title_run = tree.paragraphs[0].runs[0]
        assert title_run.bold and title_run.size == 14
        assert all(run.italic and run.bold for run in tree.paragraphs[2].runs)
        assert all(p.align == 'center' for p in tree.paragraphs[:4])

    def test_block_order(self, star_payload):
        tree = build_document(normalize_submission(star_payload))
        kinds = [type(block).__name__ for block in tree.blocks]

        assert kinds == ['Paragraph'] * 5 + ['Table', 'Paragraph', 'Paragraph', 'Table']
        assert [b.name for b in tree.blocks if isinstance(b, Table)] == ['info', 'participants']

    def test_caption_precedes_participant_table(self, star_payload):
        blocks = build_document(normalize_submission(star_payload)).blocks
        caption = blocks[-2]

        assert isinstance(caption, Paragraph)
        assert caption.text == 'Индивидуальные упражнения' == CAPTION
        assert caption.runs[0].size == HEADER_SIZE == 14
        assert caption.runs[0].italic and not caption.runs[0].bold
        assert (caption.space_before, caption.space_after) == (200, 120)
        assert isinstance(blocks[-1], Table) and blocks[-1].name == 'participants'

    def test_number_header_is_two_lines(self, star_payload):
        table = build_document(normalize_submission(star_payload)).table('participants')

        assert table.rows[0].cells[0].text == '№\nп/п'

    def test_info_table(self, full_payload):
        info = build_document(normalize_submission(full_payload)).table('info')

        assert info.column_widths == (5500, 5500)
        assert [row.texts for row in info.rows] == [
            ('Название клуба/спортивной школы', 'СШ «Грация»'),
            ('Город', 'Королёв'),
            ('Контакты (телефон, электронная почта)', '+7 900 000-00-00, grace@example.com'),
            ('Тренер (Ф.И.О)', 'Смирнова О.П.'),
            ('Судья (Ф.И.О), судейская категория', 'Кузнецова Е.В., 1 категория'),
        ]

    def test_participant_rows_follow_roster(self, full_payload):
        table = build_document(normalize_submission(full_payload)).table('participants')

        header = table.rows[0]
        assert header.header
        assert [cell.text for cell in header.cells] == [title for title, _ in PARTICIPANT_COLUMNS]
        assert all(cell.bold and cell.shading == HEADER_SHADING and cell.align == 'center'
                   for cell in header.cells)

        assert len(table.body_rows) == 3
        assert table.body_rows[0].texts == ('1', 'Орлова М.', '2013', '2 юн.', '1 юн.', 'Есть')
        assert [row.texts[0] for row in table.body_rows] == ['1', '2', '3']

    def test_empty_roster_prints_blank_canvas(self):
        table = build_document(normalize_submission({'participants': []})).table('participants')

        assert len(table.body_rows) == BLANK_ROSTER_ROWS == 8
        assert [row.texts[0] for row in table.body_rows] == [str(n) for n in range(1, 9)]
        assert all(row.texts[1:] == ('',) * 5 for row in table.body_rows)

    def test_missing_participant_fields_are_blank(self):
        table = build_document(normalize_submission({'participants': [{'name': 'Петрова А.'}]})).table('participants')

        assert table.body_rows[0].texts == ('1', 'Петрова А.', '', '', '', '')

    def test_missing_date_shows_today(self):
        tree = build_document(normalize_submission({}))

        assert tree.paragraphs[3].text == f"г. Мытищи, {datetime.now().strftime('%d.%m.%Y')}"

    def test_same_input_same_tree(self, full_payload):
        submission = normalize_submission(full_payload)

        assert build_document(submission) == build_document(submission)

    def test_unknown_table_name(self, star_payload):
        with pytest.raises(KeyError):
            build_document(normalize_submission(star_payload)).table('totals')


@pytest.mark.unit
class TestDocxRendering:
    """Test cases for the python-docx output."""

    def test_star_scenario_has_one_data_row(self, star_payload):
        doc = _open(render_submission(normalize_submission(star_payload)))

        assert len(doc.tables) == 2
        participants = doc.tables[1]
        assert len(participants.rows) == 2
        assert [cell.text for cell in participants.rows[1].cells][:3] == ['1', 'Петрова А.', '2012']
        assert doc.tables[0].rows[0].cells[1].text == 'Звезда'

    def test_empty_roster_renders_eight_rows(self):
        doc = _open(render_submission(normalize_submission({})))

        participants = doc.tables[1]
        assert len(participants.rows) == 1 + 8
        assert [row.cells[0].text for row in participants.rows[1:]] == [str(n) for n in range(1, 9)]

    def test_page_setup_is_a4_portrait(self, star_payload):
        section = _open(render_submission(normalize_submission(star_payload))).sections[0]

        assert section.page_width == Twips(11906)
        assert section.page_height == Twips(16838)
        assert section.left_margin == section.top_margin == Twips(1134)
        assert section.page_width < section.page_height

    def test_single_serif_typeface(self, full_payload):
        doc = _open(render_submission(normalize_submission(full_payload)))

        assert {run.font.name for run in _all_runs(doc)} == {FONT_NAME}

    def test_visible_text_is_deterministic(self, full_payload):
        submission = normalize_submission(full_payload)
        first = _open(render_submission(submission))
        second = _open(render_submission(submission))

        def visible(doc):
            return ([p.text for p in doc.paragraphs],
                    [[cell.text for cell in row.cells] for table in doc.tables for row in table.rows])

        assert visible(first) == visible(second)

    def test_caption_is_rendered_at_header_size(self, star_payload):
        doc = _open(render_submission(normalize_submission(star_payload)))

        captions = [p for p in doc.paragraphs if p.text == 'Индивидуальные упражнения']
        assert len(captions) == 1
        run = captions[0].runs[0]
        assert run.font.size == Pt(14)
        assert run.font.italic
        assert run.font.name == FONT_NAME

    def test_number_header_keeps_line_break(self, star_payload):
        doc = _open(render_submission(normalize_submission(star_payload)))

        header_cell = doc.tables[1].rows[0].cells[0]
        assert header_cell.text == '№\nп/п'
        assert '<w:br/>' in header_cell._tc.xml

    def test_header_row_is_shaded(self, star_payload):
        doc = _open(render_submission(normalize_submission(star_payload)))

        header_cell = doc.tables[1].rows[0].cells[0]
        assert HEADER_SHADING in header_cell._tc.xml
        assert header_cell.paragraphs[0].runs[0].bold

    def test_render_docx_accepts_any_tree(self):
        from entryform.documents.layout import DocumentTree, Page, Run

        tree = DocumentTree(page=Page(), blocks=(Paragraph(runs=(Run('Проверка'),)),))
        doc = _open(render_docx(tree))

        assert [p.text for p in doc.paragraphs if p.text] == ['Проверка']
