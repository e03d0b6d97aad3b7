"""
Roster log stored as a single .xlsx workbook.

Every submission ever received is appended here: one row per participant, or
one row with blank participant cells when the roster is empty.

The workbook is rewritten in full on every append. Appends inside one process
are serialized with a lock; appends from several processes sharing the same
file can still lose rows.
"""

# Standard library imports
import io
import os
import threading
from datetime import datetime
from typing import Any, Dict, List

# Third-party imports
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

SHEET_TITLE = 'Submissions'
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'

# (key, header, column width)
COLUMNS = (
    ('ts', 'Timestamp', 20),
    ('date', 'Date (on form)', 16),
    ('city', 'City', 16),
    ('club', 'Club/School', 32),
    ('contacts', 'Contacts', 32),
    ('coach', 'Coach (FIO)', 28),
    ('judge', 'Judge (FIO)', 28),
    ('judgeCategory', 'Judge Category', 18),
    ('p_idx', 'Participant #', 12),
    ('p_name', 'Participant Name', 28),
    ('p_birth', 'Birth Year', 12),
    ('p_has', 'Has Rank', 14),
    ('p_perf', 'Performing Rank', 16),
    ('p_med', 'Medical Visa', 16),
)
COLUMN_KEYS = tuple(key for key, _, _ in COLUMNS)
HEADERS = tuple(header for _, header, _ in COLUMNS)


class RosterLog:
    """Handle on the roster workbook at ``path``."""

    def __init__(self, path: str):
        self.path = os.path.abspath(path)
        self._lock = threading.RLock()

    def __repr__(self):
        return f'<RosterLog {self.path}>'

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def ensure_log(self) -> None:
        """Create the workbook with its header row if it does not exist yet."""
        with self._lock:
            if self.exists():
                return

            wb = Workbook()
            ws = wb.active
            ws.title = SHEET_TITLE
            ws.append(HEADERS)
            for cell in ws[1]:
                cell.font = Font(bold=True)
            for column_index, (_, _, width) in enumerate(COLUMNS, start=1):
                ws.column_dimensions[ws.cell(row=1, column=column_index).column_letter].width = width
            self._save(wb)

    def append(self, submission, now: datetime = None) -> int:
        """
        Append the submission's rows and rewrite the workbook.

        Args:
            submission: Normalized Submission.
            now: Optional clock value used for the row timestamp.

        Returns:
            int: Number of rows written.
        """
        with self._lock:
            self.ensure_log()
            wb = load_workbook(self.path)
            ws = wb[SHEET_TITLE] if SHEET_TITLE in wb.sheetnames else wb.create_sheet(SHEET_TITLE)

            timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
            rows = build_rows(submission, timestamp)
            for row in rows:
                ws.append([row.get(key) for key in COLUMN_KEYS])

            self._save(wb)
            return len(rows)

    def read_rows(self) -> List[Dict[str, Any]]:
        """Return the data rows keyed by column key (header row excluded)."""
        if not self.exists():
            return []

        ws = load_workbook(self.path)[SHEET_TITLE]
        return [
            dict(zip(COLUMN_KEYS, values))
            for values in ws.iter_rows(min_row=2, max_col=len(COLUMNS), values_only=True)
        ]

    def _save(self, wb) -> None:
        # Serialize fully before touching the file so a failure keeps the old log
        buffer = io.BytesIO()
        wb.save(buffer)

        directory = os.path.dirname(self.path)
        os.makedirs(directory, exist_ok=True)
        tmp_path = f'{self.path}.{os.getpid()}.tmp'
        try:
            with open(tmp_path, 'wb') as f:
                f.write(buffer.getvalue())
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


def build_rows(submission, timestamp: str) -> List[Dict[str, Any]]:
    """
    Map a submission to roster rows.

    Submission-level fields are repeated on every row; an empty roster still
    yields a single row with blank participant cells.
    """
    base = {
        'ts': timestamp,
        'date': submission.date,
        'city': submission.city,
        'club': submission.club,
        'contacts': submission.contacts,
        'coach': submission.coach,
        'judge': submission.judge,
        'judgeCategory': submission.judge_category,
    }
    if not submission.participants:
        return [dict(base)]

    return [
        dict(
            base,
            p_idx=p.idx,
            p_name=p.name,
            p_birth=p.birth_year,
            p_has=p.has_rank,
            p_perf=p.performing_rank,
            p_med=p.medical_visa,
        )
        for p in submission.participants
    ]
