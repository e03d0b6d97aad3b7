"""
Submission pipeline: normalize -> roster log -> document -> email.

The roster log and the mailer are passed in by the caller (the routes take
them from ``app.extensions``), so tests can hand in fakes.
"""

from entryform.audit import audit_log_dispatch, audit_log_failure, audit_log_submission
from entryform.documents import render_submission
from entryform.notifications import attachment_filename
from entryform.utils import normalize_submission

STAGE_LOG = 'log'
STAGE_RENDER = 'render'
STAGE_DISPATCH = 'dispatch'


class SubmissionError(Exception):
    """A pipeline step failed. ``stage`` names the step, ``original`` the cause."""

    def __init__(self, stage, original):
        super().__init__(f'{stage} failed: {original}')
        self.stage = stage
        self.original = original


def _run_stage(stage, func, *args):
    try:
        return func(*args)
    except Exception as e:
        audit_log_failure(stage, f'{type(e).__name__}: {e}')
        raise SubmissionError(stage, e) from e


def process_submission(payload, roster_log, mailer):
    """
    Run the full pipeline for one posted form.

    Steps run in a fixed order and the first failure stops the pipeline. Rows
    already written to the roster log stay there if a later step fails.

    Args:
        payload: Raw JSON body of the request.
        roster_log: RosterLog the rows are appended to.
        mailer: SubmissionMailer used for delivery.

    Returns:
        Submission: The normalized submission.

    Raises:
        SubmissionError: If writing, rendering or sending fails.
    """
    submission = normalize_submission(payload)

    rows = _run_stage(STAGE_LOG, roster_log.append, submission)
    audit_log_submission(submission.club, rows, f'Appended {rows} roster row(s)', submission.to_dict())

    document = _run_stage(STAGE_RENDER, render_submission, submission)

    _run_stage(STAGE_DISPATCH, mailer.send, submission, document)
    audit_log_dispatch(mailer.recipient, attachment_filename(submission))

    return submission


def render_only(payload):
    """Normalize and render without touching the roster log or the mailer."""
    submission = normalize_submission(payload)
    document = _run_stage(STAGE_RENDER, render_submission, submission)
    return submission, document
