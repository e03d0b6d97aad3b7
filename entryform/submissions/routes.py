# Submission routes for the entry form application
import io

from flask import jsonify, request, current_app, send_file

from entryform import limiter
from entryform.documents import DOCX_MIMETYPE
from entryform.notifications import attachment_filename
from entryform.pipeline import SubmissionError, process_submission, render_only
from entryform.submissions import bp

SUBMIT_FAILED_MESSAGE = 'Не удалось сохранить и/или отправить письмо'


def _submit_rate_limit():
    return current_app.config['SUBMIT_RATE_LIMIT']


@bp.route('/submit', methods=['POST'])
@limiter.limit(_submit_rate_limit)
def submit():
    """
    Store the entry in the roster log, render the document and email it.
    """
    payload = request.get_json(silent=True)
    try:
        submission = process_submission(
            payload,
            current_app.extensions['roster_log'],
            current_app.extensions['submission_mailer']
        )
        current_app.logger.info(
            f"Submission from club '{submission.club}' with "
            f"{submission.participant_count} participant(s) processed")
        return jsonify({'ok': True})

    except SubmissionError as e:
        current_app.logger.error(f"Error in submit ({e.stage}): {str(e.original)}")
        return jsonify({
            'ok': False,
            'error': SUBMIT_FAILED_MESSAGE,
            'stage': e.stage
        }), 500


@bp.route('/download-docx', methods=['POST'])
def download_docx():
    """
    Render the posted form to .docx and return it directly (no log, no email).
    """
    payload = request.get_json(silent=True)
    try:
        submission, document = render_only(payload)
        return send_file(
            io.BytesIO(document),
            mimetype=DOCX_MIMETYPE,
            as_attachment=True,
            download_name=attachment_filename(submission)
        )
    except SubmissionError as e:
        current_app.logger.error(f"Error in download_docx: {str(e.original)}")
        return jsonify({'ok': False, 'error': 'Failed to generate DOCX'}), 500
