# Roster log routes for the entry form application
import os

from flask import jsonify, current_app, send_file

from entryform.audit import audit_log_file_operation
from entryform.roster import bp

SPREADSHEET_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


@bp.route('/download-excel')
def download_excel():
    """
    Download the consolidated roster log, creating an empty one if needed.
    """
    roster_log = current_app.extensions['roster_log']
    try:
        if not roster_log.exists():
            roster_log.ensure_log()
            audit_log_file_operation('CREATE', os.path.basename(roster_log.path), 'Created empty roster log')

        audit_log_file_operation('DOWNLOAD', os.path.basename(roster_log.path), 'Roster log downloaded')
        return send_file(
            roster_log.path,
            mimetype=SPREADSHEET_MIMETYPE,
            as_attachment=True,
            download_name='submissions.xlsx',
            max_age=0
        )
    except Exception as e:
        current_app.logger.error(f"Error in download_excel: {str(e)}")
        return jsonify({'ok': False, 'error': 'Failed to download Excel'}), 500
