from flask import current_app, jsonify

from entryform.audit import audit_log_security_event


def register_error_handlers(app):
    """Register error handlers with the Flask application"""

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'ok': False, 'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({'ok': False, 'error': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def payload_too_large_error(error):
        audit_log_security_event('PAYLOAD_TOO_LARGE', 'Request body exceeded MAX_CONTENT_LENGTH')
        return jsonify({'ok': False, 'error': 'Payload too large'}), 413

    @app.errorhandler(429)
    def rate_limited_error(error):
        audit_log_security_event('RATE_LIMITED', f'Rate limit exceeded: {error.description}')
        return jsonify({'ok': False, 'error': 'Too many requests'}), 429

    @app.errorhandler(500)
    def internal_error(error):
        current_app.logger.error(f"Unhandled error: {error}")
        return jsonify({'ok': False, 'error': 'Internal server error'}), 500
