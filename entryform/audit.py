"""
Audit Logging for Entry Form Submissions

Every side effect of the submission pipeline (roster rows written, document
emailed, a step failing) is recorded in instance/logs/audit.log with a
timestamp, the client address and a short description.

Usage:
    from entryform.audit import audit_log_submission, audit_log_dispatch, audit_log_failure

    audit_log_submission('Звезда', 3, 'Appended roster rows')
    audit_log_dispatch('work@example.com', 'Заявка_Звезда.docx')
    audit_log_failure('dispatch', 'SMTPAuthenticationError: ...')
"""

import json
import logging
import os
from typing import Optional, Dict, Any
from flask import current_app, has_request_context, request


# Configure audit logger
def setup_audit_logger():
    """Setup and configure the audit logger with proper formatting and file handling."""
    audit_logger = logging.getLogger('audit')
    audit_logger.setLevel(logging.INFO)

    # Prevent duplicate log entries
    if audit_logger.handlers:
        return audit_logger

    log_dir = os.path.join(current_app.instance_path, 'logs')
    os.makedirs(log_dir, exist_ok=True)

    log_file = os.path.join(log_dir, 'audit.log')
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(formatter)
    audit_logger.addHandler(file_handler)

    # Prevent propagation to root logger
    audit_logger.propagate = False

    return audit_logger


def get_client_info() -> str:
    """Get the remote address of the current request for audit logging."""
    if has_request_context():
        return request.remote_addr or 'unknown'
    return 'SYSTEM'


def _write(level: int, message: str, additional_data: Optional[Dict[str, Any]] = None):
    if additional_data:
        message = f"{message} | Data: {json.dumps(additional_data, ensure_ascii=False, default=str)}"
    try:
        setup_audit_logger().log(level, message)
    except Exception as e:
        # Audit logging should never break a submission
        current_app.logger.error(f"AUDIT_FAILURE | {message} | {str(e)}")


def audit_log_submission(club: str, rows: int, description: str,
                         additional_data: Optional[Dict[str, Any]] = None):
    """
    Log roster rows written for a submission.

    Args:
        club: Club name from the submission
        rows: Number of rows appended to the roster log
        description: Human-readable description of the operation
        additional_data: Optional additional data to include in the log
    """
    _write(logging.INFO,
           f"SUBMISSION | Club: {club or '-'} | Rows: {rows} | Client: {get_client_info()} | {description}",
           additional_data)


def audit_log_dispatch(recipient: str, filename: str,
                       additional_data: Optional[Dict[str, Any]] = None):
    """Log a rendered document handed to the mail transport."""
    _write(logging.INFO,
           f"DISPATCH | To: {recipient} | Attachment: {filename} | Client: {get_client_info()}",
           additional_data)


def audit_log_failure(stage: str, description: str,
                      additional_data: Optional[Dict[str, Any]] = None):
    """
    Log a failed pipeline step.

    Args:
        stage: Pipeline stage that failed ('log', 'render', 'dispatch')
        description: Error description (never shown to the client)
        additional_data: Optional additional data to include in the log
    """
    _write(logging.ERROR, f"FAILURE | Stage: {stage} | Client: {get_client_info()} | {description}",
           additional_data)


def audit_log_file_operation(operation: str, filename: str, description: str,
                             additional_data: Optional[Dict[str, Any]] = None):
    """
    Log file operations (roster creation, downloads).

    Args:
        operation: Type of file operation ('CREATE', 'DOWNLOAD')
        filename: Name of the file involved
        description: Human-readable description of the operation
        additional_data: Optional additional data to include in the log
    """
    _write(logging.INFO,
           f"FILE | {operation} | File: {filename} | Client: {get_client_info()} | {description}",
           additional_data)


def audit_log_security_event(event_type: str, description: str,
                             additional_data: Optional[Dict[str, Any]] = None):
    """
    Log security-related events.

    Args:
        event_type: Type of security event ('RATE_LIMITED', 'PAYLOAD_TOO_LARGE')
        description: Human-readable description of the event
        additional_data: Optional additional data to include in the log
    """
    _write(logging.WARNING, f"SECURITY | {event_type} | Client: {get_client_info()} | {description}",
           additional_data)


def audit_log_system_event(event_type: str, description: str,
                           additional_data: Optional[Dict[str, Any]] = None):
    """
    Log system-level events.

    Args:
        event_type: Type of system event ('STARTUP', 'SHUTDOWN')
        description: Human-readable description of the event
        additional_data: Optional additional data to include in the log
    """
    _write(logging.INFO, f"SYSTEM | {event_type} | {description}",
           additional_data)
