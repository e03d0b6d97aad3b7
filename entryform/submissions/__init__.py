"""
Submissions blueprint.

Receives posted entry forms:
- /submit runs the full pipeline (roster log, document, email)
- /download-docx renders the document only
"""

from flask import Blueprint

bp = Blueprint('submissions', __name__)

from entryform.submissions import routes
