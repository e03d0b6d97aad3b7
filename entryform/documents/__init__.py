"""
Entry form document rendering.

``build_document`` describes the printed form as a tree; ``render_docx``
writes that tree out with python-docx.
"""

from entryform.documents.layout import build_document, DocumentTree
from entryform.documents.render import render_docx, render_submission, DOCX_MIMETYPE
