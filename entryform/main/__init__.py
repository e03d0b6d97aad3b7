from flask import Blueprint

bp = Blueprint('main', __name__)

from entryform.main import routes
