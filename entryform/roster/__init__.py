from flask import Blueprint

bp = Blueprint('roster', __name__)

from entryform.roster import routes
