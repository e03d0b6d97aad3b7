# Main public routes for the entry form application
from flask import render_template, jsonify

from entryform.main import bp
from entryform.utils import today_for_form


@bp.route('/')
@bp.route('/index')
def index():
    """
    Entry form page
    """
    return render_template('main/index.html', form_date=today_for_form())


@bp.route('/health')
def health():
    return jsonify({'ok': True})
