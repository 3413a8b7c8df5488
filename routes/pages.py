"""
Page routes: the built single-page UI and its client-side routing fallback.
"""

import os

from flask import Blueprint, abort, current_app, send_from_directory

pages_bp = Blueprint('pages', __name__)

RESERVED_PREFIXES = ('api', 'media')


def _send_ui_file(filename):
    ui_dir = current_app.config['UI_DIR']
    if not os.path.isfile(os.path.join(ui_dir, 'index.html')):
        abort(404)
    if filename and os.path.isfile(os.path.join(ui_dir, filename)):
        return send_from_directory(ui_dir, filename)
    return send_from_directory(ui_dir, 'index.html')


@pages_bp.route('/')
def index():
    return _send_ui_file('index.html')


@pages_bp.route('/<path:path>')
def spa_fallback(path):
    if path.split('/', 1)[0] in RESERVED_PREFIXES:
        abort(404)
    return _send_ui_file(path)
