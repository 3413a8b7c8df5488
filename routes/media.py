"""
Raw media file serving from the media root.
"""

import mimetypes

from flask import Blueprint, current_app, send_from_directory

media_bp = Blueprint('media', __name__)


@media_bp.route('/media/<path:filename>', methods=['GET', 'HEAD'])
def serve_media(filename):
    """Serve a file below the media root. Traversal attempts answer 404."""
    mimetype, _ = mimetypes.guess_type(filename)
    return send_from_directory(
        current_app.config['MEDIA_ROOT'],
        filename,
        mimetype=mimetype,
        as_attachment=False,
        conditional=True,
    )
