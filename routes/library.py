"""
Blueprint for the user library: playlists and playback history.
"""

from flask import Blueprint, request, jsonify, current_app

from core.history_db import get_history, record_history
from core.playlists_db import create_playlist, delete_playlist, list_playlists
from extensions import api_login_required, current_principal, get_store

library_bp = Blueprint('library', __name__)


# ------------------------------------------------------------------
# Playlists
# ------------------------------------------------------------------

@library_bp.route('/api/playlists', methods=['GET'])
def list_playlists_route():
    return jsonify(list_playlists(get_store(), current_principal()))


@library_bp.route('/api/playlists', methods=['POST'])
@api_login_required
def create_playlist_route():
    data = request.get_json(silent=True) or {}
    playlist = create_playlist(
        get_store(),
        current_principal(),
        data.get('name'),
        data.get('tracks'),
        data.get('isPrivate', False),
    )
    return jsonify(playlist)


@library_bp.route('/api/playlists/<playlist_id>', methods=['DELETE'])
@api_login_required
def delete_playlist_route(playlist_id):
    delete_playlist(get_store(), current_principal(), playlist_id)
    return jsonify({'success': True})


# ------------------------------------------------------------------
# History
# ------------------------------------------------------------------

@library_bp.route('/api/history', methods=['POST'])
def record_history_route():
    data = request.get_json(silent=True) or {}
    record_history(
        get_store(),
        current_principal(),
        data.get('action'),
        data.get('details'),
        limit=current_app.config['HISTORY_LIMIT'],
    )
    return jsonify({'success': True})


@library_bp.route('/api/history', methods=['GET'])
def get_history_route():
    return jsonify(get_history(get_store(), current_principal()))
