"""
Blueprint for browsing and managing the media tree.

Covers directory listing, search, folder creation, uploads, and deletion.
"""

from flask import Blueprint, request, jsonify, current_app

from core import catalog
from core.logging_config import log_user_action
from extensions import api_admin_required, api_login_required, catalog_options, current_principal

files_bp = Blueprint('files', __name__)


@files_bp.route('/api/files', methods=['GET'])
def list_files_route():
    entries = catalog.list_directory(
        request.args.get('path', ''),
        current_app.config['MEDIA_ROOT'],
        **catalog_options()
    )
    return jsonify([entry.to_dict() for entry in entries])


@files_bp.route('/api/search', methods=['GET'])
def search_route():
    entries = catalog.search(
        request.args.get('q', ''),
        current_app.config['MEDIA_ROOT'],
        limit=current_app.config['SEARCH_RESULT_LIMIT'],
        **catalog_options()
    )
    return jsonify([entry.to_dict() for entry in entries])


@files_bp.route('/api/mkdir', methods=['POST'])
@api_login_required
def mkdir_route():
    data = request.get_json(silent=True) or {}
    entry = catalog.make_directory(
        data.get('path', ''),
        data.get('name'),
        current_app.config['MEDIA_ROOT'],
    )
    log_user_action('mkdir', current_principal().username, details=entry.path)
    return jsonify({'success': True})


@files_bp.route('/api/upload', methods=['POST'])
@api_login_required
def upload_route():
    entry = catalog.save_upload(
        request.form.get('path', ''),
        request.files.get('file'),
        current_app.config['MEDIA_ROOT'],
    )
    log_user_action('upload', current_principal().username, details=entry.path)
    return jsonify({'success': True, 'file': entry.to_dict()})


@files_bp.route('/api/delete', methods=['POST'])
@api_admin_required
def delete_route():
    data = request.get_json(silent=True) or {}
    path = data.get('path', '')
    catalog.delete_path(path, current_app.config['MEDIA_ROOT'])
    log_user_action('delete', current_principal().username, details=path)
    return jsonify({'success': True})


@files_bp.route('/api/health', methods=['GET'])
def health_route():
    return jsonify({'ok': True})
