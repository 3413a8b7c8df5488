"""
Authentication routes: register, login, current user, logout.
"""

from flask import Blueprint, request, jsonify, session
from flask_login import login_user, logout_user

from core.auth_db import authenticate_user, create_user
from core.auth_models import User
from core.errors import Unauthorized
from core.logging_config import log_user_action
from extensions import current_principal, get_store

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/api/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    user = create_user(
        get_store(),
        data.get('name'),
        data.get('username'),
        data.get('password'),
    )
    log_user_action('register', user['username'])
    return jsonify({'success': True})


@auth_bp.route('/api/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    user_data = authenticate_user(get_store(), username, data.get('password'))
    if not user_data:
        log_user_action('login_failed', username)
        raise Unauthorized('Invalid credentials')

    user = User(user_data)
    session.permanent = True
    login_user(user)
    log_user_action('login', user.username)
    return jsonify({'success': True, 'user': user.to_principal()})


@auth_bp.route('/api/me', methods=['GET'])
def me():
    principal = current_principal()
    return jsonify({'user': principal.to_principal() if principal else None})


@auth_bp.route('/api/logout', methods=['POST'])
def logout():
    principal = current_principal()
    logout_user()
    session.clear()
    if principal:
        log_user_action('logout', principal.username)
    return jsonify({'success': True})
