"""
Shared extensions and objects used across all blueprints.

This module holds singleton instances (login_manager, cors, session) and the
request helpers every blueprint imports, so that blueprints do not import
app.py.
"""

from functools import wraps

from flask import current_app, jsonify
from flask_cors import CORS
from flask_login import LoginManager, current_user
from flask_session import Session

from core.auth_db import get_user_by_username
from core.auth_models import User
from core.document_store import DocumentStore

# ── Singleton instances (initialized in create_app) ──────────────────

login_manager = LoginManager()
cors = CORS()
server_session = Session()


@login_manager.user_loader
def load_user(username):
    # Re-read on every request so role changes and removals apply immediately
    user_data = get_user_by_username(get_store(), username)
    return User(user_data) if user_data else None


# ── Request helpers ──────────────────────────────────────────────────

def get_store():
    """Document store for the current app's data directory."""
    return DocumentStore(current_app.config['DATA_DIR'])


def current_principal():
    """The logged-in User, or None for anonymous requests."""
    if current_user and current_user.is_authenticated:
        return current_user._get_current_object()
    return None


def catalog_options():
    """Denylist settings passed to core.catalog listing and search."""
    config = current_app.config
    return {
        'denylist': config['DENYLIST'],
        'hide_dotfiles': config['HIDE_DOTFILES'],
    }


# ── Decorators ───────────────────────────────────────────────────────

def api_login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({
                'error': 'Unauthorized',
                'message': 'Authentication required'
            }), 401
        return f(*args, **kwargs)
    return decorated_function


def api_admin_required(f):
    """Admin required decorator for API endpoints - returns JSON error instead of redirect."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return jsonify({
                'error': 'Unauthorized',
                'message': 'Authentication required'
            }), 401
        if not current_user.is_admin:
            return jsonify({
                'error': 'Forbidden',
                'message': 'Admin access required'
            }), 403
        return f(*args, **kwargs)
    return decorated_function
