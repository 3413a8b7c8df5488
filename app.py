"""
Main Flask application for MediaDeck.
Serves a media directory tree, user accounts, playlists, and playback history
as a JSON API for the browser UI.
"""
import os

from cachelib import FileSystemCache
from flask import Flask

from core.auth_db import init_users
from core.config import APP_NAME, HOST, PORT, build_app_config
from core.document_store import DocumentStore
from core.logging_config import setup_logging, get_logger
from core.request_logging import setup_request_logging
from extensions import cors, login_manager, server_session
from routes import register_all_blueprints

logger = get_logger(__name__)


def create_app(test_config=None):
    """Build the MediaDeck Flask application.

    Args:
        test_config: Optional config overrides (see core.config.build_app_config)
    """
    config = build_app_config(test_config)

    if not config.get('TESTING'):
        setup_logging(app_name="mediadeck", log_level=config['LOG_LEVEL'], log_dir=config['LOG_DIR'])

    logger.info(f"Initializing {APP_NAME} (media root: {config['MEDIA_ROOT']})")

    app = Flask(__name__, static_folder=None)
    app.config.update(config)

    # Persistent state
    store = DocumentStore(app.config['DATA_DIR'])
    store.ensure_directories()
    init_users(store, app.config['ADMIN_PASSWORD'])
    logger.info("User store initialized")

    # Server-side sessions
    os.makedirs(app.config['SESSION_DIR'], exist_ok=True)
    app.config.setdefault('SESSION_CACHELIB', FileSystemCache(
        cache_dir=app.config['SESSION_DIR'],
        threshold=500,
        default_timeout=int(app.config['PERMANENT_SESSION_LIFETIME'].total_seconds()),
    ))
    server_session.init_app(app)

    login_manager.init_app(app)
    cors.init_app(app, origins=list(app.config['CORS_ORIGINS']), supports_credentials=True)

    setup_request_logging(app)
    register_all_blueprints(app)

    return app


if __name__ == '__main__':
    app = create_app()
    logger.info(f"Starting {APP_NAME} server on {HOST}:{PORT}")
    app.run(host=HOST, port=PORT, debug=False)
