"""
Blueprint-based route modules for MediaDeck.

Each module registers a Flask Blueprint covering a logical group of endpoints.
"""

from core.logging_config import get_logger

from .auth import auth_bp
from .files import files_bp
from .library import library_bp
from .media import media_bp
from .pages import pages_bp

logger = get_logger(__name__)

# pages_bp holds the catch-all route and is registered last
ALL_BLUEPRINTS = [
    auth_bp,
    files_bp,
    library_bp,
    media_bp,
    pages_bp,
]


def register_all_blueprints(app):
    """Register every blueprint with the Flask app."""
    for bp in ALL_BLUEPRINTS:
        app.register_blueprint(bp)
    logger.info("All route blueprints registered")
