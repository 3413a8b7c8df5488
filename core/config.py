"""
Configuration module for MediaDeck.
Contains application settings, paths, and constants.
"""
import os
import secrets
from datetime import timedelta

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Application information
APP_NAME = "MediaDeck"
APP_VERSION = "1.0.0"


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name, default):
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        print(f"Invalid integer for {name}: {value!r}. Using {default}.")
        return default


# ============================================================================
# Server Configuration
# ============================================================================
PORT = _env_int("MEDIADECK_PORT", 3000)
HOST = os.environ.get("MEDIADECK_HOST", "0.0.0.0")

# Paths
APP_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
# The media root is one level above the application directory unless overridden
MEDIA_ROOT = os.path.abspath(os.environ.get("MEDIA_ROOT") or os.path.join(APP_DIR, ".."))
DATA_DIR = os.path.abspath(os.environ.get("MEDIADECK_DATA_DIR") or os.path.join(APP_DIR, "data"))
LOG_DIR = os.path.abspath(os.environ.get("MEDIADECK_LOG_DIR") or os.path.join(APP_DIR, "logs"))
UI_DIR = os.path.abspath(os.environ.get("MEDIADECK_UI_DIR") or os.path.join(APP_DIR, "dist"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# ============================================================================
# Catalog
# ============================================================================
DEFAULT_DENYLIST = ("web_player", "node_modules")


def parse_denylist(value):
    """Parse a comma-separated denylist into a frozenset of entry names."""
    if value is None:
        return frozenset(DEFAULT_DENYLIST)
    return frozenset(part.strip() for part in value.split(",") if part.strip())


DENYLIST = parse_denylist(os.environ.get("MEDIA_DENYLIST"))
HIDE_DOTFILES = _env_bool("MEDIA_HIDE_DOTFILES", True)
SEARCH_RESULT_LIMIT = _env_int("SEARCH_RESULT_LIMIT", 100)
HISTORY_LIMIT = _env_int("HISTORY_LIMIT", 50)
MAX_UPLOAD_MB = _env_int("MAX_UPLOAD_MB", 500)

# ============================================================================
# CORS
# ============================================================================
# Origins allowed to call the API with credentials (the UI dev server by default)
DEFAULT_CORS_ORIGINS = ("http://localhost:5173",)


def parse_origins(value):
    """Parse a comma-separated origin list into a tuple."""
    if value is None:
        return DEFAULT_CORS_ORIGINS
    return tuple(part.strip().rstrip("/") for part in value.split(",") if part.strip())


CORS_ORIGINS = parse_origins(os.environ.get("CORS_ORIGINS"))

# ============================================================================
# Authentication
# ============================================================================
SESSION_LIFETIME_DAYS = _env_int("SESSION_LIFETIME_DAYS", 7)
ADMIN_USERNAME = "admin"
ADMIN_DISPLAY_NAME = "Administrator"
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")

# Registration password bounds (inclusive)
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 10


def get_secret_key():
    """Return FLASK_SECRET_KEY, or a random per-process key when unset."""
    secret = os.environ.get("FLASK_SECRET_KEY")
    if secret:
        return secret
    print("WARNING: FLASK_SECRET_KEY is not set; sessions will not survive a restart.")
    return secrets.token_hex(32)


def build_app_config(overrides=None):
    """Build the Flask config mapping for the application.

    Args:
        overrides: Optional dict applied last (tests use it to point the
            media root and data directory at temporary folders)

    Returns:
        dict: Flask config keys
    """
    overrides = dict(overrides or {})
    data_dir = os.path.abspath(overrides.get("DATA_DIR", DATA_DIR))

    config = {
        "SECRET_KEY": overrides.get("SECRET_KEY") or get_secret_key(),
        "MEDIA_ROOT": MEDIA_ROOT,
        "DATA_DIR": data_dir,
        "LOG_DIR": LOG_DIR,
        "LOG_LEVEL": LOG_LEVEL,
        "UI_DIR": UI_DIR,
        "DENYLIST": DENYLIST,
        "HIDE_DOTFILES": HIDE_DOTFILES,
        "SEARCH_RESULT_LIMIT": SEARCH_RESULT_LIMIT,
        "HISTORY_LIMIT": HISTORY_LIMIT,
        "MAX_CONTENT_LENGTH": MAX_UPLOAD_MB * 1024 * 1024,
        "CORS_ORIGINS": CORS_ORIGINS,
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
        # Server-side sessions
        "SESSION_TYPE": "cachelib",
        "SESSION_PERMANENT": True,
        "PERMANENT_SESSION_LIFETIME": timedelta(days=SESSION_LIFETIME_DAYS),
        "SESSION_DIR": os.path.join(data_dir, "sessions"),
        # Cookie configuration for cross-browser compatibility
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SECURE": False,
        "REMEMBER_COOKIE_SAMESITE": "Lax",
        "REMEMBER_COOKIE_HTTPONLY": True,
    }
    config.update(overrides)
    config["MEDIA_ROOT"] = os.path.abspath(config["MEDIA_ROOT"])
    config["DENYLIST"] = frozenset(config["DENYLIST"])
    return config
