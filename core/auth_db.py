"""
User store for authentication in MediaDeck.
Handles user registration, lookup, and credential checks against the
users document.

The stored credential is base64("username:password"). It is an encoding,
not a hash, and is kept so existing users.json files keep working. Replacing
it with a salted one-way hash changes the stored format.
"""
import base64
import hmac

from core.config import (
    ADMIN_DISPLAY_NAME,
    ADMIN_USERNAME,
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
)
from core.document_store import USERS
from core.errors import Conflict, ValidationError
from core.logging_config import get_logger

logger = get_logger(__name__)

ROLE_ADMIN = 'admin'
ROLE_CONTRIBUTOR = 'contributor'


def encode_credential(username, password):
    """Encode a username/password pair into the stored credential format."""
    raw = f"{username}:{password}".encode('utf-8')
    return base64.b64encode(raw).decode('ascii')


def load_users(store):
    return store.load(USERS, default={}) or {}


def init_users(store, admin_password):
    """Seed the users document with the admin account if it is missing.

    Existing admin records are left untouched.

    Returns:
        bool: True if the admin record was created
    """
    users = load_users(store)
    if ADMIN_USERNAME in users:
        return False

    users[ADMIN_USERNAME] = {
        'name': ADMIN_DISPLAY_NAME,
        'username': ADMIN_USERNAME,
        'credentialDigest': encode_credential(ADMIN_USERNAME, admin_password),
        'role': ROLE_ADMIN,
    }
    store.save(USERS, users)
    logger.info(f"Initial admin user '{ADMIN_USERNAME}' created")
    return True


def get_user_by_username(store, username):
    """Get a user record by exact (case-sensitive) username."""
    if not isinstance(username, str) or not username:
        return None
    return load_users(store).get(username)


def create_user(store, name, username, password):
    """Register a new contributor.

    Raises:
        ValidationError: missing fields or password length outside bounds
        Conflict: username already exists
    """
    if not all(isinstance(value, str) and value for value in (name, username, password)):
        raise ValidationError('All fields are required')
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise ValidationError(
            f'Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters'
        )

    users = load_users(store)
    if username in users:
        raise Conflict('Username already exists')

    user = {
        'name': name,
        'username': username,
        'credentialDigest': encode_credential(username, password),
        'role': ROLE_CONTRIBUTOR,
    }
    users[username] = user
    store.save(USERS, users)
    logger.info(f"User registered: {username}")
    return user


def authenticate_user(store, username, password):
    """Authenticate a user by username and password. Returns the record or None."""
    user = get_user_by_username(store, username)
    if not user or not isinstance(password, str):
        return None
    expected = str(user.get('credentialDigest') or '')
    if hmac.compare_digest(expected.encode('utf-8'), encode_credential(username, password).encode('ascii')):
        return user
    return None
