"""
Per-identity playback history, stored newest first and bounded in length.
"""
from datetime import datetime, timezone

ANONYMOUS_IDENTITY = 'anonymous'
DEFAULT_HISTORY_LIMIT = 50


def history_identity(principal):
    return principal.username if principal is not None else ANONYMOUS_IDENTITY


def record_history(store, principal, action, details, limit=DEFAULT_HISTORY_LIMIT):
    """Prepend an entry to the principal's history and keep the newest `limit`."""
    collection = store.history_collection(history_identity(principal))
    history = store.load(collection, default=[]) or []
    entry = {
        'action': action,
        'details': details,
        'timestamp': datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
    }
    history.insert(0, entry)
    store.save(collection, history[:limit])
    return entry


def get_history(store, principal):
    collection = store.history_collection(history_identity(principal))
    return store.load(collection, default=[]) or []
