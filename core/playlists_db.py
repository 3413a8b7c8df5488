"""
Playlist management for MediaDeck.

Playlists live in a single JSON list. A principal is either a
core.auth_models.User or None for anonymous callers.
"""
import uuid
from datetime import datetime, timezone

from core.auth_db import ROLE_ADMIN
from core.document_store import PLAYLISTS
from core.errors import Forbidden, NotFound, Unauthorized, ValidationError
from core.logging_config import get_logger

logger = get_logger(__name__)

TRACK_FIELDS = ('name', 'type', 'path')


def _now_iso():
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def generate_playlist_id():
    return uuid.uuid4().hex


def snapshot_tracks(tracks):
    """Copy track entries by value, keeping only MediaEntry fields."""
    if tracks is None:
        return []
    if not isinstance(tracks, list):
        raise ValidationError('Tracks must be a list')
    snapshot = []
    for track in tracks:
        if not isinstance(track, dict):
            raise ValidationError('Invalid track entry')
        snapshot.append({field: track.get(field) for field in TRACK_FIELDS})
    return snapshot


def is_visible(playlist, principal):
    if not playlist.get('private'):
        return True
    return principal is not None and playlist.get('owner') == principal.username


def list_playlists(store, principal=None):
    """Public playlists plus the principal's own private ones."""
    playlists = store.load(PLAYLISTS, default=[]) or []
    return [p for p in playlists if is_visible(p, principal)]


def create_playlist(store, principal, name, tracks=None, is_private=False):
    """Create and persist a playlist owned by the principal."""
    if principal is None:
        raise Unauthorized('Authentication required')
    name = (name or '').strip()
    if not name:
        raise ValidationError('Playlist name is required')

    playlist = {
        'id': generate_playlist_id(),
        'name': name,
        'tracks': snapshot_tracks(tracks),
        'owner': principal.username,
        'ownerName': principal.name,
        'private': bool(is_private),
        'createdAt': _now_iso(),
    }

    playlists = store.load(PLAYLISTS, default=[]) or []
    playlists.append(playlist)
    store.save(PLAYLISTS, playlists)
    logger.info(f"Playlist created: {playlist['id']} by {principal.username}")
    return playlist


def delete_playlist(store, principal, playlist_id):
    """Delete a playlist. Only its owner or an admin may delete it.

    Raises:
        Unauthorized: no principal
        NotFound: no playlist with that id
        Forbidden: principal is neither owner nor admin
    """
    if principal is None:
        raise Unauthorized('Authentication required')

    playlists = store.load(PLAYLISTS, default=[]) or []
    target = next((p for p in playlists if p.get('id') == playlist_id), None)
    if target is None:
        raise NotFound('Playlist not found')

    if target.get('owner') != principal.username and principal.role != ROLE_ADMIN:
        raise Forbidden('Not allowed to delete this playlist')

    store.save(PLAYLISTS, [p for p in playlists if p.get('id') != playlist_id])
    logger.info(f"Playlist deleted: {playlist_id} by {principal.username}")
