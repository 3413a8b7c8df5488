"""
Catalog service for MediaDeck.

Lists and searches the media root, and implements the small set of
file-management operations exposed by the API (mkdir, upload, delete).
All paths go through core.path_security first.
"""

import os
import re
import shutil
from dataclasses import dataclass, asdict

from werkzeug.utils import secure_filename

from core.errors import AccessDenied, InternalError, NotFound, ValidationError
from core.logging_config import get_logger
from core.path_security import is_within_root, join_relative, resolve_media_path

logger = get_logger(__name__)

ENTRY_FILE = 'file'
ENTRY_DIRECTORY = 'directory'

_DIGITS_RE = re.compile(r'(\d+)')


@dataclass
class MediaEntry:
    """A single file or directory below the media root."""
    name: str
    type: str
    path: str

    def to_dict(self):
        return asdict(self)


def natural_key(name):
    """Case-insensitive, numeric-aware sort key ("track2" < "track10")."""
    # split() alternates text and digit runs, so odd positions are numbers
    return [int(part) if i % 2 else part.casefold()
            for i, part in enumerate(_DIGITS_RE.split(name))]


def entry_sort_key(entry):
    """Directories first, then natural order by name."""
    return (0 if entry.type == ENTRY_DIRECTORY else 1, natural_key(entry.name))


def is_excluded(name, denylist, hide_dotfiles=True):
    if hide_dotfiles and name.startswith('.'):
        return True
    return name in denylist


def _scan_children(directory, relative_path, denylist, hide_dotfiles):
    """Return sorted MediaEntry objects for the immediate children of directory."""
    entries = []
    with os.scandir(directory) as it:
        for item in it:
            if is_excluded(item.name, denylist, hide_dotfiles):
                continue
            try:
                is_dir = item.is_dir()
            except OSError:
                is_dir = False
            entries.append(MediaEntry(
                name=item.name,
                type=ENTRY_DIRECTORY if is_dir else ENTRY_FILE,
                path=join_relative(relative_path, item.name),
            ))
    entries.sort(key=entry_sort_key)
    return entries


def list_directory(relative_path, media_root, denylist=frozenset(), hide_dotfiles=True):
    """List the immediate children of a directory below the media root.

    Raises:
        AccessDenied: path escapes the media root
        NotFound: the directory does not exist
        InternalError: the directory could not be read
    """
    full_path, safe_path = resolve_media_path(relative_path, media_root)

    if not os.path.exists(full_path):
        raise NotFound('Path not found')

    try:
        return _scan_children(full_path, safe_path, denylist, hide_dotfiles)
    except OSError as e:
        logger.error(f"Failed to list directory {full_path}: {e}", exc_info=True)
        raise InternalError('Failed to list directory') from e


def search(query, media_root, denylist=frozenset(), hide_dotfiles=True, limit=100):
    """Recursive, case-insensitive substring search over entry names.

    Matching directories are returned and still descended into. Symlinked
    directories are reported but not descended into. A subdirectory that
    cannot be read is skipped.

    Returns:
        list[MediaEntry]: at most `limit` entries
    """
    if not query or not query.strip():
        return []
    needle = query.lower()

    results = []

    def walk(directory, relative_path):
        for entry in _scan_children(directory, relative_path, denylist, hide_dotfiles):
            if len(results) >= limit:
                return
            if needle in entry.name.lower():
                results.append(entry)
            child = os.path.join(directory, entry.name)
            if entry.type == ENTRY_DIRECTORY and not os.path.islink(child):
                try:
                    walk(child, entry.path)
                except OSError as e:
                    logger.debug(f"Skipping unreadable directory {entry.path}: {e}")

    root = os.path.abspath(media_root)
    try:
        walk(root, '')
    except OSError as e:
        logger.error(f"Search failed for {query!r}: {e}", exc_info=True)
        raise InternalError('Search failed') from e

    return results[:limit]


# ------------------------------------------------------------------
# File management
# ------------------------------------------------------------------

def make_directory(relative_path, name, media_root):
    """Create directory `name` inside `relative_path`.

    Returns:
        MediaEntry: the created (or already existing) directory
    """
    name = (name or '').strip()
    if not name or name in ('.', '..') or '/' in name or '\\' in name:
        raise ValidationError('Invalid folder name')

    parent_path, safe_parent = resolve_media_path(relative_path, media_root)
    target = os.path.join(parent_path, name)
    if not is_within_root(target, media_root):
        raise AccessDenied('Access denied')

    try:
        os.makedirs(target, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create directory {target}: {e}", exc_info=True)
        raise InternalError('Failed to create directory') from e

    logger.info(f"Directory created: {join_relative(safe_parent, name)}")
    return MediaEntry(name=name, type=ENTRY_DIRECTORY, path=join_relative(safe_parent, name))


def save_upload(relative_path, file_storage, media_root):
    """Store an uploaded file (werkzeug FileStorage) inside `relative_path`.

    Returns:
        MediaEntry: the stored file
    """
    if file_storage is None or not file_storage.filename:
        raise ValidationError('No file provided')

    filename = secure_filename(file_storage.filename)
    if not filename:
        raise ValidationError('Invalid file name')

    directory, safe_parent = resolve_media_path(relative_path, media_root)
    if not os.path.isdir(directory):
        raise NotFound('Path not found')

    destination = os.path.join(directory, filename)
    try:
        file_storage.save(destination)
    except OSError as e:
        logger.error(f"Failed to store upload {destination}: {e}", exc_info=True)
        raise InternalError('Upload failed') from e

    logger.info(f"File uploaded: {join_relative(safe_parent, filename)}")
    return MediaEntry(name=filename, type=ENTRY_FILE, path=join_relative(safe_parent, filename))


def delete_path(relative_path, media_root):
    """Delete a file, or a directory recursively. The media root itself is protected."""
    full_path, safe_path = resolve_media_path(relative_path, media_root)
    if not safe_path:
        raise AccessDenied('Cannot delete the media root')

    if not os.path.lexists(full_path):
        raise NotFound('Path not found')

    try:
        if os.path.isdir(full_path) and not os.path.islink(full_path):
            shutil.rmtree(full_path)
        else:
            os.remove(full_path)
    except OSError as e:
        logger.error(f"Failed to delete {full_path}: {e}", exc_info=True)
        raise InternalError('Delete failed') from e

    logger.info(f"Deleted: {safe_path}")
