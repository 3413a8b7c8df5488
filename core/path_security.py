"""
Path sanitation for the media root.

Every filesystem-touching operation resolves user input through
resolve_media_path() before it looks at the disk.

Known limitation: the containment check is lexical. A symlink inside the
media root that points elsewhere is followed, which is acceptable for a
single-operator deployment.
"""

import os
import posixpath
import re

from core.errors import AccessDenied

_LEADING_PARENT_RE = re.compile(r'^(\.\./)+')


def normalize_relative_path(relative_path):
    """Lexically normalize a caller-supplied path to a POSIX relative path.

    Separators are unified, `.`/`..` segments are collapsed, any leading run
    of `../` segments is dropped and leading slashes are removed. Returns ''
    for the root.
    """
    if not relative_path:
        return ''
    path = str(relative_path).replace('\\', '/')
    path = posixpath.normpath(path)
    path = _LEADING_PARENT_RE.sub('', path)
    path = path.lstrip('/')
    if path == '.':
        return ''
    return path


def is_within_root(absolute_path, media_root):
    """Return True if absolute_path is media_root or lies below it."""
    root = os.path.abspath(media_root)
    candidate = os.path.abspath(absolute_path)
    return candidate == root or candidate.startswith(root.rstrip(os.sep) + os.sep)


def resolve_media_path(relative_path, media_root):
    """Resolve a relative path against the media root.

    Args:
        relative_path: Caller-supplied path, '' (or None) for the root
        media_root: Absolute path of the media root

    Returns:
        tuple: (absolute_path, safe_relative_path) where safe_relative_path
        uses forward slashes and is '' for the root

    Raises:
        AccessDenied: if the path resolves outside the media root
    """
    safe_path = normalize_relative_path(relative_path)
    root = os.path.abspath(media_root)
    full_path = os.path.normpath(os.path.join(root, *safe_path.split('/'))) if safe_path else root

    if not is_within_root(full_path, root):
        raise AccessDenied('Access denied')

    return full_path, safe_path


def join_relative(parent, name):
    """Join a relative parent path and a child name with forward slashes."""
    if not parent:
        return name
    return f"{parent.rstrip('/')}/{name}"
