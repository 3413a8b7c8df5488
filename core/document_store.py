"""
JSON document store for MediaDeck.

Each collection is a whole-file JSON document under the data directory:

    users.json              map of username -> user record
    playlists.json          list of playlist records
    history/<identity>.json list of history entries, newest first

Every call reads or writes the file on disk; nothing is cached in memory.
Writers are not coordinated, so two concurrent load/modify/save sequences on
the same document resolve as last write wins.
"""

import json
import os
import tempfile
from urllib.parse import quote

from core.errors import InternalError
from core.logging_config import get_logger, log_storage_operation

logger = get_logger(__name__)

USERS = 'users'
PLAYLISTS = 'playlists'
HISTORY_DIR = 'history'

def safe_document_name(name):
    """Percent-encode an identity into a filename stem.

    The encoding is reversible, so distinct identities never share a file.
    Dots are escaped as well, which keeps names like `..` and `.x` inert.
    """
    encoded = quote(str(name), safe='').replace('.', '%2E')
    # quote() never emits a bare '%', so the empty name cannot collide
    return encoded or '%'


class DocumentStore:
    """Read-modify-write access to named JSON documents."""

    def __init__(self, data_dir):
        self.data_dir = os.path.abspath(data_dir)

    def ensure_directories(self):
        os.makedirs(os.path.join(self.data_dir, HISTORY_DIR), exist_ok=True)

    def document_path(self, collection):
        """Map a collection name (e.g. 'users' or 'history/alice') to its file.

        Collection names are built internally; identities inside them are
        already encoded by history_collection().
        """
        parts = [part for part in collection.split('/') if part]
        return os.path.join(self.data_dir, *parts) + '.json'

    def history_collection(self, identity):
        return f"{HISTORY_DIR}/{safe_document_name(identity)}"

    def exists(self, collection):
        return os.path.exists(self.document_path(collection))

    def load(self, collection, default=None):
        """Load a document, returning `default` when it does not exist yet."""
        path = self.document_path(collection)
        if not os.path.exists(path):
            return default
        try:
            with open(path, 'r', encoding='utf-8') as f:
                value = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read document {collection}: {e}", exc_info=True)
            raise InternalError(f'Failed to read {collection}') from e

        log_storage_operation('load', collection, path=path,
                              records=len(value) if isinstance(value, (list, dict)) else None)
        return value

    def save(self, collection, value):
        """Write a whole document, replacing the previous file in one rename."""
        path = self.document_path(collection)
        directory = os.path.dirname(path)
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.tmp-', suffix='.json')
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(value, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            logger.error(f"Failed to write document {collection}: {e}", exc_info=True)
            raise InternalError(f'Failed to write {collection}') from e

        log_storage_operation('save', collection, path=path,
                              records=len(value) if isinstance(value, (list, dict)) else None)
