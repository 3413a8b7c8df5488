"""
Pytest configuration for the MediaDeck test suite.

Puts the project root on sys.path and provides a temporary media tree,
data directory, and Flask app/client.
"""
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from app import create_app  # noqa: E402
from core.auth_models import User  # noqa: E402
from core.document_store import DocumentStore  # noqa: E402

ADMIN_PASSWORD = 'admin123'


@pytest.fixture
def media_root(tmp_path):
    """A small media tree with the excluded entries present."""
    root = tmp_path / 'media'
    (root / 'Music' / 'Rock').mkdir(parents=True)
    (root / 'Music' / 'Rock' / 'song one.mp3').write_bytes(b'ID3rock')
    (root / 'Music' / 'jazz track2.mp3').write_bytes(b'ID3jazz')
    (root / 'Music' / 'jazz track10.mp3').write_bytes(b'ID3jazz')
    (root / 'Videos').mkdir()
    (root / 'Videos' / 'holiday.mp4').write_bytes(b'\x00\x00\x00')
    (root / 'readme.txt').write_text('hello')
    (root / 'web_player').mkdir()
    (root / 'web_player' / 'song.mp3').write_bytes(b'ui')
    (root / 'node_modules').mkdir()
    (root / '.hidden').write_text('secret')
    return root


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / 'data'


@pytest.fixture
def store(data_dir):
    store = DocumentStore(str(data_dir))
    store.ensure_directories()
    return store


@pytest.fixture
def app(media_root, data_dir, tmp_path):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'MEDIA_ROOT': str(media_root),
        'DATA_DIR': str(data_dir),
        'UI_DIR': str(tmp_path / 'dist'),
        'ADMIN_PASSWORD': ADMIN_PASSWORD,
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    def _register(username, password='secret1', name=None):
        return client.post('/api/register', json={
            'name': name or username.title(),
            'username': username,
            'password': password,
        })
    return _register


@pytest.fixture
def login(client):
    def _login(username, password='secret1'):
        return client.post('/api/login', json={'username': username, 'password': password})
    return _login


def make_principal(username, role='contributor', name=None):
    return User({'username': username, 'name': name or username.title(), 'role': role})


@pytest.fixture
def alice():
    return make_principal('alice')


@pytest.fixture
def bob():
    return make_principal('bob')


@pytest.fixture
def admin():
    return make_principal('admin', role='admin', name='Administrator')
