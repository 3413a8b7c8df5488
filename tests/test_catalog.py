"""Tests for directory listing, search, and file management."""
import io
import os

import pytest
from werkzeug.datastructures import FileStorage

from core import catalog
from core.errors import AccessDenied, InternalError, NotFound, ValidationError

DENYLIST = frozenset({'web_player', 'node_modules'})


def names(entries):
    return [e.name for e in entries]


class TestListDirectory:

    def test_root_listing_excludes_denylist_and_dotfiles(self, media_root):
        entries = catalog.list_directory('', str(media_root), DENYLIST)
        assert names(entries) == ['Music', 'Videos', 'readme.txt']

    def test_entries_carry_type_and_relative_path(self, media_root):
        entries = catalog.list_directory('Music', str(media_root), DENYLIST)
        by_name = {e.name: e for e in entries}
        assert by_name['Rock'].type == 'directory'
        assert by_name['Rock'].path == 'Music/Rock'
        assert by_name['jazz track2.mp3'].type == 'file'
        assert by_name['jazz track2.mp3'].path == 'Music/jazz track2.mp3'

    def test_directories_first_then_natural_order(self, tmp_path):
        root = tmp_path / 'root'
        root.mkdir()
        for name in ['b.mp3', 'A.mp3', '10.mp3', '2.mp3']:
            (root / name).write_bytes(b'')
        (root / 'Folder').mkdir()

        entries = catalog.list_directory('', str(root))
        assert names(entries) == ['Folder', '2.mp3', '10.mp3', 'A.mp3', 'b.mp3']

    def test_numeric_aware_order(self, media_root):
        entries = catalog.list_directory('Music', str(media_root), DENYLIST)
        assert names(entries) == ['Rock', 'jazz track2.mp3', 'jazz track10.mp3']

    def test_denylist_applies_at_depth(self, media_root):
        (media_root / 'Music' / 'node_modules').mkdir()
        (media_root / 'Music' / '.DS_Store').write_bytes(b'')
        entries = catalog.list_directory('Music', str(media_root), DENYLIST)
        assert 'node_modules' not in names(entries)
        assert '.DS_Store' not in names(entries)

    def test_dotfiles_can_be_shown(self, media_root):
        entries = catalog.list_directory('', str(media_root), DENYLIST, hide_dotfiles=False)
        assert '.hidden' in names(entries)

    def test_missing_directory(self, media_root):
        with pytest.raises(NotFound):
            catalog.list_directory('Nope', str(media_root), DENYLIST)

    def test_escape_is_denied(self, media_root):
        with pytest.raises(AccessDenied):
            catalog.list_directory('../..', str(media_root), DENYLIST)

    def test_listing_a_file_is_internal_error(self, media_root):
        with pytest.raises(InternalError):
            catalog.list_directory('readme.txt', str(media_root), DENYLIST)


class TestSearch:

    @pytest.mark.parametrize('query', ['', '   ', None])
    def test_empty_query_does_not_touch_filesystem(self, query):
        assert catalog.search(query, '/definitely/not/a/real/root') == []

    def test_case_insensitive_substring(self, media_root):
        results = catalog.search('JAZZ', str(media_root), DENYLIST)
        assert sorted(e.path for e in results) == [
            'Music/jazz track10.mp3',
            'Music/jazz track2.mp3',
        ]

    def test_matching_directories_are_returned_and_descended(self, media_root):
        (media_root / 'Music' / 'Rock' / 'rock anthem.mp3').write_bytes(b'')
        results = catalog.search('rock', str(media_root), DENYLIST)
        paths = [e.path for e in results]
        assert 'Music/Rock' in paths
        assert 'Music/Rock/rock anthem.mp3' in paths
        rock = next(e for e in results if e.path == 'Music/Rock')
        assert rock.type == 'directory'

    def test_denylisted_trees_are_not_searched(self, media_root):
        results = catalog.search('song', str(media_root), DENYLIST)
        assert [e.path for e in results] == ['Music/Rock/song one.mp3']

    def test_result_cap(self, tmp_path):
        root = tmp_path / 'big'
        for d in range(3):
            folder = root / f'disc{d}'
            folder.mkdir(parents=True)
            for i in range(60):
                (folder / f'track{i}.mp3').write_bytes(b'')

        results = catalog.search('track', str(root))
        assert len(results) == 100

    def test_custom_limit(self, media_root):
        results = catalog.search('a', str(media_root), DENYLIST, limit=2)
        assert len(results) == 2

    @pytest.mark.skipif(os.name != 'posix' or os.geteuid() == 0,
                        reason='permission bits are not enforced')
    def test_unreadable_directory_is_skipped(self, media_root):
        locked = media_root / 'Locked'
        locked.mkdir()
        (locked / 'jazz secret.mp3').write_bytes(b'')
        locked.chmod(0)
        try:
            results = catalog.search('jazz', str(media_root), DENYLIST)
        finally:
            locked.chmod(0o755)
        assert len(results) == 2

    def test_query_is_matched_verbatim(self, media_root):
        # Only whitespace-only queries are treated as empty
        assert catalog.search(' rock', str(media_root), DENYLIST) == []
        assert [e.path for e in catalog.search('song one', str(media_root), DENYLIST)] == [
            'Music/Rock/song one.mp3',
        ]

    @pytest.mark.skipif(not hasattr(os, 'symlink') or os.name != 'posix',
                        reason='symlinks not available')
    def test_symlink_cycles_are_not_followed(self, tmp_path):
        root = tmp_path / 'looped'
        root.mkdir()
        (root / 'song.mp3').write_bytes(b'')
        os.symlink('.', root / 'x')
        os.symlink('.', root / 'y')

        assert [e.path for e in catalog.search('song', str(root))] == ['song.mp3']
        assert catalog.search('nothing matches', str(root)) == []

        links = catalog.search('x', str(root))
        assert [(e.path, e.type) for e in links] == [('x', 'directory')]

    def test_missing_root_is_internal_error(self, tmp_path):
        with pytest.raises(InternalError):
            catalog.search('x', str(tmp_path / 'missing'))


class TestFileManagement:

    def test_make_directory(self, media_root):
        entry = catalog.make_directory('Music', 'Pop', str(media_root))
        assert (media_root / 'Music' / 'Pop').is_dir()
        assert entry.path == 'Music/Pop'
        assert entry.type == 'directory'

    def test_make_existing_directory_is_fine(self, media_root):
        catalog.make_directory('', 'Music', str(media_root))
        assert (media_root / 'Music' / 'Rock').is_dir()

    @pytest.mark.parametrize('name', ['', '..', '.', 'a/b', 'a\\b', None])
    def test_make_directory_rejects_bad_names(self, media_root, name):
        with pytest.raises(ValidationError):
            catalog.make_directory('', name, str(media_root))

    def test_make_directory_outside_root(self, media_root):
        with pytest.raises(AccessDenied):
            catalog.make_directory('..', 'evil', str(media_root))

    def test_save_upload(self, media_root):
        upload = FileStorage(stream=io.BytesIO(b'data'), filename='../../New Song.mp3')
        entry = catalog.save_upload('Music', upload, str(media_root))
        assert entry.name == 'New_Song.mp3'
        assert entry.path == 'Music/New_Song.mp3'
        assert (media_root / 'Music' / 'New_Song.mp3').read_bytes() == b'data'

    def test_save_upload_requires_file(self, media_root):
        with pytest.raises(ValidationError):
            catalog.save_upload('', None, str(media_root))

    def test_save_upload_into_missing_directory(self, media_root):
        upload = FileStorage(stream=io.BytesIO(b'data'), filename='a.mp3')
        with pytest.raises(NotFound):
            catalog.save_upload('Nope', upload, str(media_root))

    def test_delete_file_and_directory(self, media_root):
        catalog.delete_path('readme.txt', str(media_root))
        catalog.delete_path('Music', str(media_root))
        assert not (media_root / 'readme.txt').exists()
        assert not (media_root / 'Music').exists()

    def test_delete_root_is_denied(self, media_root):
        with pytest.raises(AccessDenied):
            catalog.delete_path('', str(media_root))

    def test_delete_missing(self, media_root):
        with pytest.raises(NotFound):
            catalog.delete_path('ghost.mp3', str(media_root))


def test_natural_key_orders_numbers_numerically():
    assert sorted(['track10', 'Track2', 'track1'], key=catalog.natural_key) == ['track1', 'Track2', 'track10']
