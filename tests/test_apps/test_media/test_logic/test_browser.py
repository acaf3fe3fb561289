"""Tests for media browsing logic."""

from datetime import datetime

from server.apps.media.logic.browser import (
    all_directories,
    file_details,
    folder_info,
)


class TestFolderInfo:
    """Tests for folder_info."""

    def test_lists_root(self, disk, public_url, make_file, make_dir):
        """Test listing subfolders and files of the root folder."""
        make_dir('photos')
        make_file('docs/report.pdf')
        make_file('a b.txt', b'hello')

        view = folder_info(disk, '/', public_url)

        assert view.folder == '/'
        assert view.folder_name == 'Root'
        assert view.breadcrumbs == ()
        assert view.subfolders == {'/docs': 'docs', '/photos': 'photos'}
        assert [entry.name for entry in view.files] == ['a b.txt']
        assert view.items_count == 3

    def test_excludes_hidden_files(self, disk, public_url, make_file):
        """Test that dotfiles never appear in the listing."""
        make_file('docs/.DS_Store')
        make_file('docs/.folder')
        make_file('docs/visible.txt')

        view = folder_info(disk, '/docs', public_url)

        assert [entry.name for entry in view.files] == ['visible.txt']
        assert view.items_count == 1

    def test_items_count_matches_entries(
        self,
        disk,
        public_url,
        make_file,
        make_dir,
    ):
        """Test items_count equals subfolders plus files."""
        make_dir('docs/a')
        make_dir('docs/b')
        make_file('docs/one.txt')

        view = folder_info(disk, 'docs', public_url)

        assert view.items_count == len(view.subfolders) + len(view.files)
        assert view.items_count == 3

    def test_breadcrumbs_exclude_current_folder(
        self,
        disk,
        public_url,
        make_dir,
    ):
        """Test breadcrumbs hold ancestors only."""
        make_dir('a/b/c')

        view = folder_info(disk, '/a/b/c', public_url)

        assert view.folder == '/a/b/c'
        assert view.folder_name == 'c'
        assert view.breadcrumbs == (('/', 'Root'), ('/a', 'a'), ('/a/b', 'b'))

    def test_missing_folder_is_empty(self, disk, public_url):
        """Test that an absent folder yields an empty view."""
        view = folder_info(disk, '/nowhere', public_url)

        assert view.folder == '/nowhere'
        assert view.subfolders == {}
        assert view.files == ()
        assert view.items_count == 0

    def test_folder_is_sanitized(self, disk, public_url, make_file):
        """Test that the folder argument is sanitized before listing."""
        make_file('docs/one.txt')

        view = folder_info(disk, '../docs/', public_url)

        assert view.folder == '/docs'
        assert view.files[0].full_path == '/docs/one.txt'

    def test_as_dict(self, disk, public_url, make_file):
        """Test serialization keys of the folder view."""
        make_file('docs/one.txt')

        data = folder_info(disk, '/docs', public_url).as_dict()

        assert data['folder'] == '/docs'
        assert data['folderName'] == 'docs'
        assert data['breadcrumbs'] == {'/': 'Root'}
        assert data['subfolders'] == {}
        assert data['itemsCount'] == 1
        assert data['files'][0]['fullPath'] == '/docs/one.txt'


class TestFileDetails:
    """Tests for file_details."""

    def test_snapshot_fields(self, disk, public_url, make_file):
        """Test all metadata fields of a file entry."""
        make_file('my docs/a b.txt', b'hello')

        entry = file_details(disk, 'my docs/a b.txt', public_url)

        assert entry.name == 'a b.txt'
        assert entry.full_path == '/my docs/a b.txt'
        assert entry.relative_path == '/storage/my%20docs/a%20b.txt'
        assert entry.web_path == (
            'https://media.example.com/storage/my%20docs/a%20b.txt'
        )
        assert entry.mime_type == 'text/plain'
        assert entry.size == 5
        assert isinstance(entry.modified, datetime)
        assert entry.modified.tzinfo is not None

    def test_unknown_extension(self, disk, public_url, make_file):
        """Test MIME type fallback for unknown extensions."""
        make_file('blob.zzzunknown')

        entry = file_details(disk, '/blob.zzzunknown', public_url)

        assert entry.mime_type == 'application/octet-stream'

    def test_custom_mime_lookup(self, disk, public_url, make_file):
        """Test that MIME lookup is delegated by extension."""
        make_file('photo.JPG')
        seen = []

        def lookup(extension):
            seen.append(extension)
            return 'image/x-custom'

        entry = file_details(disk, '/photo.JPG', public_url, lookup)

        assert entry.mime_type == 'image/x-custom'
        assert seen == ['jpg']


class TestAllDirectories:
    """Tests for all_directories."""

    def test_root_only(self, disk):
        """Test that an empty disk still lists the root."""
        assert all_directories(disk) == {'/': 'Root'}

    def test_indented_labels(self, disk, make_dir):
        """Test labels are indented four spaces per path segment."""
        make_dir('a/b')
        make_dir('c')

        tree = all_directories(disk)

        assert next(iter(tree)) == '/'
        assert tree == {
            '/': 'Root',
            '/a': ' ' * 8 + 'a',
            '/a/b': ' ' * 12 + 'b',
            '/c': ' ' * 8 + 'c',
        }
