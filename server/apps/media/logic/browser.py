"""Business logic for browsing the media disk."""

import logging
from collections.abc import Callable

from server.apps.media.entities import DirectoryTree, FileEntry, FolderView
from server.apps.media.infrastructure.disk import Disk
from server.apps.media.infrastructure.metadata import (
    find_mime_type,
    get_file_extension,
    timestamp_to_datetime,
)
from server.apps.media.logic.paths import (
    PATH_SEPARATOR,
    ROOT_LABEL,
    ROOT_PATH,
    base_name,
    breadcrumbs,
    clean_folder,
    relative_path,
    web_path,
)

logger = logging.getLogger(__name__)

MimeLookup = Callable[[str], str]

# Indentation unit for one path segment in the directory tree
_TREE_INDENT = ' ' * 4


def folder_info(
    disk: Disk,
    folder: str,
    public_url: str,
    mime_lookup: MimeLookup = find_mime_type,
) -> FolderView:
    """List the contents of a folder.

    A missing folder is not an error: it simply has no entries.

    Args:
        disk: Media disk.
        folder: Untrusted folder path.
        public_url: Public base URL for file web paths.
        mime_lookup: Extension to MIME type lookup.

    Returns:
        FolderView with ancestors as breadcrumbs and immediate children.
    """
    folder = clean_folder(folder)
    crumbs = breadcrumbs(folder)
    _, folder_name = crumbs.pop()

    logger.debug('Listing folder: %s', folder)

    subfolders = {
        PATH_SEPARATOR + directory: base_name(directory)
        for directory in disk.directories(folder)
    }

    files = tuple(
        file_details(disk, path, public_url, mime_lookup)
        for path in disk.files(folder)
        if not _is_hidden(path)
    )

    return FolderView(
        folder=folder,
        folder_name=folder_name,
        breadcrumbs=tuple(crumbs),
        subfolders=subfolders,
        files=files,
    )


def file_details(
    disk: Disk,
    path: str,
    public_url: str,
    mime_lookup: MimeLookup = find_mime_type,
) -> FileEntry:
    """Build the metadata snapshot of one file.

    Args:
        disk: Media disk.
        path: Path of the file, with or without leading slash.
        public_url: Public base URL for the web path.
        mime_lookup: Extension to MIME type lookup.

    Returns:
        FileEntry for the file.
    """
    path = PATH_SEPARATOR + path.lstrip(PATH_SEPARATOR)
    return FileEntry(
        name=base_name(path),
        full_path=path,
        web_path=web_path(path, public_url),
        mime_type=mime_lookup(get_file_extension(path)),
        size=disk.size(path),
        modified=timestamp_to_datetime(disk.last_modified(path)),
        relative_path=relative_path(path),
    )


def all_directories(disk: Disk) -> DirectoryTree:
    """Enumerate every directory as a move target.

    Labels are indented by four spaces per segment of the slash-prefixed
    path. Order follows the disk enumeration, after the root entry.

    Args:
        disk: Media disk.

    Returns:
        Ordered mapping of media path to indented label, root first.
    """
    tree: DirectoryTree = {ROOT_PATH: ROOT_LABEL}
    for directory in disk.all_directories(ROOT_PATH):
        path = PATH_SEPARATOR + directory
        depth = len(path.split(PATH_SEPARATOR))
        tree[path] = _TREE_INDENT * depth + base_name(path)
    return tree


def _is_hidden(path: str) -> bool:
    """Check if entry name starts with a dot."""
    return base_name(path).startswith('.')
