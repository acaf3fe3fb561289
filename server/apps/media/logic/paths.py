"""Path sanitizing and derivation for media paths.

Media paths are absolute, slash-separated paths inside the media root:
``/`` is the root, ``/photos/2024`` a folder, ``/photos/2024/a.jpg`` a
file. They never carry ``..`` segments or a trailing slash.
"""

import logging
from typing import Final

from server.apps.media.entities import Breadcrumb
from server.apps.media.infrastructure.metadata import extract_filename

logger = logging.getLogger(__name__)

# Character used to split media paths
PATH_SEPARATOR: Final = '/'

ROOT_PATH: Final = '/'
ROOT_LABEL: Final = 'Root'

# Public prefix under which the media disk is served
_PUBLIC_PREFIX: Final = '/storage/'

# Entry names that do not name a single entry
_INVALID_NAMES: Final = frozenset(('', '.', '..'))


def clean_folder(raw: str) -> str:
    """Sanitize a folder or file path into a media path.

    Removes every literal ``..`` wherever it appears, trims slashes on
    both sides and prefixes exactly one slash. The result is then
    resolved segment by segment; anything that would still leave the
    root collapses to the root.

    Args:
        raw: Untrusted path (e.g., '../photos//').

    Returns:
        Media path (e.g., '/photos'). Never fails.
    """
    cleaned = PATH_SEPARATOR + raw.replace('..', '').strip(PATH_SEPARATOR)
    if not is_within_root(cleaned):
        logger.warning('Path escapes media root, using root: %r', raw)
        return ROOT_PATH
    return cleaned


def is_within_root(path: str) -> bool:
    """Check that a path resolves inside the media root.

    Segments are resolved left to right; a ``..`` that would climb above
    the root fails the check instead of being clamped at it.

    Args:
        path: Path to check.

    Returns:
        True if resolving the segments of path stays below root.
    """
    depth = 0
    for segment in path.split(PATH_SEPARATOR):
        if segment in {'', '.'}:
            continue
        if segment == '..':
            depth -= 1
            if depth < 0:
                return False
        else:
            depth += 1
    return True


def entry_name(raw: str) -> str:
    """Reduce an untrusted entry name to a single path segment.

    Args:
        raw: Name as supplied by the client (e.g., '../docs/a.txt').

    Returns:
        Last segment (e.g., 'a.txt'), empty string if there is no
        usable name ('', '.', '..').
    """
    name = extract_filename(raw)
    if name in _INVALID_NAMES:
        return ''
    return name


def breadcrumbs(folder: str) -> list[Breadcrumb]:
    """Build the breadcrumb trail from root to folder.

    Args:
        folder: Media path (e.g., '/a/b').

    Returns:
        Ordered (path, label) pairs including folder itself:
        [('/', 'Root'), ('/a', 'a'), ('/a/b', 'b')].
    """
    crumbs: list[Breadcrumb] = [(ROOT_PATH, ROOT_LABEL)]
    current = ''
    for segment in folder.strip(PATH_SEPARATOR).split(PATH_SEPARATOR):
        if not segment:
            continue
        current = f'{current}{PATH_SEPARATOR}{segment}'
        crumbs.append((current, segment))
    return crumbs


def join_path(folder: str, name: str) -> str:
    """Join a folder media path and an entry name.

    Args:
        folder: Media path of the folder (e.g., '/docs').
        name: Entry name (e.g., 'file.pdf').

    Returns:
        Joined media path (e.g., '/docs/file.pdf').
    """
    folder_normalized = folder.strip(PATH_SEPARATOR)
    name_normalized = name.strip(PATH_SEPARATOR)

    if not folder_normalized:
        return PATH_SEPARATOR + name_normalized

    return PATH_SEPARATOR + folder_normalized + PATH_SEPARATOR + name_normalized


def base_name(path: str) -> str:
    """Get the last segment of a path.

    Args:
        path: Media or storage path.

    Returns:
        Last segment, empty string for root.
    """
    return path.rstrip(PATH_SEPARATOR).rsplit(PATH_SEPARATOR, 1)[-1]


def relative_path(path: str) -> str:
    """Get the public-serving path of a file.

    Only spaces are percent-encoded, other characters pass through.

    Args:
        path: Media path (e.g., '/a b.txt').

    Returns:
        Public path (e.g., '/storage/a%20b.txt').
    """
    encoded = path.replace(' ', '%20')
    return _PUBLIC_PREFIX + encoded.lstrip(PATH_SEPARATOR)


def web_path(path: str, base_url: str) -> str:
    """Get the full public URL of a file.

    Args:
        path: Media path.
        base_url: Public base URL (e.g., 'https://example.com').

    Returns:
        Absolute URL (e.g., 'https://example.com/storage/a.txt').
    """
    return base_url.rstrip(PATH_SEPARATOR) + relative_path(path)
