"""Metadata lookup utilities for media files."""

import mimetypes
from datetime import UTC, datetime
from pathlib import PurePosixPath
from typing import Final

_UNKNOWN_MIME_TYPE: Final = 'application/octet-stream'


def find_mime_type(extension: str) -> str:
    """Look up MIME type by file extension.

    Uses Python's built-in mimetypes registry, so only the extension
    matters and file contents are never read.

    Args:
        extension: Extension without leading dot (e.g., 'pdf').

    Returns:
        MIME type string (e.g., 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    if not extension:
        return _UNKNOWN_MIME_TYPE
    mime_type, _ = mimetypes.guess_type(f'file.{extension}', strict=False)
    if mime_type is None:
        return _UNKNOWN_MIME_TYPE
    return mime_type


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename or path (e.g., '/docs/document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = PurePosixPath(filename).suffix
    return extension.lstrip('.').lower()


def extract_filename(path: str) -> str:
    """Extract filename from path.

    Args:
        path: Full path (e.g., '/docs/file.pdf').

    Returns:
        Filename (e.g., 'file.pdf').
    """
    return PurePosixPath(path).name


def timestamp_to_datetime(timestamp: float) -> datetime:
    """Convert storage timestamp to aware datetime.

    Args:
        timestamp: Unix timestamp in seconds.

    Returns:
        Timezone-aware datetime in UTC.
    """
    return datetime.fromtimestamp(timestamp, tz=UTC)
