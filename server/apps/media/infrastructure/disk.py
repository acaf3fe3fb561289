"""Storage capability used by the media manager.

The media logic never talks to a Django storage backend directly. It
goes through ``Disk``, a narrow filesystem-like capability, so that
local directories and S3 buckets behave the same way.

Paths passed to a disk are absolute media paths (``/docs/a.txt``).
Paths returned by a disk are relative (``docs/a.txt``), and the caller
decides how to present them.

Every backend failure is logged and reported as ``False`` (or an empty
result); disks never raise for I/O problems.
"""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Protocol, final

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from django.core.exceptions import ImproperlyConfigured, SuspiciousOperation
from django.core.files.base import ContentFile, File
from django.core.files.storage import FileSystemStorage, storages

from server.apps.media.infrastructure.storage import (
    FOLDER_MARKER_NAME,
    MediaS3Storage,
)

logger = logging.getLogger(__name__)

_S3_ERRORS = (Boto3Error, BotoCoreError, ClientError, SuspiciousOperation)
_LOCAL_ERRORS = (OSError, SuspiciousOperation)


class Disk(Protocol):
    """Filesystem capability the media manager depends on."""

    def exists(self, path: str) -> bool:
        """Check whether a file or directory exists."""

    def directories(self, path: str) -> list[str]:
        """List immediate subdirectories."""

    def files(self, path: str) -> list[str]:
        """List immediate files."""

    def all_directories(self, path: str = '/') -> list[str]:
        """List every directory below path, recursively."""

    def size(self, path: str) -> int:
        """Get file size in bytes."""

    def last_modified(self, path: str) -> float:
        """Get last modification time as a Unix timestamp."""

    def make_directory(self, path: str) -> bool:
        """Create a directory."""

    def delete_directory(self, path: str) -> bool:
        """Delete an empty directory."""

    def delete(self, path: str) -> bool:
        """Delete a file."""

    def rename(self, old_path: str, new_path: str) -> bool:
        """Rename or move a file or directory."""

    def store(self, path: str, name: str, content: Any) -> bool:
        """Persist content as path/name."""


def _name(path: str) -> str:
    """Convert media path to a storage name relative to the disk root."""
    return path.strip('/')


def _join(folder: str, name: str) -> str:
    """Join relative storage names."""
    folder = folder.strip('/')
    if not folder:
        return name
    return f'{folder}/{name}'


def _as_file(content: Any) -> File:
    """Wrap raw bytes or a stream into a Django File."""
    if isinstance(content, File):
        return content
    if isinstance(content, bytes | bytearray):
        return ContentFile(bytes(content))
    return File(content)


@final
class LocalDisk:
    """Disk backed by a directory through FileSystemStorage.

    Listings are sorted by name. ``all_directories`` walks depth-first,
    so every directory is followed by its own subdirectories.
    """

    def __init__(self, storage: FileSystemStorage) -> None:
        """Initialize local disk.

        Args:
            storage: Filesystem storage rooted at the media directory.
        """
        self._storage = storage

    @property
    def root(self) -> Path:
        """Absolute root directory of the disk."""
        return Path(self._storage.location)

    def exists(self, path: str) -> bool:
        """Check whether a file or directory exists.

        Args:
            path: Media path.

        Returns:
            True if something exists at path.
        """
        try:
            return self._absolute(path).exists()
        except _LOCAL_ERRORS:
            logger.exception('Cannot check existence: %s', path)
            return False

    def directories(self, path: str) -> list[str]:
        """List immediate subdirectories of path.

        Args:
            path: Media path of the folder.

        Returns:
            Relative paths of subdirectories, empty if folder is missing.
        """
        return [_join(path, name) for name in self._listdir(path)[0]]

    def files(self, path: str) -> list[str]:
        """List immediate files of path.

        Args:
            path: Media path of the folder.

        Returns:
            Relative paths of files, empty if folder is missing.
        """
        return [_join(path, name) for name in self._listdir(path)[1]]

    def all_directories(self, path: str = '/') -> list[str]:
        """List every directory below path, depth-first.

        Args:
            path: Media path to start from.

        Returns:
            Relative paths of all nested directories.
        """
        try:
            start = self._absolute(path)
            if not start.is_dir():
                return []
            return [
                directory.relative_to(self.root).as_posix()
                for directory in self._walk(start)
            ]
        except _LOCAL_ERRORS:
            logger.exception('Cannot enumerate directories: %s', path)
            return []

    def size(self, path: str) -> int:
        """Get file size in bytes.

        Args:
            path: Media path of the file.

        Returns:
            Size in bytes, 0 if the file cannot be read.
        """
        try:
            return self._storage.size(_name(path))
        except _LOCAL_ERRORS:
            logger.exception('Cannot read size: %s', path)
            return 0

    def last_modified(self, path: str) -> float:
        """Get last modification time.

        Args:
            path: Media path of the file.

        Returns:
            Unix timestamp, 0.0 if the file cannot be read.
        """
        try:
            return self._absolute(path).stat().st_mtime
        except _LOCAL_ERRORS:
            logger.exception('Cannot read modification time: %s', path)
            return 0.0

    def make_directory(self, path: str) -> bool:
        """Create a directory including missing parents.

        Args:
            path: Media path of the new directory.

        Returns:
            True on success.
        """
        try:
            logger.info('Creating directory: %s', path)
            self._absolute(path).mkdir(parents=True)
        except _LOCAL_ERRORS:
            logger.exception('Failed to create directory: %s', path)
            return False
        return True

    def delete_directory(self, path: str) -> bool:
        """Delete an empty directory.

        Args:
            path: Media path of the directory.

        Returns:
            True on success.
        """
        try:
            logger.info('Deleting directory: %s', path)
            self._absolute(path).rmdir()
        except _LOCAL_ERRORS:
            logger.exception('Failed to delete directory: %s', path)
            return False
        return True

    def delete(self, path: str) -> bool:
        """Delete a file.

        Args:
            path: Media path of the file.

        Returns:
            True on success.
        """
        try:
            logger.info('Deleting file: %s', path)
            self._absolute(path).unlink()
        except _LOCAL_ERRORS:
            logger.exception('Failed to delete file: %s', path)
            return False
        return True

    def rename(self, old_path: str, new_path: str) -> bool:
        """Rename or move a file or directory.

        Missing parents of the destination are created. An existing
        destination is refused and left as it is.

        Args:
            old_path: Current media path.
            new_path: New media path.

        Returns:
            True on success.
        """
        try:
            source = self._absolute(old_path)
            destination = self._absolute(new_path)
            if destination.exists():
                logger.warning('Move target already exists: %s', new_path)
                return False
            logger.info('Moving: %s -> %s', old_path, new_path)
            destination.parent.mkdir(parents=True, exist_ok=True)
            source.rename(destination)
        except _LOCAL_ERRORS:
            logger.exception('Move failed: %s -> %s', old_path, new_path)
            return False
        return True

    def store(self, path: str, name: str, content: Any) -> bool:
        """Persist content as path/name.

        Args:
            path: Media path of the target folder.
            name: Target file name.
            content: Bytes, stream or Django File.

        Returns:
            True on success.
        """
        target = _join(path, name)
        try:
            saved_name = self._storage.save(target, _as_file(content))
        except _LOCAL_ERRORS:
            logger.exception('Failed to store file: %s', target)
            return False
        if saved_name != target:
            logger.warning('Stored %s under another name: %s', target, saved_name)
        return True

    def _absolute(self, path: str) -> Path:
        """Resolve media path inside the storage root.

        Raises:
            SuspiciousFileOperation: If path escapes the root.
        """
        return Path(self._storage.path(_name(path)))

    def _listdir(self, path: str) -> tuple[list[str], list[str]]:
        try:
            directories, files = self._storage.listdir(_name(path))
        except FileNotFoundError:
            return [], []
        except _LOCAL_ERRORS:
            logger.exception('Cannot list directory: %s', path)
            return [], []
        return sorted(directories), sorted(files)

    def _walk(self, directory: Path) -> Iterator[Path]:
        for child in sorted(directory.iterdir()):
            if child.is_dir() and not child.is_symlink():
                yield child
                yield from self._walk(child)


@final
class S3Disk:
    """Disk backed by an S3-compatible bucket.

    Folders are implicit key prefixes. An empty folder is kept alive by a
    hidden marker object, which is never reported as a file.
    """

    def __init__(self, storage: MediaS3Storage) -> None:
        """Initialize S3 disk.

        Args:
            storage: S3 storage backend of the media bucket.
        """
        self._storage = storage

    def exists(self, path: str) -> bool:
        """Check whether an object or a folder prefix exists.

        Args:
            path: Media path.

        Returns:
            True if an object or any object below path exists.
        """
        name = _name(path)
        if not name:
            return True
        try:
            return (
                self._storage.object_exists(name)
                or self._storage.has_prefix(f'{name}/')
            )
        except _S3_ERRORS:
            logger.exception('Cannot check existence: %s', path)
            return False

    def directories(self, path: str) -> list[str]:
        """List immediate folder prefixes of path.

        Args:
            path: Media path of the folder.

        Returns:
            Relative folder paths.
        """
        return [_join(path, name) for name in self._listdir(path)[0]]

    def files(self, path: str) -> list[str]:
        """List immediate objects of path, without folder markers.

        Args:
            path: Media path of the folder.

        Returns:
            Relative file paths.
        """
        return [
            _join(path, name)
            for name in self._listdir(path)[1]
            if name != FOLDER_MARKER_NAME
        ]

    def all_directories(self, path: str = '/') -> list[str]:
        """List every folder prefix below path.

        Folders appear in the lexicographic key order of the bucket.

        Args:
            path: Media path to start from.

        Returns:
            Relative paths of all nested folders.
        """
        base = _name(path)
        prefix = f'{base}/' if base else ''
        base_depth = prefix.count('/')
        # Ordered set of folder names
        found: dict[str, None] = {}
        try:
            for name in self._storage.names_under(prefix):
                parts = name.split('/')[:-1]
                for depth in range(base_depth, len(parts)):
                    found.setdefault('/'.join(parts[:depth + 1]))
        except _S3_ERRORS:
            logger.exception('Cannot enumerate directories: %s', path)
            return []
        return list(found)

    def size(self, path: str) -> int:
        """Get object size in bytes.

        Args:
            path: Media path of the file.

        Returns:
            Size in bytes, 0 if the object cannot be read.
        """
        try:
            return self._storage.size(_name(path))
        except _S3_ERRORS:
            logger.exception('Cannot read size: %s', path)
            return 0

    def last_modified(self, path: str) -> float:
        """Get last modification time.

        Args:
            path: Media path of the file.

        Returns:
            Unix timestamp, 0.0 if the object cannot be read.
        """
        try:
            return self._storage.get_modified_time(_name(path)).timestamp()
        except _S3_ERRORS:
            logger.exception('Cannot read modification time: %s', path)
            return 0.0

    def make_directory(self, path: str) -> bool:
        """Create a folder by writing its marker object.

        Args:
            path: Media path of the new folder.

        Returns:
            True on success.
        """
        try:
            self._storage.make_folder(_name(path))
        except _S3_ERRORS:
            logger.exception('Failed to create folder: %s', path)
            return False
        return True

    def delete_directory(self, path: str) -> bool:
        """Delete an empty folder by removing its marker object.

        Args:
            path: Media path of the folder.

        Returns:
            True on success.
        """
        try:
            self._storage.delete(_join(path, FOLDER_MARKER_NAME))
        except _S3_ERRORS:
            logger.exception('Failed to delete folder: %s', path)
            return False
        return True

    def delete(self, path: str) -> bool:
        """Delete an object.

        Args:
            path: Media path of the file.

        Returns:
            True on success.
        """
        try:
            self._storage.delete(_name(path))
        except _S3_ERRORS:
            logger.exception('Failed to delete object: %s', path)
            return False
        return True

    def rename(self, old_path: str, new_path: str) -> bool:
        """Move an object, or every object below a folder prefix.

        Moving a folder is not atomic: objects are copied one by one,
        and a failure leaves the already moved objects at their new keys.
        An occupied destination is refused, since copying onto it would
        replace objects with the same names.

        Args:
            old_path: Current media path.
            new_path: New media path.

        Returns:
            True on success.
        """
        source = _name(old_path)
        destination = _name(new_path)
        try:
            if (
                not destination
                or self._storage.object_exists(destination)
                or self._storage.has_prefix(f'{destination}/')
            ):
                logger.warning('Move target already exists: %s', new_path)
                return False
            if self._storage.object_exists(source):
                self._storage.move_object(source, destination)
                return True
            names = list(self._storage.names_under(f'{source}/'))
            if not names:
                logger.warning('Nothing to move at: %s', old_path)
                return False
            for name in names:
                self._storage.move_object(
                    name,
                    destination + name[len(source):],
                )
        except _S3_ERRORS:
            logger.exception('Move failed: %s -> %s', old_path, new_path)
            return False
        return True

    def store(self, path: str, name: str, content: Any) -> bool:
        """Persist content as path/name.

        Args:
            path: Media path of the target folder.
            name: Target object name.
            content: Bytes, stream or Django File.

        Returns:
            True on success.
        """
        target = _join(path, name)
        try:
            saved_name = self._storage.save(target, _as_file(content))
        except _S3_ERRORS:
            logger.exception('Failed to store object: %s', target)
            return False
        if saved_name != target:
            logger.warning('Stored %s under another name: %s', target, saved_name)
        return True

    def _listdir(self, path: str) -> tuple[list[str], list[str]]:
        try:
            return self._storage.listdir(_name(path))
        except _S3_ERRORS:
            logger.exception('Cannot list folder: %s', path)
            return [], []


def get_disk() -> Disk:
    """Get the disk serving the configured ``media`` storage.

    Returns:
        Disk adapter for the backend configured in STORAGES['media'].

    Raises:
        ImproperlyConfigured: If the backend has no disk adapter.
    """
    backend = storages['media']
    if isinstance(backend, MediaS3Storage):
        return S3Disk(backend)
    if isinstance(backend, FileSystemStorage):
        return LocalDisk(backend)
    raise ImproperlyConfigured(
        f'No media disk adapter for {type(backend).__name__}',
    )
