"""Business logic for media mutations.

Every operation sanitizes its paths, checks a precondition against the
disk, and only then performs the mutating call. A violated precondition
or a refused storage call is recorded in the ``ErrorSink`` and reported
as ``False``; nothing here raises for expected conditions.

The existence check and the mutation are two separate disk calls.
Another actor changing the disk in between (time-of-check/time-of-use)
is an accepted limitation: operations do not lock, version or retry.
"""

import logging

from server.apps.media.errors import ErrorKind, ErrorSink
from server.apps.media.infrastructure.disk import Disk
from server.apps.media.logic.paths import clean_folder, entry_name, join_path

logger = logging.getLogger(__name__)


def create_directory(disk: Disk, errors: ErrorSink, folder: str) -> bool:
    """Create a new directory.

    Args:
        disk: Media disk.
        errors: Sink for failure reasons.
        folder: Untrusted path of the new directory.

    Returns:
        True if the directory was created.
    """
    folder = clean_folder(folder)
    if disk.exists(folder):
        errors.add(ErrorKind.PRECONDITION, f'Folder "{folder}" already exists.')
        return False

    logger.info('Creating folder: %s', folder)
    return _storage_result(
        errors,
        disk.make_directory(folder),
        f'Unable to create folder "{folder}".',
    )


def delete_directory(disk: Disk, errors: ErrorSink, folder: str) -> bool:
    """Delete a directory, which must be empty.

    Args:
        disk: Media disk.
        errors: Sink for failure reasons.
        folder: Untrusted path of the directory.

    Returns:
        True if the directory was deleted.
    """
    folder = clean_folder(folder)
    if disk.directories(folder) or disk.files(folder):
        errors.add(
            ErrorKind.PRECONDITION,
            'The directory must be empty to delete it.',
        )
        return False

    logger.info('Deleting folder: %s', folder)
    return _storage_result(
        errors,
        disk.delete_directory(folder),
        f'Unable to delete folder "{folder}".',
    )


def delete_file(disk: Disk, errors: ErrorSink, path: str) -> bool:
    """Delete a file.

    Args:
        disk: Media disk.
        errors: Sink for failure reasons.
        path: Untrusted path of the file.

    Returns:
        True if the file was deleted.
    """
    path = clean_folder(path)
    if not disk.exists(path):
        errors.add(ErrorKind.PRECONDITION, 'File does not exist.')
        return False

    logger.info('Deleting file: %s', path)
    return _storage_result(
        errors,
        disk.delete(path),
        f'Unable to delete file "{path}".',
    )


def rename(
    disk: Disk,
    errors: ErrorSink,
    path: str,
    original_name: str,
    new_name: str,
) -> bool:
    """Rename an entry within its folder.

    Both names are reduced to their last segment, so an entry never
    leaves its folder through a rename.

    Args:
        disk: Media disk.
        errors: Sink for failure reasons.
        path: Untrusted folder path containing the entry.
        original_name: Current entry name.
        new_name: New entry name.

    Returns:
        True if the entry was renamed.
    """
    path = clean_folder(path)
    original_name = entry_name(original_name)
    new_name = entry_name(new_name)
    if not original_name or not new_name:
        errors.add(ErrorKind.PRECONDITION, 'Invalid file name.')
        return False

    new_path = join_path(path, new_name)
    if disk.exists(new_path):
        errors.add(
            ErrorKind.PRECONDITION,
            f'The file "{new_name}" already exists in this folder.',
        )
        return False

    old_path = join_path(path, original_name)
    logger.info('Renaming %s to %s', old_path, new_path)
    return _storage_result(
        errors,
        disk.rename(old_path, new_path),
        f'Unable to rename "{original_name}".',
    )


def move_file(
    disk: Disk,
    errors: ErrorSink,
    current_file: str,
    new_file: str,
    is_folder: bool = False,
) -> bool:
    """Move a file (or a folder picked as an item) to a new path.

    Args:
        disk: Media disk.
        errors: Sink for failure reasons.
        current_file: Untrusted current path.
        new_file: Untrusted destination path.
        is_folder: Whether the moved item is a folder.

    Returns:
        True if the item was moved.
    """
    current_file = clean_folder(current_file)
    new_file = clean_folder(new_file)
    if disk.exists(new_file):
        errors.add(ErrorKind.PRECONDITION, 'File already exists.')
        return False

    logger.info(
        'Moving %s from %s to %s',
        'folder' if is_folder else 'file',
        current_file,
        new_file,
    )
    return _storage_result(
        errors,
        disk.rename(current_file, new_file),
        f'Unable to move "{current_file}".',
    )


def move_folder(
    disk: Disk,
    errors: ErrorSink,
    current_folder: str,
    new_folder: str,
) -> bool:
    """Move a folder to a new path.

    The destination may be neither the folder itself nor any path that
    starts with it, which would nest the folder inside itself.

    Args:
        disk: Media disk.
        errors: Sink for failure reasons.
        current_folder: Untrusted current folder path.
        new_folder: Untrusted destination path.

    Returns:
        True if the folder was moved.
    """
    current_folder = clean_folder(current_folder)
    new_folder = clean_folder(new_folder)
    if new_folder == current_folder:
        errors.add(
            ErrorKind.PRECONDITION,
            'Please select another folder to move this folder into.',
        )
        return False

    if new_folder.startswith(current_folder):
        errors.add(
            ErrorKind.PRECONDITION,
            'You can not move this folder inside of itself.',
        )
        return False

    logger.info('Moving folder from %s to %s', current_folder, new_folder)
    return _storage_result(
        errors,
        disk.rename(current_folder, new_folder),
        f'Unable to move folder "{current_folder}".',
    )


def _storage_result(errors: ErrorSink, succeeded: bool, message: str) -> bool:
    """Record a storage failure message when the disk refused a call."""
    if not succeeded:
        errors.add(ErrorKind.STORAGE, message)
    return succeeded
