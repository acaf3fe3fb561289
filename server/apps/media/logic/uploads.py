"""Business logic for saving batches of uploaded files."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, final

from django.core.files.base import File

from server.apps.media.errors import ErrorKind, ErrorSink
from server.apps.media.infrastructure.disk import Disk
from server.apps.media.logic.paths import (
    ROOT_PATH,
    clean_folder,
    entry_name,
    join_path,
)

logger = logging.getLogger(__name__)


class UploadedPayload(Protocol):
    """One incoming file of an upload batch."""

    @property
    def original_name(self) -> str:
        """Name the client declared for the file."""

    def store_as(self, directory: str, name: str) -> bool:
        """Persist the payload as directory/name."""


@final
@dataclass(frozen=True, slots=True)
class DiskUpload:
    """Uploaded Django file that stores itself on a media disk."""

    disk: Disk
    content: File

    @property
    def original_name(self) -> str:
        """Name the client declared for the file."""
        return self.content.name or ''

    def store_as(self, directory: str, name: str) -> bool:
        """Persist the payload as directory/name.

        Args:
            directory: Media path of the target folder.
            name: Target file name.

        Returns:
            True if the disk stored the file.
        """
        return self.disk.store(directory, name, self.content)


def disk_uploads(disk: Disk, files: Iterable[File]) -> list[DiskUpload]:
    """Wrap request files (e.g., ``request.FILES.getlist``) as payloads.

    Args:
        disk: Media disk receiving the files.
        files: Uploaded Django files, in arrival order.

    Returns:
        Payloads in the same order.
    """
    return [DiskUpload(disk=disk, content=uploaded) for uploaded in files]


def save_uploaded_files(
    disk: Disk,
    errors: ErrorSink,
    files: Iterable[UploadedPayload],
    path: str = ROOT_PATH,
) -> int:
    """Save a batch of uploaded files into a folder.

    Every payload is attempted. A name that already exists, an unusable
    name or a refused store is recorded and skipped; nothing is ever
    overwritten.

    Args:
        disk: Media disk.
        errors: Sink for per-file failure reasons.
        files: Payloads in arrival order.
        path: Untrusted target folder path.

    Returns:
        Number of files stored.
    """
    path = clean_folder(path)
    uploaded = 0

    for payload in files:
        file_name = entry_name(payload.original_name)
        if not file_name:
            errors.add(
                ErrorKind.BATCH,
                f'Invalid file name "{payload.original_name}".',
            )
            continue

        target = join_path(path, file_name)
        if disk.exists(target):
            errors.add(
                ErrorKind.BATCH,
                f'File {target} already exists in this folder.',
            )
            continue

        if not payload.store_as(path, file_name):
            errors.add(ErrorKind.BATCH, f'Unable to upload "{file_name}".')
            continue

        logger.info('Uploaded file: %s', target)
        uploaded += 1

    logger.info('Uploaded %d files to %s', uploaded, path)
    return uploaded
