"""Per-request facade over the media logic."""

from collections.abc import Iterable
from datetime import datetime
from typing import final

from django.conf import settings
from django.core.files.base import File

from server.apps.media.entities import DirectoryTree, FolderView
from server.apps.media.errors import ErrorSink
from server.apps.media.infrastructure.disk import Disk, get_disk
from server.apps.media.infrastructure.metadata import (
    find_mime_type,
    get_file_extension,
    timestamp_to_datetime,
)
from server.apps.media.logic import browser, mutations, uploads
from server.apps.media.logic.browser import MimeLookup
from server.apps.media.logic.paths import ROOT_PATH, clean_folder, web_path


@final
class MediaManager:
    """Media browser and mutator bound to one disk and one error sink.

    Create one manager per request. Mutations return a success flag and
    explain failures through ``errors()``, which is never cleared by the
    manager itself.
    """

    def __init__(
        self,
        disk: Disk | None = None,
        errors: ErrorSink | None = None,
        public_url: str | None = None,
        mime_lookup: MimeLookup = find_mime_type,
    ) -> None:
        """Initialize media manager.

        Args:
            disk: Media disk, defaults to the configured ``media`` storage.
            errors: Error sink, a fresh one by default.
            public_url: Public base URL, defaults to settings.
            mime_lookup: Extension to MIME type lookup.
        """
        self._disk = get_disk() if disk is None else disk
        self._errors = ErrorSink() if errors is None else errors
        if public_url is None:
            public_url = settings.MEDIA_MANAGER_PUBLIC_URL
        self._public_url = public_url
        self._mime_lookup = mime_lookup

    @property
    def error_sink(self) -> ErrorSink:
        """Error sink collecting failures of this manager."""
        return self._errors

    def errors(self) -> list[str]:
        """Get failure reasons recorded so far.

        Returns:
            Error messages in the order they occurred.
        """
        return self._errors.messages()

    def folder_info(self, folder: str = ROOT_PATH) -> FolderView:
        """Return files and subfolders of a folder."""
        return browser.folder_info(
            self._disk,
            folder,
            self._public_url,
            self._mime_lookup,
        )

    def all_directories(self) -> DirectoryTree:
        """Return every directory that an item can be moved to."""
        return browser.all_directories(self._disk)

    def file_web_path(self, path: str) -> str:
        """Return the full public URL of a file."""
        return web_path(path, self._public_url)

    def file_mime_type(self, path: str) -> str:
        """Return the MIME type of a file, by extension."""
        return self._mime_lookup(get_file_extension(path))

    def file_size(self, path: str) -> int:
        """Return the size of a file in bytes."""
        return self._disk.size(clean_folder(path))

    def file_modified(self, path: str) -> datetime:
        """Return the last modification time of a file."""
        return timestamp_to_datetime(
            self._disk.last_modified(clean_folder(path)),
        )

    def create_directory(self, folder: str) -> bool:
        """Create a new directory."""
        return mutations.create_directory(self._disk, self._errors, folder)

    def delete_directory(self, folder: str) -> bool:
        """Delete an empty directory."""
        return mutations.delete_directory(self._disk, self._errors, folder)

    def delete_file(self, path: str) -> bool:
        """Delete a file."""
        return mutations.delete_file(self._disk, self._errors, path)

    def rename(self, path: str, original_name: str, new_name: str) -> bool:
        """Rename an entry within its folder."""
        return mutations.rename(
            self._disk,
            self._errors,
            path,
            original_name,
            new_name,
        )

    def move_file(
        self,
        current_file: str,
        new_file: str,
        is_folder: bool = False,
    ) -> bool:
        """Move a file to a new path."""
        return mutations.move_file(
            self._disk,
            self._errors,
            current_file,
            new_file,
            is_folder,
        )

    def move_folder(self, current_folder: str, new_folder: str) -> bool:
        """Move a folder to a new path."""
        return mutations.move_folder(
            self._disk,
            self._errors,
            current_folder,
            new_folder,
        )

    def save_uploaded_files(
        self,
        files: Iterable[uploads.UploadedPayload],
        path: str = ROOT_PATH,
    ) -> int:
        """Save a batch of uploaded files, returning how many were stored.

        Django request files can be wrapped with ``disk_uploads``.
        """
        return uploads.save_uploaded_files(
            self._disk,
            self._errors,
            files,
            path,
        )

    def disk_uploads(self, files: Iterable[File]) -> list[uploads.DiskUpload]:
        """Wrap Django uploaded files as payloads for this manager's disk."""
        return uploads.disk_uploads(self._disk, files)
