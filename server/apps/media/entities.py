"""Result entities returned by the media browser.

Entities are immutable snapshots built on demand for every call.
Nothing here is persisted; durable state lives in the storage backend.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, final

# Ordered mapping of absolute directory path to its display label
DirectoryTree = dict[str, str]

# (path, label) pair of a breadcrumb trail
Breadcrumb = tuple[str, str]


@final
@dataclass(frozen=True, slots=True)
class FileEntry:
    """Metadata snapshot of a single file."""

    name: str
    full_path: str
    web_path: str
    mime_type: str
    size: int
    modified: datetime
    relative_path: str

    def as_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys of the media manager API.

        Returns:
            Dictionary representation.
        """
        return {
            'name': self.name,
            'fullPath': self.full_path,
            'webPath': self.web_path,
            'mimeType': self.mime_type,
            'size': self.size,
            'modified': self.modified,
            'relativePath': self.relative_path,
        }


@final
@dataclass(frozen=True, slots=True)
class FolderView:
    """Contents of one browsed directory.

    ``breadcrumbs`` holds the ancestors only (root first, labelled
    ``Root``); the current folder is exposed as ``folder_name``.
    """

    folder: str
    folder_name: str
    breadcrumbs: tuple[Breadcrumb, ...] = ()
    subfolders: dict[str, str] = field(default_factory=dict)
    files: tuple[FileEntry, ...] = ()

    @property
    def items_count(self) -> int:
        """Combined count of subfolders and files."""
        return len(self.subfolders) + len(self.files)

    def as_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys of the media manager API.

        Returns:
            Dictionary representation.
        """
        return {
            'folder': self.folder,
            'folderName': self.folder_name,
            'breadcrumbs': dict(self.breadcrumbs),
            'subfolders': dict(self.subfolders),
            'files': [file_entry.as_dict() for file_entry in self.files],
            'itemsCount': self.items_count,
        }
