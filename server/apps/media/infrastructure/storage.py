"""Custom storage backend for S3-compatible media storage."""

import logging
from collections.abc import Iterator
from typing import Any, Final, final, override

from botocore.exceptions import ClientError
from django.core.files.base import ContentFile
from storages.backends.s3 import S3Storage
from storages.utils import clean_name

logger = logging.getLogger(__name__)

# Marker object that keeps an empty folder visible in a bucket
FOLDER_MARKER_NAME: Final = '.folder'

_NOT_FOUND_CODES: Final = frozenset(('404', 'NoSuchKey', 'NotFound'))


@final
class MediaS3Storage(S3Storage):
    """S3 storage backend for the media disk.

    Extends django-storages S3Storage with:
    - Enhanced error logging around writes and deletes
    - Folder markers, since buckets have no real directories
    - Server-side move of single objects
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Write a media object, logging the outcome.

        Args:
            name: Object name relative to the media location.
            content: Django File with the object body.
            max_length: Optional maximum length for the object name.

        Returns:
            Name the object was written under, which differs from name
            when the bucket already holds that key.

        Raises:
            ClientError: If the bucket rejects the write.
        """
        logger.info('Writing media object: %s', name)
        try:
            saved_name = super().save(name, content, max_length)
        except Exception:
            logger.exception('Media object write failed: %s', name)
            raise
        logger.debug('Media object written: %s', saved_name)
        return saved_name

    @override
    def delete(self, name: str) -> None:
        """Remove a media object or folder marker, logging the outcome.

        Args:
            name: Object name relative to the media location.

        Raises:
            ClientError: If the bucket rejects the delete.
        """
        logger.info('Removing media object: %s', name)
        try:
            super().delete(name)
        except Exception:
            logger.exception('Media object removal failed: %s', name)
            raise

    def object_exists(self, name: str) -> bool:
        """Check whether an object with exactly this name exists.

        Args:
            name: Storage path of the object.

        Returns:
            True if the object exists.

        Raises:
            ClientError: For S3 errors other than a missing key.
        """
        try:
            self.connection.meta.client.head_object(
                Bucket=self.bucket_name,
                Key=self._key(name),
            )
        except ClientError as error:
            if error.response.get('Error', {}).get('Code') in _NOT_FOUND_CODES:
                return False
            raise
        return True

    def has_prefix(self, prefix: str) -> bool:
        """Check whether any object lives under the given prefix.

        Args:
            prefix: Key prefix, usually a folder path ending with '/'.

        Returns:
            True if at least one object matches.
        """
        objects = self.bucket.objects.filter(Prefix=self._key(prefix))
        return any(True for _ in objects.limit(1))

    def names_under(self, prefix: str) -> Iterator[str]:
        """Iterate storage names of all objects under a prefix.

        Keys come back in the lexicographic order S3 lists them.

        Args:
            prefix: Key prefix ('' for the whole bucket location).

        Yields:
            Storage names relative to the storage location.
        """
        location = self._key('')
        key_prefix = self._key(prefix) if prefix else location
        for summary in self.bucket.objects.filter(Prefix=key_prefix):
            yield summary.key[len(location):].lstrip('/')

    def make_folder(self, name: str) -> str:
        """Create a folder by writing its hidden marker object.

        Args:
            name: Storage path of the folder.

        Returns:
            Storage name of the marker object.
        """
        marker_name = f'{name.rstrip("/")}/{FOLDER_MARKER_NAME}'
        return self.save(marker_name, ContentFile(b''))

    def move_object(self, source: str, destination: str) -> None:
        """Move a media object with a server-side copy and a delete.

        Buckets cannot rename keys. If the copy succeeds and the delete
        fails, the object is left under both names and nothing is lost.

        Args:
            source: Current object name.
            destination: New object name.

        Raises:
            ClientError: If the copy or the delete is rejected.
        """
        logger.info('Moving media object: %s -> %s', source, destination)
        copy_source = {
            'Bucket': self.bucket_name,
            'Key': self._key(source),
        }
        try:
            self.bucket.copy(copy_source, self._key(destination))
        except Exception:
            logger.exception(
                'Media object copy failed: %s -> %s',
                source,
                destination,
            )
            raise
        self.delete(source)

    def _key(self, name: str) -> str:
        """Translate a storage name into a bucket key.

        Delegates to django-storages normalization, which rejects
        names escaping the storage location.

        Args:
            name: Storage path.

        Returns:
            Bucket key.
        """
        return self._normalize_name(clean_name(name))
