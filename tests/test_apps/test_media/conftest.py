"""Shared fixtures for media app tests."""

from collections.abc import Callable
from pathlib import Path

import boto3
import pytest
from django.core.files.storage import FileSystemStorage
from moto import mock_aws

from server.apps.media.errors import ErrorSink
from server.apps.media.infrastructure.disk import LocalDisk, S3Disk
from server.apps.media.infrastructure.storage import MediaS3Storage
from server.apps.media.logic.manager import MediaManager


@pytest.fixture
def public_url() -> str:
    """Public base URL used for file web paths.

    Returns:
        Base URL string.
    """
    return 'https://media.example.com'


@pytest.fixture
def media_root(tmp_path: Path) -> Path:
    """Root directory of the local media disk.

    Returns:
        Path that does not exist until something is written.
    """
    return tmp_path / 'public'


@pytest.fixture
def disk(media_root: Path) -> LocalDisk:
    """Create local disk over the temporary media root.

    Returns:
        LocalDisk instance.
    """
    return LocalDisk(FileSystemStorage(location=str(media_root)))


@pytest.fixture
def errors() -> ErrorSink:
    """Create an empty error sink.

    Returns:
        ErrorSink instance.
    """
    return ErrorSink()


@pytest.fixture
def manager(
    disk: LocalDisk,
    errors: ErrorSink,
    public_url: str,
) -> MediaManager:
    """Create media manager bound to the local disk.

    Returns:
        MediaManager instance.
    """
    return MediaManager(disk=disk, errors=errors, public_url=public_url)


@pytest.fixture
def make_file(media_root: Path) -> Callable[..., Path]:
    """Factory writing a file below the media root.

    Returns:
        Function taking a relative path and optional content.
    """

    def factory(relative: str, content: bytes = b'content') -> Path:
        target = media_root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        return target

    return factory


@pytest.fixture
def make_dir(media_root: Path) -> Callable[[str], Path]:
    """Factory creating a directory below the media root.

    Returns:
        Function taking a relative path.
    """

    def factory(relative: str) -> Path:
        target = media_root / relative
        target.mkdir(parents=True, exist_ok=True)
        return target

    return factory


@pytest.fixture
def mock_s3():
    """Mock S3 service with media bucket.

    Yields:
        boto3 S3 resource with media bucket created.
    """
    with mock_aws():
        # Create S3 resource
        conn = boto3.resource('s3', region_name='us-east-1')

        # Create bucket
        conn.create_bucket(Bucket='media')

        yield conn


@pytest.fixture
def s3_storage(mock_s3) -> MediaS3Storage:
    """Create S3 storage for the mocked media bucket.

    Returns:
        MediaS3Storage instance.
    """
    return MediaS3Storage(
        bucket_name='media',
        access_key='testing',
        secret_key='testing',
        region_name='us-east-1',
    )


@pytest.fixture
def s3_disk(s3_storage: MediaS3Storage) -> S3Disk:
    """Create S3 disk over the mocked media bucket.

    Returns:
        S3Disk instance.
    """
    return S3Disk(s3_storage)
