"""Django storage configuration for the media disk.

The media disk is either a local directory (FileSystemStorage) or an
S3-compatible bucket (MinIO for local development, Cloudflare R2 in
production) served through django-storages.
"""

from typing import Any, Final

from server.settings.components import config
from server.settings.components.media_manager import (
    MEDIA_MANAGER_DISK,
    MEDIA_MANAGER_ROOT,
)

_LOCAL_MEDIA: Final[dict[str, Any]] = {
    'BACKEND': 'django.core.files.storage.FileSystemStorage',
    'OPTIONS': {
        'location': MEDIA_MANAGER_ROOT,
    },
}

_S3_MEDIA: Final[dict[str, Any]] = {
    'BACKEND': 'server.apps.media.infrastructure.storage.MediaS3Storage',
    'OPTIONS': {
        'bucket_name': config('AWS_STORAGE_BUCKET_NAME', default='media'),
        'access_key': config('AWS_ACCESS_KEY_ID', default=None),
        'secret_key': config('AWS_SECRET_ACCESS_KEY', default=None),
        'endpoint_url': config(
            'AWS_S3_ENDPOINT_URL',
            default=None,
        ),
        'region_name': config(
            'AWS_S3_REGION_NAME',
            default='auto',
        ),
        'file_overwrite': False,  # Collisions are rejected before saving
        'default_acl': None,  # Inherit bucket ACL
    },
}

# Media disk is kept separate from static files
STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'media': _S3_MEDIA if MEDIA_MANAGER_DISK == 's3' else _LOCAL_MEDIA,
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
