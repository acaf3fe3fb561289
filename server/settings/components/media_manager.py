"""Media manager settings."""

from server.settings.components import BASE_DIR, config

# Which adapter serves the media disk: 'local' or 's3'
MEDIA_MANAGER_DISK = config('MEDIA_MANAGER_DISK', default='local')

# Base directory of the local media disk
MEDIA_MANAGER_ROOT = config(
    'MEDIA_MANAGER_ROOT',
    default=str(BASE_DIR.joinpath('storage', 'app', 'public')),
)

# Public base URL prefixed onto /storage/... file paths
MEDIA_MANAGER_PUBLIC_URL = config(
    'MEDIA_MANAGER_PUBLIC_URL',
    default='http://localhost:8000',
)
