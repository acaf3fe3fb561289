"""Core Django settings."""

from server.settings.components import config

SECRET_KEY = config('DJANGO_SECRET_KEY', default='media-manager-insecure-key')

DEBUG = config('DJANGO_DEBUG', cast=bool, default=False)

ALLOWED_HOSTS = config(
    'DJANGO_ALLOWED_HOSTS',
    cast=lambda hosts: [host.strip() for host in hosts.split(',')],
    default='localhost',
)

INSTALLED_APPS = [
    'server.apps.media',
]

# The media manager keeps no database state
DATABASES: dict[str, dict[str, str]] = {}

USE_TZ = True
TIME_ZONE = 'UTC'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
