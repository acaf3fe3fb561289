"""Django app configuration for media app."""

from django.apps import AppConfig


class MediaConfig(AppConfig):
    """Configuration for media app."""

    name = 'server.apps.media'
    verbose_name = 'Media manager'
