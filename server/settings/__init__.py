"""Django settings entry point.

Settings are split into components and combined with django-split-settings.
Environment-specific values come from python-decouple.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/logging.py',
    'components/media_manager.py',
    'components/storages.py',
)
