"""Management command to browse the media disk."""

import json
from typing import Any, final, override

from django.core.management.base import BaseCommand
from django.core.serializers.json import DjangoJSONEncoder

from server.apps.media.entities import FolderView
from server.apps.media.logic.manager import MediaManager
from server.apps.media.logic.paths import ROOT_PATH


@final
class Command(BaseCommand):
    """List a media folder or the tree of move targets."""

    help = 'Browse the media disk'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            'folder',
            nargs='?',
            default=ROOT_PATH,
            help='Folder to list (default: root)',
        )
        parser.add_argument(
            '--tree',
            action='store_true',
            help='Show every directory instead of one folder',
        )
        parser.add_argument(
            '--json',
            action='store_true',
            help='Print the folder listing as JSON',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        manager = MediaManager()

        if options['tree']:
            for label in manager.all_directories().values():
                self.stdout.write(label)
            return

        view = manager.folder_info(options['folder'])
        if options['json']:
            self.stdout.write(
                json.dumps(view.as_dict(), cls=DjangoJSONEncoder, indent=2),
            )
            return

        self._write_listing(view)

    def _write_listing(self, view: FolderView) -> None:
        trail = ' / '.join(label for _, label in view.breadcrumbs)
        if trail:
            self.stdout.write(f'{trail} / {view.folder_name}')
        else:
            self.stdout.write(view.folder_name)

        for path in view.subfolders:
            self.stdout.write(f'  [dir]  {path}')
        for file_entry in view.files:
            self.stdout.write(
                f'  {file_entry.size:>8}  {file_entry.full_path} '
                f'({file_entry.mime_type})',
            )

        self.stdout.write(
            self.style.SUCCESS(f'{view.items_count} items in {view.folder}'),
        )
