"""Management command to revoke share links."""

import logging
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from server.apps.files.logic.link_operations import (
    revoke_link,
    revoke_links,
)
from server.apps.files.models import LinkState, ShareLink

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Revoke share links by slug or by file."""

    help = 'Revoke share links so they stop resolving'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            'slugs',
            nargs='*',
            help='Slugs of links to revoke',
        )
        parser.add_argument(
            '--file-id',
            type=int,
            help='Revoke every link of this file',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be revoked without revoking',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the revoke command.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If neither slugs nor a file ID were given.
        """
        slugs = options['slugs']
        file_id = options['file_id']

        if not slugs and file_id is None:
            raise CommandError('Give at least one slug or --file-id')

        links = ShareLink.objects.filter(state=LinkState.ACTIVE)
        if slugs:
            links = links.filter(slug__in=slugs)
        if file_id is not None:
            links = links.filter(file_id=file_id)

        if options['dry_run']:
            count = 0
            for share_link in links.select_related('file'):
                self.stdout.write(
                    f'Would revoke: {share_link.slug} '
                    f'(file: {share_link.file.filename})',
                )
                count += 1
            self.stdout.write(
                self.style.SUCCESS(f'Would revoke {count} share links'),
            )
            return

        if file_id is None:
            revoked = 0
            for slug in links.values_list('slug', flat=True):
                revoke_link(slug)
                revoked += 1
        else:
            revoked = revoke_links(links)
        logger.info('Revoked %d share links from command line', revoked)
        self.stdout.write(
            self.style.SUCCESS(f'Revoked {revoked} share links'),
        )
