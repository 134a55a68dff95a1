"""Management command to find file records whose content is missing."""

import logging
from typing import Any

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from server.apps.files.exceptions import (
    BackendUnavailableError,
    StoredFileNotFoundError,
)
from server.apps.files.models import FileRecord

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Report (and optionally purge) records of the active backend without content."""

    help = 'Check that every file record still has its stored content'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--purge-dangling',
            action='store_true',
            help='Delete records whose content is missing',
        )
        parser.add_argument(
            '--user',
            dest='username',
            default=None,
            help='Only check files of this username',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the verification.

        Args:
            args: Positional arguments (unused).
            options: Command options.

        Raises:
            CommandError: If the storage backend cannot be reached.
        """
        purge = options['purge_dangling']
        service = apps.get_app_config('files').file_service  # type: ignore[attr-defined]

        records = FileRecord.objects.filter(
            backend=service.backend.name,
        ).select_related('user').order_by('id')
        if options['username']:
            records = records.filter(user__username=options['username'])

        checked = 0
        dangling = 0
        purged = 0

        for record in records.iterator():
            checked += 1
            try:
                exists = service.backend.exists(record.storage_key)
            except BackendUnavailableError as exc:
                raise CommandError(
                    f'Storage backend unavailable: {exc}',
                ) from exc

            if exists:
                continue

            dangling += 1
            self.stdout.write(
                f'Missing content: {record.original_name} '
                f'(ID: {record.id}, user: {record.user.username}, '
                f'key: {record.storage_key})',
            )
            logger.warning(
                'File record without content: ID=%d, key=%s',
                record.id,
                record.storage_key,
            )

            if purge:
                try:
                    service.records.delete(record)
                except StoredFileNotFoundError:
                    continue
                purged += 1

        summary = f'Checked {checked} files, {dangling} missing content'
        if purge:
            summary = f'{summary}, {purged} records purged'
        self.stdout.write(self.style.SUCCESS(summary))
