"""Metadata store for file records."""

import logging
from typing import Any

from django.db import transaction
from django.db.models import QuerySet

from server.apps.files.exceptions import StoredFileNotFoundError
from server.apps.files.models import FileRecord

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


class FileRecordStore:
    """Persists file records of one blob backend.

    Every lookup is filtered by owner in the same query that selects
    the record, so a foreign id behaves exactly like a missing one.
    """

    def __init__(self, backend_name: str) -> None:
        """Initialize store.

        Args:
            backend_name: Name of the active blob backend; records of
                other backends are invisible through this store.
        """
        self.backend_name = backend_name

    def save(self, record: FileRecord) -> FileRecord:
        """Validate and insert a new record.

        Identity and ``uploaded_at`` are assigned by the database.

        Args:
            record: Unsaved record.

        Returns:
            The same record, now with ``id`` and ``uploaded_at`` set.

        Raises:
            ValidationError: If the record fails model validation.
            DatabaseError: If the insert fails.
        """
        record.backend = self.backend_name
        record.full_clean()
        with transaction.atomic():
            record.save(force_insert=True)
        logger.info(
            'File record created: %s (ID: %d)',
            record.storage_key,
            record.id,
        )
        return record

    def find_by_owner(self, user: _User) -> QuerySet[FileRecord]:
        """List records owned by user, newest first.

        Args:
            user: Owner of the records.

        Returns:
            QuerySet ordered by upload time, then id, both descending.
        """
        return self._records().filter(user=user).order_by('-uploaded_at', '-id')

    def find_by_id_for_owner(self, file_id: object, user: _User) -> FileRecord:
        """Get one record by id, only if owned by user.

        Args:
            file_id: Record identifier, as received from the caller.
            user: Expected owner.

        Returns:
            Matching FileRecord.

        Raises:
            StoredFileNotFoundError: If no record with this id belongs
                to user (including malformed ids).
        """
        try:
            return self._records().get(pk=file_id, user=user)
        except (FileRecord.DoesNotExist, ValueError, TypeError) as error:
            raise StoredFileNotFoundError(file_id) from error

    def delete(self, record: FileRecord) -> None:
        """Delete record in a single owner-scoped statement.

        Args:
            record: Record to delete.

        Raises:
            StoredFileNotFoundError: If the record was already deleted.
        """
        with transaction.atomic():
            deleted, _ = self._records().filter(
                pk=record.pk,
                user_id=record.user_id,
            ).delete()

        if not deleted:
            raise StoredFileNotFoundError(record.pk)
        logger.info('File record deleted from database: ID=%d', record.pk)

    def _records(self) -> QuerySet[FileRecord]:
        return FileRecord.objects.filter(backend=self.backend_name)
