"""Business logic for file operations."""

import dataclasses
import logging
from typing import IO, Any

from django.core.exceptions import ValidationError
from django.core.files.base import File
from django.db.models import QuerySet

from server.apps.files.exceptions import (
    BackendUnavailableError,
    BlobNotFoundError,
    InconsistencyError,
    StoredFileNotFoundError,
)
from server.apps.files.infrastructure.backends import BlobBackend
from server.apps.files.infrastructure.metadata import FileRecordStore
from server.apps.files.infrastructure.naming import (
    DEFAULT_CONTENT_TYPE,
    clean_content_type,
    clean_display_name,
)
from server.apps.files.models import FileRecord

# User type for Django's dynamic user model
_User = Any

_Content = bytes | IO[bytes] | File

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class FileDownload:
    """Content stream of a file plus what is needed to serve it."""

    stream: File
    content_type: str
    filename: str
    size: int


class FileService:
    """Upload, list, download and delete files of a single user.

    Combines the blob backend (content) and the record store (metadata).
    Content is always written before its record and removed before it,
    so every listed record can be downloaded.
    """

    def __init__(self, backend: BlobBackend, records: FileRecordStore) -> None:
        """Initialize service.

        Args:
            backend: Blob backend holding file content.
            records: Metadata store scoped to the same backend.
        """
        self.backend = backend
        self.records = records

    def upload(  # noqa: WPS211
        self,
        content: _Content,
        original_name: str | None,
        content_type: str | None,
        owner: _User,
        declared_size: int | None = None,
    ) -> FileRecord:
        """Store file content and create its record.

        Transaction safety: Store content first, then create DB record.
        If the DB insert fails, the stored content is deleted again
        (rollback).

        Args:
            content: Raw bytes or a file-like object.
            original_name: Client filename (untrusted, display only).
            content_type: Client MIME type (advisory).
            owner: Owner of the file.
            declared_size: Size announced by the client, if any.

        Returns:
            Created FileRecord.

        Raises:
            ValidationError: If the content is empty.
            BackendUnavailableError: If storing the content fails.
            InconsistencyError: If the DB insert failed and the stored
                content could not be removed.
        """
        size_bytes = _get_content_size(content)
        if size_bytes == 0:
            raise ValidationError('Cannot upload an empty file', code='empty')
        if declared_size is not None and declared_size != size_bytes:
            logger.warning(
                'Declared size %d differs from received size %d',
                declared_size,
                size_bytes,
            )

        display_name = clean_display_name(original_name)
        content_type = clean_content_type(content_type)

        # Step 1: Store content first
        storage_key = self.backend.put(content, content_type, display_name)

        # Step 2: Create database record
        record = FileRecord(
            user=owner,
            original_name=display_name,
            content_type=content_type,
            size_bytes=size_bytes,
            storage_key=storage_key,
        )
        try:
            return self.records.save(record)
        except Exception as error:
            logger.exception(
                'Database insert failed, rolling back stored content: %s',
                storage_key,
            )
            if not self._rollback_upload(storage_key):
                raise InconsistencyError(
                    storage_key,
                    'content stored without a file record',
                ) from error
            raise

    def list_files(self, owner: _User) -> QuerySet[FileRecord]:
        """List owner's files, newest first.

        Args:
            owner: Owner of files.

        Returns:
            QuerySet of FileRecord objects.
        """
        return self.records.find_by_owner(owner)

    def download(self, file_id: object, owner: _User) -> FileDownload:
        """Open a file owned by owner for reading.

        Args:
            file_id: ID of the file.
            owner: Expected owner of the file.

        Returns:
            FileDownload; the caller must close its stream.

        Raises:
            StoredFileNotFoundError: If the file is missing or not owned
                by owner, or its content is gone.
            BackendUnavailableError: If the backend cannot be read.
        """
        record = self.records.find_by_id_for_owner(file_id, owner)

        try:
            stream = self.backend.open(record.storage_key)
        except BlobNotFoundError:
            logger.error(
                'File record points at missing content: ID=%d, key=%s',
                record.id,
                record.storage_key,
            )
            raise

        return FileDownload(
            stream=stream,
            content_type=record.content_type or DEFAULT_CONTENT_TYPE,
            filename=record.original_name,
            size=record.size_bytes,
        )

    def delete(self, file_id: object, owner: _User) -> None:
        """Delete a file owned by owner, content first, then its record.

        If the content cannot be removed, the record is kept: a visible
        record of an existing file is preferred over unreachable content.

        Args:
            file_id: ID of file to delete.
            owner: Expected owner of the file.

        Raises:
            StoredFileNotFoundError: If the file is missing or not owned
                by owner.
            BackendUnavailableError: If deleting the content fails.
            InconsistencyError: If the content was deleted but the
                record could not be.
        """
        record = self.records.find_by_id_for_owner(file_id, owner)
        logger.info(
            'Deleting file: ID=%d, key=%s',
            record.id,
            record.storage_key,
        )

        try:
            self.backend.delete(record.storage_key)
        except BackendUnavailableError:
            logger.exception(
                'Failed to delete content, keeping record: ID=%d',
                record.id,
            )
            raise

        try:
            self.records.delete(record)
        except StoredFileNotFoundError:
            raise
        except Exception as error:
            logger.exception(
                'Content deleted but record remains: ID=%d',
                record.id,
            )
            raise InconsistencyError(
                record.storage_key,
                'file record left without content',
            ) from error

    def _rollback_upload(self, storage_key: str) -> bool:
        """Delete stored content after a failed DB insert.

        This is a best-effort operation - if deletion fails, the error
        is logged and reported to the caller instead of raised.

        Args:
            storage_key: Key of the content to delete.

        Returns:
            True if the content is gone, False if it was orphaned.
        """
        try:
            logger.warning('Rolling back upload, deleting content: %s', storage_key)
            self.backend.delete(storage_key)
        except BackendUnavailableError:
            logger.exception(
                'Failed to rollback upload, orphaned content: %s',
                storage_key,
            )
            return False

        logger.info('Successfully rolled back upload: %s', storage_key)
        return True


def _get_content_size(content: _Content) -> int:
    """Get content size in bytes.

    Args:
        content: Raw bytes or a file-like object.

    Returns:
        Size in bytes; file-like objects are left at position 0.
    """
    if isinstance(content, bytes):
        return len(content)
    if getattr(content, 'size', None) is not None:
        return content.size
    content.seek(0)
    file_size = len(content.read())
    content.seek(0)  # Reset after reading for size
    return file_size
