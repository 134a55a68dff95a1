"""Django storage classes holding uploaded file content."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Final, final

from typing_extensions import override

from django.core.files.storage import FileSystemStorage
from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)

_TEMP_PREFIX: Final = '.upload-'
_TEMP_SUFFIX: Final = '.part'


@final
class LocalFileStorage(FileSystemStorage):
    """Filesystem storage confined to a single root directory.

    Extends Django's FileSystemStorage with:
    - All-or-nothing writes (temporary file + atomic rename)
    - Enhanced error logging

    Path resolution goes through ``FileSystemStorage.path``, which
    canonicalizes the name and raises ``SuspiciousFileOperation`` for
    any name escaping ``location``.
    """

    @override
    def save(
        self,
        name: str | None,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to disk with error handling and logging.

        Args:
            name: Storage name for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage name used (may differ from name if conflicts).

        Raises:
            OSError: If writing to disk fails.
        """
        try:
            logger.info('Writing file to local storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully wrote file: %s', saved_name)
        except Exception:
            logger.exception('Failed to write file to local storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from disk with error handling and logging.

        Missing files are ignored by FileSystemStorage.

        Args:
            name: Storage name of file to delete.

        Raises:
            OSError: If the file exists but cannot be removed.
        """
        try:
            logger.info('Deleting file from local storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from local storage: %s', name)
            raise

    @override
    def _save(self, name: str, content: Any) -> str:
        """Write content next to its destination, then rename into place.

        The root directory (and any parent) is created on first use.

        Args:
            name: Storage name for the file.
            content: Django File with ``chunks()``.

        Returns:
            Storage name, with forward slashes.
        """
        full_path = Path(self.path(name))
        self._ensure_directory(full_path.parent)

        fd, temp_path = tempfile.mkstemp(
            dir=full_path.parent,
            prefix=_TEMP_PREFIX,
            suffix=_TEMP_SUFFIX,
        )
        try:
            with os.fdopen(fd, 'wb') as temp_file:
                for chunk in content.chunks():
                    temp_file.write(chunk)
            if self.file_permissions_mode is not None:
                os.chmod(temp_path, self.file_permissions_mode)
            os.replace(temp_path, full_path)
        except BaseException:
            Path(temp_path).unlink(missing_ok=True)
            raise

        return str(name).replace('\\', '/')

    def _ensure_directory(self, directory: Path) -> None:
        if self.directory_permissions_mode is None:
            directory.mkdir(parents=True, exist_ok=True)
        else:
            directory.mkdir(
                mode=self.directory_permissions_mode,
                parents=True,
                exist_ok=True,
            )


@final
class ObjectFileStorage(S3Storage):
    """S3-compatible storage backend for user files.

    Extends django-storages S3Storage with:
    - Enhanced error logging
    """

    @override
    def save(
        self,
        name: str | None,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Object key for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual object key used (may differ from name if conflicts).

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Object key of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise
