"""Blob backends storing raw file content under generated keys.

A backend wraps one Django storage and is the only place where storage
errors are translated into the files app exceptions:

- a missing key becomes ``BlobNotFoundError``
- any other storage failure becomes ``BackendUnavailableError``

The active backend is chosen once, from ``FILES_BLOB_BACKEND``.
"""

import copy
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, Any, ClassVar, Final

from typing_extensions import override

from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.files.base import ContentFile, File
from django.core.files.storage import Storage, storages

from server.apps.files.exceptions import (
    BackendUnavailableError,
    BlobNotFoundError,
)
from server.apps.files.infrastructure.naming import (
    DEFAULT_CONTENT_TYPE,
    generate_local_key,
    generate_object_key,
)

logger = logging.getLogger(__name__)

_FILES_STORAGE_ALIAS: Final = 'files'


class BlobBackend(ABC):
    """Stores, resolves and removes raw bytes by backend-generated key."""

    name: ClassVar[str]

    # Exceptions meaning "the storage itself failed" for this backend
    unavailable_errors: ClassVar[tuple[type[BaseException], ...]] = (OSError,)

    def __init__(self, storage: Storage) -> None:
        """Initialize backend.

        Args:
            storage: Django storage owned by this backend for its lifetime.
        """
        self.storage = storage

    @abstractmethod
    def generate_key(self, original_name: str) -> str:
        """Generate a fresh storage key.

        Args:
            original_name: Display name of the upload.

        Returns:
            Key unique to this upload; never the raw client name.
        """

    def put(
        self,
        content: bytes | IO[bytes] | File,
        content_type: str | None,
        original_name: str,
    ) -> str:
        """Write content under a new key.

        Args:
            content: Raw bytes or a file-like object.
            content_type: Advisory MIME type sent by the client.
            original_name: Display name of the upload.

        Returns:
            Storage key the content was written under.

        Raises:
            BackendUnavailableError: If the write fails.
        """
        storage_key = self.generate_key(original_name)
        django_file = _as_django_file(content, storage_key)
        django_file.content_type = content_type or DEFAULT_CONTENT_TYPE

        with self._translate_errors('put', storage_key):
            return self.storage.save(storage_key, django_file)

    def get(self, storage_key: str) -> bytes:
        """Read the whole content stored under key.

        Args:
            storage_key: Key returned by ``put``.

        Returns:
            Stored bytes.

        Raises:
            BlobNotFoundError: If nothing is stored under key.
            BackendUnavailableError: If reading fails.
        """
        with self._translate_errors('get', storage_key):
            with self.storage.open(storage_key, 'rb') as stored:
                return stored.read()

    def open(self, storage_key: str) -> File:
        """Open a readable stream over the content stored under key.

        The caller owns the returned file and must close it.

        Args:
            storage_key: Key returned by ``put``.

        Returns:
            Django File positioned at the start of the content.

        Raises:
            BlobNotFoundError: If nothing is stored under key.
            BackendUnavailableError: If opening fails.
        """
        with self._translate_errors('open', storage_key):
            return self.storage.open(storage_key, 'rb')

    def delete(self, storage_key: str) -> None:
        """Delete the content stored under key.

        Deleting a key that holds nothing is not an error.

        Args:
            storage_key: Key returned by ``put``.

        Raises:
            BackendUnavailableError: If deletion fails.
        """
        try:
            with self._translate_errors('delete', storage_key):
                self.storage.delete(storage_key)
        except BlobNotFoundError:
            logger.debug('Content already absent: %s', storage_key)

    def exists(self, storage_key: str) -> bool:
        """Check whether content is stored under key.

        Args:
            storage_key: Key returned by ``put``.

        Returns:
            True if content exists, False otherwise.

        Raises:
            BackendUnavailableError: If the check itself fails.
        """
        with self._translate_errors('exists', storage_key):
            return self.storage.exists(storage_key)

    @contextmanager
    def _translate_errors(
        self,
        operation: str,
        storage_key: str,
    ) -> Iterator[None]:
        try:
            yield
        except FileNotFoundError as error:
            raise BlobNotFoundError(storage_key) from error
        except self.unavailable_errors as error:
            logger.exception(
                'Storage backend %s failed during %s: %s',
                self.name,
                operation,
                storage_key,
            )
            raise BackendUnavailableError(operation, storage_key) from error


class LocalBlobBackend(BlobBackend):
    """Content kept as flat files under one root directory."""

    name = 'local'

    @override
    def generate_key(self, original_name: str) -> str:
        return generate_local_key(original_name)


class ObjectStoreBlobBackend(BlobBackend):
    """Content kept as objects in an S3-compatible bucket."""

    name = 's3'

    unavailable_errors = (ClientError, BotoCoreError, Boto3Error, OSError)

    @override
    def generate_key(self, original_name: str) -> str:
        return generate_object_key(original_name)


BLOB_BACKENDS: Final[dict[str, type[BlobBackend]]] = {
    LocalBlobBackend.name: LocalBlobBackend,
    ObjectStoreBlobBackend.name: ObjectStoreBlobBackend,
}


def build_blob_backend(
    backend_name: str | None = None,
    storage_params: dict[str, Any] | None = None,
) -> BlobBackend:
    """Create the configured blob backend and its storage.

    Args:
        backend_name: Backend name, defaults to ``FILES_BLOB_BACKEND``.
        storage_params: ``{'BACKEND': ..., 'OPTIONS': ...}`` describing the
            storage, defaults to ``STORAGES['files']``.

    Returns:
        New backend instance owning a new storage instance.

    Raises:
        ImproperlyConfigured: If the backend name is unknown.
    """
    backend_name = backend_name or settings.FILES_BLOB_BACKEND
    try:
        backend_class = BLOB_BACKENDS[backend_name]
    except KeyError as error:
        raise ImproperlyConfigured(
            f'Unknown FILES_BLOB_BACKEND {backend_name!r}, '
            f'expected one of: {", ".join(sorted(BLOB_BACKENDS))}',
        ) from error

    if storage_params is None:
        storage_params = settings.STORAGES[_FILES_STORAGE_ALIAS]

    storage = storages.create_storage(storage_params)
    logger.info(
        'Using %s blob backend (%s)',
        backend_name,
        type(storage).__name__,
    )
    return backend_class(storage)


def _as_django_file(
    content: bytes | IO[bytes] | File,
    name: str,
) -> File:
    if isinstance(content, bytes):
        return ContentFile(content, name=name)
    if isinstance(content, File):
        # Shallow copy: same underlying file, caller's object left untouched
        return copy.copy(content)
    return File(content, name=name)
