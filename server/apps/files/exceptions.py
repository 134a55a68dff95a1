"""Exceptions for files app."""


class FileServiceError(Exception):
    """Base class for failures raised by the file persistence layer."""


class StoredFileNotFoundError(FileServiceError):
    """Raised when a file does not exist or is not owned by the caller.

    Both cases raise this same error on purpose, so a caller can never
    learn that another user's file id exists.
    """

    def __init__(
        self,
        file_id: object = None,
        message: str | None = None,
    ) -> None:
        """Initialize StoredFileNotFoundError.

        Args:
            file_id: Requested file identifier, as received.
            message: Optional message overriding the default one.
        """
        self.file_id = file_id
        super().__init__(message or f'File not found: {file_id}')


class BlobNotFoundError(StoredFileNotFoundError):
    """Raised when a storage key does not resolve to stored content."""

    def __init__(self, storage_key: str) -> None:
        """Initialize BlobNotFoundError.

        Args:
            storage_key: Backend key that could not be resolved.
        """
        self.storage_key = storage_key
        super().__init__(message=f'Stored content not found: {storage_key}')


class BackendUnavailableError(FileServiceError):
    """Raised when the blob backend fails for reasons other than a missing key.

    Covers filesystem I/O errors as well as network and service errors
    of the object store.
    """

    def __init__(self, operation: str, storage_key: str | None = None) -> None:
        """Initialize BackendUnavailableError.

        Args:
            operation: Backend operation that failed (put, get, ...).
            storage_key: Key involved in the operation, if known.
        """
        self.operation = operation
        self.storage_key = storage_key
        super().__init__(
            f'Storage backend failed during {operation}: {storage_key}',
        )


class InconsistencyError(FileServiceError):
    """Raised when metadata and stored content are left out of sync."""

    def __init__(self, storage_key: str, detail: str) -> None:
        """Initialize InconsistencyError.

        Args:
            storage_key: Key of the content that is out of sync.
            detail: What was left behind.
        """
        self.storage_key = storage_key
        self.detail = detail
        super().__init__(f'Storage inconsistency for {storage_key}: {detail}')
