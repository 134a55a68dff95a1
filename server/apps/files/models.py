"""Database models for files app."""

from typing import Final, final

from typing_extensions import override

from django.conf import settings
from django.db import models

# Constants for field max lengths
_NAME_MAX_LENGTH: Final = 255
_CONTENT_TYPE_MAX_LENGTH: Final = 255
_STORAGE_KEY_MAX_LENGTH: Final = 255
_BACKEND_MAX_LENGTH: Final = 16


class BlobBackendName(models.TextChoices):
    """Blob backends a record can point into."""

    LOCAL = 'local', 'Local filesystem'
    S3 = 's3', 'Object store'


@final
class FileRecord(models.Model):
    """Metadata of one uploaded file.

    The record is created only after the content is stored, and is the
    single source of truth for resolving it: ``storage_key`` is
    meaningful only to the ``backend`` that generated it.

    ``original_name`` comes from the client and is for display only;
    it is never used to build a path or object key.
    """

    # Owner relationship
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='file_records',
        db_index=True,
    )

    original_name = models.CharField(
        max_length=_NAME_MAX_LENGTH,
        help_text='Filename as uploaded, without directory parts',
    )

    content_type = models.CharField(
        max_length=_CONTENT_TYPE_MAX_LENGTH,
        blank=True,
        default='',
        help_text='MIME type declared by the client (advisory)',
    )

    size_bytes = models.BigIntegerField(
        help_text='File size in bytes',
    )

    storage_key = models.CharField(
        max_length=_STORAGE_KEY_MAX_LENGTH,
        help_text='Key generated by the blob backend',
    )

    backend = models.CharField(
        max_length=_BACKEND_MAX_LENGTH,
        choices=BlobBackendName.choices,
        help_text='Blob backend holding the content',
    )

    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Model metadata."""

        verbose_name = 'File record'  # type: ignore[mutable-override]
        verbose_name_plural = 'File records'  # type: ignore[mutable-override]
        ordering = ['-uploaded_at', '-id']

        indexes = [
            # Optimize per-user listing, newest first
            models.Index(
                fields=['user', '-uploaded_at'],
                name='files_user_recent_idx',
            ),
        ]

        constraints = [
            # One record per stored blob
            models.UniqueConstraint(
                fields=['backend', 'storage_key'],
                name='files_backend_key_unique',
            ),
            models.CheckConstraint(
                condition=models.Q(size_bytes__gte=0),
                name='files_size_bytes_non_negative',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}:{self.original_name}'
