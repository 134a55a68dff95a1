"""Django app configuration for files app."""

from typing import TYPE_CHECKING

from typing_extensions import override

from django.apps import AppConfig

if TYPE_CHECKING:
    from server.apps.files.logic.file_operations import FileService


class FilesConfig(AppConfig):
    """Configuration for files app.

    Owns the file service: its blob backend (and the storage client
    behind it) is built once, when the app registry is ready.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.files'
    verbose_name = 'Files'

    file_service: 'FileService'

    @override
    def ready(self) -> None:
        """Build the file service for the configured blob backend."""
        from server.apps.files.infrastructure.backends import (  # noqa: WPS433
            build_blob_backend,
        )
        from server.apps.files.infrastructure.metadata import (  # noqa: WPS433
            FileRecordStore,
        )
        from server.apps.files.logic.file_operations import (  # noqa: WPS433
            FileService,
        )

        backend = build_blob_backend()
        self.file_service = FileService(
            backend=backend,
            records=FileRecordStore(backend.name),
        )
