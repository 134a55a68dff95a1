"""Django admin configuration for files app."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest

from server.apps.files.models import FileRecord

_KIB = 1024
_MIB = _KIB * 1024
_GIB = _MIB * 1024


def format_size(size_bytes: int) -> str:
    """Format size in human-readable form.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string (e.g., '1.5 MB', '234 KB').
    """
    if size_bytes < _KIB:
        return f'{size_bytes} B'
    if size_bytes < _MIB:
        return f'{size_bytes / _KIB:.1f} KB'
    if size_bytes < _GIB:
        return f'{size_bytes / _MIB:.1f} MB'
    return f'{size_bytes / _GIB:.1f} GB'


@admin.register(FileRecord)
class FileRecordAdmin(admin.ModelAdmin[FileRecord]):
    """Admin interface for FileRecord model.

    Records are read-only here: adding or deleting a record without
    its content would break the record/content pairing.
    """

    list_display = [
        'original_name',
        'user',
        'size_display',
        'content_type',
        'backend',
        'uploaded_at',
    ]

    list_filter = [
        'backend',
        'content_type',
        'uploaded_at',
    ]

    search_fields = [
        'original_name',
        'storage_key',
        'user__username',
    ]

    readonly_fields = [
        'user',
        'original_name',
        'content_type',
        'size_bytes',
        'storage_key',
        'backend',
        'uploaded_at',
    ]

    fieldsets = (
        ('File Information', {
            'fields': ('original_name', 'user'),
        }),
        ('Metadata', {
            'fields': ('size_bytes', 'content_type'),
        }),
        ('Storage', {
            'fields': ('backend', 'storage_key'),
        }),
        ('Timestamps', {
            'fields': ('uploaded_at',),
        }),
    )

    @admin.display(description='Size')
    def size_display(self, obj: FileRecord) -> str:
        """Display file size in human-readable format.

        Args:
            obj: FileRecord instance.

        Returns:
            Formatted size string.
        """
        return format_size(obj.size_bytes)

    def get_queryset(self, request: HttpRequest) -> QuerySet[FileRecord]:
        """Optimize queryset with select_related.

        Args:
            request: HTTP request.

        Returns:
            Optimized QuerySet.
        """
        return super().get_queryset(request).select_related('user')

    def has_add_permission(self, request: HttpRequest) -> bool:
        """Records are only created through uploads."""
        return False

    def has_delete_permission(
        self,
        request: HttpRequest,
        obj: FileRecord | None = None,
    ) -> bool:
        """Records are only deleted together with their content."""
        return False
