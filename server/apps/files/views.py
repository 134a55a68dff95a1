"""HTTP views for listing, uploading, downloading and deleting files."""

import logging
from http import HTTPStatus
from typing import Any

from django.apps import apps
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import (
    FileResponse,
    Http404,
    HttpRequest,
    HttpResponse,
    JsonResponse,
)
from django.views.decorators.http import require_GET, require_POST

from server.apps.files.exceptions import (
    BackendUnavailableError,
    StoredFileNotFoundError,
)
from server.apps.files.logic.file_operations import FileService
from server.apps.files.models import FileRecord

logger = logging.getLogger(__name__)

_UPLOAD_FIELD = 'file'


def _get_file_service() -> FileService:
    return apps.get_app_config('files').file_service  # type: ignore[attr-defined]


def _serialize(record: FileRecord) -> dict[str, Any]:
    """Public representation of a record (storage key stays internal)."""
    return {
        'id': record.id,
        'name': record.original_name,
        'content_type': record.content_type,
        'size': record.size_bytes,
        'uploaded_at': record.uploaded_at.isoformat(),
    }


def _backend_unavailable() -> JsonResponse:
    return JsonResponse(
        {'error': 'Storage is temporarily unavailable'},
        status=HTTPStatus.SERVICE_UNAVAILABLE,
    )


@login_required
@require_GET
def file_list(request: HttpRequest) -> JsonResponse:
    """List the current user's files, newest first."""
    records = _get_file_service().list_files(request.user)
    return JsonResponse({'files': [_serialize(record) for record in records]})


@login_required
@require_POST
def file_upload(request: HttpRequest) -> JsonResponse:
    """Store the uploaded ``file`` field for the current user."""
    uploaded = request.FILES.get(_UPLOAD_FIELD)
    if uploaded is None:
        return JsonResponse(
            {'error': 'Please select a file to upload'},
            status=HTTPStatus.BAD_REQUEST,
        )

    try:
        record = _get_file_service().upload(
            uploaded,
            original_name=uploaded.name,
            content_type=uploaded.content_type,
            owner=request.user,
            declared_size=uploaded.size,
        )
    except ValidationError as error:
        return JsonResponse(
            {'error': ' '.join(error.messages)},
            status=HTTPStatus.BAD_REQUEST,
        )
    except BackendUnavailableError:
        return _backend_unavailable()

    return JsonResponse(_serialize(record), status=HTTPStatus.CREATED)


@login_required
@require_GET
def file_download(request: HttpRequest, file_id: int) -> HttpResponse:
    """Stream a file of the current user as an attachment."""
    try:
        download = _get_file_service().download(file_id, request.user)
    except StoredFileNotFoundError as error:
        raise Http404('File not found') from error
    except BackendUnavailableError:
        return _backend_unavailable()

    return FileResponse(
        download.stream,
        as_attachment=True,
        filename=download.filename,
        content_type=download.content_type,
    )


@login_required
@require_POST
def file_delete(request: HttpRequest, file_id: int) -> HttpResponse:
    """Delete a file of the current user."""
    try:
        _get_file_service().delete(file_id, request.user)
    except StoredFileNotFoundError as error:
        raise Http404('File not found') from error
    except BackendUnavailableError:
        return _backend_unavailable()

    return HttpResponse(status=HTTPStatus.NO_CONTENT)
