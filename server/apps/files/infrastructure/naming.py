"""Naming helpers shared by the blob backends."""

import re
import uuid
from pathlib import PurePosixPath
from typing import Final

from django.core.exceptions import SuspiciousFileOperation
from django.utils.text import get_valid_filename

DEFAULT_CONTENT_TYPE: Final = 'application/octet-stream'

_DISPLAY_NAME_MAX_LENGTH: Final = 255
_OBJECT_NAME_MAX_LENGTH: Final = 100
_FALLBACK_NAME: Final = 'file'
_EXTENSION_PATTERN: Final = re.compile(r'^\.[A-Za-z0-9]{1,16}$')
_CONTENT_TYPE_MAX_LENGTH: Final = 255
_MIME_TOKEN: Final = r'[A-Za-z0-9][A-Za-z0-9!#$&^_.+-]*'
_CONTENT_TYPE_PATTERN: Final = re.compile(
    rf'{_MIME_TOKEN}/{_MIME_TOKEN}'
    + rf'(?:[ \t]*;[ \t]*{_MIME_TOKEN}=(?:{_MIME_TOKEN}|"[^"\\\x00-\x1f\x7f]*"))*',
)


def clean_display_name(original_name: str | None) -> str:
    """Reduce a client supplied filename to a safe display name.

    Browsers on some platforms send the full client path, so only the
    last component is kept.

    Args:
        original_name: Filename as sent by the client.

    Returns:
        Basename without directory parts (e.g., 'report.pdf').
    """
    if not original_name:
        return _FALLBACK_NAME

    normalized = original_name.replace('\\', '/').strip()
    name = PurePosixPath(normalized).name.strip()
    if name in {'', '.', '..'}:
        return _FALLBACK_NAME
    return name[-_DISPLAY_NAME_MAX_LENGTH:]


def get_file_extension(filename: str) -> str:
    """Get a key-safe extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension with the leading dot (e.g., '.pdf'), or an empty
        string when there is none or it contains unexpected characters.
    """
    extension = PurePosixPath(filename).suffix
    if _EXTENSION_PATTERN.match(extension):
        return extension
    return ''


def clean_content_type(content_type: str | None) -> str:
    """Reduce a client supplied MIME type to a value safe to store and serve.

    The type is advisory: anything that is not a well-formed
    ``type/subtype`` (with optional parameters) becomes an empty string
    and is later served as ``DEFAULT_CONTENT_TYPE``.

    Args:
        content_type: MIME type as sent by the client.

    Returns:
        The stripped content type, or an empty string.
    """
    if not content_type:
        return ''

    content_type = content_type.strip()
    if len(content_type) > _CONTENT_TYPE_MAX_LENGTH:
        return ''
    if _CONTENT_TYPE_PATTERN.fullmatch(content_type) is None:
        return ''
    return content_type


def generate_local_key(original_name: str) -> str:
    """Generate a storage key for the local filesystem backend.

    Example: 'My Report.PDF' -> '3f2a...9c.PDF'

    Args:
        original_name: Display name of the uploaded file.

    Returns:
        Random hex name with the original extension preserved.
    """
    return f'{uuid.uuid4().hex}{get_file_extension(original_name)}'


def generate_object_key(original_name: str) -> str:
    """Generate a storage key for the object store backend.

    The sanitized original name is kept in the key so objects remain
    recognizable when browsing the bucket.

    Example: 'My Report.pdf' -> '1b4e28ba-2fa1-11d2-883f-0016d3cca427-My_Report.pdf'

    Args:
        original_name: Display name of the uploaded file.

    Returns:
        Random UUID joined with the sanitized name.
    """
    return f'{uuid.uuid4()}-{_object_safe_name(original_name)}'


def _object_safe_name(original_name: str) -> str:
    try:
        safe_name = get_valid_filename(clean_display_name(original_name))
    except SuspiciousFileOperation:
        return _FALLBACK_NAME

    if len(safe_name) <= _OBJECT_NAME_MAX_LENGTH:
        return safe_name

    extension = get_file_extension(safe_name)
    stem_length = _OBJECT_NAME_MAX_LENGTH - len(extension)
    return f'{safe_name[:stem_length]}{extension}'
