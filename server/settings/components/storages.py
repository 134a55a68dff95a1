"""Django storage configuration for uploaded files.

The blob backend is selected once, by ``FILES_BLOB_BACKEND``:

- ``local``: files under ``FILES_LOCAL_ROOT`` on the server's disk
- ``s3``: objects in an S3-compatible bucket (AWS S3, MinIO, R2)

``STORAGES['files']`` describes the storage behind the selected backend.
"""

from typing import Any, Final

from server.settings.components import BASE_DIR, config

FILES_BLOB_BACKEND: Final = config('FILES_BLOB_BACKEND', default='local')

FILES_LOCAL_ROOT: Final = config(
    'FILES_LOCAL_ROOT',
    default=str(BASE_DIR.joinpath('media', 'files')),
)


def _local_storage() -> dict[str, Any]:
    return {
        'BACKEND': 'server.apps.files.infrastructure.storage.LocalFileStorage',
        'OPTIONS': {
            'location': FILES_LOCAL_ROOT,
            'base_url': None,
        },
    }


def _s3_storage() -> dict[str, Any]:
    # Imported here so local-only setups never touch botocore
    from botocore.config import Config  # noqa: WPS433

    return {
        'BACKEND': 'server.apps.files.infrastructure.storage.ObjectFileStorage',
        'OPTIONS': {
            'bucket_name': config('AWS_STORAGE_BUCKET_NAME'),
            'access_key': config('AWS_ACCESS_KEY_ID', default=None),
            'secret_key': config('AWS_SECRET_ACCESS_KEY', default=None),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': config(
                'AWS_S3_REGION_NAME',
                default='us-east-1',
            ),
            'client_config': Config(
                connect_timeout=config(
                    'AWS_S3_CONNECT_TIMEOUT',
                    cast=int,
                    default=5,
                ),
                read_timeout=config(
                    'AWS_S3_READ_TIMEOUT',
                    cast=int,
                    default=30,
                ),
                retries={
                    'max_attempts': config(
                        'AWS_S3_MAX_ATTEMPTS',
                        cast=int,
                        default=3,
                    ),
                    'mode': 'standard',
                },
            ),
            'file_overwrite': False,  # Prevent accidental overwrites
            'default_acl': None,  # Inherit bucket ACL
            'querystring_auth': True,
        },
    }


_FILES_STORAGES: Final = {  # noqa: WPS407
    'local': _local_storage,
    's3': _s3_storage,
}

# Storage configuration dictionary
# Uses the selected backend for user files, local storage for static files
STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'files': _FILES_STORAGES.get(FILES_BLOB_BACKEND, _local_storage)(),
    'staticfiles': {
        # Keep static files separate from user files
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
