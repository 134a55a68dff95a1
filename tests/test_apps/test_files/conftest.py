"""Shared fixtures for files app tests."""

from typing import Final

import boto3
import pytest
from django.apps import apps
from django.contrib.auth import get_user_model
from moto import mock_aws

from server.apps.files.infrastructure.backends import (
    LocalBlobBackend,
    ObjectStoreBlobBackend,
)
from server.apps.files.infrastructure.metadata import FileRecordStore
from server.apps.files.infrastructure.storage import (
    LocalFileStorage,
    ObjectFileStorage,
)
from server.apps.files.logic.file_operations import FileService

User = get_user_model()

TEST_BUCKET: Final = 'test-files'
_TEST_REGION: Final = 'us-east-1'


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def mock_s3():
    """Mock S3 service with the test bucket.

    Yields:
        boto3 S3 resource with the test bucket created.
    """
    with mock_aws():
        conn = boto3.resource('s3', region_name=_TEST_REGION)
        conn.create_bucket(Bucket=TEST_BUCKET)

        yield conn


@pytest.fixture
def local_root(tmp_path):
    """Root directory of the local backend (not created yet).

    Returns:
        Path the local storage writes into.
    """
    return tmp_path / 'blobs'


@pytest.fixture
def local_backend(local_root):
    """Local filesystem backend rooted in a temporary directory.

    Returns:
        LocalBlobBackend instance.
    """
    return LocalBlobBackend(LocalFileStorage(location=local_root))


@pytest.fixture
def s3_backend(mock_s3):
    """Object store backend talking to mocked S3.

    Returns:
        ObjectStoreBlobBackend instance.
    """
    storage = ObjectFileStorage(
        bucket_name=TEST_BUCKET,
        region_name=_TEST_REGION,
        access_key='testing',
        secret_key='testing',
    )
    return ObjectStoreBlobBackend(storage)


@pytest.fixture(params=['local', 's3'])
def blob_backend(request):
    """Each blob backend in turn.

    Returns:
        Backend instance for the current parameter.
    """
    return request.getfixturevalue(f'{request.param}_backend')


@pytest.fixture
def file_service(blob_backend):
    """File service over the current blob backend.

    Returns:
        FileService instance.
    """
    return FileService(blob_backend, FileRecordStore(blob_backend.name))


@pytest.fixture
def local_file_service(local_backend):
    """File service over the local backend only.

    Returns:
        FileService instance.
    """
    return FileService(local_backend, FileRecordStore(local_backend.name))


@pytest.fixture
def app_file_service(monkeypatch, local_file_service):
    """Install the local file service on the files app config.

    Views and management commands pick it up instead of the one
    built from settings.

    Returns:
        The installed FileService.
    """
    monkeypatch.setattr(
        apps.get_app_config('files'),
        'file_service',
        local_file_service,
    )
    return local_file_service
