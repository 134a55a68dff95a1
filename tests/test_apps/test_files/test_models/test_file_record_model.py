"""Tests for FileRecord model."""

from http import HTTPStatus

import pytest
from django.urls import reverse

from server.apps.files.admin import format_size
from server.apps.files.models import FileRecord


@pytest.mark.django_db
def test_file_record_str(user):
    """Test FileRecord __str__ method."""
    record = FileRecord.objects.create(
        user=user,
        original_name='report.pdf',
        content_type='application/pdf',
        size_bytes=100,
        storage_key='abc.pdf',
        backend='local',
    )

    assert str(record) == f'{user.username}:report.pdf'


@pytest.mark.django_db
def test_file_record_default_ordering(user):
    """Test records are ordered newest first by default."""
    older = FileRecord.objects.create(
        user=user,
        original_name='a.txt',
        size_bytes=1,
        storage_key='a.txt',
        backend='local',
    )
    newer = FileRecord.objects.create(
        user=user,
        original_name='b.txt',
        size_bytes=1,
        storage_key='b.txt',
        backend='local',
    )

    assert list(FileRecord.objects.all()) == [newer, older]


@pytest.mark.django_db
def test_file_record_deleted_with_user(user):
    """Test records are removed together with their owner."""
    FileRecord.objects.create(
        user=user,
        original_name='a.txt',
        size_bytes=1,
        storage_key='a.txt',
        backend='local',
    )

    user.delete()

    assert FileRecord.objects.count() == 0


@pytest.mark.parametrize(('size_bytes', 'expected'), [
    (0, '0 B'),
    (1023, '1023 B'),
    (1536, '1.5 KB'),
    (5 * 1024 * 1024, '5.0 MB'),
    (3 * 1024 * 1024 * 1024, '3.0 GB'),
])
def test_format_size(size_bytes, expected):
    """Test human-readable size formatting used by the admin."""
    assert format_size(size_bytes) == expected


@pytest.mark.django_db
def test_admin_changelist(admin_client, user):
    """Test the admin lists file records."""
    FileRecord.objects.create(
        user=user,
        original_name='report.pdf',
        size_bytes=2048,
        storage_key='abc.pdf',
        backend='local',
    )

    response = admin_client.get(
        reverse('admin:files_filerecord_changelist'),
    )

    assert response.status_code == HTTPStatus.OK
    assert b'report.pdf' in response.content
    assert b'2.0 KB' in response.content
