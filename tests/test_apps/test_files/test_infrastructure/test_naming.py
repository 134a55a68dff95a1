"""Tests for storage key and display name helpers."""

import re

import pytest

from server.apps.files.infrastructure.naming import (
    clean_content_type,
    clean_display_name,
    generate_local_key,
    generate_object_key,
    get_file_extension,
)

_HEX_KEY = re.compile(r'^[0-9a-f]{32}')
_UUID_PREFIX = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}-',
)


@pytest.mark.parametrize(('original_name', 'expected'), [
    ('report.pdf', 'report.pdf'),
    ('C:\\Users\\alice\\report.pdf', 'report.pdf'),
    ('../../etc/passwd', 'passwd'),
    ('  notes.txt  ', 'notes.txt'),
    ('..', 'file'),
    ('', 'file'),
    (None, 'file'),
])
def test_clean_display_name(original_name, expected):
    """Test directory parts are dropped from client filenames."""
    assert clean_display_name(original_name) == expected


def test_clean_display_name_truncates():
    """Test long names are cut to the column size, keeping the end."""
    long_name = 'a' * 300 + '.pdf'

    cleaned = clean_display_name(long_name)

    assert len(cleaned) == 255
    assert cleaned.endswith('.pdf')


def test_get_file_extension():
    """Test key-safe extension extraction."""
    assert get_file_extension('test.pdf') == '.pdf'
    assert get_file_extension('test.TXT') == '.TXT'  # Case preserved
    assert get_file_extension('test') == ''  # No extension
    assert get_file_extension('test.tar.gz') == '.gz'  # Last extension
    assert get_file_extension('.bashrc') == ''  # Dotfile
    assert get_file_extension('evil.p/h') == ''  # Unexpected characters


def test_generate_local_key_preserves_extension():
    """Test local keys are random hex plus the original extension."""
    key = generate_local_key('My Report.pdf')

    assert _HEX_KEY.match(key)
    assert key.endswith('.pdf')
    assert 'Report' not in key


def test_generate_local_key_is_unique():
    """Test the same filename never yields the same key."""
    assert generate_local_key('a.txt') != generate_local_key('a.txt')


def test_generate_object_key_keeps_safe_name():
    """Test object keys carry a sanitized copy of the filename."""
    key = generate_object_key('My Report (final).pdf')

    assert _UUID_PREFIX.match(key)
    assert key.endswith('-My_Report_final.pdf')


def test_generate_object_key_unusable_name():
    """Test names with no usable characters fall back to 'file'."""
    key = generate_object_key('???')

    assert key.endswith('-file')


def test_generate_object_key_truncates_long_name():
    """Test long names are shortened, keeping the extension."""
    key = generate_object_key('x' * 500 + '.csv')
    name_part = _UUID_PREFIX.sub('', key)

    assert len(name_part) == 100
    assert name_part.endswith('.csv')


def test_generate_object_key_drops_client_path():
    """Test directory parts of the client name never reach the key."""
    key = generate_object_key('../../etc/passwd')

    assert key.endswith('-passwd')
    assert '..' not in key
    assert 'etc' not in key


@pytest.mark.parametrize(('content_type', 'expected'), [
    ('text/plain', 'text/plain'),
    (' application/pdf ', 'application/pdf'),
    ('text/html; charset=utf-8', 'text/html; charset=utf-8'),
    ('application/vnd.ms-excel', 'application/vnd.ms-excel'),
    ('text/plain\nX-Evil: 1', ''),
    ('text/plain\r\nSet-Cookie: a=b', ''),
    ('text/plain; charset=utf-8\n', ''),
    ('plain', ''),
    ('text/' + 'x' * 300, ''),
    ('', ''),
    (None, ''),
])
def test_clean_content_type(content_type, expected):
    """Test only well-formed MIME types are kept."""
    assert clean_content_type(content_type) == expected
