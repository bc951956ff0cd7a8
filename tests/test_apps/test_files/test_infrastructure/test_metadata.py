"""Tests for metadata utilities."""

import hashlib
from io import BufferedReader, BytesIO, RawIOBase

import pytest
from django.core.files.base import ContentFile

from server.apps.files.exceptions import ChecksumError
from server.apps.files.infrastructure.metadata import (
    build_user_namespace,
    calculate_checksum,
    detect_mime_type,
    ensure_seekable,
    get_file_extension,
    get_file_size,
)


class _UnreadableStream(BytesIO):
    """Stream whose reads fail like a vanished temp file."""

    def read(self, *args, **kwargs):
        raise OSError('Input/output error')


class _ForwardOnlyStream(RawIOBase):
    """Readable stream that cannot seek, like a pipe."""

    def __init__(self, payload):
        super().__init__()
        self._source = BytesIO(payload)

    def readable(self):
        return True

    def readinto(self, buffer):
        chunk = self._source.read(len(buffer))
        buffer[:len(chunk)] = chunk
        return len(chunk)


def test_detect_mime_type():
    """Test MIME type detection from filename."""
    assert detect_mime_type('test.pdf') == 'application/pdf'
    assert detect_mime_type('test.txt') == 'text/plain'
    assert detect_mime_type('test.jpg') == 'image/jpeg'
    assert detect_mime_type('test.png') == 'image/png'


def test_detect_mime_type_unknown():
    """Test MIME type detection for unknown extension."""
    assert detect_mime_type('test.unknown') == 'application/octet-stream'


def test_calculate_checksum():
    """Test SHA256 checksum calculation."""
    file_obj = ContentFile(b'test content')

    checksum = calculate_checksum(file_obj)

    # Should be 64 character hex string
    assert len(checksum) == 64
    assert all(char in '0123456789abcdef' for char in checksum)
    assert checksum == hashlib.sha256(b'test content').hexdigest()

    # Same content should produce same checksum
    file_obj2 = ContentFile(b'test content')
    assert calculate_checksum(file_obj2) == checksum


def test_calculate_checksum_reads_whole_stream():
    """Test checksum covers content beyond the first chunk."""
    content = b'a' * 10000 + b'b'

    checksum = calculate_checksum(BytesIO(content))

    assert checksum == hashlib.sha256(content).hexdigest()
    assert checksum != hashlib.sha256(b'a' * 10000).hexdigest()


def test_calculate_checksum_starts_from_beginning_and_rewinds():
    """Test checksum ignores and resets the current stream position."""
    file_obj = BytesIO(b'partially read content')
    file_obj.read(5)

    checksum = calculate_checksum(file_obj)

    assert checksum == hashlib.sha256(b'partially read content').hexdigest()
    assert file_obj.tell() == 0


def test_calculate_checksum_unreadable_stream():
    """Test I/O failure while reading raises ChecksumError."""
    with pytest.raises(ChecksumError, match='Failed to compute file checksum'):
        calculate_checksum(_UnreadableStream(b'content'))


def test_calculate_checksum_closed_stream():
    """Test closed stream raises ChecksumError."""
    file_obj = BytesIO(b'content')
    file_obj.close()

    with pytest.raises(ChecksumError):
        calculate_checksum(file_obj)


def test_get_file_size():
    """Test size from .size attribute and from seeking."""
    assert get_file_size(ContentFile(b'12345')) == 5

    file_obj = BytesIO(b'1234567890')
    assert get_file_size(file_obj) == 10
    assert file_obj.tell() == 0


def test_ensure_seekable_keeps_seekable_stream():
    """Test seekable objects are used as they are."""
    file_obj = BytesIO(b'content')

    assert ensure_seekable(file_obj, 'a.txt') is file_obj


def test_ensure_seekable_spools_pipe_like_stream():
    """Test a forward-only stream is copied into a seekable file."""
    payload = b'x' * 20000
    stream = BufferedReader(_ForwardOnlyStream(payload))

    file_obj = ensure_seekable(stream, 'a.bin')

    assert file_obj.seekable()
    assert file_obj.name == 'a.bin'
    assert calculate_checksum(file_obj) == hashlib.sha256(payload).hexdigest()
    assert get_file_size(file_obj) == len(payload)
    assert file_obj.read() == payload


def test_ensure_seekable_closed_stream():
    """Test closed stream raises ChecksumError."""
    stream = BufferedReader(_ForwardOnlyStream(b'content'))
    stream.close()

    with pytest.raises(ChecksumError, match='Failed to read file stream'):
        ensure_seekable(stream, 'a.bin')


def test_build_user_namespace():
    """Test per-user storage namespace."""
    assert build_user_namespace(42) == 'user_42'


def test_get_file_extension():
    """Test extension extraction."""
    assert get_file_extension('document.PDF') == 'pdf'
    assert get_file_extension('archive.tar.gz') == 'gz'
    assert get_file_extension('README') == ''
