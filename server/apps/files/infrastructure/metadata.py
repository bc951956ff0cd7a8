"""Metadata extraction utilities for files."""

import hashlib
import mimetypes
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Final

from django.conf import settings
from django.core.files.base import File as DjangoFile

from server.apps.files.exceptions import ChecksumError

_CHUNK_SIZE: Final = 8192  # 8KB chunks for checksum calculation
_DEFAULT_MIME_TYPE: Final = 'application/octet-stream'


def detect_mime_type(filename: str) -> str:
    """Detect MIME type from filename.

    Uses Python's built-in mimetypes module to guess MIME type
    from filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return _DEFAULT_MIME_TYPE
    return mime_type


def calculate_checksum(file_obj: BinaryIO) -> str:
    """Calculate SHA256 checksum of file.

    Reads the whole stream in chunks from the beginning. Resets file
    pointer to beginning after calculation.

    Args:
        file_obj: File-like object to checksum.

    Returns:
        Hex-encoded SHA256 hash string (64 characters).

    Raises:
        ChecksumError: If the stream cannot be fully read.
    """
    sha256_hash = hashlib.sha256()

    try:
        _rewind(file_obj)
        for chunk in iter(lambda: file_obj.read(_CHUNK_SIZE), b''):
            sha256_hash.update(chunk)
        _rewind(file_obj)
    except (OSError, ValueError) as error:
        raise ChecksumError(
            f'Failed to compute file checksum: {error}',
        ) from error

    return sha256_hash.hexdigest()


def get_file_size(file_obj: BinaryIO) -> int:
    """Get file size from file object.

    Args:
        file_obj: File-like object.

    Returns:
        File size in bytes.
    """
    size = getattr(file_obj, 'size', None)
    if size is not None:
        return size
    file_obj.seek(0, os.SEEK_END)
    file_size = file_obj.tell()
    file_obj.seek(0)
    return file_size


def ensure_seekable(
    file_obj: BinaryIO | DjangoFile,
    filename: str,
) -> BinaryIO | DjangoFile:
    """Make sure the content can be read more than once.

    Seekable objects are returned as they are. Anything else (pipes,
    sockets, request streams) is copied into a spooled temporary file
    that stays in memory up to FILE_UPLOAD_MAX_MEMORY_SIZE.

    Args:
        file_obj: File-like object to upload.
        filename: Name given to the spooled copy.

    Returns:
        The object itself, or a seekable copy of its content.

    Raises:
        ChecksumError: If the stream cannot be read.
    """
    try:
        if _is_seekable(file_obj):
            return file_obj

        spooled = tempfile.SpooledTemporaryFile(  # noqa: SIM115
            max_size=settings.FILE_UPLOAD_MAX_MEMORY_SIZE,
        )
        shutil.copyfileobj(file_obj, spooled, _CHUNK_SIZE)
        spooled.seek(0)
    except (OSError, ValueError) as error:
        raise ChecksumError(
            f'Failed to read file stream: {error}',
        ) from error

    return DjangoFile(spooled, name=filename)


def _rewind(file_obj: BinaryIO) -> None:
    if _is_seekable(file_obj):
        file_obj.seek(0)


def _is_seekable(file_obj: BinaryIO | DjangoFile) -> bool:
    seekable = getattr(file_obj, 'seekable', None)
    return seekable is None or seekable()


def build_user_namespace(user_id: int) -> str:
    """Build the storage folder that holds a user's files.

    Args:
        user_id: Owner's user ID.

    Returns:
        Namespace (e.g., 'user_42').
    """
    return f'user_{user_id}'


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.pdf').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = Path(filename).suffix
    return extension.lstrip('.').lower()
