"""Business logic for file uploads."""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, BinaryIO

from django.contrib.auth import get_user_model
from django.core.files.base import File as DjangoFile
from django.core.files.storage import default_storage
from django.db import DatabaseError, IntegrityError, transaction

from server.apps.files.exceptions import (
    DuplicateFileError,
    SlugExhaustionError,
    StorageTransactionError,
)
from server.apps.files.infrastructure.metadata import (
    build_user_namespace,
    calculate_checksum,
    detect_mime_type,
    ensure_seekable,
    get_file_size,
)
from server.apps.files.logic.slugs import generate_unique_slug
from server.apps.files.models import File, LinkState, ShareLink

if TYPE_CHECKING:
    from server.apps.files.infrastructure.storage import FileStorage

User = get_user_model()
logger = logging.getLogger(__name__)


def _get_storage() -> 'FileStorage':
    """Get the configured default storage backend.

    Returns:
        FileStorage instance with proper S3 configuration.
    """
    return default_storage  # type: ignore[return-value]


def upload_file(  # noqa: WPS211
    user: User,
    file_obj: BinaryIO | DjangoFile,
    filename: str,
    mime_type: str = '',
    expires_at: datetime | None = None,
) -> File:
    """Upload file to storage and create database records.

    Transaction safety: Upload to storage first, then create the File
    record (and the share link, if requested) in one transaction.
    If the transaction fails, the uploaded file is deleted from
    storage before the error is raised.

    Streams that cannot seek are spooled to a temporary file first, so
    the bytes that are hashed are the bytes that get stored.

    Args:
        user: Owner of the file.
        file_obj: File-like object to upload.
        filename: Original filename, stored verbatim.
        mime_type: Declared MIME type. Guessed from filename if empty.
        expires_at: If given, a share link expiring at this moment
            is created together with the file.

    Returns:
        Created File instance. The share link is in file.links.

    Raises:
        ChecksumError: If the content cannot be read.
        DuplicateFileError: If the user already stored this content.
        StorageWriteError: If the upload to storage fails.
        StorageTransactionError: If the DB transaction fails.
        SlugExhaustionError: If no unique link slug could be generated.
    """
    file_obj = ensure_seekable(file_obj, filename)
    checksum = calculate_checksum(file_obj)
    _ensure_unique(user, checksum, filename)

    file_size = get_file_size(file_obj)
    mime_type = mime_type or detect_mime_type(filename)

    # Step 1: Upload to storage first
    storage = _get_storage()
    saved_name = storage.write_named(
        build_user_namespace(user.id),
        filename,
        file_obj,
    )

    # Step 2: Create database records (in transaction)
    try:
        file_instance, share_link = _create_records(
            user,
            filename,
            saved_name,
            file_size,
            mime_type,
            checksum,
            expires_at,
        )
    except IntegrityError as error:
        logger.exception(
            'Database transaction failed, rolling back storage upload: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        # Lost a race against a concurrent upload of the same content
        if File.objects.filter(user=user, checksum_sha256=checksum).exists():
            raise DuplicateFileError(checksum, filename) from error
        raise StorageTransactionError(
            f'Failed to create file record: {filename}',
        ) from error
    except DatabaseError as error:
        logger.exception(
            'Database transaction failed, rolling back storage upload: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        raise StorageTransactionError(
            f'Failed to create file record: {filename}',
        ) from error
    except SlugExhaustionError:
        logger.exception(
            'Share link creation failed, rolling back storage upload: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        raise
    except Exception:
        logger.exception(
            'Unexpected error creating records, rolling back storage '
            'upload: %s',
            saved_name,
        )
        storage.rollback_upload(saved_name)
        raise

    if share_link is None:
        logger.info(
            'File uploaded successfully: %s (ID: %d, size: %d, checksum: %s)',
            saved_name,
            file_instance.id,
            file_size,
            checksum,
        )
    else:
        logger.info(
            'File uploaded successfully with share link: %s '
            '(ID: %d, slug: %s, expires: %s)',
            saved_name,
            file_instance.id,
            share_link.slug,
            share_link.expires_at,
        )
    return file_instance


def _ensure_unique(user: User, checksum: str, filename: str) -> None:
    """Reject content the user has already stored.

    Args:
        user: Owner of the upload.
        checksum: SHA256 checksum of the content.
        filename: Uploaded filename, for the error.

    Raises:
        DuplicateFileError: If a file with this checksum exists.
    """
    if File.objects.filter(user=user, checksum_sha256=checksum).exists():
        logger.warning(
            'Duplicate file upload rejected for user %s: %s (checksum: %s)',
            user.username,
            filename,
            checksum,
        )
        raise DuplicateFileError(checksum, filename)


def _create_records(  # noqa: WPS211
    user: User,
    filename: str,
    saved_name: str,
    file_size: int,
    mime_type: str,
    checksum: str,
    expires_at: datetime | None,
) -> tuple[File, ShareLink | None]:
    """Create File record and optional share link atomically.

    Args:
        user: Owner of the file.
        filename: Original filename.
        saved_name: Storage path returned by the storage backend.
        file_size: Size in bytes.
        mime_type: MIME type to record.
        checksum: SHA256 checksum.
        expires_at: Share link expiry, or None for no link.

    Returns:
        Created File and the share link (None if not requested).
    """
    share_link = None
    with transaction.atomic():
        file_instance = File.objects.create(
            user=user,
            filename=filename,
            file=saved_name,  # Use actual saved name from storage
            size_bytes=file_size,
            mime_type=mime_type,
            checksum_sha256=checksum,
        )
        logger.info(
            'File record created in database: %s (ID: %d)',
            saved_name,
            file_instance.id,
        )

        if expires_at is not None:
            share_link = ShareLink.objects.create(
                file=file_instance,
                user=user,
                slug=generate_unique_slug(),
                state=LinkState.ACTIVE,
                expires_at=expires_at,
            )
    return file_instance, share_link
