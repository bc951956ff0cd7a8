"""Custom storage backend for S3-compatible storage."""

import logging
from pathlib import PurePosixPath
from typing import IO, Any, final, override

from storages.backends.s3 import S3Storage

from server.apps.files.exceptions import StorageWriteError

logger = logging.getLogger(__name__)


@final
class FileStorage(S3Storage):
    """Custom S3 storage backend for user files.

    Extends django-storages S3Storage with:
    - Namespaced writes that keep the uploaded filename
    - Transaction rollback support for failed DB operations
    - Enhanced error logging
    """

    @override
    def save(  # noqa: WPS211
        self,
        name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Save file to S3 with error handling and logging.

        Args:
            name: Storage path for the file.
            content: File content (file-like object).
            max_length: Optional maximum length for the filename.

        Returns:
            Actual storage path used (may differ from name if conflicts).

        Raises:
            Exception: If S3 upload fails.
        """
        try:
            logger.info('Uploading file to storage: %s', name)
            saved_name = super().save(name, content, max_length)
            logger.info('Successfully uploaded file: %s', saved_name)
        except Exception:
            logger.exception('Failed to upload file to storage: %s', name)
            raise
        else:
            return saved_name

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def write_named(
        self,
        namespace: str,
        desired_name: str,
        content: Any,
        max_length: int | None = None,
    ) -> str:
        """Write content under a namespace, keeping the desired filename.

        Only the last path component of desired_name is used. If the
        name is taken, the backend picks an alternative name instead of
        overwriting the existing object.

        Args:
            namespace: Folder the file belongs to (e.g., 'user_42').
            desired_name: Original filename.
            content: File content (file-like object).
            max_length: Optional maximum length for the storage path.

        Returns:
            Storage path of the written object.

        Raises:
            StorageWriteError: If the write fails or yields no path.
        """
        basename = PurePosixPath(desired_name.replace('\\', '/')).name
        storage_path = f'{namespace}/{basename}'

        try:
            saved_name = self.save(storage_path, content, max_length)
        except Exception as error:
            raise StorageWriteError(
                f'Failed to store file: {storage_path}',
            ) from error

        if not saved_name:
            logger.warning('Storage returned no path for: %s', storage_path)
            raise StorageWriteError(f'Failed to store file: {storage_path}')

        return saved_name

    def open_for_read(self, name: str) -> IO[bytes]:
        """Open a stored object for streaming its bytes.

        Args:
            name: Storage path of the object.

        Returns:
            Readable binary file object.
        """
        logger.debug('Opening file for read: %s', name)
        return self.open(name, 'rb')

    def rollback_upload(self, name: str) -> None:
        """Delete uploaded file for DB transaction rollback.

        This method is called when a database transaction fails after
        a file has been successfully uploaded to S3. It attempts to
        delete the file to maintain consistency.

        This is a best-effort operation - if deletion fails, the error
        is logged but not raised, as the DB rollback has already occurred.

        Args:
            name: Storage path of file to delete.
        """
        try:
            logger.warning('Rolling back upload, deleting file: %s', name)
            self.delete(name)
            logger.info('Successfully rolled back file upload: %s', name)
        except Exception:
            # The orphaned object is left for a storage cleanup job
            logger.exception(
                'Failed to rollback upload, orphaned file: %s',
                name,
            )
